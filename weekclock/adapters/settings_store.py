"""
Settings storage backends.

The YAML store is the production backend; the in-memory store keeps the
same interface for tests and embedded use.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from ..config import AppConfig
from ..domain.exceptions import SettingsError

logger = logging.getLogger(__name__)


class YamlSettingsStore:
    """
    Persists ``AppConfig`` to a YAML file.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a concurrent reader sees either the old
    or the new file, never a partial one.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> AppConfig:
        """
        Read the current settings.

        Raises:
            SettingsError: If the file exists but cannot be read or validated
        """
        try:
            return AppConfig.load_from_yaml(self.path)
        except (OSError, ValueError) as exc:
            raise SettingsError(f"Could not read settings from {self.path}: {exc}") from exc

    def update(self, **changes: Any) -> AppConfig:
        """
        Apply changes to the stored settings and persist them.

        Returns:
            The settings as written
        """
        with self._lock:
            current = self.load()
            try:
                updated = AppConfig(**{**current.model_dump(), **changes})
            except ValueError as exc:
                raise SettingsError(f"Invalid settings update {changes}: {exc}") from exc
            self._write(updated)

        logger.debug("Settings written to %s: %s", self.path, changes)
        return updated

    def _write(self, config: AppConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(config.to_yaml())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise SettingsError(f"Could not write settings to {self.path}: {exc}") from exc


class InMemorySettingsStore:
    """Settings store that keeps ``AppConfig`` in process memory."""

    def __init__(self, config: AppConfig | None = None, **values: Any):
        self._config = config or AppConfig(**values)
        self._lock = threading.Lock()

    def load(self) -> AppConfig:
        return self._config

    def update(self, **changes: Any) -> AppConfig:
        with self._lock:
            try:
                self._config = AppConfig(**{**self._config.model_dump(), **changes})
            except ValueError as exc:
                raise SettingsError(f"Invalid settings update {changes}: {exc}") from exc
            return self._config
