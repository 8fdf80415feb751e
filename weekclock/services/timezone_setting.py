"""
Accessor for the process-wide timezone and default-week settings.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from ..config import MAX_WEEK_OFFSET, AppConfig
from ..domain.calendar_engine import load_timezone
from ..domain.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


class SettingsStoreProtocol(Protocol):
    """Protocol describing the settings storage needed by the accessor."""

    def load(self) -> AppConfig:
        """Return the current settings."""

    def update(self, **changes: Any) -> AppConfig:
        """Persist changes and return the settings as written."""


class TimezoneSetting:
    """
    Reads and writes the configured timezone.

    ``get`` returns whatever is stored (or the default) without checking
    it; an identifier that a hand edit broke surfaces as ``TimezoneError``
    when a calculation uses it. ``set`` validates eagerly and refuses to
    store an unknown identifier.
    """

    def __init__(self, store: SettingsStoreProtocol) -> None:
        self._store = store

    def get(self) -> str:
        """Current timezone identifier, falling back to the default."""
        return self._store.load().effective_timezone()

    def set(self, value: str) -> str:
        """
        Validate and persist a new timezone identifier.

        Returns:
            The canonical identifier that was stored

        Raises:
            TimezoneError: If the identifier is not in the timezone database
        """
        canonical = load_timezone(value).name
        previous = self.get()
        self._store.update(timezone=canonical)
        logger.info("Application timezone changed from %s to %s", previous, canonical)
        return canonical

    def get_default_week_offset(self) -> int:
        """Weeks between the current week and the week the tracker opens on."""
        return self._store.load().default_week_offset

    def set_default_week_offset(self, offset: int) -> int:
        """
        Persist the default week offset.

        Raises:
            InvalidRequestError: If the offset is not an integer within a year
        """
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidRequestError(f"Week offset must be an integer, got {offset!r}")
        if not -MAX_WEEK_OFFSET <= offset <= MAX_WEEK_OFFSET:
            raise InvalidRequestError(
                f"Week offset must be between {-MAX_WEEK_OFFSET} and {MAX_WEEK_OFFSET}, got {offset}"
            )

        self._store.update(default_week_offset=offset)
        logger.info("Default week offset set to %d", offset)
        return offset
