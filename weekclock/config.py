"""
Configuration management using Pydantic models persisted as YAML.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

DEFAULT_TIMEZONE = "America/New_York"

# The tracker opens at most a year away from the current week.
MAX_WEEK_OFFSET = 52


class AppConfig(BaseModel):
    """
    Persisted application settings.

    ``timezone`` is stored as written; it is checked against the timezone
    database when it is set through ``TimezoneSetting`` and again whenever
    a calculation uses it.
    """
    timezone: str | None = None
    default_week_offset: int = 0

    @field_validator("timezone")
    @classmethod
    def strip_timezone(cls, value: str | None) -> str | None:
        """Treat a blank identifier as unset."""
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("default_week_offset")
    @classmethod
    def validate_week_offset(cls, value: int) -> int:
        """Validate the offset stays within a year of the current week."""
        if not -MAX_WEEK_OFFSET <= value <= MAX_WEEK_OFFSET:
            raise ValueError(
                f"default_week_offset must be between {-MAX_WEEK_OFFSET} and {MAX_WEEK_OFFSET}, got {value}"
            )
        return value

    def effective_timezone(self) -> str:
        """Configured timezone identifier, or the default when unset."""
        return self.timezone or DEFAULT_TIMEZONE

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load settings from a YAML file.

        A missing file is a first boot and yields the defaults.

        Args:
            config_path: Path to the YAML settings file

        Returns:
            AppConfig instance

        Raises:
            ValueError: If the file is not valid YAML or holds invalid settings
        """
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Settings file must contain a mapping at the root level.")

        return cls(**data)

    def to_yaml(self) -> str:
        """Serialise the settings, leaving unset values out."""
        return yaml.safe_dump(self.model_dump(exclude_none=True), sort_keys=True)


def get_default_config_path() -> Path:
    """Get the default settings file path."""
    # Look for settings.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "settings.yaml"

    if not config_path.exists():
        # Try in the project root (parent of weekclock/)
        project_root = Path(__file__).parent.parent
        candidate = project_root / "settings.yaml"
        if candidate.exists():
            config_path = candidate

    return config_path
