"""
Adapters layer - Settings persistence.
"""

from .settings_store import InMemorySettingsStore, YamlSettingsStore

__all__ = ["InMemorySettingsStore", "YamlSettingsStore"]
