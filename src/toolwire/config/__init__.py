"""Configuration: server profiles and the flag/env/file settings resolver."""

from toolwire.config.loader import ensure_default_config_file, load_config
from toolwire.config.models import FileSettings, ResolvedSettings, ServerProfile, SettingsOverrides
from toolwire.config.profiles import EXA, FIRECRAWL, PROFILES, get_profile
from toolwire.config.resolver import SettingsResolver

__all__ = [
    "EXA",
    "FIRECRAWL",
    "PROFILES",
    "FileSettings",
    "ResolvedSettings",
    "ServerProfile",
    "SettingsOverrides",
    "SettingsResolver",
    "ensure_default_config_file",
    "get_profile",
    "load_config",
]
