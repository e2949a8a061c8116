"""Config settings – 12-factor env-based configuration."""
from catalog_search.config.settings.base import Settings
from catalog_search.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from catalog_search.config.settings.search import HARD_MAX_LIMIT, SearchSettings

__all__ = [
    "HARD_MAX_LIMIT",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "SearchSettings",
    "Settings",
    "SettingsLoader",
]
