"""Config settings – SearchSettings for the product search compiler."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from catalog_search.config.settings.base import Settings
from catalog_search.config.validation import InvalidSettingValueError

HARD_MAX_LIMIT = 100


@dataclasses.dataclass
class SearchSettings(Settings):
    """Tunables for :class:`~catalog_search.application.search.SearchCriteriaCompiler`.

    Loaded from ``CATALOG_SEARCH_*`` environment variables via
    :class:`~catalog_search.config.settings.EnvSettingsLoader`.
    """

    _prefix: ClassVar[str] = "CATALOG_SEARCH"

    text_search_language: str = "spanish"
    full_text_min_length: int = 3
    cache_namespace: str = "product_search"
    default_limit: int = 20
    max_limit: int = HARD_MAX_LIMIT
    cache_ttl_seconds: int = 60

    def _validate(self) -> None:
        if not 1 <= self.max_limit <= HARD_MAX_LIMIT:
            raise InvalidSettingValueError(
                "max_limit", self.max_limit, f"must be between 1 and {HARD_MAX_LIMIT}"
            )
        if not 1 <= self.default_limit <= self.max_limit:
            raise InvalidSettingValueError(
                "default_limit", self.default_limit, f"must be between 1 and {self.max_limit}"
            )
        if self.full_text_min_length < 1:
            raise InvalidSettingValueError(
                "full_text_min_length", self.full_text_min_length, "must be at least 1"
            )
        if not self.text_search_language.isidentifier():
            raise InvalidSettingValueError(
                "text_search_language", self.text_search_language, "must be a plain configuration name"
            )
        if not self.cache_namespace:
            raise InvalidSettingValueError("cache_namespace", self.cache_namespace, "must not be empty")
        if self.cache_ttl_seconds < 0:
            raise InvalidSettingValueError(
                "cache_ttl_seconds", self.cache_ttl_seconds, "must not be negative"
            )


__all__ = ["HARD_MAX_LIMIT", "SearchSettings"]
