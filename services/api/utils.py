"""Shared utilities for API routes."""

from __future__ import annotations

from functools import lru_cache

from core.settings import LayoutSettings, get_settings
from core.storage import ObjectStorage, build_storage


@lru_cache(maxsize=1)
def _default_storage() -> ObjectStorage:
    return build_storage(get_settings().storage)


def get_storage() -> ObjectStorage:
    """FastAPI dependency returning the configured object store."""
    return _default_storage()


def get_layout() -> LayoutSettings:
    return get_settings().layout


def get_signed_url_ttl() -> int:
    return get_settings().storage.signed_url_ttl_seconds


__all__ = ["get_layout", "get_signed_url_ttl", "get_storage"]
