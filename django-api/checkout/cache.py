"""Cache keys shared by the catalog views, the stores and the signal handlers."""

import uuid

from django.conf import settings
from django.core.cache import cache

CONTENT_LIST_VERSION_KEY = "contents:list:version"
SETTINGS_KEY = "platform:settings"


def content_detail_key(content_id) -> str:
    return f"contents:{content_id}"


def content_list_key(page: int, limit: int, tag: str | None) -> str:
    version = cache.get(CONTENT_LIST_VERSION_KEY)
    if version is None:
        version = uuid.uuid4().hex
        cache.set(CONTENT_LIST_VERSION_KEY, version, None)
    return f"contents:list:{version}:{page}:{limit}:{tag or 'all'}"


def invalidate_content(content_id) -> None:
    """Drop the detail entry for one content and every cached list page."""
    cache.delete(content_detail_key(content_id))
    cache.set(CONTENT_LIST_VERSION_KEY, uuid.uuid4().hex, None)


def invalidate_settings() -> None:
    cache.delete(SETTINGS_KEY)


def content_ttl() -> int:
    return settings.CONTENT_CACHE_TTL


def settings_ttl() -> int:
    return settings.SETTINGS_CACHE_TTL
