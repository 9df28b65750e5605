"""Application-owned collaborators, exposed as FastAPI dependencies.

The spider and the update cache live on ``app.state``; they are created in the
lifespan (or lazily on first request) and can be replaced in tests with
``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from manhwa_tracker.config import Settings, get_settings
from manhwa_tracker.services.crawl.spiders.asura_spider import AsuraHomeSpider
from manhwa_tracker.services.update_cache import UpdateCache


def build_spider(settings: Settings) -> AsuraHomeSpider:
    return AsuraHomeSpider(
        url=settings.asura_url,
        timeout=settings.fetch_timeout_seconds,
        retries=settings.fetch_retries,
        retry_backoff=settings.fetch_retry_backoff_seconds,
    )


def init_state(app, settings: Settings) -> None:
    if getattr(app.state, "spider", None) is None:
        app.state.spider = build_spider(settings)
    if getattr(app.state, "update_cache", None) is None:
        app.state.update_cache = UpdateCache(app.state.spider.fetch, ttl=settings.cache_ttl_seconds)


def get_spider(request: Request) -> AsuraHomeSpider:
    init_state(request.app, get_settings())
    return request.app.state.spider


def get_update_cache(request: Request) -> UpdateCache:
    init_state(request.app, get_settings())
    return request.app.state.update_cache
