from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from manhwa_tracker.api.deps import get_update_cache
from manhwa_tracker.config import get_settings
from manhwa_tracker.models.updates import CompactErrorOut, CompactResponse, ErrorOut, UpdatesResponse
from manhwa_tracker.services.filters import FilterMode, apply_filter, parse_watch_param
from manhwa_tracker.services.projector import (
    COMPACT_MAX_LIMIT,
    UpcomingCode,
    compact_error,
    project_compact,
    project_verbose,
    verbose_error,
)
from manhwa_tracker.services.update_cache import UpdateCache


logger = logging.getLogger(__name__)

router = APIRouter(tags=["updates"])

WATCH_DESCRIPTION = "Comma-separated slug prefixes, or 'all'. Omit for the default watchlist."


@router.get("/updates", response_model=UpdatesResponse, responses={500: {"model": ErrorOut}})
async def api_updates(
    watch: Optional[str] = Query(None, description=WATCH_DESCRIPTION),
    mode: Optional[FilterMode] = Query(None, description="recent: upcoming or released within 24h; watchlist: prefix only"),
    cache: UpdateCache = Depends(get_update_cache),
):
    settings = get_settings()
    try:
        slot = await cache.get_slot()
    except Exception as exc:
        logger.exception("GET /updates failed: %s", exc)
        return JSONResponse(status_code=500, content=verbose_error(str(exc)))

    prefixes = parse_watch_param(watch, settings.watchlist)
    filtered = apply_filter(slot.entries, prefixes, mode or settings.filter_mode)
    return project_verbose(filtered, slot.fetched_at)


@router.get("/updates/esp32", response_model=CompactResponse, responses={500: {"model": CompactErrorOut}})
async def api_updates_compact(
    watch: Optional[str] = Query(None, description=WATCH_DESCRIPTION),
    mode: Optional[FilterMode] = Query(None, description="recent or watchlist"),
    code: Optional[UpcomingCode] = Query(None, description="binary: u=1/0; tristate: u=1 upcoming, 2 recent, 0 older"),
    limit: Optional[int] = Query(None, ge=1, le=COMPACT_MAX_LIMIT, description="Max entries returned"),
    cache: UpdateCache = Depends(get_update_cache),
):
    settings = get_settings()
    try:
        entries = await cache.get_entries()
    except Exception as exc:
        logger.exception("GET /updates/esp32 failed: %s", exc)
        return JSONResponse(status_code=500, content=compact_error(str(exc)))

    prefixes = parse_watch_param(watch, settings.watchlist)
    filtered = apply_filter(entries, prefixes, mode or settings.filter_mode)
    return project_compact(
        filtered,
        limit or settings.compact_limit,
        code or settings.compact_code,
    )
