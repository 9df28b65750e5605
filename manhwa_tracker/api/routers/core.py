from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from typing import List
import logging

from manhwa_tracker.api.deps import get_spider
from manhwa_tracker.config import get_settings
from manhwa_tracker.models.updates import StatusOut
from manhwa_tracker.services.crawl.spiders.asura_spider import AsuraHomeSpider


logger = logging.getLogger(__name__)

router = APIRouter(tags=["core"])

# Strings that should appear on a healthy homepage render.
DEBUG_MARKERS = ("grid-cols-12", "/series/", "/chapter/", "Public in", "ago")
DEBUG_WINDOW = 300
DEBUG_HITS_PER_MARKER = 2


@router.get("/", response_model=StatusOut)
async def read_index():
    return {"status": "manhwa-tracker running"}


@router.get("/debug", response_class=PlainTextResponse)
async def read_debug(spider: AsuraHomeSpider = Depends(get_spider)):
    """Raw HTML excerpts around known markers, for diagnosing extraction breakage.

    Always fetches the live page (the cache is not consulted or updated).
    """
    if not get_settings().debug_endpoint:
        raise HTTPException(status_code=404, detail="Not Found")
    try:
        html = await spider.fetch_html()
    except Exception as exc:
        logger.exception("GET /debug failed: %s", exc)
        return PlainTextResponse(f"fetch failed: {exc}", status_code=500)
    return PlainTextResponse(render_debug_report(html, spider))


def render_debug_report(html: str, spider: AsuraHomeSpider) -> str:
    entries = spider.parse_html(html)
    lines: List[str] = [
        f"url: {spider.url}",
        f"length: {len(html)}",
        f"entries extracted: {len(entries)}",
    ]
    for marker in DEBUG_MARKERS:
        lines.append("")
        lines.append(f"=== {marker!r} ({html.count(marker)} hits)")
        start = 0
        for _ in range(DEBUG_HITS_PER_MARKER):
            idx = html.find(marker, start)
            if idx < 0:
                break
            lo = max(0, idx - DEBUG_WINDOW // 2)
            hi = min(len(html), idx + len(marker) + DEBUG_WINDOW // 2)
            lines.append(f"--- @{idx}")
            lines.append(html[lo:hi])
            start = idx + len(marker)
    return "\n".join(lines) + "\n"
