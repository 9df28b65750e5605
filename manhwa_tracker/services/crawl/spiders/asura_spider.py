from __future__ import annotations

import asyncio
import logging
import re
from typing import Dict, List, Optional

import httpx
from selectolax.lexbor import LexborHTMLParser, LexborNode

from ..base import Entry
from ..errors import FetchError, OriginStatusError, OriginUnavailableError


logger = logging.getLogger(__name__)

SERIES_PREFIX = "/series/"
CHAPTER_MARKER = "/chapter/"

# Cloudflare in front of the origin lets this signature through over HTTP/2; HTTP/1.1 gets 403.
BROWSER_HEADERS: Dict[str, str] = {
    "user-agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "accept-language": "en-US,en;q=0.9",
    "accept-encoding": "gzip, deflate, br",
    "cache-control": "max-age=0",
    "sec-ch-ua": '"Chromium";v="124", "Google Chrome";v="124", "Not-A.Brand";v="99"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "none",
    "sec-fetch-user": "?1",
    "upgrade-insecure-requests": "1",
}

RETRYABLE_STATUS = frozenset({408, 413, 429, 500, 502, 503, 504, 521, 522, 524})

_WS_RE = re.compile(r"\s+")


def clean_text(node: Optional[LexborNode]) -> str:
    """Rendered text of a node with whitespace collapsed.

    Only text nodes are joined, so the template's empty comment markers
    (`Public in <!-- -->4.1<!-- --> hours`) and attribute values never leak in.
    """
    if node is None:
        return ""
    return _WS_RE.sub(" ", node.text(deep=True) or "").strip()


class AsuraHomeSpider:
    """Fetches the asuracomic.net homepage and extracts the latest chapter per series.

    The page is a Next.js render; each series in the "Latest Updates" list is a
    card with a thumbnail column and a text column. The text column holds the
    series title link followed by chapter rows, newest first.

    Selectors (CSS):
      - card_sel: one series update card
      - text_col_sel: the card's text column (the thumbnail column is ignored)
      - title_sel: candidate title anchors; the first with non-empty text wins
      - row_sel: chapter rows within the text column
      - chapter_sel: chapter anchor within a row
      - label_sel: chapter label element within the chapter anchor
      - time_sel: relative-time element within a row
    """

    name = "asura_home"

    def __init__(
        self,
        *,
        url: str = "https://asuracomic.net/",
        timeout: float = 15.0,
        retries: int = 2,
        retry_backoff: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
        card_sel: str = "div.grid.grid-rows-1.grid-cols-12.m-2",
        text_col_sel: str = "div.col-span-9",
        title_sel: str = 'a[href^="/series/"]',
        row_sel: str = "div.flex.flex-row.justify-between",
        chapter_sel: str = 'a[href*="/chapter/"]',
        label_sel: str = "span",
        time_sel: str = "p",
    ) -> None:
        self.url = url
        self.timeout = float(timeout)
        self.retries = max(0, int(retries))
        self.retry_backoff = float(retry_backoff)
        self.headers = headers or dict(BROWSER_HEADERS)
        self._client = client
        self._owns_client = client is None
        self.card_sel = card_sel
        self.text_col_sel = text_col_sel
        self.title_sel = title_sel
        self.row_sel = row_sel
        self.chapter_sel = chapter_sel
        self.label_sel = label_sel
        self.time_sel = time_sel

    # --- Public API ---
    async def fetch(self) -> List[Entry]:
        html = await self.fetch_html()
        return self.parse_html(html)

    async def fetch_html(self) -> str:
        """GET the homepage with bounded retries; raises FetchError on failure."""
        client = self._get_client()
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                resp = await client.get(self.url, headers=self.headers)
            except httpx.TransportError as exc:
                if attempt < attempts:
                    logger.warning("Fetch %s failed (attempt %d/%d): %s", self.url, attempt, attempts, exc)
                    await self._backoff(attempt)
                    continue
                raise OriginUnavailableError(f"Could not reach {self.url}: {exc}", url=self.url) from exc

            if resp.is_success:
                return resp.text
            if resp.status_code in RETRYABLE_STATUS and attempt < attempts:
                logger.warning(
                    "Fetch %s returned HTTP %d (attempt %d/%d)", self.url, resp.status_code, attempt, attempts
                )
                await self._backoff(attempt)
                continue
            raise OriginStatusError(resp.status_code, url=self.url)

        raise FetchError(f"Could not fetch {self.url}", url=self.url)  # pragma: no cover

    def parse_html(self, html: str) -> List[Entry]:
        if not html:
            return []
        doc = LexborHTMLParser(html)
        results: List[Entry] = []
        for idx, card in enumerate(doc.css(self.card_sel)):
            entry = self._parse_card(card)
            if entry is None:
                logger.debug("Skipped card #%d: no title link or chapter row", idx)
                continue
            results.append(entry)
        return results

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- Internals ---
    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                http2=True,
                headers=self.headers,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def _backoff(self, attempt: int) -> None:
        if self.retry_backoff > 0:
            await asyncio.sleep(self.retry_backoff * attempt)

    def _parse_card(self, card: LexborNode) -> Optional[Entry]:
        column = card.css_first(self.text_col_sel)
        if column is None:
            return None

        title_link = self._find_title_link(column)
        if title_link is None:
            return None
        title = clean_text(title_link)
        href = title_link.attributes.get("href") or ""
        slug = href[len(SERIES_PREFIX):].strip() if href.startswith(SERIES_PREFIX) else href.strip()

        # Rows are newest first; only the first row with a chapter link and a time counts.
        for row in column.css(self.row_sel):
            chapter_link = row.css_first(self.chapter_sel)
            if chapter_link is None:
                continue
            time_node = row.css_first(self.time_sel)
            if time_node is None:
                continue
            chapter = clean_text(chapter_link.css_first(self.label_sel)) or clean_text(chapter_link)
            return Entry.build(title=title, slug=slug, chapter=chapter, time=clean_text(time_node))
        return None

    def _find_title_link(self, column: LexborNode) -> Optional[LexborNode]:
        for a in column.css(self.title_sel):
            href = a.attributes.get("href") or ""
            if CHAPTER_MARKER in href:
                continue
            if clean_text(a):
                return a
        return None
