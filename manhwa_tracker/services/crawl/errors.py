from __future__ import annotations

from typing import Optional


class FetchError(RuntimeError):
    """The origin page could not be retrieved."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class OriginUnavailableError(FetchError):
    """Network or transport failure (DNS, connect, TLS, timeout)."""


class OriginStatusError(FetchError):
    def __init__(self, status_code: int, *, url: Optional[str] = None) -> None:
        super().__init__(f"Origin responded with HTTP {status_code}", url=url)
        self.status_code = status_code
