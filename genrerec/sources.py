"""Raw text retrieval for the catalog loader (local directory or HTTP)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import httpx


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    name: str
    ok: bool
    status: Optional[int]
    body: str = ""


class RetrievalError(Exception):
    """Transport-level failure while fetching a named text resource."""

    def __init__(self, source_name: str, status: Optional[int] = None, reason: str = "") -> None:
        self.source_name = source_name
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "transport error")
        super().__init__(f"Failed to load {source_name} ({detail})")


class TextSource(Protocol):
    async def fetch(self, name: str) -> FetchResponse:
        ...


def _decode(raw: bytes) -> str:
    # MovieLens 100k ships u.item as ISO-8859-1.
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


class DirectorySource:
    """Serve resources as files under a local directory."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    async def fetch(self, name: str) -> FetchResponse:
        path = self.root / name
        if not path.is_file():
            logger.warning("Resource %s not found under %s", name, self.root)
            return FetchResponse(name=name, ok=False, status=404)

        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            logger.warning("Reading %s failed: %s", path, exc)
            raise RetrievalError(name, status=None, reason=str(exc) or type(exc).__name__) from exc
        logger.info("Read %s (%d bytes) from %s", name, len(raw), path)
        return FetchResponse(name=name, ok=True, status=200, body=_decode(raw))

    def __repr__(self) -> str:
        return f"DirectorySource({str(self.root)!r})"


class HttpSource:
    """Fetch resources relative to a base URL with an async httpx client.

    No timeout is applied unless `timeout_s` is given; a hung request blocks
    the load that awaits it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = str(base_url).rstrip("/") + "/"
        self.timeout_s = timeout_s
        self._client = client

    def url_for(self, name: str) -> str:
        return self.base_url + str(name).lstrip("/")

    async def fetch(self, name: str) -> FetchResponse:
        url = self.url_for(name)
        try:
            if self._client is not None:
                r = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s), follow_redirects=True) as client:
                    r = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Fetch %s failed: %s", url, exc)
            raise RetrievalError(name, status=None, reason=str(exc) or type(exc).__name__) from exc

        ok = 200 <= r.status_code < 300
        if not ok:
            logger.warning("Fetch %s returned HTTP %d", url, r.status_code)
            return FetchResponse(name=name, ok=False, status=int(r.status_code))

        logger.info("Fetched %s (%d bytes)", url, len(r.content))
        return FetchResponse(name=name, ok=True, status=int(r.status_code), body=_decode(r.content))

    def __repr__(self) -> str:
        return f"HttpSource({self.base_url!r})"
