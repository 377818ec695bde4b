"""Default fetch capability built on requests.

RequestsFetcher performs plain GETs, or conditional GETs backed by an on-disk
cache when a cache directory is passed:

- A stored entry with an ETag sends If-None-Match, one with Last-Modified
  sends If-Modified-Since
- 304 Not Modified is answered from the stored body (these responses do not
  count against the GitHub rate limit)
- Only success responses carrying a validator are stored
"""

import contextlib
import hashlib
import json
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

from ghread.logger import get_logger

logger = get_logger(__name__)

CACHE_SCHEMA_VERSION = 1


@dataclass
class FetchResult:
    """Response returned by RequestsFetcher.

    Attributes:
        status: HTTP status code
        status_text: Reason phrase
        content: Raw body
        from_cache: True when the body was served from the on-disk cache
    """

    status: int
    status_text: str
    content: bytes = b""
    from_cache: bool = False
    _parsed: Any = field(default=None, init=False, repr=False)
    _decoded: bool = field(default=False, init=False, repr=False)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON (once)."""
        if not self._decoded:
            self._parsed = json.loads(self.content)
            self._decoded = True
        return self._parsed


@dataclass
class CacheEntry:
    """One stored response."""

    url: str
    status: int
    status_text: str
    body: str
    etag: str | None = None
    last_modified: str | None = None
    stored_at: float = 0.0


class ResponseCache:
    """Directory of JSON files, one per URL."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path_for(self, url: str) -> Path:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    def get(self, url: str) -> CacheEntry | None:
        """Return the stored entry for url, or None on miss or corrupt entry."""
        path = self._path_for(url)
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None

        if data.get("version") != CACHE_SCHEMA_VERSION or data.get("url") != url:
            return None

        try:
            return CacheEntry(
                url=data["url"],
                status=int(data["status"]),
                status_text=data["status_text"],
                body=data["body"],
                etag=data.get("etag"),
                last_modified=data.get("last_modified"),
                stored_at=float(data.get("stored_at", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed cache entry {path}: {e}")
            return None

    def put(self, entry: CacheEntry) -> None:
        """Store entry, replacing any previous one for the same URL."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(entry.url)
        payload = {
            "version": CACHE_SCHEMA_VERSION,
            "url": entry.url,
            "status": entry.status,
            "status_text": entry.status_text,
            "body": entry.body,
            "etag": entry.etag,
            "last_modified": entry.last_modified,
            "stored_at": entry.stored_at,
        }
        # Atomic write: each writer gets its own tmp file, then renames it into place
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                dir=self.directory,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(json.dumps(payload, separators=(",", ":")))
            os.replace(tmp_name, path)
            tmp_name = None
        finally:
            if tmp_name is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)


class RequestsFetcher:
    """Fetch capability backed by a requests.Session."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: Session to reuse; a new one is created if omitted
            timeout: Per-request timeout in seconds, or None for no timeout
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def __call__(
        self,
        url: str,
        headers: dict[str, str],
        cache_dir: str | None = None,
    ) -> FetchResult:
        """GET url, using the cache in cache_dir when given.

        requests exceptions (connection errors, timeouts) propagate.
        """
        if not cache_dir:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
            return FetchResult(resp.status_code, resp.reason or "", resp.content)

        cache = ResponseCache(cache_dir)
        entry = cache.get(url)

        request_headers = dict(headers)
        if entry is not None:
            if entry.etag:
                request_headers["If-None-Match"] = entry.etag
            if entry.last_modified:
                request_headers["If-Modified-Since"] = entry.last_modified

        resp = self.session.get(url, headers=request_headers, timeout=self.timeout)

        if resp.status_code == 304 and entry is not None:
            logger.debug(f"Not modified, serving {url} from cache")
            return FetchResult(
                entry.status,
                entry.status_text,
                entry.body.encode("utf-8"),
                from_cache=True,
            )

        result = FetchResult(resp.status_code, resp.reason or "", resp.content)

        etag = resp.headers.get("ETag")
        last_modified = resp.headers.get("Last-Modified")
        if result.ok and (etag or last_modified):
            try:
                cache.put(
                    CacheEntry(
                        url=url,
                        status=result.status,
                        status_text=result.status_text,
                        body=resp.content.decode("utf-8"),
                        etag=etag,
                        last_modified=last_modified,
                        stored_at=time.time(),
                    )
                )
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not cache response for {url}: {e}")

        return result
