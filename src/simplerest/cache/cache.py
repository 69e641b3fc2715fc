"""Disk-based response caching for GET requests.

Uses :mod:`diskcache` to persist GET responses on the filesystem.  Only
successful (2xx) GET responses are stored; every other request passes
straight through to the wrapped transport.

Cache keys are SHA-256 hashes of ``METHOD|URL``.  The URL already carries
the encoded query string, so identical requests resolve to the same entry.

Entries go through two ages:

- **Fresh** (age <= ``ttl_seconds``): served without network I/O, flagged
  ``from_cache``.
- **Stale**: when the stored answer had an ``ETag`` or ``Last-Modified``
  header, a conditional request is sent; a ``304`` answer serves the stored
  data flagged ``from_cache`` and ``cache_expired``.

diskcache evicts entries after ``max_stale_seconds``.

See Also:
    :class:`~simplerest.models.CacheConfig` -- the Pydantic model that
    controls ``enabled``, ``ttl_seconds`` and ``max_stale_seconds``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

import diskcache

from simplerest.models import CacheConfig, ResponseStatus
from simplerest.transport.base import Http, HttpHeader, HttpResponse, Transport

logger = logging.getLogger(__name__)


def _header(headers: list[HttpHeader], name: str) -> Optional[str]:
    lowered = name.lower()
    for h in headers:
        if h.name.lower() == lowered:
            return h.value
    return None


class CachingTransport(Transport):
    """Wrap a :class:`~simplerest.transport.base.Transport` with a disk cache.

    Args:
        inner: Transport that performs the actual requests.
        cache_dir: Root directory for the cache.  A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration.
        clock: Returns the current Unix time in seconds.

    Example::

        from simplerest.cache import CachingTransport
        from simplerest.models import CacheConfig
        from simplerest.transport import HttpxTransport

        transport = CachingTransport(HttpxTransport(), "/tmp/api-cache", CacheConfig())
        client = RestClient(base_url="https://api.example.com", transport=transport)
    """

    def __init__(
        self,
        inner: Transport,
        cache_dir: Union[str, Path],
        config: CacheConfig,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.inner = inner
        self._config = config
        self._clock = clock or time.time
        self._cache_dir = Path(cache_dir)
        self._cache: Optional[diskcache.Cache] = None
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def execute(self, http: Http) -> HttpResponse:
        if self._cache is None or http.method.upper() != "GET":
            return self.inner.execute(http)

        key = self._make_key(http.method, http.url)
        entry = self._cache.get(key)

        if entry is not None:
            age = self._clock() - entry["stored_at"]
            if age <= self._config.ttl_seconds:
                logger.debug("Cache hit: %s %s", http.method, http.url)
                return self._to_response(entry, expired=False)
            if entry.get("etag") or entry.get("last_modified"):
                return self._revalidate(key, entry, http)

        response = self.inner.execute(http)
        self._store(key, response)
        return response

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and the wrapped transport."""
        if self._cache is not None:
            self._cache.close()
        self.inner.close()

    # ------------------------------------------------------------------ #
    # Cache management
    # ------------------------------------------------------------------ #

    def invalidate(self, method: str, url: str) -> None:
        """Remove the entry for *method* and *url*, if any."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(method, url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size``, ``directory``, ``ttl_seconds`` and
            ``max_stale_seconds``.
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "responses"),
            "ttl_seconds": self._config.ttl_seconds,
            "max_stale_seconds": self._config.max_stale_seconds,
        }

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _revalidate(self, key: str, entry: dict[str, Any], http: Http) -> HttpResponse:
        headers = list(http.headers)
        if entry.get("etag"):
            headers.append(HttpHeader(name="If-None-Match", value=entry["etag"]))
        if entry.get("last_modified"):
            headers.append(HttpHeader(name="If-Modified-Since", value=entry["last_modified"]))
        conditional = dataclasses.replace(http, headers=headers)

        response = self.inner.execute(conditional)
        if (
            response.response_status == ResponseStatus.COMPLETED
            and response.status_code == 304
        ):
            logger.debug("Revalidated stale entry: %s %s", http.method, http.url)
            entry = dict(entry, stored_at=self._clock())
            self._cache.set(key, entry, expire=self._config.max_stale_seconds)
            return self._to_response(entry, expired=True)

        self._store(key, response)
        return response

    def _store(self, key: str, response: HttpResponse) -> None:
        if response.response_status != ResponseStatus.COMPLETED:
            return
        if not (200 <= response.status_code < 300):
            return
        entry = {
            "stored_at": self._clock(),
            "etag": _header(response.headers, "ETag"),
            "last_modified": _header(response.headers, "Last-Modified"),
            "status_code": response.status_code,
            "status_description": response.status_description,
            "headers": [(h.name, h.value) for h in response.headers],
            "content": response.content,
            "raw_bytes": response.raw_bytes,
            "content_type": response.content_type,
            "content_length": response.content_length,
            "content_encoding": response.content_encoding,
            "response_uri": response.response_uri,
            "server": response.server,
        }
        self._cache.set(key, entry, expire=self._config.max_stale_seconds)

    @staticmethod
    def _to_response(entry: dict[str, Any], expired: bool) -> HttpResponse:
        return HttpResponse(
            status_code=entry["status_code"],
            status_description=entry["status_description"],
            headers=[HttpHeader(name=n, value=v) for n, v in entry["headers"]],
            content=entry["content"],
            raw_bytes=entry["raw_bytes"],
            content_type=entry["content_type"],
            content_length=entry["content_length"],
            content_encoding=entry["content_encoding"],
            response_uri=entry["response_uri"],
            server=entry["server"],
            response_status=ResponseStatus.COMPLETED,
            from_cache=True,
            cache_expired=expired,
        )

    @staticmethod
    def _make_key(method: str, url: str) -> str:
        raw = f"{method.upper()}|{url}"
        return hashlib.sha256(raw.encode()).hexdigest()
