"""Disk-based response caching for simplerest.

This package provides :class:`CachingTransport`, a transport wrapper that
stores successful GET responses on disk using :mod:`diskcache` and
revalidates stale entries with conditional requests.

The CLI wraps its transport in one when the ``cache`` section of the
global configuration (:class:`~simplerest.models.CacheConfig`) is enabled.
"""

from simplerest.cache.cache import CachingTransport

__all__ = ["CachingTransport"]
