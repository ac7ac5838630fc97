"""DAO for caching OpenGraph preview metadata in Redis

This module provides a Redis-backed cache for PreviewMetadata keyed by target
URL, with an on-demand fallback to fetching the target document on a miss.

Responsibilities:
    - Retrieve preview metadata for a target URL from Redis
    - On cache-miss (and when configured), resolve the metadata and populate cache
    - Maintain one key type, with a fixed TTL:
        * cache:<prefix>:preview:<xxh64(target)> -> {"target": ..., "preview": {...}}

The cache is advisory. Losing an entry only costs a re-fetch, so read
failures are treated as misses and write failures are logged and ignored.

Classes:
    PreviewCacheDAO:
        Concrete DAO for preview metadata caching backed by Redis.

Example:
    Basic usage with fetching on misses:

        >>> dao = PreviewCacheDAO(prefix="kvshortener:dev")

        # First call fetches https://example.com and caches the result (real or fallback)
        >>> dao.get('https://example.com', pull=True)
        PreviewMetadata(title='Example Domain', description='No description available', image_url='https://via.placeholder.com/...')

        # Subsequent calls within PREVIEW_TTL are served from Redis
        >>> dao.get('https://example.com', pull=False)
        PreviewMetadata(title='Example Domain', ...)
"""

import json
import logging
from collections.abc import Callable
from typing import Optional

import redis
from beartype import beartype

from kvshortener.models import PreviewMetadata
from kvshortener.dao.cache.cache_key_schema import CacheKeySchema
from kvshortener.dao.cache.constants import PREVIEW_TTL
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.exceptions import CacheMissError, CachePutError
from kvshortener.utils.opengraph import resolve_preview


logger = logging.getLogger(__name__)


class PreviewCacheDAO(RedisClientMixin):
    """Redis-backed DAO for preview metadata with on-demand fetch/caching

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
        resolver (Callable[[str], PreviewMetadata]):
            Function resolving metadata on a miss. Defaults to resolve_preview.

    Methods:
        get(target: str, pull: bool = True) -> PreviewMetadata:
            Retrieve cached preview metadata for target.
            On miss, optionally resolve it and populate cache.
    """

    def __init__(self, *args, resolver: Optional[Callable[[str], PreviewMetadata]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.keys = CacheKeySchema(prefix=kwargs.get('prefix'))
        self.resolver = resolver or resolve_preview

    @beartype
    def get(self, target: str, pull: bool = True) -> PreviewMetadata:
        """Retrieve preview metadata for a target URL

        Steps:
            - Try "cache:<prefix>:preview:<xxh64(target)>".
            - On CACHE HIT, return the stored metadata.
            - On CACHE MISS, raise CacheMissError if pull=False. Otherwise resolve
              the metadata (fetch + fallbacks) and warm the cache.

        Args:
            target (str):
                Target URL whose preview metadata is requested.
            pull (bool):
                If True, resolve and cache on miss.
                If False, raise CacheMissError on miss.
                Defaults to True.

        Returns:
            PreviewMetadata: Cached or freshly resolved metadata.

        Raises:
            CacheMissError:
                If the metadata is not cached and pull is False.
        """
        cached = self._read(target)

        # CACHE HIT: return stored metadata
        if cached is not None:
            return cached

        # CACHE MISS: raise CacheMissError if pull=False
        #             otherwise resolve the metadata and warm the cache
        if not pull:
            raise CacheMissError(f'Preview for {target} not found in cache and pull=False.')

        preview = self.resolver(target)
        try:
            self._warm_up_cache(target, preview)
        except CachePutError:
            logger.warning('Failed to cache preview metadata.', extra={'url': target}, exc_info=True)
        return preview

    def _read(self, target: str) -> PreviewMetadata | None:
        try:
            blob = self.redis.get(self.keys.preview_key(target))
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
            logger.warning('Preview cache unreachable, treating as miss.', extra={'url': target}, exc_info=True)
            return None
        if blob is None:
            return None

        try:
            entry = json.loads(blob)
            # xxh64 keys may collide: only trust entries written for this exact target
            if entry['target'] != target:
                return None
            return PreviewMetadata.from_dict(entry['preview'])
        except (ValueError, TypeError, KeyError):
            logger.warning('Malformed preview cache entry, treating as miss.', extra={'url': target})
            return None

    def _warm_up_cache(self, target: str, preview: PreviewMetadata) -> None:
        """Write resolved preview metadata to Redis with PREVIEW_TTL

        Raises:
            CachePutError:
                If the Redis write fails due to connectivity issues.
        """
        entry = json.dumps({'target': target, 'preview': preview.to_dict()}, separators=(',', ':'), ensure_ascii=False)
        try:
            self.redis.set(self.keys.preview_key(target), entry, ex=PREVIEW_TTL)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise CachePutError(f'Failed to write preview for {target} to cache.') from e
