"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for CRUD
operations with ShortURLModel instances.

Responsibilities:
    - Create, retrieve, update and delete short URL mappings;
    - Deduplicate creations through a target URL -> shortcode index;
    - Allocate random shortcodes, retrying on collision;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Storage layout (see RedisKeySchema):
    <prefix>:links:<shortcode>         -> JSON document {target, expires_at, preview}
    <prefix>:targets:<xxh64(target)>   -> shortcode currently mapped to target

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from kvshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url, created = dao.create("https://example.com/page", ttl=3600)
    >>> created
    True
    >>> dao.get(short_url.shortcode).target
    'https://example.com/page'
    >>> dao.create("https://example.com/page")[0].shortcode == short_url.shortcode
    True
"""

import json
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from beartype import beartype

from kvshortener.constants import Shortcode
from kvshortener.models import ShortURLModel, PreviewMetadata
from kvshortener.dao.base import ShortURLBaseDAO
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error
from kvshortener.dao.exceptions import (
    DataStoreError,
    MalformedRecordError,
    ShortURLAlreadyExistsError,
    ShortURLNotFoundError,
)
from kvshortener.utils.shortener import generate_shortcode
from kvshortener.utils.validators import validate_url, validate_shortcode, validate_ttl


logger = logging.getLogger(__name__)


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE:
        - Expired mappings are not removed here. `get()` returns whatever is
          stored; the redirect path deletes a mapping once it observes expiry.
        - The target index and the mapping are separate keys. Concurrent
          creations for the same target may both miss the index and allocate
          two shortcodes; the last one written wins the index entry.
    """

    @handle_redis_connection_error
    @beartype
    def create(
        self,
        target: str,
        shortcode: Optional[str] = None,
        ttl: Optional[int] = None,
        preview: Optional[PreviewMetadata] = None,
        **kwargs,
    ) -> tuple[ShortURLModel, bool]:
        """Create a short URL mapping in Redis, reusing a live mapping for the same target

        Steps:
            1- Validate target, shortcode and ttl (no Redis access on failure)
            2- Return the live mapping already indexed for this exact target, if any
            3- Reject a custom shortcode that is already taken
            4- Otherwise allocate a random shortcode
            5- Write mapping + target index in one pipeline

        Args:
            target (str):
                Absolute http(s) URL to shorten.
            shortcode (Optional[str]):
                Caller-supplied shortcode. A random one is allocated if None.
            ttl (Optional[int]):
                Seconds until the mapping expires (60s - 1 year). Never expires if None.
            preview (Optional[PreviewMetadata]):
                Rich-preview metadata stored with the mapping.

        Returns:
            tuple[ShortURLModel, bool]:
                (mapping, created) where created is False for a deduplicated target.

        Raises:
            ValidationError:
                If target, shortcode or ttl are malformed.
            ShortURLAlreadyExistsError:
                If the custom shortcode already exists.
            DataStoreError:
                If no free shortcode was found or a Redis connection issue occurs.

        Example:
            >>> dao.create('https://example.com', shortcode='abc123')
            (ShortURLModel(target='https://example.com', shortcode='abc123', ...), True)
        """
        validate_url(target)
        if shortcode is not None:
            validate_shortcode(shortcode)
        if ttl is not None:
            ttl = validate_ttl(ttl)

        existing = self.find_by_target(target)
        if existing is not None:
            logger.debug('Target already mapped to shortcode %s.', existing.shortcode, extra={'shortcode': existing.shortcode})
            return existing, False

        if shortcode is None:
            shortcode = self._allocate_shortcode()
        elif self.redis.exists(self.keys.link_key(shortcode)):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")

        expires_at = datetime.now(UTC) + timedelta(seconds=ttl) if ttl is not None else None
        short_url = ShortURLModel(target=target, shortcode=shortcode, expires_at=expires_at, preview=preview)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self.keys.link_key(shortcode), self._serialize(short_url))
            pipe.set(self.keys.target_index_key(target), shortcode)
            pipe.execute()
        return short_url, True

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.

        Returns:
            ShortURLModel:
                The stored mapping. It may already be expired.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            MalformedRecordError:
                If the stored document is not a well-formed mapping.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123', ...)
        """
        blob = self.redis.get(self.keys.link_key(shortcode))
        if blob is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self._deserialize(shortcode, blob)

    @handle_redis_connection_error
    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel | None:
        """Return the live mapping whose target equals `target` exactly, or None

        The index entry is only a hint: the mapping it names is re-read and
        must still point at the same target and not be expired.
        """
        shortcode = self.redis.get(self.keys.target_index_key(target))
        if shortcode is None:
            return None

        try:
            short_url = self.get(shortcode)
        except (ShortURLNotFoundError, MalformedRecordError):
            return None

        if short_url.target != target or short_url.is_expired():
            return None
        return short_url

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def update(self, shortcode: str, target: str, **kwargs) -> ShortURLModel:
        """Point an existing shortcode at a new target URL

        This is a partial update: expiration and preview metadata are kept.
        The target index entry moves from the old target to the new one.

        Raises:
            ValidationError:
                If target is malformed.
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            MalformedRecordError:
                If the stored document is not a well-formed mapping.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        validate_url(target)
        current = self.get(shortcode)
        updated = current.with_target(target)

        old_index_key = self.keys.target_index_key(current.target)
        owns_old_index = self.redis.get(old_index_key) == shortcode

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self.keys.link_key(shortcode), self._serialize(updated))
            if owns_old_index and current.target != target:
                pipe.delete(old_index_key)
            pipe.set(self.keys.target_index_key(target), shortcode)
            pipe.execute()
        return updated

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> None:
        """Delete a short URL mapping (idempotent)

        The target index entry is removed only when it still names this shortcode.
        """
        link_key = self.keys.link_key(shortcode)
        index_key = None
        blob = self.redis.get(link_key)
        if blob is not None:
            try:
                target = self._deserialize(shortcode, blob).target
            except MalformedRecordError:
                target = None
            if target is not None and self.redis.get(self.keys.target_index_key(target)) == shortcode:
                index_key = self.keys.target_index_key(target)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(link_key)
            if index_key is not None:
                pipe.delete(index_key)
            pipe.execute()

    def _allocate_shortcode(self) -> str:
        """Draw random shortcodes until an unused one is found

        Raises:
            DataStoreError:
                If every draw collided with an existing shortcode.
        """
        for attempt in range(1, Shortcode.MAX_ATTEMPTS + 1):
            shortcode = generate_shortcode()
            if not self.redis.exists(self.keys.link_key(shortcode)):
                return shortcode
            logger.warning('Shortcode collision on attempt %d.', attempt, extra={'shortcode': shortcode})
        raise DataStoreError(f'Failed to allocate a unique shortcode after {Shortcode.MAX_ATTEMPTS} attempts.')

    @staticmethod
    def _serialize(short_url: ShortURLModel) -> str:
        document = {
            'target': short_url.target,
            'expires_at': short_url.expires_at.isoformat() if short_url.expires_at else None,
            'preview': short_url.preview.to_dict() if short_url.preview else None,
        }
        return json.dumps(document, separators=(',', ':'), ensure_ascii=False)

    @staticmethod
    def _deserialize(shortcode: str, blob: str) -> ShortURLModel:
        try:
            document = json.loads(blob)
            expires_at = document.get('expires_at')
            preview = document.get('preview')
            return ShortURLModel(
                target=str(document['target']),
                shortcode=shortcode,
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
                preview=PreviewMetadata.from_dict(preview) if preview else None,
            )
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.error('Malformed short URL record.', extra={'shortcode': shortcode, 'error': str(e)})
            raise MalformedRecordError(f"Short URL record with code '{shortcode}' is malformed.") from e
