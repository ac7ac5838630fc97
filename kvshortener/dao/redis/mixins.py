"""Redis connection setup shared by every kvshortener DAO

A request typically builds several DAOs (short URLs, analytics, API keys,
rate limits) from the same `load_redis_config()` settings. They all get the
client returned by `shared_client()`, which is built once per settings per
Lambda container, so warm invocations reuse one connection pool.

Tests (and callers holding a client already) pass `redis_client=` instead.

Example:
    >>> dao = AnalyticsRedisDAO(redis_host='redis.internal', prefix='kvshortener:prod')
    >>> other = ShortURLRedisDAO(redis_host='redis.internal', prefix='kvshortener:prod')
    >>> dao.redis is other.redis
    True
"""

import functools
from typing import Optional

import redis

from kvshortener.dao.redis.redis_key_schema import RedisKeySchema
from kvshortener.dao.redis.helpers import redis_location
from kvshortener.dao.exceptions import DataStoreError


@functools.cache
def shared_client(
    host: str,
    port: int,
    db: int,
    decode_responses: bool,
    username: Optional[str],
    password: Optional[str],
    ssl: bool,
) -> redis.Redis:
    return redis.Redis(
        host=host,
        port=port,
        db=db,
        decode_responses=decode_responses,
        username=username,
        password=password,
        ssl=ssl,
    )


class RedisClientMixin:
    """Give a DAO `self.redis` (a reachable client) and `self.keys` (its key schema)

    Keyword arguments mirror the `redis` section of a lambda's AppConfig
    document as returned by `load_redis_config()`, i.e. `redis_host`,
    `redis_port`, `redis_db`, `redis_username`, `redis_password`, `redis_ssl`.

    Raises:
        DataStoreError:
            If Redis doesn't answer the PING sent on construction.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_ssl: Optional[bool] = False,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        if redis_client is None:
            # AppConfig values may arrive as strings
            redis_client = shared_client(
                redis_host,
                int(redis_port),
                int(redis_db),
                bool(redis_decode_responses),
                redis_username,
                redis_password,
                bool(redis_ssl),
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; raise DataStoreError (or return False) if it is unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e
            return False
        return True
