"""Redis DAO for per-client request rate limiting

Fixed window counter:
    <prefix>:ratelimit:<client id>  -> requests accepted in the current window (EX <window>)

A missing key means no request was accepted in the current window. Each
accepted request rewrites the counter with a fresh TTL, so the window is
anchored to the latest accepted request rather than to wall-clock
boundaries. Rejected requests write nothing.

NOTE:
    The counter is read then written (no INCR). Concurrent requests from the
    same client may both read the same value and both be accepted. The
    limiter is best-effort by design.
"""

from beartype import beartype

from kvshortener.constants import RateLimit
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class RateLimitRedisDAO(RedisClientMixin):
    """Fixed-window request counter keyed by client identity

    Args (in addition to RedisClientMixin):
        limit (int):
            Requests allowed per window. Defaults to RateLimit.LIMIT.
        window (int):
            Window length in seconds. Defaults to RateLimit.WINDOW.

    Example:
        >>> dao = RateLimitRedisDAO(prefix="kvshortener:dev", limit=2, window=60)
        >>> dao.hit('203.0.113.7'), dao.hit('203.0.113.7'), dao.hit('203.0.113.7')
        (True, True, False)
    """

    def __init__(self, *args, limit: int = RateLimit.LIMIT, window: int = RateLimit.WINDOW, **kwargs):
        super().__init__(*args, **kwargs)
        self.limit = limit
        self.window = window

    @handle_redis_connection_error
    @beartype
    def hit(self, client_id: str, **kwargs) -> bool:
        """Count a request for client_id if it is within budget

        Returns:
            bool: True if the request is allowed, False if it must be rejected.
        """
        key = self.keys.rate_limit_key(client_id)
        count = self.redis.get(key)
        count = int(count) if count else 0

        if count >= self.limit:
            return False

        self.redis.set(key, count + 1, ex=self.window)
        return True

    @handle_redis_connection_error
    @beartype
    def retry_after(self, client_id: str, **kwargs) -> int:
        """Seconds until the client's window resets (falls back to the full window)"""
        ttl = self.redis.ttl(self.keys.rate_limit_key(client_id))
        return ttl if isinstance(ttl, int) and ttl > 0 else self.window
