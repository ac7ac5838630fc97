"""Redis DAO for click analytics

Counters:
    <prefix>:clicks:<shortcode>   -> clicks for one short URL
    <prefix>:clicks:__total__     -> clicks across all short URLs

NOTE:
    Increments are GET + SET, not INCR. Concurrent redirects for the same
    shortcode may lose increments (last write wins). Click counts are an
    approximation and are documented as such.
"""

import logging

from beartype import beartype

from kvshortener.constants import Analytics
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error


logger = logging.getLogger(__name__)


def _as_count(value: str | None) -> int:
    try:
        return int(value) if value is not None else 0
    except ValueError:
        logger.warning('Non-integer click counter value %r treated as 0.', value)
        return 0


class AnalyticsRedisDAO(RedisClientMixin):
    """Per-shortcode and aggregate click counters stored in Redis

    Methods:
        hit(shortcode: str) -> int:
            Record one click for shortcode (and the aggregate). Returns the new count.
        clicks(shortcode: str) -> int:
            Current click count for shortcode (0 if never clicked).
        total() -> int:
            Aggregate click count.
        top(limit: int) -> list[tuple[str, int]]:
            Most clicked shortcodes, highest first.
        reset(shortcode: str) -> None:
            Drop the click counter of a deleted shortcode.

    Example:
        >>> dao = AnalyticsRedisDAO(prefix="kvshortener:dev")
        >>> dao.hit('abc123')
        1
        >>> dao.clicks('abc123')
        1
    """

    @handle_redis_connection_error
    @beartype
    def hit(self, shortcode: str, **kwargs) -> int:
        clicks_key = self.keys.clicks_key(shortcode)
        total_key = self.keys.total_clicks_key()

        clicks = _as_count(self.redis.get(clicks_key)) + 1
        self.redis.set(clicks_key, clicks)
        total = _as_count(self.redis.get(total_key)) + 1
        self.redis.set(total_key, total)
        return clicks

    @handle_redis_connection_error
    @beartype
    def clicks(self, shortcode: str, **kwargs) -> int:
        return _as_count(self.redis.get(self.keys.clicks_key(shortcode)))

    @handle_redis_connection_error
    def total(self, **kwargs) -> int:
        return _as_count(self.redis.get(self.keys.total_clicks_key()))

    @handle_redis_connection_error
    @beartype
    def top(self, limit: int = Analytics.TOP_URLS_LIMIT, **kwargs) -> list[tuple[str, int]]:
        """List the most clicked shortcodes

        Scans every click counter key (prefix listing) and sorts by count.
        O(number of counters), fine for an administrative endpoint.

        Returns:
            list[tuple[str, int]]: (shortcode, clicks) pairs, highest first.
        """
        total_key = self.keys.total_clicks_key()
        prefix_length = len(self.keys.clicks_key(''))

        keys = [key for key in self.redis.scan_iter(match=self.keys.clicks_pattern()) if key != total_key]
        if not keys:
            return []
        counts = self.redis.mget(keys)

        ranking = [(key[prefix_length:], _as_count(count)) for key, count in zip(keys, counts)]
        ranking.sort(key=lambda item: (-item[1], item[0]))
        return ranking[:limit]

    @handle_redis_connection_error
    @beartype
    def reset(self, shortcode: str, **kwargs) -> None:
        self.redis.delete(self.keys.clicks_key(shortcode))
