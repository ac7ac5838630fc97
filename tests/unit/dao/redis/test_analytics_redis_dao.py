import pytest
import redis

from kvshortener.dao.exceptions import DataStoreError
from kvshortener.dao.redis import AnalyticsRedisDAO


class TestAnalyticsRedisDAO:
    dao: AnalyticsRedisDAO

    @pytest.fixture(autouse=True)
    def setup(self, redis_client: redis.Redis, store, app_prefix: str) -> None:
        self.dao = AnalyticsRedisDAO(redis_client=redis_client, prefix=app_prefix)
        self.redis_client = redis_client
        self.store = store

    def test_hit_counts_clicks_and_total(self) -> None:
        assert self.dao.hit('abc') == 1
        assert self.dao.hit('abc') == 2
        assert self.dao.hit('xyz') == 1

        assert self.dao.clicks('abc') == 2
        assert self.dao.clicks('xyz') == 1
        assert self.dao.total() == 3
        assert self.store.get('testapp:test:clicks:abc') == '2'
        assert self.store.get('testapp:test:clicks:__total__') == '3'

    def test_clicks_for_unknown_shortcode_is_zero(self) -> None:
        assert self.dao.clicks('nope') == 0
        assert self.dao.total() == 0

    def test_non_integer_counter_reads_as_zero(self) -> None:
        self.store.set('testapp:test:clicks:abc', 'garbage')
        assert self.dao.clicks('abc') == 0
        assert self.dao.hit('abc') == 1

    def test_top_sorts_by_clicks_and_excludes_total(self) -> None:
        for shortcode, clicks in [('a', 1), ('b', 3), ('c', 2), ('d', 3)]:
            for _ in range(clicks):
                self.dao.hit(shortcode)

        assert self.dao.top() == [('b', 3), ('d', 3), ('c', 2), ('a', 1)]
        assert self.dao.top(limit=2) == [('b', 3), ('d', 3)]

    def test_top_without_counters(self) -> None:
        assert self.dao.top() == []
        self.redis_client.mget.assert_not_called()

    def test_top_ignores_other_prefixes(self) -> None:
        self.store.set('otherapp:test:clicks:zzz', '99')
        self.dao.hit('abc')
        assert self.dao.top() == [('abc', 1)]

    def test_reset_drops_counter(self) -> None:
        self.dao.hit('abc')
        self.dao.reset('abc')
        assert self.dao.clicks('abc') == 0
        # The aggregate is not rolled back
        assert self.dao.total() == 1

    def test_connection_error_becomes_data_store_error(self) -> None:
        self.redis_client.set.side_effect = redis.exceptions.ConnectionError('down')
        with pytest.raises(DataStoreError):
            self.dao.hit('abc')
