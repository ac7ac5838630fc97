import json
from unittest.mock import MagicMock

import pytest
import redis
from freezegun import freeze_time

from kvshortener.constants import Preview
from kvshortener.models import PreviewMetadata
from kvshortener.exceptions import UpstreamFetchError
from kvshortener.dao.exceptions import CacheMissError
from kvshortener.dao.cache import CacheKeySchema, PreviewCacheDAO
from kvshortener.dao.cache.constants import PREVIEW_TTL
from kvshortener.utils.opengraph import resolve_preview


TARGET = 'https://example.com/article'


class TestPreviewCacheDAO:
    resolver: MagicMock
    dao: PreviewCacheDAO

    @pytest.fixture
    def preview(self) -> PreviewMetadata:
        return PreviewMetadata(title='Article', description='About things', image_url='https://example.com/a.png')

    @pytest.fixture(autouse=True)
    def setup(self, redis_client: redis.Redis, store, app_prefix: str, preview: PreviewMetadata) -> None:
        self.resolver = MagicMock(return_value=preview)
        self.dao = PreviewCacheDAO(redis_client=redis_client, prefix=app_prefix, resolver=self.resolver)
        self.keys = CacheKeySchema(prefix=app_prefix)
        self.redis_client = redis_client
        self.store = store
        self.preview = preview

    def test_cache_keys_are_namespaced(self) -> None:
        assert self.dao.keys.preview_key(TARGET).startswith('cache:testapp:test:preview:')

    def test_miss_without_pull_raises(self) -> None:
        with pytest.raises(CacheMissError):
            self.dao.get(TARGET, pull=False)
        self.resolver.assert_not_called()

    def test_miss_resolves_and_warms_cache(self) -> None:
        assert self.dao.get(TARGET) == self.preview

        self.resolver.assert_called_once_with(TARGET)
        entry = json.loads(self.store.get(self.keys.preview_key(TARGET)))
        assert entry == {'target': TARGET, 'preview': self.preview.to_dict()}
        self.redis_client.set.assert_called_once_with(self.keys.preview_key(TARGET), self.store.get(self.keys.preview_key(TARGET)), ex=PREVIEW_TTL)

    def test_hit_does_not_resolve_again(self) -> None:
        self.dao.get(TARGET)
        self.dao.get(TARGET)
        assert self.dao.get(TARGET, pull=False) == self.preview
        self.resolver.assert_called_once_with(TARGET)

    def test_entry_expires_after_preview_ttl(self) -> None:
        with freeze_time('2026-01-01 12:00:00') as frozen:
            self.dao.get(TARGET)
            frozen.tick(PREVIEW_TTL - 1)
            self.dao.get(TARGET)
            assert self.resolver.call_count == 1

            frozen.tick(2)
            self.dao.get(TARGET)
            assert self.resolver.call_count == 2

    def test_entry_for_another_target_is_a_miss(self) -> None:
        # Same key, different target (hash collision)
        self.store.set(self.keys.preview_key(TARGET), json.dumps({'target': 'https://other.example', 'preview': self.preview.to_dict()}))
        self.dao.get(TARGET)
        self.resolver.assert_called_once_with(TARGET)

    def test_malformed_entry_is_a_miss(self) -> None:
        self.store.set(self.keys.preview_key(TARGET), '{broken')
        assert self.dao.get(TARGET) == self.preview
        self.resolver.assert_called_once_with(TARGET)

    def test_unreachable_cache_still_resolves(self) -> None:
        self.redis_client.get.side_effect = redis.exceptions.ConnectionError('down')
        self.redis_client.set.side_effect = redis.exceptions.ConnectionError('down')

        assert self.dao.get(TARGET) == self.preview
        self.resolver.assert_called_once_with(TARGET)

    def test_unreachable_target_caches_fallback_and_fetches_once(self, redis_client: redis.Redis, app_prefix: str) -> None:
        fetches = []

        def unreachable(url: str) -> str:
            fetches.append(url)
            raise UpstreamFetchError(f'Failed to fetch {url}: ConnectError')

        dao = PreviewCacheDAO(redis_client=redis_client, prefix=app_prefix, resolver=lambda url: resolve_preview(url, fetch=unreachable))

        first = dao.get('https://unreachable.invalid')
        second = dao.get('https://unreachable.invalid')

        assert first == second == PreviewMetadata(
            title=Preview.DEFAULT_TITLE,
            description=Preview.DEFAULT_DESCRIPTION,
            image_url=Preview.DEFAULT_IMAGE_URL,
        )
        assert fetches == ['https://unreachable.invalid']
