import json

import pytest

from kvshortener.dao.redis import ShortURLRedisDAO, AnalyticsRedisDAO
from kvshortener.dao.exceptions import ShortURLNotFoundError
from kvshortener.lambdas.delete_url import app


class TestDeleteUrlHandler:
    short_url_dao: ShortURLRedisDAO
    analytics_dao: AnalyticsRedisDAO

    @pytest.fixture(autouse=True)
    def setup(self, use_redis, redis_client, api_key: str, context, make_event) -> None:
        use_redis(app)
        self.short_url_dao = ShortURLRedisDAO(redis_client=redis_client, prefix='testapp:test')
        self.analytics_dao = AnalyticsRedisDAO(redis_client=redis_client, prefix='testapp:test')
        self.context = context
        self.make_event = make_event

    def delete(self, shortcode: str | None, **kwargs) -> dict:
        path_parameters = {'shortcode': shortcode} if shortcode is not None else None
        event = self.make_event('DELETE', f'/api/urls/{shortcode}', path_parameters=path_parameters, **kwargs)
        return app.lambda_handler(event, self.context)

    def test_delete_short_url(self) -> None:
        self.short_url_dao.create('https://example.com/a', shortcode='abc123')
        self.analytics_dao.hit('abc123')

        response = self.delete('abc123')

        assert response['statusCode'] == 200
        assert json.loads(response['body']) == {'message': 'URL deleted successfully'}
        with pytest.raises(ShortURLNotFoundError):
            self.short_url_dao.get('abc123')
        assert self.short_url_dao.find_by_target('https://example.com/a') is None
        assert self.analytics_dao.clicks('abc123') == 0

    def test_delete_is_idempotent(self) -> None:
        self.short_url_dao.create('https://example.com/a', shortcode='abc123')

        assert self.delete('abc123')['statusCode'] == 200
        assert self.delete('abc123')['statusCode'] == 200
        assert self.delete('never-existed')['statusCode'] == 200

    def test_missing_shortcode(self) -> None:
        response = self.delete(None)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'MISSING_SHORTCODE'

    def test_requires_api_key(self) -> None:
        self.short_url_dao.create('https://example.com/a', shortcode='abc123')

        response = self.delete('abc123', token=None)

        assert response['statusCode'] == 401
        assert self.short_url_dao.get('abc123').target == 'https://example.com/a'
