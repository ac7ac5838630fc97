import json

import pytest

from kvshortener.dao.redis import DomainRedisDAO
from kvshortener.dao.exceptions import DomainNotFoundError
from kvshortener.lambdas.manage_domains import app


class TestManageDomainsHandler:
    domain_dao: DomainRedisDAO

    @pytest.fixture(autouse=True)
    def setup(self, use_redis, redis_client, api_key: str, context, make_event) -> None:
        use_redis(app)
        self.domain_dao = DomainRedisDAO(redis_client=redis_client, prefix='testapp:test')
        self.context = context
        self.make_event = make_event

    def call(self, method: str, **kwargs) -> dict:
        return app.lambda_handler(self.make_event(method, '/api/domains', **kwargs), self.context)

    def test_register_domain(self) -> None:
        response = self.call('POST', body={'domain': 'Go.Example.com', 'target': 'https://example.com/landing'})

        assert response['statusCode'] == 201
        assert json.loads(response['body']) == {'domain': 'go.example.com', 'target': 'https://example.com/landing'}
        assert self.domain_dao.get('go.example.com') == 'https://example.com/landing'

    def test_register_overwrites_existing_domain(self) -> None:
        self.domain_dao.register('go.example.com', 'https://example.com/old')

        self.call('POST', body={'domain': 'go.example.com', 'target': 'https://example.com/new'})

        assert self.domain_dao.get('go.example.com') == 'https://example.com/new'

    @pytest.mark.parametrize(
        'body',
        [
            {'domain': 'not a domain', 'target': 'https://example.com'},
            {'domain': 'go.example.com', 'target': 'example.com'},
            {'target': 'https://example.com'},
            '{not json',
        ],
    )
    def test_invalid_registration(self, body) -> None:
        response = self.call('POST', body=body)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'INVALID_REQUEST'

    def test_delete_domain(self) -> None:
        self.domain_dao.register('go.example.com', 'https://example.com/landing')

        response = self.call('DELETE', path_parameters={'domain': 'go.example.com'})

        assert response['statusCode'] == 200
        with pytest.raises(DomainNotFoundError):
            self.domain_dao.get('go.example.com')

    def test_delete_without_domain(self) -> None:
        response = self.call('DELETE')

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'MISSING_DOMAIN'

    def test_unsupported_method(self) -> None:
        response = self.call('PUT', body={'domain': 'go.example.com', 'target': 'https://example.com'})

        assert response['statusCode'] == 405
        assert response['headers']['Allow'] == 'POST, DELETE'

    def test_requires_api_key(self) -> None:
        response = self.call('POST', body={'domain': 'go.example.com', 'target': 'https://example.com'}, token=None)

        assert response['statusCode'] == 401
        with pytest.raises(DomainNotFoundError):
            self.domain_dao.get('go.example.com')
