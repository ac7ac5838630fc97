import json
from collections.abc import Callable
from typing import Any, cast

import pytest
import redis
from pytest import MonkeyPatch

from kvshortener.types import LambdaEvent, LambdaContext


API_KEY = 's3cr3t'


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'kvshortener'})


@pytest.fixture
def api_key(store) -> str:
    store.set(f'testapp:test:apikeys:{API_KEY}', 'unit-tests')
    return API_KEY


@pytest.fixture
def use_redis(monkeypatch: MonkeyPatch, redis_client: redis.Redis) -> Callable:
    """Point a handler module's Redis DAOs at the in-memory client"""

    def install(app_module) -> None:
        monkeypatch.setattr(app_module, 'load_redis_config', lambda lambda_name: {'redis_client': redis_client})

    return install


@pytest.fixture
def make_event() -> Callable[..., LambdaEvent]:
    """Build an API Gateway (REST, Lambda proxy) event"""

    def build(
        method: str = 'GET',
        path: str = '/',
        *,
        path_parameters: dict[str, str] | None = None,
        body: Any = None,
        token: str | None = API_KEY,
        headers: dict[str, str] | None = None,
        source_ip: str = '203.0.113.7',
        domain: str = 'sho.rt',
    ) -> LambdaEvent:
        all_headers = {'Host': domain, 'User-Agent': 'Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0'}
        if token is not None:
            all_headers['Authorization'] = f'Bearer {token}'
        all_headers.update(headers or {})
        return cast(LambdaEvent, {
            'httpMethod': method,
            'path': path,
            'pathParameters': path_parameters,
            'headers': all_headers,
            'body': body if body is None or isinstance(body, str) else json.dumps(body),
            'isBase64Encoded': False,
            'requestContext': {
                'domainName': domain,
                'stage': 'Prod',
                'identity': {'sourceIp': source_ip},
            },
        })

    return build
