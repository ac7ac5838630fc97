import fnmatch
import math
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from kvshortener.constants import ENV


class InMemoryRedis:
    """Dict-backed stand-in for the Redis commands used by the DAOs

    Values are stored as strings (like a client with decode_responses=True).
    EX deadlines are evaluated against datetime.now(), so they follow freezegun.
    """

    def __init__(self):
        self.data: dict[str, str] = {}
        self.deadlines: dict[str, datetime] = {}

    def _alive(self, key: str) -> bool:
        deadline = self.deadlines.get(key)
        if deadline is not None and datetime.now(UTC) >= deadline:
            self.data.pop(key, None)
            self.deadlines.pop(key, None)
        return key in self.data

    def get(self, key: str) -> str | None:
        return self.data[key] if self._alive(key) else None

    def set(self, key: str, value, ex: int | None = None, **kwargs) -> bool:
        self.data[key] = str(value)
        if ex is not None:
            self.deadlines[key] = datetime.now(UTC) + timedelta(seconds=ex)
        else:
            self.deadlines.pop(key, None)
        return True

    def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self._alive(key):
                deleted += 1
            self.data.pop(key, None)
            self.deadlines.pop(key, None)
        return deleted

    def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if self._alive(key))

    def ttl(self, key: str) -> int:
        if not self._alive(key):
            return -2
        if key not in self.deadlines:
            return -1
        return math.ceil((self.deadlines[key] - datetime.now(UTC)).total_seconds())

    def mget(self, keys: list[str]) -> list[str | None]:
        return [self.get(key) for key in keys]

    def scan_iter(self, match: str | None = None, **kwargs):
        return iter([key for key in list(self.data) if self._alive(key) and fnmatch.fnmatchcase(key, match or '*')])


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_NAME, 'testapp')
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.REDIRECT_URL, raising=False)
    monkeypatch.delenv(ENV.AppConfig.AGENT_URL, raising=False)


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def store() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def redis_client(store: InMemoryRedis) -> redis.Redis:
    """Mock a Redis pipeline-compatible client backed by an in-memory store."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    for command in ('get', 'set', 'delete', 'exists', 'ttl', 'mget', 'scan_iter'):
        getattr(client, command).side_effect = getattr(store, command)
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.execute.return_value = []
    return client
