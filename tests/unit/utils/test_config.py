"""Unit tests for configuration utilities in config.py."""

import json
from io import BytesIO
from typing import cast
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from pytest import MonkeyPatch

from kvshortener.types import AppConfig
from kvshortener.utils import config
from kvshortener.constants import ENV
from kvshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError


class TestConfigUtilities:
    appconfig_payload: AppConfig
    appconfig_client: MagicMock

    @pytest.fixture
    def appconfig_payload(self) -> AppConfig:
        # fmt: off
        return cast(AppConfig, {
            'build': 42,
            'active_backend': 'redis',
            'configs': {
                'test_lambda': {
                    'redis': {
                        'host': 'monkey',
                        'port': 6380,
                        'db': 3
                    }
                }
            },
        })
        # fmt: on

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, appconfig_payload: AppConfig) -> None:
        monkeypatch.setenv(ENV.AppConfig.APP_ID, 'app123')
        monkeypatch.setenv(ENV.AppConfig.ENV_ID, 'env123')
        monkeypatch.setenv(ENV.AppConfig.PROFILE_ID, 'prof123')

        client = MagicMock()
        client.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
        client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
        monkeypatch.setattr(config.boto3, 'client', lambda service: client)

        self.appconfig_payload = appconfig_payload
        self.appconfig_client = client

    def test_load_config_from_appconfig(self) -> None:
        result = config.load_config('test_lambda')

        assert result == {'redis': {'host': 'monkey', 'port': 6380, 'db': 3}}
        self.appconfig_client.start_configuration_session.assert_called_once_with(
            ApplicationIdentifier='app123',
            EnvironmentIdentifier='env123',
            ConfigurationProfileIdentifier='prof123',
        )
        self.appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')

    def test_load_config_for_unknown_lambda(self) -> None:
        with pytest.raises(BadConfigurationError, match="no 'other_lambda' section"):
            config.load_config('other_lambda')

    def test_load_config_requires_appconfig_ids(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.delenv(ENV.AppConfig.PROFILE_ID)

        with pytest.raises(MissingEnvironmentVariableError, match="'APPCONFIG_PROFILE_ID'"):
            config.load_config('test_lambda')
        self.appconfig_client.start_configuration_session.assert_not_called()

    def test_appconfig_errors_propagate(self) -> None:
        self.appconfig_client.start_configuration_session.side_effect = ClientError(
            {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
        )
        with pytest.raises(ClientError):
            config.load_config('test_lambda')

    def test_load_redis_config(self) -> None:
        assert config.load_redis_config('test_lambda') == {'redis_host': 'monkey', 'redis_port': 6380, 'redis_db': 3}

    def test_load_redis_config_requires_redis_backend(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setattr(config, 'load_config', lambda name: {'dynamodb': {'table': 'links'}})

        with pytest.raises(BadConfigurationError, match='not configured with a Redis backend'):
            config.load_redis_config('test_lambda')


def test_app_env_defaults_to_local(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(ENV.App.APP_ENV)
    assert config.app_env() == 'local'


def test_app_prefix(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_NAME, 'kvshortener')
    monkeypatch.setenv(ENV.App.APP_ENV, 'Dev')
    assert config.app_prefix() == 'kvshortener:dev'

    monkeypatch.delenv(ENV.App.APP_NAME)
    assert config.app_prefix() is None


def test_redirect_url(monkeypatch: MonkeyPatch) -> None:
    assert config.redirect_url() is None
    monkeypatch.setenv(ENV.App.REDIRECT_URL, 'https://example.com')
    assert config.redirect_url() == 'https://example.com'


@pytest.mark.parametrize(
    'url',
    ['http://localhost:2772', 'http://127.0.0.1', 'http://host.docker.internal:2772', ''],
)
def test_validate_appconfig_agent_url_accepts_local_agents(url: str) -> None:
    assert config._validate_appconfig_agent_url(url) == url


@pytest.mark.parametrize(
    'url',
    ['file:///etc/passwd', 'http://evil.example:2772', 'http://localhost:8080'],
)
def test_validate_appconfig_agent_url_rejects_others(url: str) -> None:
    with pytest.raises(BadConfigurationError):
        config._validate_appconfig_agent_url(url)
