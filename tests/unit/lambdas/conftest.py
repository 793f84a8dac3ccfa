import json
from typing import Any, cast

import pytest
from pytest import MonkeyPatch

from linkshortener.types import LambdaEvent, LambdaContext
from linkshortener.constants import ENV
from linkshortener.dao.memory import LinkMemoryDAO, ResponseCacheMemoryDAO
from linkshortener.services import LinkService


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'pytest'})


@pytest.fixture
def service() -> LinkService:
    return LinkService(LinkMemoryDAO(), ResponseCacheMemoryDAO())


@pytest.fixture
def wire(monkeypatch: MonkeyPatch, service: LinkService):
    """Point a handler module at the in-memory `service` instead of AppConfig + Redis"""
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')

    def _wire(app_module) -> list[str]:
        loaded: list[str] = []

        def fake_load_config(lambda_name: str) -> dict:
            loaded.append(lambda_name)
            return {'active_backend': 'memory', 'memory': {}, 'links': {}}

        monkeypatch.setattr(app_module, 'load_config', fake_load_config)
        monkeypatch.setattr(app_module, 'link_service_from_config', lambda app_config: service)
        return loaded

    return _wire


@pytest.fixture
def make_event():
    """Build an API Gateway (REST, proxy integration) event"""
    return _make_event


def _make_event(
    method: str,
    path: str,
    shortcode: str | None = None,
    body: Any = None,
) -> LambdaEvent:
    event: dict[str, Any] = {
        'resource': path,
        'path': path,
        'httpMethod': method,
        'headers': {'User-Agent': 'pytest'},
        'requestContext': {
            'resourcePath': path,
            'httpMethod': method,
            'domainName': 'sho.rt',
            'stage': 'test',
        },
        'pathParameters': None if shortcode is None else {'shortcode': shortcode},
        'body': body if body is None or isinstance(body, str) else json.dumps(body),
    }
    return cast(LambdaEvent, event)
