"""Unit tests for runtime utilities in runtime.py."""

import pytest

from linkshortener.utils.runtime import running_locally, running_in_production
from linkshortener.constants import ENV


@pytest.mark.parametrize(
    'app_env, sam_flag, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', None, False),
        ('dev', 'true', True),
        ('prod', 'false', False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_flag, expected):
    monkeypatch.setenv(ENV.App.APP_ENV, app_env)

    if sam_flag is None:
        monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    else:
        monkeypatch.setenv(ENV.App.AWS_SAM_LOCAL, sam_flag)

    assert running_locally() is expected


@pytest.mark.parametrize(
    'app_env, expected',
    [
        ('prod', True),
        ('Production', True),
        ('dev', False),
        ('staging', False),
        ('local', False),
    ],
)
def test_running_in_production(monkeypatch, app_env, expected):
    monkeypatch.setenv(ENV.App.APP_ENV, app_env)
    assert running_in_production() is expected


def test_not_production_by_default(monkeypatch):
    monkeypatch.delenv(ENV.App.APP_ENV, raising=False)
    assert running_in_production() is False
