from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from linkshortener.dao.exceptions import DataStoreError
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis import mixins


class TestRedisClientMixin:
    @pytest.fixture
    def unhealthy_redis_client(self, redis_client: redis.Redis) -> redis.Redis:
        redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        return redis_client

    def test_healthcheck_passes_with_healthy_redis(self, redis_client: redis.Redis):
        RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
        redis_client.ping.assert_called_once()  # initialization performs a healthcheck

    def test_healthcheck_fails_with_unhealthy_redis(self, unhealthy_redis_client: redis.Redis):
        with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
            RedisClientMixin(redis_client=unhealthy_redis_client, prefix='testapp:test')

    def test_healthcheck_without_raising(self, redis_client: redis.Redis):
        dao = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
        redis_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout')
        assert dao._healthcheck(raise_error=False) is False

    def test_client_is_built_with_bounded_timeouts(self, monkeypatch: MonkeyPatch):
        factory = MagicMock()
        monkeypatch.setattr(mixins.redis, 'Redis', factory)

        dao = RedisClientMixin(redis_host='redis.test', redis_port='6380', redis_db='2', redis_timeout=0.5, prefix='app:env')

        factory.assert_called_once_with(
            host='redis.test',
            port=6380,
            db=2,
            decode_responses=True,
            username=None,
            password=None,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        assert dao.redis is factory.return_value
        assert dao.keys.link_key('abc123') == 'app:env:links:abc123'
