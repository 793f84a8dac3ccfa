import pytest
import redis

from linkshortener.constants import TTL
from linkshortener.models import ResponseKey, ResponseOperation
from linkshortener.dao.cache import ResponseCacheRedisDAO
from linkshortener.dao.exceptions import CacheMissError, CachePutError, DataStoreError


RESOLVE_KEY = 'testapp:test:cache:links:abc123:resolve'
STATS_KEY = 'testapp:test:cache:links:abc123:stats'
EPOCH_KEY = 'testapp:test:cache:links:abc123:epoch'


class TestResponseCacheRedisDAO:
    dao: ResponseCacheRedisDAO
    redis_client: redis.Redis
    key: ResponseKey

    @pytest.fixture(autouse=True)
    def setup(self, redis_client: redis.Redis, app_prefix: str):
        self.redis_client = redis_client
        self.dao = ResponseCacheRedisDAO(redis_client=redis_client, prefix=app_prefix)
        self.key = ResponseKey('abc123', ResponseOperation.RESOLVE)

    def test_get_hit(self):
        self.redis_client.get.return_value = '{"shortcode":"abc123","access_count":1}'
        assert self.dao.get(self.key) == {'shortcode': 'abc123', 'access_count': 1}
        self.redis_client.get.assert_called_once_with(RESOLVE_KEY)

    def test_get_miss(self):
        with pytest.raises(CacheMissError, match="No cached resolve response for code 'abc123'."):
            self.dao.get(self.key)

    def test_get_connection_error(self):
        self.redis_client.get.side_effect = redis.exceptions.ConnectionError('refused')
        with pytest.raises(DataStoreError):
            self.dao.get(self.key)

    @pytest.mark.parametrize('blob', ['{not json', '[1, 2]', '"text"'])
    def test_get_unreadable_blob_is_a_miss(self, blob: str):
        self.redis_client.get.return_value = blob
        with pytest.raises(CacheMissError, match="Unreadable cached resolve response for code 'abc123'."):
            self.dao.get(self.key)

    def test_lookup_replaces_unreadable_blob(self):
        stored = {RESOLVE_KEY: '{not json', EPOCH_KEY: '1'}
        self.redis_client.get.side_effect = stored.get

        assert self.dao.lookup(self.key, lambda: {'shortcode': 'abc123'}, ttl=30) == {'shortcode': 'abc123'}
        self.redis_client.set.assert_called_once_with(RESOLVE_KEY, '{"shortcode":"abc123"}', ex=30)

    def test_put_without_epoch(self):
        assert self.dao.put(self.key, {'shortcode': 'abc123'}, ttl=30) is True
        self.redis_client.set.assert_called_once_with(RESOLVE_KEY, '{"shortcode":"abc123"}', ex=30)
        self.redis_client.transaction.assert_not_called()

    def test_put_with_unchanged_epoch(self):
        self.redis_client.get.return_value = '2'

        assert self.dao.put(self.key, {'shortcode': 'abc123'}, ttl=30, epoch=2) is True

        assert self.redis_client.transaction.call_args.args[1] == EPOCH_KEY
        self.redis_client.get.assert_called_once_with(EPOCH_KEY)
        self.redis_client.multi.assert_called_once()
        self.redis_client.set.assert_called_once_with(RESOLVE_KEY, '{"shortcode":"abc123"}', ex=30)

    def test_put_skipped_after_invalidation(self):
        self.redis_client.get.return_value = '3'

        assert self.dao.put(self.key, {'shortcode': 'abc123'}, ttl=30, epoch=2) is False
        self.redis_client.set.assert_not_called()

    def test_put_treats_missing_epoch_as_zero(self):
        assert self.dao.put(self.key, {'shortcode': 'abc123'}, ttl=30, epoch=0) is True

    def test_put_keeps_unicode(self):
        self.dao.put(self.key, {'target': 'https://例え.jp/パス'}, ttl=30)
        self.redis_client.set.assert_called_once_with(RESOLVE_KEY, '{"target":"https://例え.jp/パス"}', ex=30)

    @pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('refused'), redis.exceptions.TimeoutError('slow')])
    def test_put_failure(self, error: Exception):
        self.redis_client.set.side_effect = error
        with pytest.raises(CachePutError, match="Failed to cache resolve response for code 'abc123'."):
            self.dao.put(self.key, {'shortcode': 'abc123'}, ttl=30)

    @pytest.mark.parametrize('stored, expected', [(None, 0), ('5', 5)])
    def test_epoch(self, stored: str | None, expected: int):
        self.redis_client.get.return_value = stored
        assert self.dao.epoch('abc123') == expected
        self.redis_client.get.assert_called_once_with(EPOCH_KEY)

    def test_invalidate(self):
        self.dao.invalidate('abc123')

        self.redis_client.pipeline.assert_called_once_with(transaction=True)
        self.redis_client.incr.assert_called_once_with(EPOCH_KEY)
        self.redis_client.expire.assert_called_once_with(EPOCH_KEY, TTL.CACHE_EPOCH)
        self.redis_client.delete.assert_called_once_with(RESOLVE_KEY, STATS_KEY)
        self.redis_client.execute.assert_called_once()

    def test_invalidate_failure_propagates(self):
        self.redis_client.execute.side_effect = redis.exceptions.ConnectionError('refused')
        with pytest.raises(DataStoreError):
            self.dao.invalidate('abc123')
