"""DAO for caching read responses in Redis

Key types:
    * <prefix>:cache:links:<shortcode>:<operation>   -> JSON payload (string), EX <ttl>
    * <prefix>:cache:links:<shortcode>:epoch         -> INT invalidation epoch, EX one day

Classes:
    ResponseCacheRedisDAO:
        Concrete ResponseCacheBaseDAO backed by Redis. Uses RedisClientMixin
        to initialize the Redis client and assigns CacheKeySchema for key generation.

Example:
    >>> cache = ResponseCacheRedisDAO(redis_client=link_dao.redis, prefix="linkshortener:dev")
    >>> key = ResponseKey('abc123', ResponseOperation.RESOLVE)
    >>> cache.put(key, {'shortcode': 'abc123'}, ttl=30)
    True
    >>> cache.get(key)
    {'shortcode': 'abc123'}
    >>> cache.invalidate('abc123')
    >>> cache.epoch('abc123')
    1
"""

import json
from typing import Any

import redis
from beartype import beartype

from linkshortener.constants import TTL
from linkshortener.models import ResponseKey, ResponseOperation
from linkshortener.dao.base import ResponseCacheBaseDAO
from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.exceptions import CacheMissError, CachePutError
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error


class ResponseCacheRedisDAO(RedisClientMixin, ResponseCacheBaseDAO):
    """Redis-backed response cache

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client. Can be shared with LinkRedisDAO.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
    """

    key_schema = CacheKeySchema

    @handle_redis_connection_error
    @beartype
    def get(self, key: ResponseKey) -> dict[str, Any]:
        """Retrieve a cached payload

        Raises:
            CacheMissError:
                If the payload is not cached (never stored, expired or invalidated)
                or the stored blob is not a JSON object.
            DataStoreError:
                If a Redis connectivity issue occurs (handled by decorator).
        """
        blob = self.redis.get(self.keys.response_key(key))
        if blob is None:
            raise CacheMissError(f"No cached {key.operation} response for code '{key.shortcode}'.")
        try:
            payload = json.loads(blob)
        except json.JSONDecodeError as e:
            raise CacheMissError(f"Unreadable cached {key.operation} response for code '{key.shortcode}'.") from e
        if not isinstance(payload, dict):
            raise CacheMissError(f"Unreadable cached {key.operation} response for code '{key.shortcode}'.")
        return payload

    @beartype
    def put(self, key: ResponseKey, value: dict[str, Any], ttl: int, epoch: int | None = None) -> bool:
        """Cache a payload for `ttl` seconds

        With an `epoch`, the epoch key is WATCHed: an invalidate() running
        between the read of the epoch and EXEC aborts the transaction, and the
        retried comparison then skips the write.

        Returns:
            bool: True if the payload was stored, False if the code was invalidated since `epoch`.

        Raises:
            CachePutError:
                If the Redis write fails due to connectivity issues.
        """
        response_key = self.keys.response_key(key)
        epoch_key = self.keys.epoch_key(key.shortcode)
        blob = json.dumps(value, separators=(',', ':'), ensure_ascii=False)

        def _put(pipe: redis.client.Pipeline) -> bool:
            if epoch is not None and int(pipe.get(epoch_key) or 0) != epoch:
                return False
            pipe.multi()
            pipe.set(response_key, blob, ex=ttl)
            return True

        try:
            if epoch is None:
                self.redis.set(response_key, blob, ex=ttl)
                return True
            return self.redis.transaction(_put, epoch_key, value_from_callable=True)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise CachePutError(f"Failed to cache {key.operation} response for code '{key.shortcode}'.") from e

    @handle_redis_connection_error
    @beartype
    def epoch(self, shortcode: str) -> int:
        return int(self.redis.get(self.keys.epoch_key(shortcode)) or 0)

    @handle_redis_connection_error
    @beartype
    def invalidate(self, shortcode: str) -> None:
        """Bump the epoch and drop every cached response of `shortcode` atomically"""
        epoch_key = self.keys.epoch_key(shortcode)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(epoch_key)
            pipe.expire(epoch_key, TTL.CACHE_EPOCH)
            pipe.delete(*(self.keys.response_key(ResponseKey(shortcode, operation)) for operation in ResponseOperation))
            pipe.execute()
