from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.cache.response_cache_redis_dao import ResponseCacheRedisDAO

__all__ = [
    'CacheKeySchema',
    'ResponseCacheRedisDAO',
]
