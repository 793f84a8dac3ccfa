from linkshortener.models import ResponseKey
from linkshortener.dao.redis.redis_key_schema import RedisKeySchema, prefix_key


__all__ = ['CacheKeySchema']


class CacheKeySchema(RedisKeySchema):
    """Provide standardized Redis keys for cached read responses.

    Example:
        >>> keys = CacheKeySchema(prefix='linkshortener:dev')
        >>> keys.response_key(ResponseKey('abc123', ResponseOperation.STATS))
        'linkshortener:dev:cache:links:abc123:stats'
        >>> keys.epoch_key('abc123')
        'linkshortener:dev:cache:links:abc123:epoch'
    """

    @prefix_key
    def response_key(self, key: ResponseKey) -> str:
        return f'cache:links:{key.shortcode}:{key.operation}'

    @prefix_key
    def epoch_key(self, shortcode: str) -> str:
        return f'cache:links:{shortcode}:epoch'
