"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO for CRUD
operations with LinkRecordModel instances.

Storage layout:
    - <prefix>:links:<shortcode>   -> HASH {id, target, shortcode, access_count, created_at, updated_at}
    - <prefix>:links:counter       -> INT, source of link ids

Responsibilities:
    - Insert links atomically, rejecting taken short codes (unique constraint);
    - Retrieve, update and delete links by short code;
    - Increment access counters without losing concurrent hits;
    - Raise appropriate DAO exceptions (including DataStoreError on timeouts).

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkRecordModel in a Redis datastore.

Example:
    >>> from linkshortener.models import LinkRecordModel
    >>> from linkshortener.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="app:dev")

    >>> link = dao.insert(LinkRecordModel.new(target="https://example.com/page", shortcode="abc123"))
    >>> link.id
    '1'
    >>> dao.get("abc123").target
    'https://example.com/page'
    >>> dao.hit("abc123").access_count
    1
"""

from dataclasses import replace
from typing import Any

import redis
from beartype import beartype

from linkshortener.models import LinkRecordModel
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import ShortCodeAlreadyExistsError, LinkNotFoundError


def _to_mapping(link: LinkRecordModel) -> dict[str, Any]:
    return {field: value for field, value in link.to_dict().items() if value is not None}


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    This class implements the LinkBaseDAO interface using Redis as a data store.
    Conditional writes run as WATCH/MULTI/EXEC transactions; redis-py retries
    the transaction callable whenever a watched key changes concurrently.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> dao = LinkRedisDAO(redis_host="localhost", prefix="shortener:test")
        >>> dao.insert(LinkRecordModel.new(target="https://example.com", shortcode="abc123")).shortcode
        'abc123'
        >>> dao.update(dao.get("abc123").with_target("https://example.org")).target
        'https://example.org'
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        """Insert a link into Redis

        The existence check and the HSET are executed as one WATCH/MULTI/EXEC
        transaction. If another client creates the same short code between the
        check and the write, the retried check sees it and the insert fails:

            (client 1): WATCH links:abc123 -> EXISTS links:abc123 => 0
            (client 2): HSET  links:abc123 ...
            (client 1): MULTI -> HSET links:abc123 ... -> EXEC => aborted (WatchError)
            (client 1): WATCH links:abc123 -> EXISTS links:abc123 => 1
                        => ShortCodeAlreadyExistsError

        Args:
            link (LinkRecordModel):
                Link to store. Its id is assigned from the global link counter.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkRecordModel: the stored link (with id and timestamps).

        Raises:
            ShortCodeAlreadyExistsError:
                If a link with the same short code already exists.
            DataStoreError:
                If a Redis connection issue or timeout occurs.
        """
        link_key = self.keys.link_key(link.shortcode)
        if link.created_at is None:
            fresh = LinkRecordModel.new(target=link.target, shortcode=link.shortcode)
            link = replace(link, created_at=fresh.created_at, updated_at=fresh.updated_at)
        link = replace(link, id=str(self.redis.incr(self.keys.counter_key())))

        def _insert(pipe: redis.client.Pipeline) -> LinkRecordModel:
            if pipe.exists(link_key):
                raise ShortCodeAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
            pipe.multi()
            pipe.hset(link_key, mapping=_to_mapping(link))
            return link

        return self.redis.transaction(_insert, link_key, value_from_callable=True)

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> LinkRecordModel:
        """Retrieve a stored link by shortcode

        Raises:
            LinkNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            LinkRecordModel(target='https://example.com', shortcode='abc123', ...)
        """
        data = self.redis.hgetall(self.keys.link_key(shortcode))
        if not data:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return LinkRecordModel.from_dict(data)

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def update(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        """Replace the target URL of an existing link

        Only `target` and `updated_at` are written. The access counter is read
        inside the same transaction so the returned record reflects concurrent hits.

        Raises:
            LinkNotFoundError:
                If the link does not exist (e.g., it was deleted concurrently).
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(link.shortcode)

        def _update(pipe: redis.client.Pipeline) -> LinkRecordModel:
            data = pipe.hgetall(link_key)
            if not data:
                raise LinkNotFoundError(f"Link with code '{link.shortcode}' not found.")
            current = LinkRecordModel.from_dict(data)
            updated_at = link.updated_at or current.touched()
            if current.updated_at is not None:
                updated_at = max(updated_at, current.updated_at)
            updated = replace(current, target=link.target, updated_at=updated_at)

            pipe.multi()
            pipe.hset(link_key, mapping={'target': updated.target, 'updated_at': updated.updated_at.isoformat()})
            return updated

        return self.redis.transaction(_update, link_key, value_from_callable=True)

    @handle_redis_connection_error
    @beartype
    def hit(self, shortcode: str, **kwargs) -> LinkRecordModel:
        """Increment the access counter of a link

        NOTE: HINCRBY alone would be atomic, but the counter and `updated_at`
              must change together and the link must still exist. A hit racing
              with DELETE must not recreate a partial hash:

              (client 1): HEXISTS links:abc123 ... => 1
              (client 2): DEL     links:abc123
              (client 1): HINCRBY links:abc123 access_count 1
                          => links:abc123 = {access_count: 1}  (orphaned hash)

              The WATCH on the link key prevents this; a concurrent hit makes
              redis-py retry the transaction so no increment is lost.

        Returns:
            LinkRecordModel: the link after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit('abc123').access_count
            4
        """
        link_key = self.keys.link_key(shortcode)

        def _hit(pipe: redis.client.Pipeline) -> LinkRecordModel:
            data = pipe.hgetall(link_key)
            if not data:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            link = LinkRecordModel.from_dict(data).with_hit()

            pipe.multi()
            # fmt: off
            pipe.hset(link_key, mapping={'access_count': link.access_count,
                                         'updated_at': link.updated_at.isoformat()})
            # fmt: on
            return link

        return self.redis.transaction(_hit, link_key, value_from_callable=True)

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> None:
        """Remove a link

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if not self.redis.delete(self.keys.link_key(shortcode)):
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
