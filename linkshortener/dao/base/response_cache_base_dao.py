"""Abstract base class for response cache data access objects (DAOs).

The response cache sits in front of the read paths (resolve and stats).
It holds disposable JSON snapshots of link records keyed by
ResponseKey(shortcode, operation), never the source of truth.

Responsibilities:
    - get/put entries with a time-to-live
    - Invalidate every cached response of a short code on writes
    - Fence stale repopulation with a per-link invalidation epoch
    - Compose get -> loader -> put as an explicit read-through lookup()

Example:
    >>> cache = ResponseCacheMemoryDAO()
    >>> key = ResponseKey('abc123', ResponseOperation.STATS)
    >>> cache.lookup(key, loader=lambda: {'shortcode': 'abc123'}, ttl=30)
    {'shortcode': 'abc123'}
    >>> cache.get(key)
    {'shortcode': 'abc123'}
    >>> cache.invalidate('abc123')
    >>> cache.get(key)
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.CacheMissError: ...
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from linkshortener.constants import TTL
from linkshortener.models import ResponseKey
from linkshortener.types import ResponsePayload
from linkshortener.dao.exceptions import CacheMissError, CachePutError, DataStoreError


logger = logging.getLogger(__name__)


class ResponseCacheBaseDAO(ABC):
    """Interface for response cache DAOs.

    Methods:
        get(key: ResponseKey) -> ResponsePayload:
            Return a cached payload. Raises CacheMissError on miss or expiry.

        put(key: ResponseKey, value: ResponsePayload, ttl: int, epoch: int | None = None) -> bool:
            Cache a payload for `ttl` seconds. When `epoch` is given, the write is
            skipped (returns False) if the short code was invalidated since.

        epoch(shortcode: str) -> int:
            Current invalidation epoch of a short code.

        invalidate(shortcode: str) -> None:
            Drop every cached response of a short code and bump its epoch.

        lookup(key: ResponseKey, loader: Callable[[], ResponsePayload], ttl: int) -> ResponsePayload:
            Read-through: cached payload on hit, loader() + guarded put on miss.
    """

    @abstractmethod
    def get(self, key: ResponseKey) -> ResponsePayload:
        pass

    @abstractmethod
    def put(self, key: ResponseKey, value: ResponsePayload, ttl: int, epoch: int | None = None) -> bool:
        pass

    @abstractmethod
    def epoch(self, shortcode: str) -> int:
        pass

    @abstractmethod
    def invalidate(self, shortcode: str) -> None:
        """Drop every cached response for `shortcode`.

        Must complete before the caller's write is reported as successful.
        Failures propagate (a silently failed invalidation means stale reads).
        """
        pass

    def lookup(
        self,
        key: ResponseKey,
        loader: Callable[[], ResponsePayload],
        ttl: int = TTL.RESPONSE_CACHE,
    ) -> ResponsePayload:
        """Return the cached payload for `key`, loading and caching it on a miss

        Steps:
            - CACHE HIT: return the cached payload (loader is not called).
            - CACHE MISS: remember the short code's epoch, call loader(), then
              put the result unless the short code was invalidated in between.

        Errors raised by loader() propagate and nothing is cached. Cache
        outages only degrade to calling loader() directly.

        Args:
            key (ResponseKey):
                Short code + operation being read.
            loader (Callable[[], ResponsePayload]):
                Produces the payload from the source of truth.
            ttl (int):
                Time-to-live of the cached payload in seconds.

        Returns:
            ResponsePayload: Cached or freshly loaded payload.
        """
        try:
            value = self.get(key)
        except CacheMissError:
            logger.debug('Response cache MISS.', extra={'shortcode': key.shortcode, 'operation': str(key.operation)})
        except DataStoreError:
            logger.warning(
                'Response cache unavailable. Reading through to the repository.',
                exc_info=True,
                extra={'shortcode': key.shortcode, 'operation': str(key.operation)},
            )
            return loader()
        else:
            logger.debug('Response cache HIT.', extra={'shortcode': key.shortcode, 'operation': str(key.operation)})
            return value

        try:
            epoch = self.epoch(key.shortcode)
        except DataStoreError:
            logger.warning('Response cache unavailable. Skipping cache population.', exc_info=True)
            return loader()

        value = loader()

        try:
            stored = self.put(key, value, ttl, epoch=epoch)
        except (CachePutError, DataStoreError):
            logger.warning('Failed to populate response cache.', exc_info=True, extra={'shortcode': key.shortcode})
        else:
            if not stored:
                logger.debug(
                    'Skipped caching a response invalidated while loading.',
                    extra={'shortcode': key.shortcode, 'operation': str(key.operation)},
                )
        return value
