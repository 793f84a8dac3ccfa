"""Unit tests for the read-through ResponseCacheBaseDAO.lookup()."""

from unittest.mock import MagicMock

import pytest

from linkshortener.models import ResponseKey, ResponseOperation
from linkshortener.dao.base import ResponseCacheBaseDAO
from linkshortener.dao.memory import ResponseCacheMemoryDAO
from linkshortener.dao.exceptions import CacheMissError, CachePutError, DataStoreError, LinkNotFoundError


KEY = ResponseKey('abc123', ResponseOperation.STATS)


class FlakyCache(ResponseCacheBaseDAO):
    """Concrete cache whose primitives are MagicMocks"""

    def __init__(self):
        self.get = MagicMock(side_effect=CacheMissError('miss'))
        self.put = MagicMock(return_value=True)
        self.epoch = MagicMock(return_value=4)
        self.invalidate = MagicMock()

    # Abstract slots, shadowed per instance by the mocks above
    def get(self, key):
        pass

    def put(self, key, value, ttl, epoch=None):
        pass

    def epoch(self, shortcode):
        pass

    def invalidate(self, shortcode):
        pass


class TestLookup:
    def test_hit_skips_loader(self):
        cache = ResponseCacheMemoryDAO()
        cache.put(KEY, {'cached': True}, ttl=30)
        loader = MagicMock()

        assert cache.lookup(KEY, loader, ttl=30) == {'cached': True}
        loader.assert_not_called()

    def test_miss_loads_and_populates(self):
        cache = ResponseCacheMemoryDAO()
        loader = MagicMock(return_value={'loaded': True})

        assert cache.lookup(KEY, loader, ttl=30) == {'loaded': True}
        assert cache.lookup(KEY, loader, ttl=30) == {'loaded': True}
        loader.assert_called_once()

    def test_put_uses_epoch_read_before_loading(self):
        cache = FlakyCache()
        cache.lookup(KEY, lambda: {'loaded': True}, ttl=15)
        cache.put.assert_called_once_with(KEY, {'loaded': True}, 15, epoch=4)

    def test_invalidation_during_load_prevents_caching(self):
        cache = ResponseCacheMemoryDAO()

        def loader():
            # a concurrent write lands while the loader runs
            cache.invalidate('abc123')
            return {'stale': True}

        assert cache.lookup(KEY, loader, ttl=30) == {'stale': True}
        with pytest.raises(CacheMissError):
            cache.get(KEY)

    def test_loader_errors_propagate_and_nothing_is_cached(self):
        cache = FlakyCache()
        loader = MagicMock(side_effect=LinkNotFoundError('gone'))

        with pytest.raises(LinkNotFoundError):
            cache.lookup(KEY, loader, ttl=30)
        cache.put.assert_not_called()

    def test_unavailable_cache_reads_through(self):
        cache = FlakyCache()
        cache.get.side_effect = DataStoreError('down')

        assert cache.lookup(KEY, lambda: {'loaded': True}) == {'loaded': True}
        cache.put.assert_not_called()

    def test_unavailable_epoch_reads_through(self):
        cache = FlakyCache()
        cache.epoch.side_effect = DataStoreError('down')

        assert cache.lookup(KEY, lambda: {'loaded': True}) == {'loaded': True}
        cache.put.assert_not_called()

    @pytest.mark.parametrize('error', [CachePutError('write failed'), DataStoreError('down')])
    def test_failed_put_still_returns_value(self, error: Exception):
        cache = FlakyCache()
        cache.put.side_effect = error

        assert cache.lookup(KEY, lambda: {'loaded': True}) == {'loaded': True}
