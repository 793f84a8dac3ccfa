import threading
from datetime import datetime, UTC

import pytest
from freezegun import freeze_time

from linkshortener.models import LinkRecordModel
from linkshortener.dao.memory import LinkMemoryDAO
from linkshortener.dao.exceptions import ShortCodeAlreadyExistsError, LinkNotFoundError


class TestLinkMemoryDAO:
    dao: LinkMemoryDAO

    @pytest.fixture(autouse=True)
    def setup(self):
        self.dao = LinkMemoryDAO()

    @freeze_time('2025-10-15')
    def test_insert_assigns_sequential_ids(self):
        first = self.dao.insert(LinkRecordModel(target='https://example.com/1', shortcode='aaaaaa'))
        second = self.dao.insert(LinkRecordModel.new(target='https://example.com/2', shortcode='bbbbbb'))

        assert (first.id, second.id) == ('1', '2')
        assert first.created_at == datetime(2025, 10, 15, tzinfo=UTC)
        assert len(self.dao) == 2

    def test_insert_never_overwrites(self):
        self.dao.insert(LinkRecordModel.new(target='https://example.com/original', shortcode='abc123'))

        with pytest.raises(ShortCodeAlreadyExistsError, match="Link with code 'abc123' already exists."):
            self.dao.insert(LinkRecordModel.new(target='https://example.com/other', shortcode='abc123'))
        assert self.dao.get('abc123').target == 'https://example.com/original'

    def test_get_and_exists(self):
        inserted = self.dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123'))

        assert self.dao.get('abc123') == inserted
        assert self.dao.exists('abc123') is True
        assert self.dao.exists('zzz999') is False

    def test_get_missing(self):
        with pytest.raises(LinkNotFoundError, match="Link with code 'abc123' not found."):
            self.dao.get('abc123')

    def test_update_keeps_counter_and_created_at(self):
        with freeze_time('2025-10-01'):
            self.dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123'))
            self.dao.hit('abc123')

        with freeze_time('2025-10-02'):
            updated = self.dao.update(LinkRecordModel.new(target='https://example.org', shortcode='abc123'))

        assert updated.target == 'https://example.org'
        assert updated.access_count == 1
        assert updated.created_at == datetime(2025, 10, 1, tzinfo=UTC)
        assert updated.updated_at == datetime(2025, 10, 2, tzinfo=UTC)
        assert self.dao.get('abc123') == updated

    def test_update_missing(self):
        with pytest.raises(LinkNotFoundError):
            self.dao.update(LinkRecordModel.new(target='https://example.org', shortcode='abc123'))

    def test_hit(self):
        self.dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123'))

        assert self.dao.hit('abc123').access_count == 1
        assert self.dao.hit('abc123').access_count == 2
        assert self.dao.get('abc123').access_count == 2

    def test_hit_missing(self):
        with pytest.raises(LinkNotFoundError):
            self.dao.hit('abc123')

    def test_delete(self):
        self.dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123'))
        self.dao.delete('abc123')

        assert not self.dao.exists('abc123')
        with pytest.raises(LinkNotFoundError):
            self.dao.delete('abc123')

    def test_concurrent_hits_are_not_lost(self):
        self.dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123'))

        def worker():
            for _ in range(100):
                self.dao.hit('abc123')

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert self.dao.get('abc123').access_count == 800

    def test_concurrent_inserts_of_same_code_admit_one_winner(self):
        barrier = threading.Barrier(8)
        outcomes: list[str] = []

        def worker(n: int):
            barrier.wait()
            try:
                self.dao.insert(LinkRecordModel.new(target=f'https://example.com/{n}', shortcode='abc123'))
            except ShortCodeAlreadyExistsError:
                outcomes.append('duplicate')
            else:
                outcomes.append('inserted')

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count('inserted') == 1
        assert outcomes.count('duplicate') == 7
