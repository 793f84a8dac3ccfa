"""In-process implementation of LinkBaseDAO.

Intended for local runs and tests. It satisfies the same contract as
LinkRedisDAO (including the atomic unique short code constraint) but keeps
nothing across process restarts.
"""

import itertools
import threading
from dataclasses import replace

from linkshortener.models import LinkRecordModel
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import ShortCodeAlreadyExistsError, LinkNotFoundError


class LinkMemoryDAO(LinkBaseDAO):
    """Thread-safe dictionary-backed link repository

    Example:
        >>> dao = LinkMemoryDAO()
        >>> dao.insert(LinkRecordModel.new(target='https://example.com', shortcode='abc123')).id
        '1'
        >>> dao.insert(LinkRecordModel.new(target='https://example.org', shortcode='abc123'))
        Traceback (most recent call last):
            ...
        linkshortener.dao.exceptions.ShortCodeAlreadyExistsError: Link with code 'abc123' already exists.
    """

    def __init__(self):
        self._links: dict[str, LinkRecordModel] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        if link.created_at is None:
            fresh = LinkRecordModel.new(target=link.target, shortcode=link.shortcode)
            link = replace(link, created_at=fresh.created_at, updated_at=fresh.updated_at)

        with self._lock:
            if link.shortcode in self._links:
                raise ShortCodeAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
            link = replace(link, id=str(next(self._ids)))
            self._links[link.shortcode] = link
        return link

    def get(self, shortcode: str, **kwargs) -> LinkRecordModel:
        with self._lock:
            return self._get(shortcode)

    def exists(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            return shortcode in self._links

    def update(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        with self._lock:
            current = self._get(link.shortcode)
            updated_at = link.updated_at or current.touched()
            if current.updated_at is not None:
                updated_at = max(updated_at, current.updated_at)
            updated = replace(current, target=link.target, updated_at=updated_at)
            self._links[link.shortcode] = updated
        return updated

    def hit(self, shortcode: str, **kwargs) -> LinkRecordModel:
        with self._lock:
            link = self._get(shortcode).with_hit()
            self._links[shortcode] = link
        return link

    def delete(self, shortcode: str, **kwargs) -> None:
        with self._lock:
            if self._links.pop(shortcode, None) is None:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

    def _get(self, shortcode: str) -> LinkRecordModel:
        try:
            return self._links[shortcode]
        except KeyError:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.") from None

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)
