"""Link lifecycle orchestration: create, resolve, update, delete, stats.

LinkService composes the shortcode allocator, a link repository (source of
truth) and a response cache (disposable read snapshots). It holds no global
state: every collaborator is injected.

Caching rules:
    - resolve() and stats() are read-through and cached independently
      (ResponseKey = shortcode + operation).
    - resolve() increments the access counter only when it misses the cache,
      and caches the post-increment snapshot.
    - redirect() always increments through the repository and never touches
      the cache.
    - create(), update() and delete() invalidate the shortcode's cache entries
      before returning, so a completed write is visible to every later read.

Example:
    >>> service = LinkService(LinkMemoryDAO(), ResponseCacheMemoryDAO())
    >>> link = service.create('https://example.com')
    >>> service.redirect(link.shortcode)
    'https://example.com'
    >>> service.stats(link.shortcode).access_count
    1
"""

import logging

from linkshortener.constants import TTL
from linkshortener.models import LinkRecordModel, ResponseKey, ResponseOperation
from linkshortener.dao.base import LinkBaseDAO, ResponseCacheBaseDAO
from linkshortener.services.allocator import ShortcodeAllocator
from linkshortener.utils.validators import validate_url


logger = logging.getLogger(__name__)


class LinkService:
    """Public operations over short links

    Args:
        link_dao (LinkBaseDAO): link repository
        response_cache (ResponseCacheBaseDAO): cache of resolve/stats snapshots
        allocator (ShortcodeAllocator): shortcode allocator, default settings if omitted
        cache_ttl (int): lifetime of cached snapshots in seconds

    Raises (from operations):
        InvalidUrlError: target URL is empty or not absolute
        LinkNotFoundError: no link with the requested shortcode
        CapacityExhaustedError: no free shortcode could be allocated
        DataStoreError: the repository is unreachable or timed out
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        response_cache: ResponseCacheBaseDAO,
        allocator: ShortcodeAllocator | None = None,
        cache_ttl: int = TTL.RESPONSE_CACHE,
    ):
        self.link_dao = link_dao
        self.response_cache = response_cache
        self.allocator = allocator or ShortcodeAllocator()
        self.cache_ttl = cache_ttl

    def create(self, target_url: str) -> LinkRecordModel:
        target = validate_url(target_url)
        link = self.allocator.claim(self.link_dao, target)
        self.response_cache.invalidate(link.shortcode)
        logger.info('Created short link.', extra={'shortcode': link.shortcode, 'linkId': link.id, 'event': 'LINK_CREATED'})
        return link

    def resolve(self, shortcode: str) -> LinkRecordModel:
        """Return the link for `shortcode`, counting an access on cache miss"""
        payload = self.response_cache.lookup(
            ResponseKey(shortcode, ResponseOperation.RESOLVE),
            loader=lambda: self.link_dao.hit(shortcode).to_dict(),
            ttl=self.cache_ttl,
        )
        return LinkRecordModel.from_dict(payload)

    def update(self, shortcode: str, target_url: str) -> LinkRecordModel:
        target = validate_url(target_url)
        link = self.link_dao.update(LinkRecordModel.new(target=target, shortcode=shortcode))
        self.response_cache.invalidate(shortcode)
        logger.info('Updated short link target.', extra={'shortcode': shortcode, 'event': 'LINK_UPDATED'})
        return link

    def delete(self, shortcode: str) -> None:
        self.link_dao.delete(shortcode)
        self.response_cache.invalidate(shortcode)
        logger.info('Deleted short link.', extra={'shortcode': shortcode, 'event': 'LINK_DELETED'})

    def stats(self, shortcode: str) -> LinkRecordModel:
        """Return the link for `shortcode` without counting an access"""
        payload = self.response_cache.lookup(
            ResponseKey(shortcode, ResponseOperation.STATS),
            loader=lambda: self.link_dao.get(shortcode).to_dict(),
            ttl=self.cache_ttl,
        )
        return LinkRecordModel.from_dict(payload)

    def redirect(self, shortcode: str) -> str:
        """Return the target of `shortcode`, counting every redirect

        Redirects bypass the response cache and leave its entries untouched.
        """
        return self.link_dao.hit(shortcode).target
