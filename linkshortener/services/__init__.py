from linkshortener.services.allocator import ShortcodeAllocator
from linkshortener.services.link_service import LinkService
from linkshortener.services.factory import link_service_from_config


__all__ = [
    'ShortcodeAllocator',
    'LinkService',
    'link_service_from_config',
]
