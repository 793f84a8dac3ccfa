from linkshortener.dao.base.link_base_dao import LinkBaseDAO
from linkshortener.dao.base.response_cache_base_dao import ResponseCacheBaseDAO


__all__ = [
    'LinkBaseDAO',
    'ResponseCacheBaseDAO',
]
