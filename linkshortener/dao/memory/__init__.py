from linkshortener.dao.memory.link_memory_dao import LinkMemoryDAO
from linkshortener.dao.memory.response_cache_memory_dao import ResponseCacheMemoryDAO


__all__ = [
    'LinkMemoryDAO',
    'ResponseCacheMemoryDAO',
]
