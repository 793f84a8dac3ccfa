"""Build a LinkService from a loaded AppConfig.

Supported backends (`active_backend`):
    redis:  LinkRedisDAO + ResponseCacheRedisDAO sharing one Redis client
    memory: LinkMemoryDAO + ResponseCacheMemoryDAO (local runs only, one pair
            per app prefix shared by every service built in the process)

Example:
    >>> service = link_service_from_config({'active_backend': 'memory', 'memory': {}})
    >>> service.create('https://example.com').access_count
    0
"""

import logging
import functools
from typing import Any

from linkshortener.exceptions import BadConfigurationError
from linkshortener.dao.redis import LinkRedisDAO
from linkshortener.dao.cache import ResponseCacheRedisDAO
from linkshortener.dao.memory import LinkMemoryDAO, ResponseCacheMemoryDAO
from linkshortener.services.allocator import ShortcodeAllocator
from linkshortener.services.link_service import LinkService
from linkshortener.utils.config import LinkSettings, app_prefix


logger = logging.getLogger(__name__)


SUPPORTED_BACKENDS = frozenset({'redis', 'memory'})


@functools.cache
def _memory_backend(prefix: str | None) -> tuple[LinkMemoryDAO, ResponseCacheMemoryDAO]:
    """Process-wide in-memory stores, one pair per app prefix"""
    return LinkMemoryDAO(), ResponseCacheMemoryDAO()


def link_service_from_config(app_config: dict[str, Any]) -> LinkService:
    """Wire repository, cache and allocator for the configured backend

    Args:
        app_config (dict): result of `load_config(lambda_name)`

    Raises:
        BadConfigurationError: unknown backend or invalid 'links' settings
        DataStoreError: the Redis healthcheck failed
    """
    backend = app_config.get('active_backend')
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f'Unsupported backend {backend!r}. Expected one of: {", ".join(sorted(SUPPORTED_BACKENDS))}')

    settings = LinkSettings.from_config(app_config)

    if backend == 'redis':
        redis_config = {f'redis_{k}': v for k, v in (app_config.get('redis') or {}).items()}
        redis_config.setdefault('redis_timeout', settings.repository_timeout)
        try:
            link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
        except TypeError as e:
            raise BadConfigurationError(f'Invalid redis config section: {e}') from e
        response_cache = ResponseCacheRedisDAO(redis_client=link_dao.redis, prefix=app_prefix())
    else:
        link_dao, response_cache = _memory_backend(app_prefix())

    logger.debug('Built link service.', extra={'backend': backend, 'prefix': app_prefix()})
    return LinkService(
        link_dao=link_dao,
        response_cache=response_cache,
        allocator=ShortcodeAllocator(length=settings.shortcode_length, max_attempts=settings.max_attempts),
        cache_ttl=settings.cache_ttl,
    )
