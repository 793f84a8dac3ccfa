"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a link is not found in the data store.

    ShortCodeAlreadyExistsError:
        Raised when inserting a link whose short code is already taken.
        Recovered by the shortcode allocator, never surfaced to API callers.

    DataStoreError:
        Raised when the data store is unavailable (connection issues, timeouts, OOM, etc.).

    CacheMissError:
        Raised when a requested response cache entry is missing or expired.

    CachePutError:
        Raised when writing a response cache entry fails.

Example:
    >>> from linkshortener.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.LinkNotFoundError: Link with code 'abc123' not found.
"""

from linkshortener.exceptions import LinkShortenerError


class DAOError(LinkShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class LinkNotFoundError(DAOError):
    """Raised when a link is not found in the data store."""

    error_code = 'dao:link_not_found_error'


class ShortCodeAlreadyExistsError(DAOError):
    """Raised when inserting a link whose short code already exists in the data store."""

    error_code = 'dao:short_code_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'


class CacheMissError(DAOError):
    """Raised when a requested cache entry is missing."""

    error_code = 'dao:cache_miss_error'


class CachePutError(DAOError):
    """Raised when writing or updating a cache entry fails."""

    error_code = 'dao:cache_put_error'
