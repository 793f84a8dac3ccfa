"""Abstract base class for link data access objects (DAOs).

This class establishes a consistent contract for all link repository
implementations, regardless of the underlying storage mechanism
(e.g., Redis, in-process memory, PostgreSQL).

Responsibilities:
    - Provide an interface for inserting, retrieving, updating and deleting LinkRecordModel objects.
    - Enforce the short code uniqueness constraint atomically on insert.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.models import LinkRecordModel
        >>> from linkshortener.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)

        >>> link = dao.insert(LinkRecordModel.new(target='https://example.com/blog', shortcode='a1b2c3'))
        >>> link.id
        '1'

        >>> dao.hit('a1b2c3').access_count
        1

        >>> dao.delete('a1b2c3')
        >>> dao.exists('a1b2c3')
        False
"""

from abc import ABC, abstractmethod

from linkshortener.models import LinkRecordModel
from linkshortener.dao.exceptions import LinkNotFoundError


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        insert(link: LinkRecordModel, **kwargs) -> LinkRecordModel:
            Insert a new link and assign its id.
            Raises ShortCodeAlreadyExistsError if the short code already exists.

        get(shortcode: str, **kwargs) -> LinkRecordModel:
            Retrieve a link by short code.
            Raises LinkNotFoundError if the link does not exist.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether a short code is taken.

        update(link: LinkRecordModel, **kwargs) -> LinkRecordModel:
            Persist the mutable fields (target, updated_at) of an existing link.
            Raises LinkNotFoundError if the link does not exist.

        hit(shortcode: str, **kwargs) -> LinkRecordModel:
            Atomically increment the access counter of a link.
            Raises LinkNotFoundError if the link does not exist.

        delete(shortcode: str, **kwargs) -> None:
            Remove a link.
            Raises LinkNotFoundError if the link does not exist.

    All methods raise DataStoreError on connection, timeout or write failures.

    Subclassing:
        Datastore-specific implementations (e.g., LinkRedisDAO or LinkMemoryDAO)
        must extend this class and implement all abstract methods.
    """

    @abstractmethod
    def insert(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        """Insert a new link into the data store.

        The short code check and the write happen atomically: a concurrent
        insert of the same short code must fail, never overwrite.

        Args:
            link (LinkRecordModel):
                The link to be inserted. Its `id` is ignored and assigned by the data store.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkRecordModel: The stored link, including its assigned id.

        Raises:
            ShortCodeAlreadyExistsError:
                If a link with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> LinkRecordModel:
        """Retrieve a link from the data store by its short code.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def exists(self, shortcode: str, **kwargs) -> bool:
        """Return True if a link with the given short code exists.

        Data stores with a cheaper existence check should override this.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        try:
            self.get(shortcode, **kwargs)
        except LinkNotFoundError:
            return False
        return True

    @abstractmethod
    def update(self, link: LinkRecordModel, **kwargs) -> LinkRecordModel:
        """Persist a new target URL and `updated_at` for an existing link.

        The stored access counter is kept as-is, so concurrent hits are not lost.

        Returns:
            LinkRecordModel: The link as stored after the update.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, **kwargs) -> LinkRecordModel:
        """Increment the access counter of a link and refresh `updated_at`.

        Returns:
            LinkRecordModel: The link after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> None:
        """Remove a link from the data store.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
