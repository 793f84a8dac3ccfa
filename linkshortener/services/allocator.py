"""Shortcode allocation with bounded collision retries.

The repository's atomic insert is the only uniqueness authority: the
exists() pre-check merely skips codes that are obviously taken, and a
ShortCodeAlreadyExistsError raised by insert() (a concurrent create grabbed
the same code in between) is retried with a fresh code.

Example:
    >>> allocator = ShortcodeAllocator(length=6, max_attempts=16)
    >>> link = allocator.claim(LinkMemoryDAO(), 'https://example.com')
    >>> len(link.shortcode)
    6
"""

import logging
from collections.abc import Callable

from linkshortener.constants import Defaults
from linkshortener.exceptions import CapacityExhaustedError
from linkshortener.models import LinkRecordModel
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import ShortCodeAlreadyExistsError
from linkshortener.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class ShortcodeAllocator:
    """Find free shortcodes and claim them in a link repository

    Attributes:
        length (int): default shortcode length
        max_attempts (int | None): collisions tolerated per allocation, None for no ceiling
        generator (Callable[[int], str]): produces a random candidate of the given length
    """

    def __init__(
        self,
        length: int = Defaults.SHORTCODE_LENGTH,
        max_attempts: int | None = Defaults.MAX_ALLOCATION_ATTEMPTS,
        generator: Callable[[int], str] = generate_shortcode,
    ):
        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f'max_attempts must be positive or None, got {max_attempts!r}')
        self.length = length
        self.max_attempts = max_attempts
        self.generator = generator

    def allocate(self, dao: LinkBaseDAO, length: int | None = None) -> str:
        """Return the first generated shortcode that is not present in `dao`

        Raises:
            CapacityExhaustedError: `max_attempts` consecutive candidates were taken.
        """
        return self._next_free(dao, self.length if length is None else length, self._budget())

    def claim(self, dao: LinkBaseDAO, target: str, length: int | None = None) -> LinkRecordModel:
        """Allocate a shortcode and insert a new record for `target` under it

        Pre-check collisions and insert conflicts draw from the same attempt budget.

        Returns:
            LinkRecordModel: the persisted record (id assigned by the repository).

        Raises:
            CapacityExhaustedError: no free shortcode was claimed within `max_attempts`.
        """
        length = self.length if length is None else length
        budget = self._budget()

        while True:
            shortcode = self._next_free(dao, length, budget)
            try:
                return dao.insert(LinkRecordModel.new(target=target, shortcode=shortcode))
            except ShortCodeAlreadyExistsError:
                logger.info(
                    'Shortcode claimed concurrently. Retrying with a new one.',
                    extra={'shortcode': shortcode, 'event': 'SHORTCODE_INSERT_CONFLICT'},
                )
                budget.spend(shortcode)

    def _next_free(self, dao: LinkBaseDAO, length: int, budget: '_AttemptBudget') -> str:
        while True:
            shortcode = self.generator(length)
            if not dao.exists(shortcode):
                return shortcode
            logger.debug('Shortcode collision.', extra={'shortcode': shortcode, 'event': 'SHORTCODE_COLLISION'})
            budget.spend(shortcode)

    def _budget(self) -> '_AttemptBudget':
        return _AttemptBudget(self.max_attempts)


class _AttemptBudget:
    def __init__(self, limit: int | None):
        self.limit = limit
        self.spent = 0

    def spend(self, shortcode: str) -> None:
        self.spent += 1
        if self.limit is not None and self.spent >= self.limit:
            logger.error(
                'Gave up allocating a shortcode.',
                extra={'attempts': self.spent, 'lastShortcode': shortcode, 'event': 'CAPACITY_EXHAUSTED'},
            )
            raise CapacityExhaustedError(f'No free shortcode found after {self.spent} attempts.')
