from dataclasses import dataclass
from enum import StrEnum


class ResponseOperation(StrEnum):
    """Read operations whose responses are cached independently."""

    RESOLVE = 'resolve'
    STATS = 'stats'


@dataclass(frozen=True)
class ResponseKey:
    """Identity of a cached read response: short code + operation type.

    Example:
        >>> key = ResponseKey('abc123', ResponseOperation.STATS)
        >>> key.shortcode, str(key.operation)
        ('abc123', 'stats')
    """

    shortcode: str
    operation: ResponseOperation
