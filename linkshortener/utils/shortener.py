"""Shortcode generation utility

This module provides a helper function for generating random, fixed-length,
Base62 short codes from a cryptographically strong random source.

Functions:
    generate_shortcode(length=6):
        Generate a random short code suitable for use as a URL slug.

Example:
    >>> from linkshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q3ZxT0'
"""

import secrets
import string

from linkshortener.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH) -> str:
    """Generate a random Base62 short code of exactly `length` characters.

    Every character is drawn independently with `secrets.choice`, so the
    codespace is BASE**length (62^6 ~ 5.6e10 for the default length).

    Args:
        length (int, optional):
            Exact length of the resulting code. Defaults to 6.

    Returns:
        str: A random string over [a-zA-Z0-9].

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is smaller than 1.

    NOTE:
        - Two calls may return the same code. Uniqueness is enforced by the
          allocator against the link repository, not here.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
