"""URL syntax validation

validate_url() checks well-formedness only (scheme + authority), never
reachability.

Example:
    >>> validate_url(' https://example.com/path?q=1 ')
    'https://example.com/path?q=1'
    >>> validate_url('not a url')
    Traceback (most recent call last):
        ...
    linkshortener.exceptions.InvalidUrlError: Invalid URL format: 'not a url'
"""

import re
from urllib.parse import urlsplit

from linkshortener.exceptions import InvalidUrlError


# RFC 3986: scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*$')
MAX_URL_LENGTH = 2048


def validate_url(url: object) -> str:
    """Return the normalized (stripped) URL or raise InvalidUrlError

    Rules:
        - Must be a non-empty string (surrounding whitespace is ignored).
        - No whitespace or control characters inside the URL.
        - Absolute: a syntactically valid scheme followed by '//' and a host.
        - A port, when given, must be numeric and in range.

    Raises:
        InvalidUrlError: If the URL is missing or malformed.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError('URL is required')

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidUrlError(f'URL exceeds {MAX_URL_LENGTH} characters')
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise InvalidUrlError(f'Invalid URL format: {url!r}')

    try:
        components = urlsplit(url)
        components.port  # noqa: B018 (raises ValueError on malformed ports)
    except ValueError as e:
        raise InvalidUrlError(f'Invalid URL format: {url!r}') from e

    if not SCHEME_PATTERN.match(components.scheme) or not components.netloc or not components.hostname:
        raise InvalidUrlError(f'Invalid URL format: {url!r}')
    return url
