"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.
    running_in_production() -> bool:
        True if APP_ENV names a production environment.

Example:
    >>> from linkshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from linkshortener.constants import ENV, PRODUCTION_ENVS


def running_locally() -> bool:
    """Check if the lambda is running locally via sam local invoke

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def running_in_production() -> bool:
    """Check if APP_ENV is a production environment ('prod' or 'production')

    Error responses only carry diagnostic detail outside of production.

    Example:
        >>> os.environ['APP_ENV'] = 'prod'
        >>> running_in_production()
        True
    """
    return os.getenv(ENV.App.APP_ENV, 'local').lower() in PRODUCTION_ENVS
