"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 3,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "manage_url": {
                "redis": { ... }
            }
        },
        "links": {
            "shortcode_length": 6,
            "max_attempts": 16,
            "cache_ttl": 30,
            "repository_timeout": 2.0
        }
    }

Each Lambda loads its own backend section (e.g., `"shorten_url"`) plus the
shared `"links"` section from this AppConfig document.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary. In SAM, load configuration
        from a local AppConfig agent.

Classes:
    LinkSettings
        Validated link allocation and caching parameters.

Example:
    Typical usage inside a Lambda handler:

        >>> from linkshortener.utils.config import load_config
        >>> config = load_config('shorten_url')
        >>> config['active_backend']
        'redis'
        >>> config['redis']['host']
        'redis-15501.host.docker.internal'
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from collections.abc import Callable

import boto3

from linkshortener.constants import ENV, TTL, Defaults
from linkshortener.exceptions import BadConfigurationError
from linkshortener.utils.helpers import require_environment
from linkshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Finds the project root via the CloudFormation environment variable PROJECT_ROOT.
    Falls back to the current file.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _extract_lambda_config(document: dict[str, Any], lambda_name: str) -> dict[str, Any]:
    """Reduce a full AppConfig document to the sections a single lambda needs"""
    try:
        backend = document['active_backend']
        lambda_configs = document.get('configs', {}).get(lambda_name, {})
    except (KeyError, AttributeError) as e:
        raise BadConfigurationError(f'Malformed AppConfig document: {e!r}') from e

    return {
        'active_backend': backend,
        backend: lambda_configs.get(backend, {}),
        'links': document.get('links', {}),
    }


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = _extract_lambda_config(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the active backend section
    relevant to the requested Lambda function together with the shared
    link settings.

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: {'active_backend': <backend>, <backend>: {...}, 'links': {...}}

    Raises:
        MissingEnvironmentVariableError: AppConfig identifiers are not set.
        BadConfigurationError: the AppConfig document has no 'active_backend'.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = _extract_lambda_config(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data


@dataclass(frozen=True)
class LinkSettings:
    """Link allocation and caching parameters

    Attributes:
        shortcode_length (int): characters per generated shortcode
        max_attempts (int | None): allocation attempts before giving up (None = unbounded)
        cache_ttl (int): lifetime of cached resolve/stats responses in seconds
        repository_timeout (float): socket timeout for repository calls in seconds
    """

    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    max_attempts: int | None = Defaults.MAX_ALLOCATION_ATTEMPTS
    cache_ttl: int = TTL.RESPONSE_CACHE
    repository_timeout: float = Defaults.REPOSITORY_TIMEOUT

    def __post_init__(self):
        if not _positive_int(self.shortcode_length):
            raise BadConfigurationError(f'shortcode_length must be a positive integer, got {self.shortcode_length!r}')
        if self.max_attempts is not None and not _positive_int(self.max_attempts):
            raise BadConfigurationError(f'max_attempts must be a positive integer or null, got {self.max_attempts!r}')
        if not _positive_int(self.cache_ttl):
            raise BadConfigurationError(f'cache_ttl must be a positive integer, got {self.cache_ttl!r}')
        if isinstance(self.repository_timeout, bool) or not isinstance(self.repository_timeout, (int, float)) or self.repository_timeout <= 0:
            raise BadConfigurationError(f'repository_timeout must be a positive number, got {self.repository_timeout!r}')

    @classmethod
    def from_config(cls, app_config: dict[str, Any]) -> 'LinkSettings':
        """Build settings from the 'links' section of a loaded AppConfig

        Missing keys fall back to defaults, unknown keys are rejected.

        Example:
            >>> LinkSettings.from_config({'links': {'shortcode_length': 8}}).shortcode_length
            8
        """
        section = app_config.get('links') or {}
        if not isinstance(section, dict):
            raise BadConfigurationError(f"'links' config section must be an object, got {type(section).__name__}")
        try:
            return cls(**section)
        except TypeError as e:
            raise BadConfigurationError(f"Unknown key in 'links' config section: {e}") from e


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
