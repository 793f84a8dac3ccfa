from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Default lifetime of a cached resolve/stats response
    RESPONSE_CACHE = 30
    # Lifetime of a per-link cache invalidation epoch (1 day in seconds)
    CACHE_EPOCH = 86_400  # 60 * 60 * 24


class Defaults:
    """Default values for link allocation and repository access."""

    SHORTCODE_LENGTH = 6  # 62^6 ~ 5.6e10 codes
    MAX_ALLOCATION_ATTEMPTS = 16  # Collisions tolerated before CapacityExhaustedError
    REPOSITORY_TIMEOUT = 2.0  # Seconds before a repository call fails with DataStoreError


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# APP_ENV values treated as production (no diagnostic detail in error responses)
PRODUCTION_ENVS = frozenset({'prod', 'production'})

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
