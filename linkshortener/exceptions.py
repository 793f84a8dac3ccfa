class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkshortener_error'


class InvalidUrlError(LinkShortenerError):
    """Raised when a target URL is missing or not a well-formed absolute URL."""

    error_code = 'app:invalid_url_error'


class CapacityExhaustedError(LinkShortenerError):
    """Raised when no free shortcode was found within the allocation attempt ceiling."""

    error_code = 'app:capacity_exhausted_error'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
