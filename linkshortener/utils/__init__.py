from linkshortener.utils.shortener import generate_shortcode
from linkshortener.utils.validators import validate_url
from linkshortener.utils.config import load_config, app_env, app_name, app_prefix, project_root, LinkSettings
from linkshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from linkshortener.utils.runtime import running_locally, running_in_production
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'validate_url',
    'load_config',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'LinkSettings',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'running_locally',
    'running_in_production',
    'initialize_logging',
]
