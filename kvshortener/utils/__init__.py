from kvshortener.utils.config import app_env, app_name, app_prefix, load_config, load_redis_config
from kvshortener.utils.helpers import base_url, get_short_url, require_environment
from kvshortener.utils.shortener import generate_shortcode
from kvshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'load_redis_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'initialize_logging',
]
