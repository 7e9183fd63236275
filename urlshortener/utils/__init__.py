from urlshortener.utils.config import app_env, app_name, app_prefix, load_config
from urlshortener.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from urlshortener.utils.shortcode import encode_digest, candidate_shortcodes
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'encode_digest',
    'candidate_shortcodes',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
