from enum import StrEnum


class ShortCode:
    """Shortcode derivation parameters."""

    # Retry ladder: candidate prefix lengths, tried in ascending order
    MIN_LENGTH = 7
    MAX_LENGTH = 10
    LENGTHS = tuple(range(MIN_LENGTH, MAX_LENGTH + 1))

    # Length of a base62-encoded SHA-256 digest (62**43 > 2**256)
    ENCODED_DIGEST_LENGTH = 43


class Datastore:
    """Datastore parameters."""

    # Max Redis optimistic-lock retries for a single insert before giving up
    REDIS_MAX_WATCH_RETRIES = 16

    # Max SQL insert transactions re-run after losing a unique-constraint race
    SQL_MAX_INSERT_RETRIES = 4


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
