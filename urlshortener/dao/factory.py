"""Build the configured URL mapping DAO

The Lambda configuration holds exactly one backend section (see
urlshortener.utils.config.load_config):

    {"memory": {}}
    {"redis": {"host": "...", "port": 6379, "db": 0, ...}}
    {"sql": {"url": "postgresql+psycopg://..."}}

Backend options are forwarded to the DAO constructor with the backend name
as prefix, e.g. {"redis": {"host": "h"}} -> URLMappingRedisDAO(redis_host="h").
"""

import json
import functools
import logging

from urlshortener.types import LambdaConfiguration
from urlshortener.exceptions import BadConfigurationError
from urlshortener.dao.base import URLMappingBaseDAO
from urlshortener.dao.memory import URLMappingMemoryDAO
from urlshortener.dao.redis import URLMappingRedisDAO
from urlshortener.dao.sql import URLMappingSQLDAO


logger = logging.getLogger(__name__)

BACKENDS = frozenset({'memory', 'redis', 'sql'})


@functools.cache
def shared_memory_dao() -> URLMappingMemoryDAO:
    """Return the process-wide in-memory DAO (created on first use)."""
    return URLMappingMemoryDAO()


@functools.cache
def shared_sql_dao(options_json: str) -> URLMappingSQLDAO:
    """Return the process-wide SQL DAO for the given options (created on first use)

    Warm Lambda invocations reuse the engine, its connection pool and the
    schema check instead of rebuilding them on every request.

    Args:
        options_json (str):
            The backend options serialized with sorted keys, so equal options share a DAO.
    """
    options = json.loads(options_json)
    return URLMappingSQLDAO(**{f'sql_{k}': v for k, v in options.items()})


def dao_from_config(app_config: LambdaConfiguration, prefix: str | None = None) -> URLMappingBaseDAO:
    """Instantiate the DAO for the single backend named in app_config

    Args:
        app_config (LambdaConfiguration):
            Mapping of backend name to backend options, e.g. {'redis': {'host': 'localhost'}}.
        prefix (str | None):
            Key namespace for backends that support one (Redis).

    Returns:
        URLMappingBaseDAO: the configured DAO.

    Raises:
        BadConfigurationError:
            If app_config doesn't name exactly one supported backend.
        DataStoreError:
            If the backend can't be reached during initialization.
    """
    if len(app_config) != 1:
        raise BadConfigurationError(f'Expected exactly one backend section, got {sorted(app_config)}.')

    ((backend, options),) = app_config.items()
    options = options or {}
    if backend not in BACKENDS:
        raise BadConfigurationError(f"Unsupported backend '{backend}' (expected one of {sorted(BACKENDS)}).")

    logger.debug('Using %s backend for URL mappings.', backend)

    if backend == 'memory':
        return shared_memory_dao()
    elif backend == 'redis':
        return URLMappingRedisDAO(**{f'redis_{k}': v for k, v in options.items()}, prefix=prefix)
    else:
        return shared_sql_dao(json.dumps(options, sort_keys=True))
