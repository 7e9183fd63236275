"""Application configuration backed by AWS AppConfig

Every environment (`APP_ENV`) has its own AppConfig *Environment* inside the
application's AppConfig *Application*. The deployed JSON document selects one
backend and holds per-Lambda backend settings:

    {
        "build": 42,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": {"host": "...", "port": 6379, "db": 0},
                "sql": {"url": "postgresql+psycopg://..."}
            },
            "resolve_url": { ... },
            "redirect_url": { ... }
        }
    }

A Lambda only ever sees its own section for the active backend, e.g.
load_config('shorten_url') -> {'redis': {'host': '...', 'port': 6379, 'db': 0}},
which is exactly what urlshortener.dao.factory.dao_from_config() expects.

Under `sam local` the document can be served by a local AppConfig Agent
container instead (set APPCONFIG_AGENT_URL, e.g. http://appconfig-agent:2772).

Functions:
    app_env() -> str
    app_name() -> str | None
    app_prefix() -> str | None
    lambda_section(document, lambda_name) -> dict
    load_config(lambda_name) -> dict
"""

import os
import json
import logging
import urllib.error
import urllib.parse
import urllib.request

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.types import AppConfigDocument, LambdaConfiguration
from urlshortener.constants import ENV
from urlshortener.exceptions import AppConfigError, BadConfigurationError
from urlshortener.utils.helpers import require_environment
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = 'backend-config'

# The local agent must be one of these; the URL comes from the environment
AGENT_SCHEMES = frozenset({'http', 'https'})
AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
AGENT_PORTS = frozenset({2772, None})


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return '<app name>:<app env>', the namespace for data store keys

    None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_prefix()
        'urlshortener:dev'
    """
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def lambda_section(document: AppConfigDocument, lambda_name: str) -> LambdaConfiguration:
    """Pick {active backend: settings} for one Lambda out of an AppConfig document

    Raises:
        BadConfigurationError:
            If the document has no active backend or no section for this Lambda/backend.
    """
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no active backend section for '{lambda_name}'.") from e


def _decode_document(content: bytes) -> AppConfigDocument:
    try:
        return json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BadConfigurationError('AppConfig document is not valid JSON.') from e


def _agent_url() -> str | None:
    """Return the validated local AppConfig Agent URL, or None if not configured"""
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url:
        return None

    components = urllib.parse.urlparse(url)
    if components.scheme not in AGENT_SCHEMES:
        raise BadConfigurationError(f'Bad scheme {url}')
    if components.hostname not in AGENT_HOSTS:
        raise BadConfigurationError(f'Bad host {url}')
    if components.port not in AGENT_PORTS:
        raise BadConfigurationError(f'Bad port {url}')
    return url.rstrip('/')


def _fetch_from_agent(agent_url: str) -> AppConfigDocument:
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

    logger.debug('Fetching AppConfig from local agent.', extra={'agentUrl': url})
    try:
        with urllib.request.urlopen(url, timeout=5) as response:  # noqa: S310
            return _decode_document(response.read())
    except urllib.error.URLError as e:
        raise AppConfigError(f'Failed to fetch configuration from local AppConfig agent at {agent_url}.') from e


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> AppConfigDocument:
    logger.debug('Fetching AppConfig from AWS AppConfig.')
    try:
        appconfig = boto3.client('appconfigdata')
        token = appconfig.start_configuration_session(
            ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
            EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
            ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
        )['InitialConfigurationToken']
        content = appconfig.get_latest_configuration(ConfigurationToken=token)['Configuration'].read()
    except (BotoCoreError, ClientError) as e:
        raise AppConfigError('Failed to fetch configuration from AWS AppConfig.') from e

    return _decode_document(content)


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load the active backend's configuration for a Lambda

    Reads from the local AppConfig Agent when running under SAM with
    APPCONFIG_AGENT_URL set, and from AWS AppConfig otherwise.

    Environment variables required (AWS AppConfig only):
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda's section, e.g. "shorten_url".

    Returns:
        dict: {<active backend>: <backend settings>}

    Raises:
        MissingEnvironmentVariableError:
            If an AppConfig identifier is missing from the environment.
        AppConfigError:
            If AppConfig (or the local agent) can't be reached.
        BadConfigurationError:
            If the agent URL is unsafe, or the document isn't valid JSON or
            lacks the Lambda's section.

    Example:
        >>> load_config('shorten_url')
        {'redis': {'host': 'redis-15501.host.docker.internal', 'port': 6379, 'db': 0}}
    """
    agent_url = _agent_url()
    if running_locally() and agent_url:
        document = _fetch_from_agent(agent_url)
    else:
        document = _fetch_from_appconfig()

    data = lambda_section(document, lambda_name)
    logger.debug(
        'Loaded AppConfig.',
        extra={'lambdaName': lambda_name, 'backend': next(iter(data)), 'build': document.get('build')},
    )
    return data
