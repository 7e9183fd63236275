"""Helpers shared by the Lambda handlers

Functions:
    base_url(event) -> str
        Public base URL of the API the event came through
    get_short_url(shortcode, event) -> str
        Public short URL of a shortcode
    require_environment(*names) -> Callable
        Decorator: fail fast when environment variables are missing
    guarantee_500_response(handler) -> Callable
        Decorator: never let an exception escape a handler in AWS

Example:
    >>> event = {'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}}
    >>> get_short_url('Gh71TCN', event)
    'https://abc123.execute-api.us-east-1.amazonaws.com/Prod/Gh71TCN'
"""

import os
import json
import logging
import functools
from collections.abc import Callable

from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from urlshortener.exceptions import MissingEnvironmentVariableError
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_BASE_URL = 'http://localhost:3000'  # sam local start-api


def base_url(event: LambdaEvent) -> str:
    """Return the public base URL of the API Gateway the event came through

    Default execute-api domains need the stage in the path; custom domains
    map the stage through a base path mapping and don't. Events without a
    domain (tests, `sam local invoke`) fall back to the SAM local API.

    Returns:
        str: e.g. 'https://sho.rt' or 'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
    """
    context = event.get('requestContext') or {}
    domain = context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL

    if 'execute-api' in domain:
        return f'https://{domain}/{context.get("stage", "")}'
    return f'https://{domain}'


def get_short_url(shortcode: str, event: LambdaEvent) -> str:
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def require_environment(*names: str) -> Callable:
    """Decorator: raise MissingEnvironmentVariableError unless all `names` are set and non-empty

    Example:
        >>> @require_environment('APPCONFIG_APP_ID')
        ... def load():
        ...     return os.environ['APPCONFIG_APP_ID']
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = ', '.join(f"'{name}'" for name in names if not os.environ.get(name))
            if missing:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: turn any exception escaping a handler into a JSON 500 response

    Under SAM the exception propagates instead, so the traceback shows up
    in the local console.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception as e:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'error': e.__class__.__name__, 'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            body = {'message': 'Internal Server Error', 'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR}
            return {'statusCode': 500, 'body': json.dumps(body)}

    return wrapper
