import json
import logging

from urlshortener.shortener import URLShortener
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError, GenerationExhaustedError, InfrastructureError
from urlshortener.dao import dao_from_config
from urlshortener.dao.exceptions import DataStoreError, TargetConflictError
from urlshortener.utils import load_config, get_short_url, app_prefix
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.responses import response_200, response_400, response_409, response_500, response_503
from urlshortener.lambdas.shorten_url.constants import (
    SHORTEN_SUCCESS,
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    TARGET_CONFLICT,
    GENERATION_EXHAUSTED,
    DATASTORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Load the application's config and connect to the data store
    - Step 2: Extract original URL from request body
    - Step 3: Get or create the shortcode for the original URL
    - Step 4: Respond to user with 200 success

    The same original URL always yields the same shortcode, so retrying a
    request is safe.

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: original url (provided in request)
            short_url: short url
            shortcode: shortcode
        400: Bad client request
            message: indicate cause of bad request (invalid JSON or missing target_url)
        409: Conflict
            message: original URL is bound to a different shortcode
        500: Internal server error
            message: configuration error, or no unique shortcode could be generated
        503: Service unavailable
            message: data store is unreachable

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['message']
        Successfully shortened https://example.com to https://mylambda.com/abc1234
    """
    # 1- Load application's config and connect to the data store
    try:
        app_config = load_config('shorten_url')
        shortener = URLShortener(dao_from_config(app_config, prefix=app_prefix()))
    except (ConfigurationError, InfrastructureError) as e:
        logger.exception(
            'Failed to load configuration for shorten URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR, 'error': e.__class__.__name__},
        )
        return response_500(error_code=CONFIGURATION_ERROR)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': DATASTORE_UNAVAILABLE})
        return response_503(message='data store unavailable', error_code=DATASTORE_UNAVAILABLE)

    # 2- Extract original URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    target_url = request_body.get('target_url')
    if not target_url or not isinstance(target_url, str):
        logger.info("Missing 'target_url' in JSON body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    # 3- Get or create the shortcode
    try:
        shortcode = shortener.shorten(target_url)
    except TargetConflictError as e:
        logger.info(
            'Original URL bound to a different shortcode. Responding with 409.',
            extra={'event': TARGET_CONFLICT, 'reason': str(e)},
        )
        return response_409(message='original URL is bound to a different short URL', error_code=TARGET_CONFLICT)
    except GenerationExhaustedError:
        logger.exception('Failed to generate unique shortcode. Responding with 500.', extra={'event': GENERATION_EXHAUSTED})
        return response_500(message='failed to generate unique short URL', error_code=GENERATION_EXHAUSTED)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': DATASTORE_UNAVAILABLE})
        return response_503(message='data store unavailable', error_code=DATASTORE_UNAVAILABLE)

    # 4- Return successful response to user
    short_url = get_short_url(shortcode, event)
    logger.info('Shortened URL. Responding with 200.', extra={'shortcode': shortcode, 'event': SHORTEN_SUCCESS})
    return response_200(
        {
            'message': f'Successfully shortened {target_url} to {short_url}',
            'target_url': target_url,
            'short_url': short_url,
            'shortcode': shortcode,
        }
    )
