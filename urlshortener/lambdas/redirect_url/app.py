import logging

from urlshortener.shortener import URLShortener
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError, InfrastructureError
from urlshortener.dao import dao_from_config
from urlshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError
from urlshortener.utils import load_config, get_short_url, app_prefix
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.responses import response_302, response_400, response_404, response_500, response_503
from urlshortener.lambdas.redirect_url.constants import (
    REDIRECT_SUCCESS,
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    DATASTORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Load the application's config and connect to the data store
    - Step 2: Extract shortcode from request path
    - Step 3: Resolve the shortcode to its target URL
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: shortcode doesn't exist
        500: Internal server error
            message: server experienced an internal error
        503: Service unavailable
            message: data store is unreachable

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TCN'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Load application's config and connect to the data store
    try:
        app_config = load_config('redirect_url')
        shortener = URLShortener(dao_from_config(app_config, prefix=app_prefix()))
    except (ConfigurationError, InfrastructureError) as e:
        logger.exception(
            'Failed to load configuration for redirect URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR, 'error': e.__class__.__name__},
        )
        return response_500(error_code=CONFIGURATION_ERROR)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': DATASTORE_UNAVAILABLE})
        return response_503(message='data store unavailable', error_code=DATASTORE_UNAVAILABLE)

    # 2- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 3- Resolve the shortcode
    try:
        target_url = shortener.resolve(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': DATASTORE_UNAVAILABLE})
        return response_503(message='data store unavailable', error_code=DATASTORE_UNAVAILABLE)

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
