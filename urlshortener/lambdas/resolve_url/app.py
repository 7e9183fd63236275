import logging

from urlshortener.shortener import URLShortener
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.exceptions import ConfigurationError, InfrastructureError
from urlshortener.dao import dao_from_config
from urlshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError
from urlshortener.utils import load_config, get_short_url, app_prefix
from urlshortener.utils.helpers import guarantee_500_response
from urlshortener.lambdas.responses import response_200, response_400, response_404, response_500, response_503
from urlshortener.lambdas.resolve_url.constants import (
    RESOLVE_SUCCESS,
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    DATASTORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to look up the original URL of a shortcode

    HTTP responses:
        200: Shortcode found
            target_url: original URL
            short_url: short URL
            shortcode: shortcode
        400: Missing 'shortcode' query string parameter
        404: Shortcode doesn't exist
        500: Configuration error
        503: Data store is unreachable

    Example:
        >>> event = {'queryStringParameters': {'shortcode': 'Gh71TCN'}}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['target_url']
        'https://example.com/my-page'
    """
    # 1- Load application's config and connect to the data store
    try:
        app_config = load_config('resolve_url')
        shortener = URLShortener(dao_from_config(app_config, prefix=app_prefix()))
    except (ConfigurationError, InfrastructureError) as e:
        logger.exception(
            'Failed to load configuration for resolve URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR, 'error': e.__class__.__name__},
        )
        return response_500(error_code=CONFIGURATION_ERROR)
    except DataStoreError:
        logger.exception('Data store unreachable. Responding with 503.', extra={'event': DATASTORE_UNAVAILABLE})
        return response_503(message='data store unavailable', error_code=DATASTORE_UNAVAILABLE)

    # 2- Extract shortcode from query string
    shortcode = (event.get('queryStringParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in query string. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in query string", error_code=MISSING_SHORTCODE)

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

    logger.info('Resolved short URL. Responding with 200.', extra={'shortcode': shortcode, 'event': RESOLVE_SUCCESS})
    return response_200(
        {
            'target_url': target_url,
            'short_url': get_short_url(shortcode, event),
            'shortcode': shortcode,
        }
    )
