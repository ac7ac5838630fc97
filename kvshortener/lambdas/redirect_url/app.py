import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, AnalyticsRedisDAO, DomainRedisDAO
from kvshortener.dao.exceptions import ShortURLNotFoundError, MalformedRecordError, DomainNotFoundError
from kvshortener.utils import load_redis_config, get_short_url, app_prefix
from kvshortener.utils.crawlers import looks_like_preview_crawler
from kvshortener.utils.helpers import guarantee_500_response, get_header, path_parameter, request_host
from kvshortener.utils.responses import response_302, response_400, response_404
from kvshortener.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    CRAWLER_PREVIEW,
    CUSTOM_DOMAIN_REDIRECT,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def _custom_domain_fallback(event: LambdaEvent, shortcode: str, redis_config: dict) -> LambdaResponse:
    """Forward an unknown shortcode to the target of a registered custom domain, else 404"""
    host = request_host(event)
    if host:
        try:
            base = DomainRedisDAO(**redis_config, prefix=app_prefix()).get(host)
        except DomainNotFoundError:
            pass
        else:
            location = f'{base.rstrip("/")}/{shortcode}'
            logger.info(
                'Shortcode unknown, host is a registered custom domain. Responding with 302.',
                extra={'shortcode': shortcode, 'host': host, 'event': CUSTOM_DOMAIN_REDIRECT},
            )
            return response_302(location=location)

    logger.info('Short URL record not found in database. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
    return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Send link-preview crawlers to the preview page
    - Step 3: Get short URL record from database (custom domain fallback if unknown)
    - Step 4: Delete the record (and its click counter) if it has expired
    - Step 5: Count the click and redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL, preview page, or custom domain target
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: unknown or expired shortcode
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TCNx'}, 'headers': {'User-Agent': 'curl/8.0'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    redis_config = load_redis_config('redirect_url')

    # 1- Extract shortcode from request's path
    shortcode = path_parameter(event, 'shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Crawlers don't run client-side redirects: serve them the preview page
    user_agent = get_header(event, 'User-Agent') or ''
    if looks_like_preview_crawler(user_agent):
        logger.info('Link-preview crawler detected. Responding with 302.', extra={'shortcode': shortcode, 'event': CRAWLER_PREVIEW})
        return response_302(location=f'{get_short_url(shortcode, event)}/og')

    # 3- Get short_url record from database
    short_url_dao = ShortURLRedisDAO(**redis_config, prefix=app_prefix())
    try:
        short_url = short_url_dao.get(shortcode)
    except (ShortURLNotFoundError, MalformedRecordError):
        return _custom_domain_fallback(event, shortcode, redis_config)

    # 4- Lazy expiration: the first read after expiry removes the record and its click counter
    if short_url.is_expired():
        short_url_dao.delete(shortcode)
        AnalyticsRedisDAO(**redis_config, prefix=app_prefix()).reset(shortcode)
        logger.info('Short URL expired and was deleted. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED})
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    # 5- Count the click and redirect client to target URL
    clicks = AnalyticsRedisDAO(**redis_config, prefix=app_prefix()).hit(shortcode)
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'clicks': clicks, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=short_url.target)
