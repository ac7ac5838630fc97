import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, AnalyticsRedisDAO, ApiKeyRedisDAO, RateLimitRedisDAO
from kvshortener.utils import load_redis_config, app_prefix
from kvshortener.utils.guards import guard_api_request
from kvshortener.utils.helpers import guarantee_500_response, path_parameter
from kvshortener.utils.responses import response_200, response_400
from kvshortener.lambdas.delete_url.constants import MISSING_SHORTCODE, SHORT_URL_DELETED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Delete a short URL and its click counter (DELETE /api/urls/{shortcode})

    Deleting an unknown shortcode is not an error: the response is always 200.
    """
    redis_config = load_redis_config('delete_url')
    prefix = app_prefix()

    denied = guard_api_request(
        event,
        api_key_dao=ApiKeyRedisDAO(**redis_config, prefix=prefix),
        rate_limit_dao=RateLimitRedisDAO(**redis_config, prefix=prefix),
    )
    if denied is not None:
        return denied

    shortcode = path_parameter(event, 'shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    ShortURLRedisDAO(**redis_config, prefix=prefix).delete(shortcode)
    AnalyticsRedisDAO(**redis_config, prefix=prefix).reset(shortcode)

    logger.info('Short URL deleted. Responding with 200.', extra={'shortcode': shortcode, 'event': SHORT_URL_DELETED})
    return response_200({'message': 'URL deleted successfully'})
