import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import AnalyticsRedisDAO, ApiKeyRedisDAO, RateLimitRedisDAO
from kvshortener.utils import load_redis_config, app_prefix
from kvshortener.utils.guards import guard_api_request
from kvshortener.utils.helpers import guarantee_500_response, path_parameter
from kvshortener.utils.responses import response_200
from kvshortener.lambdas.get_analytics.constants import ANALYTICS_SHORTCODE, ANALYTICS_AGGREGATE


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report click analytics

    Routes:
        GET /api/analytics/{shortcode} -> 200 {code, clickCount}
        GET /api/analytics             -> 200 {totalClicks, topUrls: [{code, clickCount}, ...]}

    Counts are approximate: concurrent redirects may lose increments.
    Unknown shortcodes simply report zero clicks.
    """
    redis_config = load_redis_config('get_analytics')
    prefix = app_prefix()

    denied = guard_api_request(
        event,
        api_key_dao=ApiKeyRedisDAO(**redis_config, prefix=prefix),
        rate_limit_dao=RateLimitRedisDAO(**redis_config, prefix=prefix),
    )
    if denied is not None:
        return denied

    dao = AnalyticsRedisDAO(**redis_config, prefix=prefix)

    shortcode = path_parameter(event, 'shortcode')
    if shortcode:
        logger.info('Reporting clicks for shortcode. Responding with 200.', extra={'shortcode': shortcode, 'event': ANALYTICS_SHORTCODE})
        return response_200({'code': shortcode, 'clickCount': dao.clicks(shortcode)})

    top_urls = [{'code': code, 'clickCount': count} for code, count in dao.top()]
    logger.info('Reporting aggregate clicks. Responding with 200.', extra={'event': ANALYTICS_AGGREGATE})
    return response_200({'totalClicks': dao.total(), 'topUrls': top_urls})
