import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, ApiKeyRedisDAO, RateLimitRedisDAO
from kvshortener.dao.exceptions import ShortURLNotFoundError, MalformedRecordError
from kvshortener.exceptions import ValidationError
from kvshortener.utils import load_redis_config, get_short_url, app_prefix
from kvshortener.utils.guards import guard_api_request
from kvshortener.utils.helpers import guarantee_500_response, parse_json_body, path_parameter
from kvshortener.utils.responses import response_200, response_400, response_404
from kvshortener.utils.validators import validate_url
from kvshortener.lambdas.update_url.constants import INVALID_REQUEST, SHORT_URL_NOT_FOUND, SHORT_URL_UPDATED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Point an existing short URL at a new target (PUT /api/urls/{shortcode})

    The update is a partial merge: expiration and preview metadata are kept.

    HTTP responses:
        200: Target updated
            message, shortUrl, url
        400: Bad client request (missing shortcode, invalid JSON or URL)
        401: Missing or invalid API key
        404: Unknown shortcode
        429: Client rate limit exceeded
    """
    redis_config = load_redis_config('update_url')
    prefix = app_prefix()

    denied = guard_api_request(
        event,
        api_key_dao=ApiKeyRedisDAO(**redis_config, prefix=prefix),
        rate_limit_dao=RateLimitRedisDAO(**redis_config, prefix=prefix),
    )
    if denied is not None:
        return denied

    shortcode = path_parameter(event, 'shortcode')
    try:
        if not shortcode:
            raise ValidationError("missing 'shortcode' in path")
        body = parse_json_body(event)
        if body.get('url') is None:
            raise ValidationError("missing 'url' in JSON body")
        target = validate_url(body['url'])
    except ValidationError as e:
        logger.info('Invalid update request. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST)

    short_url_dao = ShortURLRedisDAO(**redis_config, prefix=prefix)
    try:
        short_url_dao.update(shortcode, target)
    except (ShortURLNotFoundError, MalformedRecordError):
        logger.info('Short URL record not found in database. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    logger.info('Short URL updated. Responding with 200.', extra={'shortcode': shortcode, 'event': SHORT_URL_UPDATED})
    return response_200(
        {
            'message': 'URL updated successfully',
            'shortUrl': get_short_url(shortcode, event),
            'url': target,
        }
    )
