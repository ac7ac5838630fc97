import logging
from typing import Any

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import ShortURLRedisDAO, ApiKeyRedisDAO, RateLimitRedisDAO
from kvshortener.dao.cache import PreviewCacheDAO
from kvshortener.dao.exceptions import ShortURLAlreadyExistsError
from kvshortener.exceptions import ValidationError
from kvshortener.utils import load_redis_config, get_short_url, app_prefix
from kvshortener.utils.guards import guard_api_request
from kvshortener.utils.helpers import guarantee_500_response, parse_json_body
from kvshortener.utils.opengraph import merge_preview
from kvshortener.utils.responses import response_200, response_201, response_400, response_409
from kvshortener.utils.validators import validate_url, validate_shortcode, validate_ttl
from kvshortener.lambdas.shorten_url.constants import (
    INVALID_REQUEST,
    SHORTCODE_TAKEN,
    SHORT_URL_EXISTS,
    SHORT_URL_CREATED,
)


logger = logging.getLogger(__name__)


def _optional_text(body: dict[str, Any], field: str) -> str | None:
    value = body.get(field)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"'{field}' must be a string")
    return value or None


def parse_request(body: dict[str, Any]) -> dict[str, Any]:
    """Validate a create request body

    Returns:
        dict: target, shortcode, ttl, og_title, og_description, og_image
              (optional fields are None when absent).

    Raises:
        ValidationError:
            If any field is malformed.
    """
    if body.get('url') is None:
        raise ValidationError("missing 'url' in JSON body")

    shortcode = body.get('customCode')
    expires_in = body.get('expiresIn')
    og_image = _optional_text(body, 'ogImage')

    return {
        'target': validate_url(body['url']),
        'shortcode': validate_shortcode(shortcode) if shortcode is not None else None,
        'ttl': validate_ttl(expires_in) if expires_in is not None else None,
        'og_title': _optional_text(body, 'ogTitle'),
        'og_description': _optional_text(body, 'ogDescription'),
        'og_image': validate_url(og_image, field='ogImage') if og_image is not None else None,
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Authenticate and rate limit the client
    - Step 2: Validate the JSON request body
    - Step 3: Return the existing short URL if the target is already mapped
    - Step 4: Reject a custom shortcode that is already taken
    - Step 5: Resolve preview metadata for fields the caller didn't supply
    - Step 6: Store the new mapping and respond with 201

    HTTP responses:
        200: Target URL already shortened
            shortUrl: existing short url
            url: target url
        201: Successful URL shortening
            shortUrl: newly generated short url
            url: target url
        400: Bad client request
            message: invalid JSON, URL, custom code, expiration or preview fields
        401: Unauthorized
            message: missing or invalid API key
        409: Conflict
            message: custom shortcode already exists
        429: Too many requests
            message: client rate limit exceeded
        500: Internal server error
            message: indicate the server experienced an internal error

    Example:
        >>> event = {'headers': {'Authorization': 'Bearer s3cr3t'}, 'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])
        {'shortUrl': 'http://localhost:3000/V1StGXR8', 'url': 'https://example.com'}
    """
    # 0- Get application's config
    redis_config = load_redis_config('shorten_url')
    prefix = app_prefix()

    # 1- Authenticate and rate limit the client
    denied = guard_api_request(
        event,
        api_key_dao=ApiKeyRedisDAO(**redis_config, prefix=prefix),
        rate_limit_dao=RateLimitRedisDAO(**redis_config, prefix=prefix),
    )
    if denied is not None:
        return denied

    # 2- Validate the request body
    try:
        request = parse_request(parse_json_body(event))
    except ValidationError as e:
        logger.info('Invalid create request. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST)
    target = request['target']

    short_url_dao = ShortURLRedisDAO(**redis_config, prefix=prefix)

    # 3- Deduplicate: a target maps to at most one live shortcode
    existing = short_url_dao.find_by_target(target)
    if existing is not None:
        logger.info(
            'Target URL already shortened. Responding with 200.',
            extra={'shortcode': existing.shortcode, 'event': SHORT_URL_EXISTS},
        )
        return response_200({'shortUrl': get_short_url(existing.shortcode, event), 'url': target})

    # 4- Reject a taken custom shortcode before fetching any metadata
    shortcode = request['shortcode']
    if shortcode is not None and short_url_dao.exists(shortcode):
        logger.info('Custom shortcode already taken. Responding with 409.', extra={'shortcode': shortcode, 'event': SHORTCODE_TAKEN})
        return response_409(message=f"custom code '{shortcode}' already exists", error_code=SHORTCODE_TAKEN)

    # 5- Resolve preview metadata (only if some field is missing)
    preview = merge_preview(
        request['og_title'],
        request['og_description'],
        request['og_image'],
        resolver=lambda: PreviewCacheDAO(**redis_config, prefix=prefix).get(target),
    )

    # 6- Store the mapping
    try:
        short_url, created = short_url_dao.create(target, shortcode=shortcode, ttl=request['ttl'], preview=preview)
    except ShortURLAlreadyExistsError:
        # Custom code claimed by a concurrent request since step 4
        logger.info('Custom shortcode already taken. Responding with 409.', extra={'shortcode': shortcode, 'event': SHORTCODE_TAKEN})
        return response_409(message=f"custom code '{shortcode}' already exists", error_code=SHORTCODE_TAKEN)

    body = {'shortUrl': get_short_url(short_url.shortcode, event), 'url': target}
    if not created:
        logger.info('Target URL already shortened. Responding with 200.', extra={'shortcode': short_url.shortcode, 'event': SHORT_URL_EXISTS})
        return response_200(body)

    logger.info('Short URL created. Responding with 201.', extra={'shortcode': short_url.shortcode, 'event': SHORT_URL_CREATED})
    return response_201(body)
