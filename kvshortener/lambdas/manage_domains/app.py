import logging

from kvshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from kvshortener.dao.redis import DomainRedisDAO, ApiKeyRedisDAO, RateLimitRedisDAO
from kvshortener.exceptions import ValidationError
from kvshortener.utils import load_redis_config, app_prefix
from kvshortener.utils.guards import guard_api_request
from kvshortener.utils.helpers import guarantee_500_response, http_method, parse_json_body, path_parameter
from kvshortener.utils.responses import response_200, response_201, response_400, response_405
from kvshortener.utils.validators import validate_domain, validate_url
from kvshortener.lambdas.manage_domains.constants import (
    INVALID_REQUEST,
    MISSING_DOMAIN,
    METHOD_NOT_ALLOWED,
    DOMAIN_REGISTERED,
    DOMAIN_DELETED,
)


logger = logging.getLogger(__name__)

ALLOWED_METHODS = ['POST', 'DELETE']


def register_domain(event: LambdaEvent, dao: DomainRedisDAO) -> LambdaResponse:
    try:
        body = parse_json_body(event)
        domain = validate_domain(body.get('domain'))
        target = validate_url(body.get('target'), field='target')
    except ValidationError as e:
        logger.info('Invalid domain registration. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST)

    dao.register(domain, target)
    logger.info('Custom domain registered. Responding with 201.', extra={'domain': domain, 'event': DOMAIN_REGISTERED})
    return response_201({'domain': domain, 'target': target})


def delete_domain(event: LambdaEvent, dao: DomainRedisDAO) -> LambdaResponse:
    domain = path_parameter(event, 'domain')
    if not domain:
        logger.info('Missing "domain" in path. Responding with 400.', extra={'event': MISSING_DOMAIN})
        return response_400(message="missing 'domain' in path", error_code=MISSING_DOMAIN)

    dao.delete(domain)
    logger.info('Custom domain deleted. Responding with 200.', extra={'domain': domain, 'event': DOMAIN_DELETED})
    return response_200({'message': 'Domain deleted successfully'})


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Manage the custom domain registry

    Routes:
        POST   /api/domains           {domain, target} -> 201 {domain, target}
        DELETE /api/domains/{domain}                   -> 200 (idempotent)

    Requests arriving on a registered domain for an unknown shortcode are
    forwarded to `<target>/<shortcode>` by the redirect handler.
    """
    redis_config = load_redis_config('manage_domains')
    prefix = app_prefix()

    denied = guard_api_request(
        event,
        api_key_dao=ApiKeyRedisDAO(**redis_config, prefix=prefix),
        rate_limit_dao=RateLimitRedisDAO(**redis_config, prefix=prefix),
    )
    if denied is not None:
        return denied

    method = http_method(event)
    if method not in ALLOWED_METHODS:
        logger.info('Unsupported method %s. Responding with 405.', method, extra={'event': METHOD_NOT_ALLOWED})
        return response_405(allowed=ALLOWED_METHODS, error_code=METHOD_NOT_ALLOWED)

    dao = DomainRedisDAO(**redis_config, prefix=prefix)
    if method == 'POST':
        return register_domain(event, dao)
    return delete_domain(event, dao)
