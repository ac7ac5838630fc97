"""Request guards shared by the /api/* lambda handlers

Every management route runs the same two checks before touching business
logic, in this order:

    1- Authentication: 'Authorization: Bearer <token>' must name a stored API key
    2- Rate limiting: the client address must be within its request budget

A rejected request never reaches the handler's own DAO calls.

Example:
    >>> denied = guard_api_request(event, api_key_dao=ApiKeyRedisDAO(...), rate_limit_dao=RateLimitRedisDAO(...))
    >>> if denied is not None:
    ...     return denied
"""

import logging

from kvshortener.types import LambdaEvent, LambdaResponse
from kvshortener.exceptions import AuthError, RateLimitError
from kvshortener.utils.helpers import bearer_token, client_ip
from kvshortener.utils.responses import response_401, response_429


logger = logging.getLogger(__name__)

MISSING_AUTHORIZATION = 'MISSING_AUTHORIZATION'
INVALID_API_KEY = 'INVALID_API_KEY'
RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'

# Requests without a resolvable client address share one budget
UNKNOWN_CLIENT = 'unknown'


def authenticate(event: LambdaEvent, api_key_dao) -> str:
    """Return the request's API key

    Raises:
        AuthError:
            If the Authorization header is missing or names an unknown key.
    """
    token = bearer_token(event)
    if token is None:
        raise AuthError('Missing Authorization header', reason=MISSING_AUTHORIZATION)
    if not api_key_dao.is_valid(token):
        raise AuthError('Invalid API key', reason=INVALID_API_KEY)
    return token


def throttle(event: LambdaEvent, rate_limit_dao) -> str:
    """Count the request against its client's budget and return the client id

    Raises:
        RateLimitError:
            If the budget of the current window is spent.
    """
    client_id = client_ip(event) or UNKNOWN_CLIENT
    if not rate_limit_dao.hit(client_id):
        retry_after = rate_limit_dao.retry_after(client_id)
        raise RateLimitError(f'Too many requests. Try again in {retry_after} seconds.', retry_after=retry_after)
    return client_id


def guard_api_request(event: LambdaEvent, *, api_key_dao, rate_limit_dao) -> LambdaResponse | None:
    """Authenticate and rate limit an /api/* request

    Args:
        event (LambdaEvent):
            API Gateway event payload.
        api_key_dao (ApiKeyRedisDAO):
            Credential store consulted for the bearer token.
        rate_limit_dao (RateLimitRedisDAO):
            Fixed-window counter keyed by client address.

    Returns:
        LambdaResponse | None:
            A 401/429 response if the request must be rejected, None if it may proceed.
    """
    try:
        authenticate(event, api_key_dao)
    except AuthError as e:
        logger.info('Request not authenticated. Responding with 401.', extra={'event': e.reason, 'reason': str(e)})
        return response_401(message=str(e), error_code=e.reason)

    try:
        throttle(event, rate_limit_dao)
    except RateLimitError as e:
        logger.info(
            'Rate limit exceeded. Responding with 429.',
            extra={'event': RATE_LIMIT_EXCEEDED, 'retry_after': e.retry_after},
        )
        return response_429(retry_after=e.retry_after, message=str(e), error_code=RATE_LIMIT_EXCEEDED)

    return None
