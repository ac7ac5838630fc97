"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    get_header() -> str | None
        Case-insensitive request header lookup
    request_host() -> str | None
        Host the request was addressed to
    client_ip() -> str | None
        Originating client address
    bearer_token() -> str | None
        Token from an 'Authorization: Bearer <token>' header
    parse_json_body() -> dict
        Decode the JSON object carried by the request body
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn unhandled exceptions into HTTP 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from kvshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "sho.rt",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://sho.rt'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import base64
import binascii
import functools
import logging
from typing import Any
from collections.abc import Callable

from kvshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from kvshortener.exceptions import MissingEnvironmentVariableError, ValidationError
from kvshortener.types import LambdaEvent
from kvshortener.utils.runtime import running_locally
from kvshortener.utils.responses import response_500


logger = logging.getLogger(__name__)

LOCAL_HOSTS = frozenset({'localhost', '127.0.0.1'})


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    Return the public base URL for the current Lambda invocation.

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain.split(':', 1)[0] in LOCAL_HOSTS:
        # SAM local API serves plain HTTP
        return f'http://{domain}'
    elif domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: LambdaEvent) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def get_header(event: LambdaEvent, name: str) -> str | None:
    """Return a request header value, matching the header name case-insensitively"""
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def request_host(event: LambdaEvent) -> str | None:
    """Return the host the client addressed (Host header, then API Gateway domain), without port"""
    host = get_header(event, 'Host') or (event.get('requestContext') or {}).get('domainName')
    if not host:
        return None
    return host.split(':', 1)[0].lower()


def client_ip(event: LambdaEvent) -> str | None:
    """Return the originating client address

    Prefers the address observed by API Gateway (REST `identity.sourceIp`,
    HTTP API `http.sourceIp`) and falls back to proxy headers.
    """
    request_context = event.get('requestContext') or {}
    source_ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    if source_ip:
        return source_ip

    forwarded = get_header(event, 'CF-Connecting-IP') or get_header(event, 'X-Forwarded-For')
    if forwarded:
        return forwarded.split(',', 1)[0].strip()
    return None


def bearer_token(event: LambdaEvent) -> str | None:
    """Extract the token from an 'Authorization: Bearer <token>' header"""
    authorization = get_header(event, 'Authorization')
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def path_parameter(event: LambdaEvent, name: str) -> str | None:
    return (event.get('pathParameters') or {}).get(name)


def parse_json_body(event: LambdaEvent) -> dict[str, Any]:
    """Decode the request body as a JSON object

    Raises:
        ValidationError:
            If the body is not valid JSON or not a JSON object.
    """
    body = event.get('body')
    try:
        if body and event.get('isBase64Encoded'):
            body = base64.b64decode(body, validate=True).decode('utf-8')
        payload = json.loads(body or '{}')
    except (binascii.Error, ValueError) as e:
        raise ValidationError('invalid JSON body') from e
    if not isinstance(payload, dict):
        raise ValidationError('JSON body must be an object')
    return payload


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable) -> Callable:
    """Decorator: respond with HTTP 500 instead of crashing on unhandled exceptions

    When running locally the original exception is re-raised to ease debugging.
    """

    @functools.wraps(func)
    def wrapper(event: LambdaEvent, context: Any, *args, **kwargs):
        try:
            return func(event, context, *args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper


def http_method(event: LambdaEvent) -> str:
    """Return the request method for REST (v1) and HTTP API (v2) payloads"""
    method = event.get('httpMethod') or ((event.get('requestContext') or {}).get('http') or {}).get('method') or ''
    return method.upper()
