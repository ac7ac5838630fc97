"""API Gateway (Lambda proxy) response builders

Every JSON error body has the shape {"message": ..., "errorCode": ...}.
"""

import json
from typing import Any

from kvshortener.types import LambdaResponse


JSON_HEADERS = {'Content-Type': 'application/json'}


def json_response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error(status_code: int, base: str, message: str | None, error_code: str | None) -> LambdaResponse:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(status_code, body)


def response_200(body: dict[str, Any]) -> LambdaResponse:
    return json_response(200, body)


def response_201(body: dict[str, Any]) -> LambdaResponse:
    return json_response(201, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': '',  # no body needed for redirects
    }


def response_html(html: str, status_code: int = 200) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'text/html; charset=utf-8'},
        'body': html,
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(400, 'Bad Request', message, error_code)


def response_401(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(401, 'Unauthorized', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(404, 'Not Found', message, error_code)


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(409, 'Conflict', message, error_code)


def response_429(*, retry_after: int, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    body = {'message': message or 'Too Many Requests'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(429, body, headers={'Retry-After': str(retry_after)})


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['error_code'] = error_code
    return json_response(500, body)


def response_405(*, allowed: list[str], message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    body = {'message': message or 'Method Not Allowed'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(405, body, headers={'Allow': ', '.join(allowed)})
