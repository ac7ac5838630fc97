"""Input validation for short URL requests.

Every validator raises `ValidationError` with a human-readable message and
returns the (possibly normalized) value otherwise. Validation never touches
the data store.

Functions:
    is_absolute_url(value) -> bool
    validate_url(value, field='url') -> str
    validate_shortcode(value) -> str
    validate_ttl(value) -> int
    validate_domain(value) -> str
"""

import re
from urllib.parse import urlparse

from kvshortener.constants import TTL, Shortcode, Analytics
from kvshortener.exceptions import ValidationError


MAX_URL_LENGTH = 2048
RESERVED_SHORTCODES = frozenset({'api', Analytics.TOTAL_CLICKS_ID})

_SHORTCODE_RE = re.compile(Shortcode.PATTERN)
_DOMAIN_RE = re.compile(r'^(?=.{1,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$')


def is_absolute_url(value: object) -> bool:
    """Return True for an absolute http(s) URL with a host."""
    if not isinstance(value, str) or not value or len(value) > MAX_URL_LENGTH:
        return False
    try:
        components = urlparse(value)
    except ValueError:
        return False
    return components.scheme in {'http', 'https'} and bool(components.netloc)


def validate_url(value: object, field: str = 'url') -> str:
    if not is_absolute_url(value):
        raise ValidationError(f"'{field}' must be an absolute http(s) URL (max {MAX_URL_LENGTH} characters)")
    return value


def validate_shortcode(value: object) -> str:
    if not isinstance(value, str) or not _SHORTCODE_RE.fullmatch(value):
        raise ValidationError("'customCode' may only contain letters, digits, '-' and '_'")
    if len(value) > Shortcode.MAX_CUSTOM_LENGTH:
        raise ValidationError(f"'customCode' must be at most {Shortcode.MAX_CUSTOM_LENGTH} characters")
    if value in RESERVED_SHORTCODES:
        raise ValidationError(f"'{value}' is reserved and cannot be used as 'customCode'")
    return value


def validate_ttl(value: object) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("'expiresIn' must be a number of seconds")
    if not TTL.ONE_MINUTE <= value <= TTL.ONE_YEAR:
        raise ValidationError(f"'expiresIn' must be between {TTL.ONE_MINUTE} and {TTL.ONE_YEAR} seconds")
    return int(value)


def validate_domain(value: object) -> str:
    if not isinstance(value, str) or not _DOMAIN_RE.fullmatch(value.lower()):
        raise ValidationError("'domain' must be a valid host name, e.g. 'links.example.com'")
    return value.lower()
