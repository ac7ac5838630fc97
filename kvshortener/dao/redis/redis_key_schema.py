import functools
from collections.abc import Callable

import xxhash

from kvshortener.constants import Analytics


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "kvshortener:prod" or "kvshortener:dev".

    Target URLs are hashed (xxh64) before being embedded in a key, so that
    arbitrarily long URLs map to fixed-length key names.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    def links_pattern(self) -> str:
        return self.link_key('*')

    @prefix_key
    def target_index_key(self, target: str) -> str:
        return f'targets:{xxhash.xxh64_hexdigest(target.encode("utf-8"))}'

    @prefix_key
    def clicks_key(self, shortcode: str) -> str:
        return f'clicks:{shortcode}'

    def clicks_pattern(self) -> str:
        return self.clicks_key('*')

    def total_clicks_key(self) -> str:
        return self.clicks_key(Analytics.TOTAL_CLICKS_ID)

    @prefix_key
    def rate_limit_key(self, client_id: str) -> str:
        return f'ratelimit:{client_id}'

    @prefix_key
    def domain_key(self, domain: str) -> str:
        return f'domains:{domain.lower()}'

    @prefix_key
    def api_key_key(self, token: str) -> str:
        return f'apikeys:{token}'
