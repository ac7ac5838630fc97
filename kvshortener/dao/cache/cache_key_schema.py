import functools
from collections.abc import Callable

import xxhash


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for advisory cache entries.

    An optional prefix can be provided to namespace all generated keys.
    All keys live under 'cache:' so they can never collide with the
    authoritative records described by RedisKeySchema.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else 'cache'

    @prefix_key
    def preview_key(self, target: str) -> str:
        return f'preview:{xxhash.xxh64_hexdigest(target.encode("utf-8"))}'
