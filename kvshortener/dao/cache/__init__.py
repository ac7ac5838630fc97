from kvshortener.dao.cache.cache_key_schema import CacheKeySchema
from kvshortener.dao.cache.preview_cache_dao import PreviewCacheDAO

__all__ = [
    'CacheKeySchema',
    'PreviewCacheDAO',
]
