from kvshortener.dao.redis.redis_key_schema import RedisKeySchema
from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from kvshortener.dao.redis.analytics_redis_dao import AnalyticsRedisDAO
from kvshortener.dao.redis.rate_limit_redis_dao import RateLimitRedisDAO
from kvshortener.dao.redis.domain_redis_dao import DomainRedisDAO
from kvshortener.dao.redis.api_key_redis_dao import ApiKeyRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
    'AnalyticsRedisDAO',
    'RateLimitRedisDAO',
    'DomainRedisDAO',
    'ApiKeyRedisDAO',
]
