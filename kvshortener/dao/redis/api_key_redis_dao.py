from beartype import beartype

from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error


class ApiKeyRedisDAO(RedisClientMixin):
    """Credential store for /api/* bearer tokens

    A token is valid iff `<prefix>:apikeys:<token>` holds a non-empty value
    (typically a label naming the key owner). There are no scopes or roles.
    """

    @handle_redis_connection_error
    @beartype
    def is_valid(self, token: str, **kwargs) -> bool:
        if not token:
            return False
        return bool(self.redis.get(self.keys.api_key_key(token)))
