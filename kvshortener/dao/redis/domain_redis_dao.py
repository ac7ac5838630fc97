"""Redis DAO for the custom domain registry

    <prefix>:domains:<domain>  -> target base URL

Registered domains are consulted by the redirect path when a shortcode is
unknown: requests arriving on a registered host are forwarded to its target.
"""

from beartype import beartype

from kvshortener.dao.redis.mixins import RedisClientMixin
from kvshortener.dao.redis.helpers import handle_redis_connection_error
from kvshortener.dao.exceptions import DomainNotFoundError


class DomainRedisDAO(RedisClientMixin):
    @handle_redis_connection_error
    @beartype
    def register(self, domain: str, target: str, **kwargs) -> 'DomainRedisDAO':
        """Map domain to a target base URL (overwrites an existing mapping)"""
        self.redis.set(self.keys.domain_key(domain), target)
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, domain: str, **kwargs) -> str:
        """Return the target base URL for domain

        Raises:
            DomainNotFoundError:
                If the domain is not registered.
        """
        target = self.redis.get(self.keys.domain_key(domain))
        if not target:
            raise DomainNotFoundError(f"Domain '{domain}' is not registered.")
        return target

    @handle_redis_connection_error
    @beartype
    def delete(self, domain: str, **kwargs) -> None:
        self.redis.delete(self.keys.domain_key(domain))
