"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying key-value store.

Responsibilities:
    - Provide an interface for creating, retrieving, updating and deleting ShortURLModel objects.
    - Deduplicate creations for a target URL that is already mapped.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from kvshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url, created = dao.create("https://example.com/blog/article-123")
        >>> created
        True

        >>> retrieved = dao.get(short_url.shortcode)
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> dao.create("https://example.com/blog/article-123")[1]
        False
"""

from abc import ABC, abstractmethod
from typing import Optional

from kvshortener.models import ShortURLModel, PreviewMetadata


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        create(target, shortcode=None, ttl=None, preview=None, **kwargs) -> tuple[ShortURLModel, bool]:
            Create a mapping, or return the live mapping already pointing at target.
            Raises ValidationError on malformed input.
            Raises ShortURLAlreadyExistsError if a custom shortcode is taken.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel by short code, expired or not.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises MalformedRecordError if the stored entry can't be decoded.

        find_by_target(target: str, **kwargs) -> ShortURLModel | None:
            Return the live mapping for an exact target URL, if any.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether a short code is taken.

        update(shortcode: str, target: str, **kwargs) -> ShortURLModel:
            Point an existing short code at a new target URL.
            Raises ShortURLNotFoundError if the entry does not exist.

        delete(shortcode: str, **kwargs) -> None:
            Remove a mapping. Deleting a missing short code is not an error.
    """

    @abstractmethod
    def create(
        self,
        target: str,
        shortcode: Optional[str] = None,
        ttl: Optional[int] = None,
        preview: Optional[PreviewMetadata] = None,
        **kwargs,
    ) -> tuple[ShortURLModel, bool]:
        """Create a new short URL mapping (or reuse an existing one).

        Args:
            target (str):
                Absolute http(s) URL to shorten.
            shortcode (Optional[str]):
                Caller-supplied short code. A random one is allocated if None.
            ttl (Optional[int]):
                Seconds until the mapping expires. Never expires if None.
            preview (Optional[PreviewMetadata]):
                Rich-preview metadata to store alongside the mapping.
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            tuple[ShortURLModel, bool]:
                The mapping and whether it was newly created.

        Raises:
            ValidationError:
                If target, shortcode or ttl are malformed.
            ShortURLAlreadyExistsError:
                If the custom shortcode is already taken.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        No expiration handling is performed here; callers decide what to do
        with a mapping whose `expires_at` is in the past.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.
            MalformedRecordError:
                If the stored record can't be deserialized.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel | None:
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def update(self, shortcode: str, target: str, **kwargs) -> ShortURLModel:
        """Replace the target URL of an existing mapping.

        Expiration and preview metadata of the mapping are preserved.

        Raises:
            ValidationError:
                If target is malformed.
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> None:
        pass
