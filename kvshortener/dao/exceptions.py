"""Exceptions related to Data Access Objects (DAO) operations.

DAO exceptions extend the application taxonomy in `kvshortener.exceptions`,
so a caller can catch either the storage-specific class or the generic one
(e.g. `ShortURLNotFoundError` is also a `NotFoundError`).

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a ShortURLModel is not found in the data store.

    ShortURLAlreadyExistsError:
        Raised when attempting to insert a ShortURLModel that already exists.

    DomainNotFoundError:
        Raised when a custom domain is not registered.

    MalformedRecordError:
        Raised when a stored record can't be deserialized.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, time, OOM, etc.).

    CacheMissError:
        Raised when a requested cache entry (e.g., preview metadata) is missing.

    CachePutError:
        Raised when writing or updating a cache entry fails.

Example:
    >>> from kvshortener.dao.exceptions import CacheMissError
    >>> raise CacheMissError("Preview for https://example.com not found in cache.")
    Traceback (most recent call last):
        ...
    kvshortener.dao.exceptions.CacheMissError: Preview for https://example.com not found in cache.
"""

from kvshortener.exceptions import KVShortenerError, NotFoundError, ConflictError, SerializationError


class DAOError(KVShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError, NotFoundError):
    """Exception raised when a ShortURLModel is not found in the data store."""

    error_code = 'dao:short_url_not_found'


class ShortURLAlreadyExistsError(DAOError, ConflictError):
    """Exception raised when attempting to insert a ShortURLModel that already exists in the data store."""

    error_code = 'dao:short_url_already_exists'


class DomainNotFoundError(DAOError, NotFoundError):
    """Exception raised when a custom domain is not registered in the data store."""

    error_code = 'dao:domain_not_found'


class MalformedRecordError(DAOError, SerializationError):
    """Exception raised when a stored record is not well-formed."""

    error_code = 'dao:malformed_record'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'


class CacheMissError(DAOError):
    """Exception raised when a requested cache entry is missing."""

    error_code = 'dao:cache_miss'


class CachePutError(DAOError):
    """Exception raised when writing or updating a cache entry fails."""

    error_code = 'dao:cache_put_error'
