class KVShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:kvshortener_error'


class ValidationError(KVShortenerError):
    """Raised when request input is malformed (bad URL, short code, expiration, ...)."""

    error_code = 'app:validation_error'


class ConflictError(KVShortenerError):
    """Raised when a resource with the same identity already exists."""

    error_code = 'app:conflict_error'


class NotFoundError(KVShortenerError):
    """Raised when a requested resource doesn't exist (or is no longer live)."""

    error_code = 'app:not_found_error'


class AuthError(KVShortenerError):
    """Raised when an API credential is missing or invalid."""

    error_code = 'auth:auth_error'

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason


class RateLimitError(KVShortenerError):
    """Raised when a client exceeded its request budget for the current window."""

    error_code = 'app:rate_limit_error'

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamFetchError(KVShortenerError):
    """Raised when a remote document can't be fetched (network error, timeout, non-2xx)."""

    error_code = 'upstream:fetch_error'


class SerializationError(KVShortenerError):
    """Raised when a stored record is not well-formed."""

    error_code = 'app:serialization_error'


class ConfigurationError(KVShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
