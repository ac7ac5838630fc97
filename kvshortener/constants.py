from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    ONE_MINUTE = 60
    ONE_HOUR = 3_600
    # Upper bound for caller-requested short URL expiration (1 year in seconds)
    ONE_YEAR = 31_536_000  # 60 * 60 * 24 * 365


class Shortcode:
    """Short code allocation policy."""

    ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-'
    LENGTH = 8
    MAX_ATTEMPTS = 5  # random draws before giving up on allocation
    MAX_CUSTOM_LENGTH = 64
    PATTERN = r'^[a-zA-Z0-9_-]+$'


class RateLimit:
    """Fixed-window rate limit applied to every /api/* request."""

    LIMIT = 100  # requests per window
    WINDOW = 60  # seconds


class Preview:
    """Rich-preview (OpenGraph) metadata policy."""

    DEFAULT_TITLE = 'Untitled'
    DEFAULT_DESCRIPTION = 'No description available'
    DEFAULT_IMAGE_URL = 'https://via.placeholder.com/1200x630?text=No+Image'
    FETCH_TIMEOUT = 5.0  # seconds
    USER_AGENT = 'kvshortener-preview/1.0'
    # User-agent fragments of link-preview crawlers (matched case-insensitively)
    CRAWLER_SIGNATURES = (
        'facebookexternalhit',
        'twitterbot',
        'linkedinbot',
        'slackbot',
        'discordbot',
        'telegrambot',
        'whatsapp',
    )


class Analytics:
    """Click analytics settings."""

    TOTAL_CLICKS_ID = '__total__'
    TOP_URLS_LIMIT = 10


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        REDIRECT_URL = 'REDIRECT_URL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
