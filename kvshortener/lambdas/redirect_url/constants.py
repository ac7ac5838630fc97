# Logging events / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
CRAWLER_PREVIEW = 'CRAWLER_PREVIEW'
CUSTOM_DOMAIN_REDIRECT = 'CUSTOM_DOMAIN_REDIRECT'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
