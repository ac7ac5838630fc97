# Logging events / error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_DELETED = 'SHORT_URL_DELETED'
