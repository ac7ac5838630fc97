# Logging events / error codes
INVALID_REQUEST = 'INVALID_REQUEST'
SHORTCODE_TAKEN = 'SHORTCODE_TAKEN'
SHORT_URL_EXISTS = 'SHORT_URL_EXISTS'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
