# Logging events / error codes
INVALID_REQUEST = 'INVALID_REQUEST'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_UPDATED = 'SHORT_URL_UPDATED'
