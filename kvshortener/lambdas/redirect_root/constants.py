# Logging events / error codes
REDIRECT_URL_NOT_CONFIGURED = 'REDIRECT_URL_NOT_CONFIGURED'
ROOT_REDIRECT = 'ROOT_REDIRECT'
