# Logging events / error codes
INVALID_REQUEST = 'INVALID_REQUEST'
MISSING_DOMAIN = 'MISSING_DOMAIN'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
DOMAIN_REGISTERED = 'DOMAIN_REGISTERED'
DOMAIN_DELETED = 'DOMAIN_DELETED'
