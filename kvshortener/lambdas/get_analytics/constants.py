# Logging events / error codes
ANALYTICS_SHORTCODE = 'ANALYTICS_SHORTCODE'
ANALYTICS_AGGREGATE = 'ANALYTICS_AGGREGATE'
