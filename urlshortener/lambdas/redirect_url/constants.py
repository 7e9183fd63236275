# Log events & error codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
DATASTORE_UNAVAILABLE = 'DATASTORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
