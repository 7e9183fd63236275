# Log events & error codes
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
TARGET_CONFLICT = 'TARGET_CONFLICT'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
DATASTORE_UNAVAILABLE = 'DATASTORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
