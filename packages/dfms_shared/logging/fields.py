"""Structured log field names shared by DFMS packages."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EXCEPTION = "exception"
EVENT = "event"

SERVICE = "service"
ENVIRONMENT = "environment"

# One API exchange.
API_EXCHANGE_EVENT = "api_exchange"
API_RETRY_EVENT = "api_retry"
HTTP_METHOD = "http_method"
HTTP_URL = "http_url"
STATUS_CODE = "status_code"
ENVELOPE_CODE = "envelope_code"
SUCCESS = "success"
ERROR_CATEGORY = "error_category"
ATTEMPT = "attempt"
MOCK = "mock"
