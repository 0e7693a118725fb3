"""Messages synthesized by response normalization."""

DEFAULT_SUCCESS = "success"
DEFAULT_COMPLETED = "operation completed"
OPERATION_SUCCEEDED = "operation succeeded"
LIST_RETRIEVED = "list retrieved successfully"

EMPTY_RESPONSE = "API returned empty response"
EMPTY_OBJECT = "API returned empty object, possible backend processing error"
UNRECOGNIZED_FORMAT = "unrecognized response format"

REQUEST_TIMED_OUT = "request timed out"
NETWORK_ERROR_PREFIX = "network error"
CONFIG_ERROR_PREFIX = "request configuration error"
