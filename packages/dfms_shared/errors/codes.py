"""Numeric envelope code constants.

``SUCCESS`` is the only code that marks an envelope as successful. The
remaining constants are the codes the normalizer synthesizes itself; codes
reported by the backend pass through untouched.
"""

SUCCESS = 200

# Synthesized for 2xx responses whose body could not be used.
EMPTY_RESPONSE = 500
UNRECOGNIZED_FORMAT = 500

# Synthesized on the error path when no HTTP response exists.
NETWORK_ERROR = 0
CONFIG_ERROR = -1

# Backend business codes returned by the login endpoint.
USER_NOT_FOUND = 20004
INVALID_CREDENTIALS = 20002

# Transport failure codes that denote an aborted or timed-out request.
TIMEOUT_CODES = frozenset({"ECONNABORTED", "ETIMEDOUT"})
