"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# A QR attendance token is valid for exactly five minutes after issuance.
TOKEN_VALIDITY_MS = 300_000

SESSION_HANDLE_BYTES = 32
MAX_PAYLOAD_LENGTH = 1024
