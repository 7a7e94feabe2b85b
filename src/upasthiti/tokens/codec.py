"""QR payload wire format.

A payload is a JSON object with exactly four keys::

    {"subject": "CS101", "teacher": "Dr. Anjali Verma",
     "timestamp": 1700000000000, "expires": 1700000300000}

``timestamp`` and ``expires`` are epoch milliseconds and must differ by
exactly the token validity window. Anything else is malformed.
"""

from __future__ import annotations

import json

from ..core.constants import MAX_PAYLOAD_LENGTH, TOKEN_VALIDITY_MS
from ..core.exceptions import ValidationError
from .model import QRPayload

PAYLOAD_KEYS = frozenset({"subject", "teacher", "timestamp", "expires"})


class MalformedPayload(ValidationError):
    """Raised when a scanned string is not a well-formed QR payload."""


def encode_payload(payload: QRPayload) -> str:
    return json.dumps(
        {
            "subject": payload.subject_id,
            "teacher": payload.teacher_name,
            "timestamp": payload.issued_at_epoch_ms,
            "expires": payload.expires_at_epoch_ms,
        },
        separators=(",", ":"),
    )


def _require_text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise MalformedPayload(f"'{key}' must be a non-empty string")
    return value


def _require_epoch_ms(data: dict, key: str) -> int:
    value = data[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedPayload(f"'{key}' must be a non-negative integer")
    return value


def decode_payload(raw: str) -> QRPayload:
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedPayload("Empty payload")
    if len(raw) > MAX_PAYLOAD_LENGTH:
        raise MalformedPayload("Payload too long")

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise MalformedPayload("Payload is not valid JSON") from e

    if not isinstance(data, dict) or set(data) != PAYLOAD_KEYS:
        raise MalformedPayload("Unexpected payload shape")

    issued_at = _require_epoch_ms(data, "timestamp")
    expires_at = _require_epoch_ms(data, "expires")
    if expires_at - issued_at != TOKEN_VALIDITY_MS:
        raise MalformedPayload("Validity window does not match")

    return QRPayload(
        subject_id=_require_text(data, "subject"),
        teacher_name=_require_text(data, "teacher"),
        issued_at_epoch_ms=issued_at,
        expires_at_epoch_ms=expires_at,
    )
