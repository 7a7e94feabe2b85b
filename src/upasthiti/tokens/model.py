from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import TOKEN_VALIDITY_MS


@dataclass(frozen=True)
class QRPayload:
    """Decoded content of a scanned QR code."""

    subject_id: str
    teacher_name: str
    issued_at_epoch_ms: int
    expires_at_epoch_ms: int

    @property
    def token_ref(self) -> str:
        return f"{self.teacher_name}|{self.subject_id}|{self.issued_at_epoch_ms}"


@dataclass(frozen=True)
class AttendanceToken:
    """Time-bound, subject-scoped credential minted by a faculty member.

    Expiry is passive: nothing deletes a token, readers compare the
    current time against ``expires_at_epoch_ms``.
    """

    subject_id: str
    issuer_identity_id: str
    teacher_name: str
    issued_at_epoch_ms: int
    expires_at_epoch_ms: int

    @classmethod
    def mint(cls, *, subject_id: str, issuer_identity_id: str, teacher_name: str, now_ms: int) -> "AttendanceToken":
        return cls(
            subject_id=subject_id,
            issuer_identity_id=issuer_identity_id,
            teacher_name=teacher_name,
            issued_at_epoch_ms=now_ms,
            expires_at_epoch_ms=now_ms + TOKEN_VALIDITY_MS,
        )

    def is_live_at(self, now_ms: int) -> bool:
        return self.issued_at_epoch_ms <= now_ms < self.expires_at_epoch_ms

    def remaining_ms(self, now_ms: int) -> int:
        """Countdown for display; never used to decide validity."""
        return max(0, self.expires_at_epoch_ms - now_ms)

    @property
    def token_ref(self) -> str:
        return f"{self.teacher_name}|{self.subject_id}|{self.issued_at_epoch_ms}"

    def to_qr_payload(self) -> QRPayload:
        return QRPayload(
            subject_id=self.subject_id,
            teacher_name=self.teacher_name,
            issued_at_epoch_ms=self.issued_at_epoch_ms,
            expires_at_epoch_ms=self.expires_at_epoch_ms,
        )

    def to_payload(self) -> str:
        from .codec import encode_payload

        return encode_payload(self.to_qr_payload())
