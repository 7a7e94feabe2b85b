from __future__ import annotations

from dataclasses import dataclass

from .access.policy import AccessPolicy
from .attendance.repository import InMemoryCheckInLedger
from .attendance.service import AttendanceAggregator, AttendanceService
from .fraud.service import FraudAlertFeed
from .seed import seed_demo_alerts, seed_demo_identities
from .tokens.issuer import TokenIssuer
from .tokens.verifier import TokenVerifier
from .users.repository import InMemoryIdentityRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    identities_repo: InMemoryIdentityRepository
    ledger_repo: InMemoryCheckInLedger

    auth_service: AuthService
    user_service: UserService
    access_policy: AccessPolicy
    token_issuer: TokenIssuer
    token_verifier: TokenVerifier
    aggregator: AttendanceAggregator
    attendance_service: AttendanceService
    fraud_feed: FraudAlertFeed


def build_container(*, dedupe_checkins: bool = True, seed_demo_data: bool = False) -> Container:
    identities_repo = InMemoryIdentityRepository()
    ledger_repo = InMemoryCheckInLedger()

    auth_service = AuthService(identities_repo)
    user_service = UserService(identities_repo)
    token_issuer = TokenIssuer()
    token_verifier = TokenVerifier(token_issuer)
    aggregator = AttendanceAggregator(ledger_repo, identities_repo, dedupe=dedupe_checkins)
    attendance_service = AttendanceService(token_issuer, token_verifier, aggregator)
    fraud_feed = FraudAlertFeed()

    if seed_demo_data:
        seed_demo_identities(user_service)
        seed_demo_alerts(fraud_feed)

    return Container(
        identities_repo=identities_repo,
        ledger_repo=ledger_repo,
        auth_service=auth_service,
        user_service=user_service,
        access_policy=AccessPolicy(),
        token_issuer=token_issuer,
        token_verifier=token_verifier,
        aggregator=aggregator,
        attendance_service=attendance_service,
        fraud_feed=fraud_feed,
    )
