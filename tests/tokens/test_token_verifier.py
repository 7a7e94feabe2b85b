from __future__ import annotations

import json

import pytest

from upasthiti.core.enums import CheckInOutcome
from upasthiti.tokens.issuer import TokenStanding


@pytest.fixture
def teacher(container):
    return container.identities_repo.get_by_username("teacher1")


@pytest.fixture
def student(container):
    return container.identities_repo.get_by_username("student1")


def test_accepted_within_window(container, teacher, student, fixed_now):
    token = container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    for offset in (0, 1, 150_000, 299_999):
        event = container.token_verifier.verify(token.to_payload(), student, fixed_now + offset)
        assert event.outcome == CheckInOutcome.ACCEPTED
        assert event.student_id == "1"
        assert event.subject_id == "CS101"
        assert event.token_ref == token.token_ref


@pytest.mark.parametrize("offset", [300_000, 300_001, 10_000_000])
def test_expired_at_or_after_window(container, teacher, student, fixed_now, offset):
    token = container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    event = container.token_verifier.verify(token.to_payload(), student, fixed_now + offset)
    assert event.outcome == CheckInOutcome.EXPIRED


def test_replaced_token_is_rejected_inside_its_window(container, teacher, student, fixed_now):
    first = container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now + 60_000)

    event = container.token_verifier.verify(first.to_payload(), student, fixed_now + 61_000)
    assert event.outcome != CheckInOutcome.ACCEPTED
    assert event.outcome == CheckInOutcome.EXPIRED


def test_subject_mismatch(container, teacher, student, fixed_now):
    token = container.token_issuer.issue_token("CS305", teacher, now_ms=fixed_now)
    event = container.token_verifier.verify(token.to_payload(), student, fixed_now + 1000)
    assert event.outcome == CheckInOutcome.SUBJECT_MISMATCH


@pytest.mark.parametrize("raw", ["", "garbage", "{}", json.dumps({"subject": "CS101"})])
def test_malformed_never_raises(container, student, fixed_now, raw):
    event = container.token_verifier.verify(raw, student, fixed_now)
    assert event.outcome == CheckInOutcome.MALFORMED
    assert event.token_ref is None


def test_forged_payload_is_malformed(container, student, fixed_now):
    forged = json.dumps({"subject": "CS101", "teacher": "Dr. Anjali Verma", "timestamp": fixed_now, "expires": fixed_now + 300_000})
    event = container.token_verifier.verify(forged, student, fixed_now + 1000)
    assert event.outcome == CheckInOutcome.MALFORMED


def test_presented_before_issuance_is_malformed(container, teacher, student, fixed_now):
    token = container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    event = container.token_verifier.verify(token.to_payload(), student, fixed_now - 1)
    assert event.outcome == CheckInOutcome.MALFORMED


def test_faculty_presenting_token_is_subject_mismatch(container, teacher, fixed_now):
    token = container.token_issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    event = container.token_verifier.verify(token.to_payload(), teacher, fixed_now + 1)
    assert event.outcome == CheckInOutcome.SUBJECT_MISMATCH


def test_expired_ref_is_pruned_but_still_reported_expired(container, teacher, student, fixed_now):
    issuer = container.token_issuer
    other = container.identities_repo.get_by_username("teacher2")

    first = issuer.issue_token("CS101", teacher, now_ms=fixed_now)
    still_live = issuer.issue_token("CS101", other, now_ms=fixed_now + 200_000)
    issuer.issue_token("CS101", teacher, now_ms=fixed_now + 400_000)

    assert issuer.standing_of(first.to_qr_payload()) == TokenStanding.UNKNOWN
    assert issuer.standing_of(still_live.to_qr_payload()) == TokenStanding.CURRENT

    event = container.token_verifier.verify(first.to_payload(), student, fixed_now + 400_001)
    assert event.outcome == CheckInOutcome.EXPIRED
