"""Unit tests for the insurance claim state machine and its effect on invoices"""

import pytest
from decimal import Decimal

from billing_ledger.domain.insurance_claim import (
    CLAIM_TRANSITIONS,
    ClaimStatus,
    InsuranceClaim,
    can_transition,
    invoice_insurance_state,
)
from billing_ledger.domain.invoice import InvoiceStatus


def _claim(status: ClaimStatus) -> InsuranceClaim:
    return InsuranceClaim(
        invoice_id=1,
        insurance_provider_id=1,
        status=status,
        claimed_amount=Decimal("100.00"),
    )


class TestClaimTransitions:
    def test_every_status_has_transition_entry(self):
        assert set(CLAIM_TRANSITIONS) == set(ClaimStatus)

    def test_draft_can_only_be_submitted(self):
        assert CLAIM_TRANSITIONS[ClaimStatus.DRAFT] == {ClaimStatus.SUBMITTED}

    def test_closed_is_terminal(self):
        assert CLAIM_TRANSITIONS[ClaimStatus.CLOSED] == frozenset()

    @pytest.mark.parametrize(
        "current, target",
        [
            (ClaimStatus.SUBMITTED, ClaimStatus.IN_REVIEW),
            (ClaimStatus.SUBMITTED, ClaimStatus.PAID),
            (ClaimStatus.IN_REVIEW, ClaimStatus.DENIED),
            (ClaimStatus.DENIED, ClaimStatus.APPEALED),
            (ClaimStatus.APPEALED, ClaimStatus.APPROVED),
            (ClaimStatus.APPROVED, ClaimStatus.PAID),
            (ClaimStatus.PARTIALLY_APPROVED, ClaimStatus.APPEALED),
            (ClaimStatus.PAID, ClaimStatus.CLOSED),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (ClaimStatus.DRAFT, ClaimStatus.PAID),
            (ClaimStatus.IN_REVIEW, ClaimStatus.IN_REVIEW),
            (ClaimStatus.APPROVED, ClaimStatus.APPEALED),
            (ClaimStatus.PAID, ClaimStatus.APPEALED),
            (ClaimStatus.CLOSED, ClaimStatus.SUBMITTED),
            (ClaimStatus.DENIED, ClaimStatus.PAID),
        ],
    )
    def test_rejected_transitions(self, current, target):
        assert not can_transition(current, target)


class TestInvoiceInsuranceState:
    def test_no_claims_means_no_override(self):
        assert invoice_insurance_state([]) is None

    def test_draft_claims_are_ignored(self):
        assert invoice_insurance_state([_claim(ClaimStatus.DRAFT)]) is None

    def test_settled_claims_release_the_invoice(self):
        claims = [_claim(ClaimStatus.PAID), _claim(ClaimStatus.CLOSED)]

        assert invoice_insurance_state(claims) is None

    def test_open_claim_means_pending_insurance(self):
        claims = [_claim(ClaimStatus.SUBMITTED), _claim(ClaimStatus.PAID)]

        assert invoice_insurance_state(claims) == InvoiceStatus.PENDING_INSURANCE

    def test_all_active_claims_denied(self):
        claims = [_claim(ClaimStatus.DENIED), _claim(ClaimStatus.CLOSED)]

        assert invoice_insurance_state(claims) == InvoiceStatus.INSURANCE_DENIED

    def test_one_denial_among_open_claims_stays_pending(self):
        claims = [_claim(ClaimStatus.DENIED), _claim(ClaimStatus.APPEALED)]

        assert invoice_insurance_state(claims) == InvoiceStatus.PENDING_INSURANCE
