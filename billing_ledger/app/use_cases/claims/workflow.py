"""Claim workflow steps shared by the claim use cases

Holds the transition checks, the invoice insurance-state sync and the
ClaimPaid dispatch so each use case stays a short sequence of steps.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.app.services.event_dispatcher import DomainEventDispatcher
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.domain.errors import ClaimNotFoundError, InvalidStateError, ValidationError
from billing_ledger.domain.events import ClaimPaid
from billing_ledger.domain.insurance_claim import (
    ClaimStatus,
    InsuranceClaim,
    can_transition,
    invoice_insurance_state,
)
from billing_ledger.domain.invoice import Invoice
from billing_ledger.domain.money import ZERO, to_money
from billing_ledger.domain.payment import Payment

logger = logging.getLogger(__name__)


class ClaimWorkflow:
    def __init__(
        self,
        claim_repo: InsuranceClaimRepository,
        payment_ledger: PaymentLedger,
        dispatcher: DomainEventDispatcher,
        today: Callable[[], date] = date.today,
    ):
        self.claim_repo = claim_repo
        self.payment_ledger = payment_ledger
        self.dispatcher = dispatcher
        self.today = today

    async def lock(self, claim_id: int) -> InsuranceClaim:
        """Lock the claim's invoice, then the claim; payments and edits take the invoice first too."""
        claim = await self.claim_repo.get_by_id(claim_id)
        if not claim:
            raise ClaimNotFoundError(claim_id)
        await self.payment_ledger.lock_invoice(claim.invoice_id)
        claim = await self.claim_repo.get_by_id(claim_id, for_update=True)
        if not claim:
            raise ClaimNotFoundError(claim_id)
        return claim

    def transition(self, claim: InsuranceClaim, target: ClaimStatus) -> None:
        if not can_transition(claim.status, target):
            raise InvalidStateError(
                f"Claim {claim.id} cannot move from {claim.status.value} to {target.value}",
                current_state=claim.status,
                target_state=target,
            )
        logger.info(f"Claim {claim.id}: {claim.status.value} -> {target.value}")
        claim.status = target

    async def sync_invoice(self, claim: InsuranceClaim) -> Invoice:
        """
        Bring the invoice's insurance override in line with all of its claims

        Draft and cancelled invoices keep their override.
        """
        invoice = await self.payment_ledger.lock_invoice(claim.invoice_id)
        if not (invoice.is_draft or invoice.is_cancelled):
            claims = await self.claim_repo.get_by_invoice_id(invoice.id)
            invoice.status_override = invoice_insurance_state(claims)
        return await self.payment_ledger.recompute(invoice)

    def payable_limit(self, claim: InsuranceClaim) -> Decimal:
        if claim.approved_amount is not None:
            return to_money(claim.approved_amount)
        return to_money(claim.claimed_amount)

    async def mark_paid(
        self,
        claim: InsuranceClaim,
        paid_amount: Optional[Decimal],
        payment_date: Optional[date],
        acting_user: Optional[str],
    ) -> Optional[Payment]:
        """
        Move the claim to PAID and raise ClaimPaid when payments are automatic

        Returns:
            The generated (or already existing) insurance payment, if any
        """
        paid = to_money(paid_amount)
        if paid <= ZERO:
            raise ValidationError("Paid amount must be greater than 0", field="paid_amount", paid_amount=paid)

        limit = self.payable_limit(claim)
        if paid > limit:
            raise ValidationError(
                "Paid amount exceeds the approved amount",
                field="paid_amount",
                paid_amount=paid,
                approved_amount=limit,
            )

        self.transition(claim, ClaimStatus.PAID)
        claim.paid_amount = paid
        if claim.approved_amount is None:
            claim.approved_amount = paid
        claim.response_date = claim.response_date or payment_date or self.today()
        await self.claim_repo.update(claim)
        await self.sync_invoice(claim)

        if not claim.auto_generate_payment:
            return None

        results = await self.dispatcher.dispatch(
            ClaimPaid(
                claim_id=claim.id,
                invoice_id=claim.invoice_id,
                amount=paid,
                payment_date=payment_date or self.today(),
                claim_number=claim.claim_number,
                acting_user=acting_user,
            )
        )
        return next((r for r in results if isinstance(r, Payment)), None)
