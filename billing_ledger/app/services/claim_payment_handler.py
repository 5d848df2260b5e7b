"""ClaimPaid handler

Turns a paid insurance claim into an INSURANCE payment on its invoice.
"""

import logging
from billing_ledger.app.repositories.payment_repository import PaymentRepository
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.domain.events import ClaimPaid
from billing_ledger.domain.payment import Payment, PaymentMethod

logger = logging.getLogger(__name__)


class ClaimPaymentHandler:
    """
    Records the payment for a ClaimPaid event

    At most one non-voided payment exists per claim: a repeated event for the
    same claim returns the payment already on file.
    """

    def __init__(self, payment_ledger: PaymentLedger, payment_repo: PaymentRepository):
        self.payment_ledger = payment_ledger
        self.payment_repo = payment_repo

    async def __call__(self, event: ClaimPaid) -> Payment:
        existing = await self.payment_repo.get_by_claim_id(event.claim_id)
        if existing:
            logger.info(f"Claim {event.claim_id} already has payment {existing.id}; skipping")
            return existing

        reference = event.claim_number or f"claim-{event.claim_id}"
        return await self.payment_ledger.apply(
            invoice_id=event.invoice_id,
            amount=event.amount,
            method=PaymentMethod.INSURANCE,
            payment_date=event.payment_date,
            reference_number=reference,
            notes=f"Automatically generated from insurance claim {reference}",
            insurance_claim_id=event.claim_id,
            received_by=event.acting_user,
        )
