"""Claim status use cases

SubmitClaim, RecordClaimResponse, RecordClaimPayment, AppealClaim and
CloseClaim. Each one moves the claim along CLAIM_TRANSITIONS and then
re-syncs the invoice's insurance state.
"""

from libs.result import Result, Return
from billing_ledger.domain.errors import InvalidStateError, ValidationError
from billing_ledger.domain.insurance_claim import AWAITING_RESPONSE, ClaimStatus
from billing_ledger.domain.money import ZERO, money_sum, to_money
from .base import ClaimUseCase
from .dtos import (
    ClaimActionCommandDTO,
    ClaimResponseDTO,
    RecordClaimPaymentCommandDTO,
    RecordClaimResponseCommandDTO,
    SubmitClaimCommandDTO,
)

_APPROVALS = (ClaimStatus.APPROVED, ClaimStatus.PARTIALLY_APPROVED)


class SubmitClaim(ClaimUseCase):
    """
    Use Case: Submit a draft claim to the payer

    The claim must have items and its invoice must have been sent. On
    success the invoice shows PENDING_INSURANCE until the claim settles.
    """

    error_code = "SUBMIT_CLAIM_FAILED"
    error_message = "Failed to submit insurance claim"

    async def execute(self, command: SubmitClaimCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            # Step 1: Lock claim and check preconditions
            claim = await self.workflow.lock(command.claim_id)
            self.workflow.transition(claim, ClaimStatus.SUBMITTED)

            items = await self.claim_repo.get_items(claim.id)
            if not items:
                raise ValidationError(f"Claim {claim.id} has no line items", field="line_item_ids")
            items_total = money_sum(item.claimed_amount for item in items)
            if to_money(claim.claimed_amount) > items_total:
                raise ValidationError(
                    "Claimed amount exceeds the claimed items' total",
                    field="claimed_amount",
                    claimed_amount=claim.claimed_amount,
                    items_total=items_total,
                )

            invoice = await self.workflow.payment_ledger.lock_invoice(claim.invoice_id)
            if invoice.is_draft or invoice.is_cancelled:
                raise InvalidStateError(
                    f"Invoice {invoice.invoice_number} must be sent before its claims are submitted",
                    current_state=invoice.status_override,
                )

            # Step 2: Record submission
            claim.submission_date = command.submission_date or self.workflow.today()
            if command.claim_number is not None:
                claim.claim_number = command.claim_number
            claim = await self.claim_repo.update(claim)

            # Step 3: Invoice insurance state
            await self.workflow.sync_invoice(claim)

            response = await self._respond(claim)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)


class RecordClaimResponse(ClaimUseCase):
    """
    Use Case: Record the payer's answer to a claim

    Business Rules:
    1. Only claims awaiting the payer (submitted, in review, appealed) accept a response
    2. APPROVED defaults approved_amount to claimed_amount; PARTIALLY_APPROVED requires it
    3. approved_amount must be > 0 and <= claimed_amount
    4. An approval that already carries paid_amount is recorded as PAID
    5. DENIED stores the denial reason
    """

    error_code = "RECORD_CLAIM_RESPONSE_FAILED"
    error_message = "Failed to record claim response"

    async def execute(self, command: RecordClaimResponseCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            claim = await self.workflow.lock(command.claim_id)
            if claim.status not in AWAITING_RESPONSE:
                raise InvalidStateError(
                    f"Claim {claim.id} is not awaiting a payer response",
                    current_state=claim.status,
                )

            response_date = command.response_date or self.workflow.today()
            if command.response_details is not None:
                claim.response_details = command.response_details

            payment = None
            if command.status in _APPROVALS:
                approved = self._approved_amount(claim.claimed_amount, command)
                self.workflow.transition(claim, command.status)
                claim.approved_amount = approved
                claim.response_date = response_date

                if command.paid_amount is not None and to_money(command.paid_amount) > ZERO:
                    payment = await self.workflow.mark_paid(
                        claim, command.paid_amount, response_date, command.acting_user
                    )
                else:
                    claim = await self.claim_repo.update(claim)
                    await self.workflow.sync_invoice(claim)

            elif command.status == ClaimStatus.PAID:
                claim.response_date = response_date
                payment = await self.workflow.mark_paid(
                    claim, command.paid_amount, response_date, command.acting_user
                )

            else:
                self.workflow.transition(claim, command.status)
                claim.response_date = response_date
                if command.status == ClaimStatus.DENIED:
                    claim.denial_reason = command.denial_reason
                claim = await self.claim_repo.update(claim)
                await self.workflow.sync_invoice(claim)

            response = await self._respond(claim, payment.id if payment else None)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)

    @staticmethod
    def _approved_amount(claimed_amount, command: RecordClaimResponseCommandDTO):
        claimed = to_money(claimed_amount)
        if command.approved_amount is None:
            if command.status == ClaimStatus.PARTIALLY_APPROVED:
                raise ValidationError(
                    "Partial approval requires an approved amount", field="approved_amount"
                )
            return claimed

        approved = to_money(command.approved_amount)
        if approved <= ZERO or approved > claimed:
            raise ValidationError(
                "Approved amount must be positive and not exceed the claimed amount",
                field="approved_amount",
                approved_amount=approved,
                claimed_amount=claimed,
            )
        return approved


class RecordClaimPayment(ClaimUseCase):
    """Record the payer's remittance; generates the INSURANCE payment when enabled."""

    error_code = "RECORD_CLAIM_PAYMENT_FAILED"
    error_message = "Failed to record claim payment"

    async def execute(self, command: RecordClaimPaymentCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            claim = await self.workflow.lock(command.claim_id)
            payment = await self.workflow.mark_paid(
                claim,
                command.paid_amount,
                command.payment_date,
                command.acting_user,
            )
            response = await self._respond(claim, payment.id if payment else None)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)


class AppealClaim(ClaimUseCase):
    """Appeal a denied or partially approved claim; the invoice goes back to PENDING_INSURANCE."""

    error_code = "APPEAL_CLAIM_FAILED"
    error_message = "Failed to appeal insurance claim"

    async def execute(self, command: ClaimActionCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            claim = await self.workflow.lock(command.claim_id)
            self.workflow.transition(claim, ClaimStatus.APPEALED)
            if command.notes is not None:
                claim.notes = command.notes
            claim = await self.claim_repo.update(claim)
            await self.workflow.sync_invoice(claim)

            response = await self._respond(claim)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)


class CloseClaim(ClaimUseCase):
    """Close a claim for good. A closed claim no longer affects the invoice status."""

    error_code = "CLOSE_CLAIM_FAILED"
    error_message = "Failed to close insurance claim"

    async def execute(self, command: ClaimActionCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            claim = await self.workflow.lock(command.claim_id)
            self.workflow.transition(claim, ClaimStatus.CLOSED)
            if command.notes is not None:
                claim.notes = command.notes
            claim = await self.claim_repo.update(claim)
            await self.workflow.sync_invoice(claim)

            response = await self._respond(claim)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)
