"""UpdateClaim Use Case"""

from libs.result import Result, Return
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.domain.errors import InvalidStateError, LineItemNotFoundError, ValidationError
from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaimItem
from billing_ledger.domain.money import ZERO, money_sum, to_money
from .base import ClaimUseCase
from .dtos import ClaimResponseDTO, UpdateClaimCommandDTO
from .workflow import ClaimWorkflow


class UpdateClaim(ClaimUseCase):
    """
    Use Case: Edit a claim

    Business Rules:
    1. Membership and claimed_amount change only while the claim is DRAFT
    2. Added items must belong to the claim's invoice and be billed to insurance
    3. A membership change without an explicit claimed_amount resets it to
       the items' total
    4. Header fields (numbers, beneficiary, notes) are editable until CLOSED
    5. auto_generate_payment is frozen once the claim is PAID
    """

    error_code = "UPDATE_CLAIM_FAILED"
    error_message = "Failed to update insurance claim"

    def __init__(self, uow: UnitOfWork, workflow: ClaimWorkflow, line_repo: InvoiceLineRepository):
        super().__init__(uow, workflow)
        self.line_repo = line_repo

    async def execute(self, command: UpdateClaimCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            # Step 1: Lock claim
            claim = await self.workflow.lock(command.claim_id)
            if claim.status == ClaimStatus.CLOSED:
                raise InvalidStateError(f"Claim {claim.id} is closed", current_state=claim.status)

            touches_items = bool(command.add_line_item_ids or command.remove_line_item_ids)
            if (touches_items or command.claimed_amount is not None) and claim.status != ClaimStatus.DRAFT:
                raise InvalidStateError(
                    f"Claim {claim.id} items and amount can only change while draft",
                    current_state=claim.status,
                )
            if command.auto_generate_payment is not None and claim.status == ClaimStatus.PAID:
                raise InvalidStateError(
                    f"Claim {claim.id} is already paid",
                    current_state=claim.status,
                )

            # Step 2: Membership
            if touches_items:
                current = {i.invoice_line_item_id for i in await self.claim_repo.get_items(claim.id)}
                invoice_lines = {
                    line.id: line for line in await self.line_repo.get_by_invoice_id(claim.invoice_id)
                }

                additions = []
                for line_item_id in dict.fromkeys(command.add_line_item_ids):
                    if line_item_id in current:
                        continue
                    line = invoice_lines.get(line_item_id)
                    if line is None:
                        raise LineItemNotFoundError(line_item_id)
                    if not line.bill_to_insurance:
                        raise ValidationError(
                            f"Line item {line_item_id} is not billed to insurance",
                            field="add_line_item_ids",
                            line_item_id=line_item_id,
                        )
                    additions.append(line)

                removals = [i for i in dict.fromkeys(command.remove_line_item_ids) if i in current]
                remaining = (current - set(removals)) | {line.id for line in additions}
                if not remaining:
                    raise ValidationError("A claim needs at least one line item", field="remove_line_item_ids")

                await self.claim_repo.remove_items(claim.id, removals)
                if additions:
                    await self.claim_repo.add_items(
                        [
                            InsuranceClaimItem(
                                claim_id=claim.id,
                                invoice_line_item_id=line.id,
                                claimed_amount=to_money(line.amount),
                            )
                            for line in additions
                        ]
                    )

            # Step 3: Claimed amount
            if touches_items or command.claimed_amount is not None:
                items_total = money_sum(i.claimed_amount for i in await self.claim_repo.get_items(claim.id))
                claimed = items_total if command.claimed_amount is None else to_money(command.claimed_amount)
                if claimed <= ZERO or claimed > items_total:
                    raise ValidationError(
                        "Claimed amount must be positive and not exceed the claimed items' total",
                        field="claimed_amount",
                        claimed_amount=claimed,
                        items_total=items_total,
                    )
                claim.claimed_amount = claimed

            # Step 4: Header fields
            if command.claim_number is not None:
                claim.claim_number = command.claim_number
            if command.policy_number is not None:
                claim.policy_number = command.policy_number
            if command.beneficiary_name is not None:
                claim.beneficiary_name = command.beneficiary_name
            if command.notes is not None:
                claim.notes = command.notes
            if command.auto_generate_payment is not None:
                claim.auto_generate_payment = command.auto_generate_payment

            claim = await self.claim_repo.update(claim)
            response = await self._respond(claim)
            await self.uow.commit()
            return Return.ok(response)

        except Exception as e:
            return await self._fail(command.claim_id, e)
