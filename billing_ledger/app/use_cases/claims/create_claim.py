"""CreateClaim Use Case"""

import logging
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.app.repositories.insurance_provider_repository import InsuranceProviderRepository
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.domain.errors import (
    InsuranceProviderNotFoundError,
    InvalidStateError,
    InvoiceNotFoundError,
    LedgerError,
    LineItemNotFoundError,
    ValidationError,
)
from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaim, InsuranceClaimItem
from billing_ledger.domain.invoice import InvoiceStatus
from billing_ledger.domain.money import ZERO, money_sum, to_money
from .dtos import ClaimResponseDTO, CreateClaimCommandDTO

logger = logging.getLogger(__name__)


class CreateClaim:
    """
    Use Case: Draft an insurance claim

    Business Rules:
    1. Invoice exists and is not cancelled; provider exists
    2. Items are the given ids (owned by the invoice and billed to insurance)
       or else every bill-to-insurance item of the invoice
    3. A claim without items is rejected
    4. claimed_amount defaults to the items' total; an explicit value must be
       > 0 and must not exceed it
    5. Status DRAFT
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_repo: InvoiceLineRepository,
        provider_repo: InsuranceProviderRepository,
        claim_repo: InsuranceClaimRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_repo = line_repo
        self.provider_repo = provider_repo
        self.claim_repo = claim_repo

    async def execute(self, command: CreateClaimCommandDTO) -> Result[ClaimResponseDTO]:
        try:
            # Step 1: Invoice (locked, so line edits wait) and provider
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not invoice:
                raise InvoiceNotFoundError(command.invoice_id)
            if invoice.is_cancelled:
                raise InvalidStateError(
                    f"Invoice {invoice.invoice_number} is cancelled",
                    current_state=InvoiceStatus.CANCELLED,
                )

            if not await self.provider_repo.get_by_id(command.insurance_provider_id):
                raise InsuranceProviderNotFoundError(command.insurance_provider_id)

            # Step 2: Select line items
            invoice_lines = {line.id: line for line in await self.line_repo.get_by_invoice_id(invoice.id)}

            if command.line_item_ids is not None:
                selected = []
                for line_item_id in dict.fromkeys(command.line_item_ids):
                    line = invoice_lines.get(line_item_id)
                    if line is None:
                        raise LineItemNotFoundError(line_item_id)
                    if not line.bill_to_insurance:
                        raise ValidationError(
                            f"Line item {line_item_id} is not billed to insurance",
                            field="line_item_ids",
                            line_item_id=line_item_id,
                        )
                    selected.append(line)
            else:
                selected = [line for line in invoice_lines.values() if line.bill_to_insurance]

            if not selected:
                raise ValidationError("A claim needs at least one line item", field="line_item_ids")

            # Step 3: Claimed amount
            items_total = money_sum(line.amount for line in selected)
            claimed = items_total if command.claimed_amount is None else to_money(command.claimed_amount)
            if claimed <= ZERO or claimed > items_total:
                raise ValidationError(
                    "Claimed amount must be positive and not exceed the claimed items' total",
                    field="claimed_amount",
                    claimed_amount=claimed,
                    items_total=items_total,
                )

            # Step 4: Persist claim and membership
            claim = await self.claim_repo.create(
                InsuranceClaim(
                    invoice_id=invoice.id,
                    insurance_provider_id=command.insurance_provider_id,
                    claim_number=command.claim_number,
                    policy_number=command.policy_number or invoice.policy_number,
                    beneficiary_name=command.beneficiary_name or invoice.beneficiary_name,
                    status=ClaimStatus.DRAFT,
                    claimed_amount=claimed,
                    auto_generate_payment=command.auto_generate_payment,
                    notes=command.notes,
                    created_by=command.acting_user,
                )
            )
            items = await self.claim_repo.add_items(
                [
                    InsuranceClaimItem(
                        claim_id=claim.id,
                        invoice_line_item_id=line.id,
                        claimed_amount=to_money(line.amount),
                    )
                    for line in selected
                ]
            )

            await self.uow.commit()

            logger.info(
                f"Drafted claim {claim.id} on invoice {invoice.invoice_number}: "
                f"{len(items)} items, claimed {claimed}"
            )
            return Return.ok(ClaimResponseDTO.from_entity(claim, items))

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Claim on invoice {command.invoice_id} rejected: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Claim on invoice {command.invoice_id} failed: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Claim on invoice {command.invoice_id} failed")
            return Return.err(
                Error(
                    code="CREATE_CLAIM_FAILED",
                    message="Failed to create insurance claim",
                    reason=str(e),
                )
            )
