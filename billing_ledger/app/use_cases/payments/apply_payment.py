"""ApplyPayment Use Case

Records a payment against an invoice and reconciles its balance and status.
"""

import logging
from datetime import date
from typing import Callable
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.domain.errors import LedgerError
from .dtos import ApplyPaymentCommandDTO, InvoiceBalanceDTO, PaymentResponseDTO, PaymentResultDTO

logger = logging.getLogger(__name__)


class ApplyPayment:
    """
    Use Case: Record a payment

    Business Rules:
    1. amount > 0
    2. Invoice must be sent (not DRAFT) and not CANCELLED
    3. Sum of payments may never exceed the invoice total
    4. amount_paid and status are recomputed under the invoice row lock

    Flow:
    1. Lock invoice, validate, insert payment, recompute (PaymentLedger.apply)
    2. Commit transaction
    3. Return payment and new invoice balance
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_ledger: PaymentLedger,
        invoice_repo: InvoiceRepository,
        today: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.payment_ledger = payment_ledger
        self.invoice_repo = invoice_repo
        self.today = today

    async def execute(self, command: ApplyPaymentCommandDTO) -> Result[PaymentResultDTO]:
        try:
            # Step 1: Apply under lock
            payment = await self.payment_ledger.apply(
                invoice_id=command.invoice_id,
                amount=command.amount,
                method=command.method,
                payment_date=command.payment_date,
                reference_number=command.reference_number,
                notes=command.notes,
                funding_program_reference=command.funding_program_reference,
                received_by=command.acting_user,
            )
            invoice = await self.invoice_repo.get_by_id(payment.invoice_id)

            # Step 2: Commit transaction
            await self.uow.commit()

            # Step 3: Build response
            return Return.ok(
                PaymentResultDTO(
                    payment=PaymentResponseDTO.from_entity(payment),
                    invoice=InvoiceBalanceDTO.from_entity(invoice, self.today()),
                )
            )

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Payment on invoice {command.invoice_id} rejected: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Payment on invoice {command.invoice_id} failed: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Payment on invoice {command.invoice_id} failed")
            return Return.err(
                Error(
                    code="APPLY_PAYMENT_FAILED",
                    message="Failed to apply payment",
                    reason=str(e),
                )
            )
