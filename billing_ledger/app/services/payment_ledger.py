"""Payment Ledger

Applies, edits, removes and voids payments, keeping an invoice's amount_paid
and status consistent with its payment history.

Every method runs inside the caller's transaction and starts by locking the
invoice row (SELECT FOR UPDATE). Two concurrent payments against one invoice
therefore serialize on the lock, and the second one sums a payment set that
already includes the first. Nothing here commits; use cases own the
transaction boundary.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.app.repositories.payment_repository import PaymentRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.errors import (
    InvalidStateError,
    InvoiceNotFoundError,
    OverpaymentError,
    PaymentNotFoundError,
    ValidationError,
)
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from billing_ledger.domain.money import ZERO, money_sum, to_money
from billing_ledger.domain.payment import Payment, PaymentMethod

logger = logging.getLogger(__name__)


class PaymentLedger:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        today: Callable[[], date] = date.today,
    ):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.today = today

    async def lock_invoice(self, invoice_id: int) -> Invoice:
        invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
        if not invoice:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    async def recompute(self, invoice: Invoice) -> Invoice:
        """
        Rewrite amount_paid and status from the current payment set

        The caller must hold the invoice lock. Idempotent: running it twice
        over the same payments writes the same values.
        """
        payments = await self.payment_repo.get_by_invoice_id(invoice.id)
        invoice.amount_paid = money_sum(p.amount for p in payments)
        invoice.status = invoice.current_status(self.today())
        return await self.invoice_repo.update(invoice)

    async def apply(
        self,
        invoice_id: int,
        amount: Decimal,
        method: PaymentMethod,
        payment_date: date,
        reference_number: Optional[str] = None,
        notes: Optional[str] = None,
        insurance_claim_id: Optional[int] = None,
        funding_program_reference: Optional[str] = None,
        received_by: Optional[str] = None,
    ) -> Payment:
        """
        Record a payment against an invoice

        Raises:
            InvoiceNotFoundError: Unknown invoice
            ValidationError: amount <= 0
            InvalidStateError: Invoice is DRAFT or CANCELLED
            OverpaymentError: Payments would exceed the invoice total
        """
        # Step 1: Lock invoice row
        invoice = await self.lock_invoice(invoice_id)

        # Step 2: Validate
        amount = self._validate_amount(amount)
        self._ensure_open(invoice)

        payments = await self.payment_repo.get_by_invoice_id(invoice.id)
        already_paid = money_sum(p.amount for p in payments)
        self._ensure_within_total(invoice, already_paid, amount)

        # Step 3: Insert payment
        payment = await self.payment_repo.create(
            Payment(
                invoice_id=invoice.id,
                amount=amount,
                method=method,
                payment_date=payment_date,
                reference_number=reference_number,
                notes=notes,
                insurance_claim_id=insurance_claim_id,
                funding_program_reference=funding_program_reference,
                received_by=received_by,
            )
        )

        # Step 4: Recompute balance and status
        invoice = await self.recompute(invoice)

        logger.info(
            f"Applied payment {payment.id} of {amount} ({method.value}) to invoice "
            f"{invoice.invoice_number}: paid {invoice.amount_paid}/{invoice.total_amount}, "
            f"status={invoice.status.value}"
        )
        return payment

    async def update(
        self,
        payment_id: int,
        amount: Optional[Decimal] = None,
        payment_date: Optional[date] = None,
        method: Optional[PaymentMethod] = None,
        reference_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        """
        Edit a payment, re-validating the overpayment limit against the other payments
        """
        payment, invoice = await self._lock_payment(payment_id)

        if payment.is_voided:
            raise InvalidStateError(f"Payment {payment_id} is voided", current_state="voided")
        if invoice.is_cancelled:
            raise InvalidStateError(
                f"Invoice {invoice.invoice_number} is cancelled",
                current_state=InvoiceStatus.CANCELLED,
            )

        if amount is not None:
            amount = self._validate_amount(amount)
            payments = await self.payment_repo.get_by_invoice_id(invoice.id)
            others = money_sum(p.amount for p in payments if p.id != payment.id)
            self._ensure_within_total(invoice, others, amount)
            payment.amount = amount

        if payment_date is not None:
            payment.payment_date = payment_date
        if method is not None:
            payment.method = method
        if reference_number is not None:
            payment.reference_number = reference_number
        if notes is not None:
            payment.notes = notes

        payment = await self.payment_repo.update(payment)
        await self.recompute(invoice)

        logger.info(f"Updated payment {payment.id} on invoice {invoice.invoice_number}")
        return payment

    async def remove(self, payment_id: int) -> Invoice:
        """
        Delete a payment and recompute the invoice

        This is the one path that can move a PAID invoice back to
        PARTIALLY_PAID, SENT or OVERDUE.
        """
        payment, invoice = await self._lock_payment(payment_id)

        if invoice.is_cancelled:
            raise InvalidStateError(
                f"Invoice {invoice.invoice_number} is cancelled; void the payment instead",
                current_state=InvoiceStatus.CANCELLED,
            )

        await self.payment_repo.delete(payment)
        invoice = await self.recompute(invoice)

        logger.info(
            f"Removed payment {payment_id} from invoice {invoice.invoice_number}: "
            f"status={invoice.status.value}"
        )
        return invoice

    async def void(self, payment_id: int, reason: str, acting_user: Optional[str] = None) -> Payment:
        """Mark a payment voided; the row stays for audit and leaves every sum."""
        payment, invoice = await self._lock_payment(payment_id)

        if payment.is_voided:
            raise InvalidStateError(f"Payment {payment_id} is already voided", current_state="voided")
        if not reason or not reason.strip():
            raise ValidationError("A void reason is required", field="reason")

        payment.voided_at = utcnow()
        payment.void_reason = reason
        payment = await self.payment_repo.update(payment)
        await self.recompute(invoice)

        logger.info(f"Voided payment {payment_id} on invoice {invoice.invoice_number} by {acting_user}")
        return payment

    async def _lock_payment(self, payment_id: int):
        payment = await self.payment_repo.get_by_id(payment_id)
        if not payment:
            raise PaymentNotFoundError(payment_id)
        invoice = await self.lock_invoice(payment.invoice_id)
        # Re-read under the invoice lock; a concurrent void or delete may have won
        payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
        if not payment:
            raise PaymentNotFoundError(payment_id)
        return payment, invoice

    @staticmethod
    def _validate_amount(amount: Decimal) -> Decimal:
        amount = to_money(amount)
        if amount <= ZERO:
            raise ValidationError("Payment amount must be greater than 0", field="amount", amount=amount)
        return amount

    @staticmethod
    def _ensure_open(invoice: Invoice) -> None:
        if invoice.is_draft or invoice.is_cancelled:
            raise InvalidStateError(
                f"Cannot record payments on a {invoice.status_override.value} invoice",
                current_state=invoice.status_override,
                invoice_id=invoice.id,
            )

    @staticmethod
    def _ensure_within_total(invoice: Invoice, already_paid: Decimal, amount: Decimal) -> None:
        total = to_money(invoice.total_amount)
        if already_paid + amount > total:
            raise OverpaymentError(invoice.id, total, already_paid, amount)
