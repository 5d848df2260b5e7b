"""Unit tests for ApplyPayment and the payment adjustment use cases"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from billing_ledger.app.use_cases.payments import (
    ApplyPayment,
    ApplyPaymentCommandDTO,
    RemovePayment,
    VoidPayment,
    VoidPaymentCommandDTO,
)
from billing_ledger.domain.errors import ConcurrencyError, OverpaymentError
from billing_ledger.domain.invoice import InvoiceStatus
from billing_ledger.domain.payment import PaymentMethod

TODAY = date(2025, 3, 15)


@pytest.fixture
def mock_payment_ledger():
    return MagicMock()


@pytest.fixture
def mock_invoice_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestApplyPaymentUseCase:
    async def test_success_returns_payment_and_balance(
        self, mock_uow, mock_payment_ledger, mock_invoice_repo, make_invoice, make_payment
    ):
        """
        Given: A sent invoice of 300.00
        When: A card payment of 100.00 is recorded
        Then: The payment and the new balance of 200.00 are returned after commit
        """
        # Arrange
        mock_payment_ledger.apply = AsyncMock(return_value=make_payment())
        mock_invoice_repo.get_by_id = AsyncMock(
            return_value=make_invoice(status=InvoiceStatus.PARTIALLY_PAID, amount_paid=Decimal("100.00"))
        )
        use_case = ApplyPayment(mock_uow, mock_payment_ledger, mock_invoice_repo, today=lambda: TODAY)

        # Act
        result = await use_case.execute(
            ApplyPaymentCommandDTO(
                invoice_id=1,
                amount=Decimal("100.00"),
                method=PaymentMethod.CARD,
                payment_date=TODAY,
                acting_user="staff_1",
            )
        )

        # Assert
        assert result.is_ok()
        assert result.value.payment.payment_id == 10
        assert result.value.invoice.status == "partially_paid"
        assert result.value.invoice.balance_due == Decimal("200.00")
        assert mock_payment_ledger.apply.call_args.kwargs["received_by"] == "staff_1"
        mock_uow.commit.assert_called_once()

    async def test_overpayment_is_rolled_back(self, mock_uow, mock_payment_ledger, mock_invoice_repo):
        mock_payment_ledger.apply = AsyncMock(
            side_effect=OverpaymentError(1, Decimal("300.00"), Decimal("250.00"), Decimal("100.00"))
        )
        use_case = ApplyPayment(mock_uow, mock_payment_ledger, mock_invoice_repo)

        result = await use_case.execute(
            ApplyPaymentCommandDTO(invoice_id=1, amount=Decimal("100.00"), method=PaymentMethod.CASH)
        )

        assert result.is_err()
        assert result.error.code == "OVERPAYMENT"
        assert result.error.details["remaining"] == "50.00"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_unexpected_failure(self, mock_uow, mock_payment_ledger, mock_invoice_repo):
        mock_payment_ledger.apply = AsyncMock(side_effect=RuntimeError("deadlock detected"))
        use_case = ApplyPayment(mock_uow, mock_payment_ledger, mock_invoice_repo)

        result = await use_case.execute(
            ApplyPaymentCommandDTO(invoice_id=1, amount=Decimal("100.00"), method=PaymentMethod.CASH)
        )

        assert result.is_err()
        assert result.error.code == "APPLY_PAYMENT_FAILED"
        assert result.error.category == "internal"

    async def test_lost_race_is_a_concurrency_conflict(self, mock_uow, mock_payment_ledger, mock_invoice_repo):
        """
        Given: The database rejects the write because another transaction holds the lock
        When: ApplyPayment runs
        Then: The caller gets a retryable CONCURRENCY_CONFLICT instead of a generic failure
        """
        locked = RuntimeError("database is locked")
        mock_payment_ledger.apply = AsyncMock(side_effect=locked)
        mock_uow.conflict_from = MagicMock(
            return_value=ConcurrencyError("Transaction lost a race with a concurrent writer")
        )
        use_case = ApplyPayment(mock_uow, mock_payment_ledger, mock_invoice_repo)

        result = await use_case.execute(
            ApplyPaymentCommandDTO(invoice_id=1, amount=Decimal("100.00"), method=PaymentMethod.CASH)
        )

        assert result.is_err()
        assert result.error.code == "CONCURRENCY_CONFLICT"
        assert result.error.category == "concurrency"
        mock_uow.conflict_from.assert_called_once_with(locked)
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestPaymentAdjustmentUseCases:
    async def test_remove_returns_balance_only(self, mock_uow, mock_payment_ledger, mock_invoice_repo, make_invoice):
        invoice = make_invoice()
        mock_payment_ledger.remove = AsyncMock(return_value=invoice)
        mock_invoice_repo.get_by_id = AsyncMock(return_value=invoice)
        use_case = RemovePayment(mock_uow, mock_payment_ledger, mock_invoice_repo, today=lambda: TODAY)

        result = await use_case.execute(10)

        assert result.is_ok()
        assert result.value.payment is None
        assert result.value.invoice.status == "sent"
        mock_uow.commit.assert_called_once()

    async def test_void_passes_reason(
        self, mock_uow, mock_payment_ledger, mock_invoice_repo, make_invoice, make_payment
    ):
        voided = make_payment(void_reason="Bounced check")
        mock_payment_ledger.void = AsyncMock(return_value=voided)
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        use_case = VoidPayment(mock_uow, mock_payment_ledger, mock_invoice_repo, today=lambda: TODAY)

        result = await use_case.execute(
            VoidPaymentCommandDTO(payment_id=10, reason="Bounced check", acting_user="staff_1")
        )

        assert result.is_ok()
        assert result.value.payment.void_reason == "Bounced check"
        mock_payment_ledger.void.assert_called_once_with(10, "Bounced check", "staff_1")

    async def test_void_lost_race_is_a_concurrency_conflict(self, mock_uow, mock_payment_ledger, mock_invoice_repo):
        mock_payment_ledger.void = AsyncMock(side_effect=RuntimeError("could not serialize access"))
        mock_uow.conflict_from = MagicMock(return_value=ConcurrencyError("Row changed by a concurrent writer"))
        use_case = VoidPayment(mock_uow, mock_payment_ledger, mock_invoice_repo)

        result = await use_case.execute(VoidPaymentCommandDTO(payment_id=10, reason="Bounced check"))

        assert result.is_err()
        assert result.error.code == "CONCURRENCY_CONFLICT"
        mock_uow.commit.assert_not_called()
