import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from billing_ledger.app.services.claim_payment_handler import ClaimPaymentHandler
from billing_ledger.domain.events import ClaimPaid
from billing_ledger.domain.payment import PaymentMethod


@pytest.fixture
def mock_payment_ledger():
    return MagicMock()


@pytest.fixture
def mock_payment_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestClaimPaymentHandler:
    async def test_records_insurance_payment(self, mock_payment_ledger, mock_payment_repo, make_payment):
        """
        Given: A ClaimPaid event for a claim without payments
        When: The handler runs
        Then: An INSURANCE payment linked to the claim is applied to the invoice
        """
        # Arrange
        mock_payment_repo.get_by_claim_id = AsyncMock(return_value=None)
        created = make_payment(method=PaymentMethod.INSURANCE, insurance_claim_id=5)
        mock_payment_ledger.apply = AsyncMock(return_value=created)
        handler = ClaimPaymentHandler(mock_payment_ledger, mock_payment_repo)
        event = ClaimPaid(
            claim_id=5,
            invoice_id=1,
            amount=Decimal("200.00"),
            payment_date=date(2025, 3, 20),
            claim_number="CLM-7781",
            acting_user="staff_1",
        )

        # Act
        payment = await handler(event)

        # Assert
        assert payment is created
        kwargs = mock_payment_ledger.apply.call_args.kwargs
        assert kwargs["invoice_id"] == 1
        assert kwargs["amount"] == Decimal("200.00")
        assert kwargs["method"] == PaymentMethod.INSURANCE
        assert kwargs["insurance_claim_id"] == 5
        assert kwargs["reference_number"] == "CLM-7781"
        assert kwargs["received_by"] == "staff_1"

    async def test_reference_falls_back_to_claim_id(self, mock_payment_ledger, mock_payment_repo, make_payment):
        mock_payment_repo.get_by_claim_id = AsyncMock(return_value=None)
        mock_payment_ledger.apply = AsyncMock(return_value=make_payment())
        handler = ClaimPaymentHandler(mock_payment_ledger, mock_payment_repo)

        await handler(ClaimPaid(claim_id=9, invoice_id=1, amount=Decimal("10.00"), payment_date=date(2025, 3, 20)))

        assert mock_payment_ledger.apply.call_args.kwargs["reference_number"] == "claim-9"

    async def test_repeated_event_returns_existing_payment(
        self, mock_payment_ledger, mock_payment_repo, make_payment
    ):
        existing = make_payment(insurance_claim_id=5)
        mock_payment_repo.get_by_claim_id = AsyncMock(return_value=existing)
        mock_payment_ledger.apply = AsyncMock()
        handler = ClaimPaymentHandler(mock_payment_ledger, mock_payment_repo)

        payment = await handler(
            ClaimPaid(claim_id=5, invoice_id=1, amount=Decimal("200.00"), payment_date=date(2025, 3, 20))
        )

        assert payment is existing
        mock_payment_ledger.apply.assert_not_called()
