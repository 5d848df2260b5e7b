import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaim
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from billing_ledger.domain.payment import Payment, PaymentMethod


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.conflict_from = MagicMock(return_value=None)
    return uow


@pytest.fixture
def make_invoice():
    """Factory for sent invoices; pass status_override=InvoiceStatus.DRAFT for drafts"""

    def _make(**overrides):
        fields = dict(
            id=1,
            invoice_number="INV-2025-00001",
            client_id="client_42",
            issue_date=date(2025, 3, 1),
            due_date=date(2025, 3, 31),
            status=InvoiceStatus.SENT,
            status_override=None,
            subtotal=Decimal("300.00"),
            tax_amount=Decimal("0.00"),
            discount_amount=Decimal("0.00"),
            total_amount=Decimal("300.00"),
            amount_paid=Decimal("0.00"),
            created_at=datetime(2025, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Invoice(**fields)

    return _make


@pytest.fixture
def make_payment():
    def _make(**overrides):
        fields = dict(
            id=10,
            invoice_id=1,
            amount=Decimal("100.00"),
            payment_date=date(2025, 3, 10),
            method=PaymentMethod.CARD,
            created_at=datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Payment(**fields)

    return _make


@pytest.fixture
def make_claim():
    def _make(**overrides):
        fields = dict(
            id=5,
            invoice_id=1,
            insurance_provider_id=3,
            claim_number="CLM-7781",
            status=ClaimStatus.SUBMITTED,
            claimed_amount=Decimal("200.00"),
            auto_generate_payment=True,
            created_at=datetime(2025, 3, 2, 9, 0, 0, tzinfo=timezone.utc),
            updated_at=datetime(2025, 3, 2, 9, 0, 0, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return InsuranceClaim(**fields)

    return _make
