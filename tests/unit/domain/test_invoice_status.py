"""Unit tests for invoice status derivation, totals and numbering helpers"""

import pytest
from datetime import date
from decimal import Decimal

from billing_ledger.domain.invoice import (
    InvoiceStatus,
    compute_total,
    derive_status,
    format_invoice_number,
    invoice_number_prefix,
    parse_invoice_number,
)

DUE = date(2025, 3, 31)
BEFORE_DUE = date(2025, 3, 15)
AFTER_DUE = date(2025, 4, 2)


class TestDeriveStatus:
    def test_unpaid_before_due_date_is_sent(self):
        status = derive_status(Decimal("300.00"), Decimal("0.00"), DUE, BEFORE_DUE)

        assert status == InvoiceStatus.SENT

    def test_due_date_itself_is_not_overdue(self):
        status = derive_status(Decimal("300.00"), Decimal("0.00"), DUE, DUE)

        assert status == InvoiceStatus.SENT

    def test_unpaid_after_due_date_is_overdue(self):
        status = derive_status(Decimal("300.00"), Decimal("0.00"), DUE, AFTER_DUE)

        assert status == InvoiceStatus.OVERDUE

    def test_partial_payment_wins_over_overdue(self):
        status = derive_status(Decimal("300.00"), Decimal("50.00"), DUE, AFTER_DUE)

        assert status == InvoiceStatus.PARTIALLY_PAID

    def test_full_payment_is_paid(self):
        status = derive_status(Decimal("300.00"), Decimal("300.00"), DUE, AFTER_DUE)

        assert status == InvoiceStatus.PAID

    def test_zero_total_invoice_is_paid(self):
        status = derive_status(Decimal("0.00"), Decimal("0.00"), DUE, BEFORE_DUE)

        assert status == InvoiceStatus.PAID

    @pytest.mark.parametrize("override", [InvoiceStatus.DRAFT, InvoiceStatus.CANCELLED])
    def test_draft_and_cancelled_overrides_are_absolute(self, override):
        status = derive_status(Decimal("300.00"), Decimal("300.00"), DUE, AFTER_DUE, override)

        assert status == override

    @pytest.mark.parametrize(
        "override", [InvoiceStatus.PENDING_INSURANCE, InvoiceStatus.INSURANCE_DENIED]
    )
    def test_insurance_override_holds_until_paid(self, override):
        assert derive_status(Decimal("300.00"), Decimal("120.00"), DUE, AFTER_DUE, override) == override
        assert derive_status(Decimal("300.00"), Decimal("300.00"), DUE, AFTER_DUE, override) == InvoiceStatus.PAID


class TestComputeTotal:
    def test_total_subtracts_discount_and_adds_tax(self):
        total = compute_total(Decimal("300.00"), Decimal("24.00"), Decimal("30.00"))

        assert total == Decimal("294.00")

    def test_total_is_rounded_to_cents(self):
        total = compute_total(Decimal("100.005"), Decimal("0"), Decimal("0"))

        assert total == Decimal("100.01")


class TestInvoiceNumbers:
    def test_format_pads_sequence_to_five_digits(self):
        assert format_invoice_number(2025, 42) == "INV-2025-00042"

    def test_format_with_custom_prefix(self):
        assert format_invoice_number(2025, 1, prefix="BIL") == "BIL-2025-00001"

    def test_sequence_past_five_digits_is_not_truncated(self):
        assert format_invoice_number(2025, 100000) == "INV-2025-100000"

    def test_year_prefix(self):
        assert invoice_number_prefix(2026) == "INV-2026-"

    def test_parse_round_trips_format(self):
        assert parse_invoice_number("INV-2025-00042") == ("INV", 2025, 42)

    def test_parse_rejects_malformed_number(self):
        with pytest.raises(ValueError):
            parse_invoice_number("INV-2025")
