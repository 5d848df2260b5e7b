"""Unit tests for the ledger error hierarchy and its Error conversion"""

from datetime import date
from decimal import Decimal

from billing_ledger.api.error import ClientError
from billing_ledger.domain.errors import (
    ConcurrencyError,
    ConflictError,
    DuplicateKeyError,
    InvalidStateError,
    InvoiceNotFoundError,
    InvoiceNumberCollisionError,
    OverpaymentError,
    ReferencedEntityError,
    ValidationError,
)
from billing_ledger.domain.invoice import InvoiceStatus


class TestLedgerErrors:
    def test_overpayment_details_are_json_ready(self):
        error = OverpaymentError(1, Decimal("300.00"), Decimal("250.00"), Decimal("100.00"))

        result = error.to_error()

        assert result.code == "OVERPAYMENT"
        assert result.category == "conflict"
        assert result.reason == "OverpaymentError"
        assert result.details == {
            "invoice_id": 1,
            "total_amount": "300.00",
            "already_paid": "250.00",
            "attempted": "100.00",
            "remaining": "50.00",
        }

    def test_overpayment_is_a_conflict(self):
        assert isinstance(OverpaymentError(1, Decimal("1"), Decimal("0"), Decimal("2")), ConflictError)

    def test_invalid_state_serializes_enum_state(self):
        error = InvalidStateError("Invoice is cancelled", current_state=InvoiceStatus.CANCELLED)

        assert error.to_error().details == {"current_state": "cancelled"}

    def test_validation_error_carries_field_and_dates(self):
        error = ValidationError("Bad date", field="due_date", due_date=date(2025, 3, 1))

        result = error.to_error()

        assert result.category == "validation"
        assert result.details == {"field": "due_date", "due_date": "2025-03-01"}

    def test_not_found_message_names_entity(self):
        error = InvoiceNotFoundError(99)

        assert error.message == "Invoice 99 not found"
        assert error.to_error().category == "not_found"
        assert error.to_error().code == "INVOICE_NOT_FOUND"

    def test_duplicate_key(self):
        error = DuplicateKeyError("Service code", "code", "90837")

        assert error.details == {"code": "90837"}
        assert "90837" in error.message

    def test_referenced_entity(self):
        error = ReferencedEntityError("Service code", 4, "line items", 2)

        assert error.to_error().details == {"id": 4, "referenced_by": "line items", "count": 2}

    def test_number_collision_is_retryable_concurrency_error(self):
        error = InvoiceNumberCollisionError("INV-2025-00007")

        assert isinstance(error, ConcurrencyError)
        assert error.to_error().category == "concurrency"

    def test_retryable_flag_comes_from_the_http_layer(self):
        error = InvoiceNumberCollisionError("INV-2025-00007").to_error()
        conflict = ClientError(ConflictError("Invoice is cancelled").to_error())

        body = ClientError(error).to_body()

        assert not hasattr(error, "retryable")
        assert ClientError(error).status_code == 409
        assert body["error"]["retryable"] is True
        assert "retryable" not in conflict.to_body()["error"]
