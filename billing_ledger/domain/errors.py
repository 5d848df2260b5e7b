"""Typed exception hierarchy for the billing ledger

Every error carries a machine-readable ``code``, a ``category`` used by the
API layer to pick a status code, and structured ``details`` with the
quantities involved, so callers never parse messages.

    LedgerError
    +-- ValidationError
    +-- NotFoundError
    |   +-- InvoiceNotFoundError, PaymentNotFoundError, ClaimNotFoundError,
    |       ServiceCodeNotFoundError, InsuranceProviderNotFoundError,
    |       FundingProgramNotFoundError, ClientNotFoundError, LineItemNotFoundError
    +-- ConflictError
    |   +-- OverpaymentError
    |   +-- InvalidStateError
    |   +-- DuplicateKeyError
    |   +-- ReferencedEntityError
    +-- ConcurrencyError
        +-- InvoiceNumberCollisionError
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional
from libs.result import Error


class LedgerError(Exception):
    code: str = "LEDGER_ERROR"
    category: str = "internal"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_error(self) -> Error:
        return Error(
            code=self.code,
            message=self.message,
            reason=type(self).__name__,
            category=self.category,
            details={k: _jsonable(v) for k, v in self.details.items()},
        )


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class ValidationError(LedgerError):
    code = "VALIDATION_ERROR"
    category = "validation"

    def __init__(self, message: str, field: Optional[str] = None, **details):
        self.field = field
        if field:
            details["field"] = field
        super().__init__(message, details)


# Not found


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    category = "not_found"
    entity = "Entity"

    def __init__(self, entity_id: Any):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} {entity_id} not found", {"id": entity_id})


class InvoiceNotFoundError(NotFoundError):
    code = "INVOICE_NOT_FOUND"
    entity = "Invoice"


class LineItemNotFoundError(NotFoundError):
    code = "LINE_ITEM_NOT_FOUND"
    entity = "Invoice line item"


class PaymentNotFoundError(NotFoundError):
    code = "PAYMENT_NOT_FOUND"
    entity = "Payment"


class ClaimNotFoundError(NotFoundError):
    code = "CLAIM_NOT_FOUND"
    entity = "Insurance claim"


class ServiceCodeNotFoundError(NotFoundError):
    code = "SERVICE_CODE_NOT_FOUND"
    entity = "Service code"


class InsuranceProviderNotFoundError(NotFoundError):
    code = "INSURANCE_PROVIDER_NOT_FOUND"
    entity = "Insurance provider"


class FundingProgramNotFoundError(NotFoundError):
    code = "FUNDING_PROGRAM_NOT_FOUND"
    entity = "Funding program"


class ClientNotFoundError(NotFoundError):
    code = "CLIENT_NOT_FOUND"
    entity = "Client"


# Conflicts


class ConflictError(LedgerError):
    code = "CONFLICT"
    category = "conflict"


class OverpaymentError(ConflictError):
    """Applying the payment would push amount paid past the invoice total."""

    code = "OVERPAYMENT"

    def __init__(self, invoice_id: int, total_amount: Decimal, already_paid: Decimal, attempted: Decimal):
        self.invoice_id = invoice_id
        self.total_amount = total_amount
        self.already_paid = already_paid
        self.attempted = attempted
        super().__init__(
            f"Payment of {attempted} exceeds invoice total: "
            f"{already_paid} already paid of {total_amount}",
            {
                "invoice_id": invoice_id,
                "total_amount": total_amount,
                "already_paid": already_paid,
                "attempted": attempted,
                "remaining": total_amount - already_paid,
            },
        )


class InvalidStateError(ConflictError):
    code = "INVALID_STATE"

    def __init__(self, message: str, current_state: Any = None, **details):
        self.current_state = current_state
        if current_state is not None:
            details["current_state"] = current_state
        super().__init__(message, details)


class DuplicateKeyError(ConflictError):
    code = "DUPLICATE_KEY"

    def __init__(self, entity: str, key: str, value: Any):
        self.key = key
        self.value = value
        super().__init__(f"{entity} with {key} '{value}' already exists", {key: value})


class ReferencedEntityError(ConflictError):
    code = "ENTITY_REFERENCED"

    def __init__(self, entity: str, entity_id: Any, referenced_by: str, count: int):
        self.entity_id = entity_id
        self.count = count
        super().__init__(
            f"{entity} {entity_id} cannot be changed: referenced by {count} {referenced_by}",
            {"id": entity_id, "referenced_by": referenced_by, "count": count},
        )


# Concurrency


class ConcurrencyError(LedgerError):
    """Transient conflict between concurrent writers; safe to retry."""

    code = "CONCURRENCY_CONFLICT"
    category = "concurrency"


class InvoiceNumberCollisionError(ConcurrencyError):
    code = "INVOICE_NUMBER_COLLISION"

    def __init__(self, invoice_number: str):
        self.invoice_number = invoice_number
        super().__init__(
            f"Invoice number {invoice_number} was taken by a concurrent writer",
            {"invoice_number": invoice_number},
        )
