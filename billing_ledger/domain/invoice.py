"""Invoice Domain Entity

Tracks client invoices, their running balance and lifecycle status.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Numeric, String, Date, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow
from billing_ledger.domain.money import ZERO, to_money

INVOICE_NUMBER_PREFIX = "INV"
INVOICE_SEQUENCE_WIDTH = 5


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    PENDING_INSURANCE = "pending_insurance"
    INSURANCE_DENIED = "insurance_denied"


# Statuses that can be stored as an override and survive recomputation
OVERRIDE_STATUSES = frozenset({
    InvoiceStatus.DRAFT,
    InvoiceStatus.CANCELLED,
    InvoiceStatus.PENDING_INSURANCE,
    InvoiceStatus.INSURANCE_DENIED,
})

INSURANCE_STATUSES = frozenset({
    InvoiceStatus.PENDING_INSURANCE,
    InvoiceStatus.INSURANCE_DENIED,
})


def derive_status(
    total_amount: Decimal,
    paid_amount: Decimal,
    due_date: date,
    today: date,
    override: Optional[InvoiceStatus] = None,
) -> InvoiceStatus:
    """
    Single source of truth for invoice status.

    Pure function of the invoice's money, due date, the current date and the
    stored override. DRAFT and CANCELLED overrides are absolute. Insurance
    overrides hold until the invoice is fully paid.

    Args:
        total_amount: Invoice total
        paid_amount: Sum of non-voided payments
        due_date: Invoice due date
        today: Date the status is evaluated at
        override: Stored manual/insurance override, if any

    Returns:
        Derived InvoiceStatus
    """
    if override in (InvoiceStatus.CANCELLED, InvoiceStatus.DRAFT):
        return override

    if paid_amount >= total_amount:
        return InvoiceStatus.PAID

    if override in INSURANCE_STATUSES:
        return override

    if paid_amount > ZERO:
        return InvoiceStatus.PARTIALLY_PAID

    if today > due_date:
        return InvoiceStatus.OVERDUE

    return InvoiceStatus.SENT


def compute_total(subtotal: Decimal, tax_amount: Decimal, discount_amount: Decimal) -> Decimal:
    """total = subtotal - discount + tax"""
    return to_money(to_money(subtotal) - to_money(discount_amount) + to_money(tax_amount))


def format_invoice_number(year: int, sequence: int, prefix: str = INVOICE_NUMBER_PREFIX) -> str:
    return f"{prefix}-{year}-{sequence:0{INVOICE_SEQUENCE_WIDTH}d}"


def invoice_number_prefix(year: int, prefix: str = INVOICE_NUMBER_PREFIX) -> str:
    return f"{prefix}-{year}-"


def parse_invoice_number(invoice_number: str) -> Tuple[str, int, int]:
    """Split 'INV-2025-00042' into ('INV', 2025, 42). Raises ValueError if malformed."""
    prefix, year, sequence = invoice_number.rsplit("-", 2)
    return prefix, int(year), int(sequence)


class Invoice(BaseModel, table=True):
    """
    Invoice - Client invoice and its running balance

    Domain Rules:
    - invoice_number is unique, format INV-<year>-<5-digit-seq>
    - total_amount = subtotal - discount_amount + tax_amount
    - subtotal is the sum of line item amounts
    - amount_paid is the sum of non-voided payments, never set by callers
    - status is derived (see derive_status); status_override holds DRAFT,
      CANCELLED or an insurance state
    - due_date >= issue_date
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_client_id', 'client_id'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_due_date', 'due_date'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-2025-00001)"
    )

    client_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Client identifier owned by the client registry"
    )

    issue_date: date = Field(sa_column=Column(Date, nullable=False))

    due_date: date = Field(sa_column=Column(Date, nullable=False))

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Last derived status"
    )

    status_override: Optional[InvoiceStatus] = Field(
        default=InvoiceStatus.DRAFT,
        description="Stored override consumed by derive_status"
    )

    subtotal: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Sum of line item amounts"
    )

    tax_amount: Decimal = Field(default=ZERO, sa_column=Column(Numeric(15, 2), nullable=False))

    discount_amount: Decimal = Field(default=ZERO, sa_column=Column(Numeric(15, 2), nullable=False))

    total_amount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="subtotal - discount + tax"
    )

    amount_paid: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Sum of non-voided payments (derived)"
    )

    insurance_provider_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("insurance_providers.id"), nullable=True),
    )

    funding_program_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("funding_programs.id"), nullable=True),
    )

    policy_number: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))

    beneficiary_name: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    notification_requested_at: Optional[datetime] = Field(
        default=None,
        description="Set when creation asked for a client notification"
    )

    issued_at: Optional[datetime] = Field(default=None, description="Timestamp when invoice was sent")

    cancelled_at: Optional[datetime] = Field(default=None)

    created_by: Optional[str] = Field(default=None, description="Acting user id")

    created_at: datetime = Field(default_factory=utcnow, description="Invoice creation timestamp")

    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    def current_status(self, today: date) -> InvoiceStatus:
        return derive_status(
            to_money(self.total_amount),
            to_money(self.amount_paid),
            self.due_date,
            today,
            self.status_override,
        )

    def apply_totals(self, subtotal: Decimal) -> None:
        self.subtotal = to_money(subtotal)
        self.total_amount = compute_total(self.subtotal, self.tax_amount, self.discount_amount)

    @property
    def is_draft(self) -> bool:
        return self.status_override == InvoiceStatus.DRAFT

    @property
    def is_cancelled(self) -> bool:
        return self.status_override == InvoiceStatus.CANCELLED

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "invoice_number": "INV-2025-00001",
                "client_id": "client_42",
                "issue_date": "2025-03-01",
                "due_date": "2025-03-31",
                "status": "sent",
                "subtotal": "300.00",
                "tax_amount": "0.00",
                "discount_amount": "0.00",
                "total_amount": "300.00",
                "amount_paid": "0.00",
            }
        }
