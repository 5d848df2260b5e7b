"""Invoice Line Item Domain Entity

Tracks individual billed services within an invoice.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, Numeric, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow


class InvoiceLineItem(BaseModel, table=True):
    """
    Invoice Line Item - Billed service within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - quantity > 0, rate >= 0
    - amount = quantity * rate, rounded to cents
    - description and rate are snapshots of the service code at creation
    - Mutable only while the invoice is DRAFT
    """

    __tablename__ = "invoice_line_items"
    __table_args__ = (
        Index('ix_invoice_line_items_invoice_id', 'invoice_id'),
        Index('ix_invoice_line_items_service_code_id', 'service_code_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique line item identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    service_code_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("service_codes.id"), nullable=False),
        description="Foreign key to ServiceCode"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description (defaults to the service code description)"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Billed units"
    )

    rate: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Price per unit"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="quantity * rate"
    )

    date_of_service: date = Field(sa_column=Column(Date, nullable=False))

    bill_to_insurance: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Whether this item is eligible for insurance claims"
    )

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=utcnow, description="Line item creation timestamp")

    updated_at: datetime = Field(default_factory=utcnow)
