"""Service Code Domain Entity

Catalog of billable services with default rates.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, Numeric, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow


class ServiceCode(BaseModel, table=True):
    """
    ServiceCode - Billable service catalog entry

    Domain Rules:
    - code is unique and stable once referenced by line items
    - default_rate >= 0
    - Line items snapshot description and rate, so edits never touch issued invoices
    """

    __tablename__ = "service_codes"
    __table_args__ = (
        Index('ix_service_codes_code', 'code', unique=True),
        Index('ix_service_codes_category', 'category'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique service code identifier (auto-increment)"
    )

    code: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Catalog code (e.g., '90837')"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Service description copied onto new line items"
    )

    default_rate: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Default rate per billable unit"
    )

    billable_unit: str = Field(
        default="session",
        sa_column=Column(String(50), nullable=False),
        description="Billable unit (session, hour, visit, ...)"
    )

    category: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Optional grouping for catalog listings"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Billing guidelines"
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="Inactive codes cannot be used on new line items"
    )

    created_by: Optional[str] = Field(default=None, description="Acting user id")

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)
