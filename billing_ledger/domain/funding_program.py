"""Funding Program Domain Entity"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, Numeric, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow


class FundingProgram(BaseModel, table=True):
    """
    FundingProgram - Government or charitable program that funds services

    Domain Rules:
    - name is unique
    - max_amount, when set, is >= 0
    - Cannot be deleted while invoices reference it
    """

    __tablename__ = "funding_programs"
    __table_args__ = (
        Index('ix_funding_programs_name', 'name', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    name: str = Field(sa_column=Column(String(255), nullable=False))

    program_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Program type (e.g., 'government', 'grant')"
    )

    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    max_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(15, 2), nullable=True),
        description="Maximum annual funding"
    )

    contact_email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    eligibility_requirements: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    created_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)
