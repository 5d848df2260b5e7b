"""Insurance Provider Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow


class InsuranceProvider(BaseModel, table=True):
    """
    InsuranceProvider - Payer that insurance claims are filed against

    Domain Rules:
    - name is unique
    - Cannot be deleted while invoices or claims reference it
    """

    __tablename__ = "insurance_providers"
    __table_args__ = (
        Index('ix_insurance_providers_name', 'name', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    name: str = Field(sa_column=Column(String(255), nullable=False))

    payer_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Payer identifier used for claim submission"
    )

    email: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    phone: Optional[str] = Field(default=None, sa_column=Column(String(50), nullable=True))

    website: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    address: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Claim submission instructions"
    )

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    created_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)
