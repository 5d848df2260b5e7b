"""Request schemas for the catalog and funding source registry API"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CreateServiceCodeRequestSchema(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)
    default_rate: Decimal = Field(..., ge=0)
    billable_unit: str = "session"
    category: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


class UpdateServiceCodeRequestSchema(BaseModel):
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    default_rate: Optional[Decimal] = Field(default=None, ge=0)
    billable_unit: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class CreateInsuranceProviderRequestSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    payer_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


class UpdateInsuranceProviderRequestSchema(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    payer_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class CreateFundingProgramRequestSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    program_type: Optional[str] = None
    description: Optional[str] = None
    max_amount: Optional[Decimal] = Field(default=None, ge=0)
    contact_email: Optional[str] = None
    eligibility_requirements: Optional[str] = None
    is_active: bool = True


class UpdateFundingProgramRequestSchema(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    program_type: Optional[str] = None
    description: Optional[str] = None
    max_amount: Optional[Decimal] = Field(default=None, ge=0)
    contact_email: Optional[str] = None
    eligibility_requirements: Optional[str] = None
    is_active: Optional[bool] = None
