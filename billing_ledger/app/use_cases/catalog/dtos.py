"""Data Transfer Objects for the service catalog and funding source registry"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from billing_ledger.domain.funding_program import FundingProgram
from billing_ledger.domain.insurance_provider import InsuranceProvider
from billing_ledger.domain.service_code import ServiceCode


class ListCatalogQueryDTO(BaseModel):
    active_only: bool = False
    category: Optional[str] = Field(default=None, description="Service codes only")


# Service codes

class CreateServiceCodeCommandDTO(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=255)
    default_rate: Decimal
    billable_unit: str = "session"
    category: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    acting_user: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "code": "90837",
                "description": "Psychotherapy, 60 minutes",
                "default_rate": "150.00",
                "billable_unit": "session",
                "category": "therapy",
            }
        }


class UpdateServiceCodeCommandDTO(BaseModel):
    service_code_id: int
    code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    default_rate: Optional[Decimal] = None
    billable_unit: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class ServiceCodeResponseDTO(BaseModel):
    service_code_id: int
    code: str
    description: str
    default_rate: Decimal
    billable_unit: str
    category: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, service_code: ServiceCode) -> "ServiceCodeResponseDTO":
        return cls(
            service_code_id=service_code.id,
            code=service_code.code,
            description=service_code.description,
            default_rate=service_code.default_rate,
            billable_unit=service_code.billable_unit,
            category=service_code.category,
            notes=service_code.notes,
            is_active=service_code.is_active,
            created_by=service_code.created_by,
            created_at=service_code.created_at,
            updated_at=service_code.updated_at,
        )


# Insurance providers

class CreateInsuranceProviderCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    payer_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    acting_user: Optional[str] = None


class UpdateInsuranceProviderCommandDTO(BaseModel):
    insurance_provider_id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    payer_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class InsuranceProviderResponseDTO(BaseModel):
    insurance_provider_id: int
    name: str
    payer_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, provider: InsuranceProvider) -> "InsuranceProviderResponseDTO":
        return cls(
            insurance_provider_id=provider.id,
            name=provider.name,
            payer_id=provider.payer_id,
            email=provider.email,
            phone=provider.phone,
            website=provider.website,
            address=provider.address,
            notes=provider.notes,
            is_active=provider.is_active,
            created_by=provider.created_by,
            created_at=provider.created_at,
            updated_at=provider.updated_at,
        )


# Funding programs

class CreateFundingProgramCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    program_type: Optional[str] = None
    description: Optional[str] = None
    max_amount: Optional[Decimal] = None
    contact_email: Optional[str] = None
    eligibility_requirements: Optional[str] = None
    is_active: bool = True
    acting_user: Optional[str] = None


class UpdateFundingProgramCommandDTO(BaseModel):
    funding_program_id: int
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    program_type: Optional[str] = None
    description: Optional[str] = None
    max_amount: Optional[Decimal] = None
    contact_email: Optional[str] = None
    eligibility_requirements: Optional[str] = None
    is_active: Optional[bool] = None


class FundingProgramResponseDTO(BaseModel):
    funding_program_id: int
    name: str
    program_type: Optional[str] = None
    description: Optional[str] = None
    max_amount: Optional[Decimal] = None
    contact_email: Optional[str] = None
    eligibility_requirements: Optional[str] = None
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, program: FundingProgram) -> "FundingProgramResponseDTO":
        return cls(
            funding_program_id=program.id,
            name=program.name,
            program_type=program.program_type,
            description=program.description,
            max_amount=program.max_amount,
            contact_email=program.contact_email,
            eligibility_requirements=program.eligibility_requirements,
            is_active=program.is_active,
            created_by=program.created_by,
            created_at=program.created_at,
            updated_at=program.updated_at,
        )


class ListServiceCodesResponseDTO(BaseModel):
    service_codes: List[ServiceCodeResponseDTO]
    count: int


class ListInsuranceProvidersResponseDTO(BaseModel):
    insurance_providers: List[InsuranceProviderResponseDTO]
    count: int


class ListFundingProgramsResponseDTO(BaseModel):
    funding_programs: List[FundingProgramResponseDTO]
    count: int
