"""Catalog and Funding Source API Routes

Service codes, insurance providers and funding programs. Entities that
invoices, line items or claims reference can be deactivated but not deleted.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from billing_ledger.api.error import ClientError, build_dto
from billing_ledger.api.schemas.catalog_request import (
    CreateFundingProgramRequestSchema,
    CreateInsuranceProviderRequestSchema,
    CreateServiceCodeRequestSchema,
    UpdateFundingProgramRequestSchema,
    UpdateInsuranceProviderRequestSchema,
    UpdateServiceCodeRequestSchema,
)
from billing_ledger.adapter.repositories import (
    SqlAlchemyFundingProgramRepository,
    SqlAlchemyInsuranceClaimRepository,
    SqlAlchemyInsuranceProviderRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyServiceCodeRepository,
)
from billing_ledger.adapter.services import SqlAlchemyUnitOfWork
from billing_ledger.app.use_cases.catalog import (
    CreateFundingProgram,
    CreateFundingProgramCommandDTO,
    CreateInsuranceProvider,
    CreateInsuranceProviderCommandDTO,
    CreateServiceCode,
    CreateServiceCodeCommandDTO,
    DeleteFundingProgram,
    DeleteInsuranceProvider,
    DeleteServiceCode,
    FundingProgramResponseDTO,
    GetFundingProgram,
    GetInsuranceProvider,
    GetServiceCode,
    InsuranceProviderResponseDTO,
    ListCatalogQueryDTO,
    ListFundingPrograms,
    ListFundingProgramsResponseDTO,
    ListInsuranceProviders,
    ListInsuranceProvidersResponseDTO,
    ListServiceCodes,
    ListServiceCodesResponseDTO,
    ServiceCodeResponseDTO,
    UpdateFundingProgram,
    UpdateFundingProgramCommandDTO,
    UpdateInsuranceProvider,
    UpdateInsuranceProviderCommandDTO,
    UpdateServiceCode,
    UpdateServiceCodeCommandDTO,
)
from billing_ledger.depends import get_acting_user, get_session

router = APIRouter(prefix="/billing", tags=["Catalog"])


def _unwrap(result):
    if result.is_err():
        raise ClientError(result.error)
    return result.value


# Service codes

@router.post("/service-codes", response_model=ServiceCodeResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_service_code(
    request: CreateServiceCodeRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = CreateServiceCode(SqlAlchemyUnitOfWork(session), SqlAlchemyServiceCodeRepository(session))
    command = build_dto(CreateServiceCodeCommandDTO, acting_user=acting_user, **request.model_dump())
    return _unwrap(await use_case.execute(command))


@router.get("/service-codes", response_model=ListServiceCodesResponseDTO)
async def list_service_codes(
    active_only: bool = Query(default=False),
    category: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    query = ListCatalogQueryDTO(active_only=active_only, category=category)
    return _unwrap(await ListServiceCodes(SqlAlchemyServiceCodeRepository(session)).execute(query))


@router.get("/service-codes/{service_code_id}", response_model=ServiceCodeResponseDTO)
async def get_service_code(service_code_id: int, session: AsyncSession = Depends(get_session)):
    return _unwrap(await GetServiceCode(SqlAlchemyServiceCodeRepository(session)).execute(service_code_id))


@router.patch("/service-codes/{service_code_id}", response_model=ServiceCodeResponseDTO)
async def update_service_code(
    service_code_id: int,
    request: UpdateServiceCodeRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Edit a service code. Codes used on line items keep their code value."""
    use_case = UpdateServiceCode(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    command = build_dto(
        UpdateServiceCodeCommandDTO,
        service_code_id=service_code_id,
        **request.model_dump(exclude_unset=True),
    )
    return _unwrap(await use_case.execute(command))


@router.delete("/service-codes/{service_code_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_code(service_code_id: int, session: AsyncSession = Depends(get_session)):
    use_case = DeleteServiceCode(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    _unwrap(await use_case.execute(service_code_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Insurance providers

@router.post(
    "/insurance-providers",
    response_model=InsuranceProviderResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_insurance_provider(
    request: CreateInsuranceProviderRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = CreateInsuranceProvider(SqlAlchemyUnitOfWork(session), SqlAlchemyInsuranceProviderRepository(session))
    command = build_dto(CreateInsuranceProviderCommandDTO, acting_user=acting_user, **request.model_dump())
    return _unwrap(await use_case.execute(command))


@router.get("/insurance-providers", response_model=ListInsuranceProvidersResponseDTO)
async def list_insurance_providers(
    active_only: bool = Query(default=False),
    session: AsyncSession = Depends(get_session),
):
    query = ListCatalogQueryDTO(active_only=active_only)
    return _unwrap(await ListInsuranceProviders(SqlAlchemyInsuranceProviderRepository(session)).execute(query))


@router.get("/insurance-providers/{insurance_provider_id}", response_model=InsuranceProviderResponseDTO)
async def get_insurance_provider(insurance_provider_id: int, session: AsyncSession = Depends(get_session)):
    use_case = GetInsuranceProvider(SqlAlchemyInsuranceProviderRepository(session))
    return _unwrap(await use_case.execute(insurance_provider_id))


@router.patch("/insurance-providers/{insurance_provider_id}", response_model=InsuranceProviderResponseDTO)
async def update_insurance_provider(
    insurance_provider_id: int,
    request: UpdateInsuranceProviderRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    use_case = UpdateInsuranceProvider(SqlAlchemyUnitOfWork(session), SqlAlchemyInsuranceProviderRepository(session))
    command = build_dto(
        UpdateInsuranceProviderCommandDTO,
        insurance_provider_id=insurance_provider_id,
        **request.model_dump(exclude_unset=True),
    )
    return _unwrap(await use_case.execute(command))


@router.delete("/insurance-providers/{insurance_provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_insurance_provider(insurance_provider_id: int, session: AsyncSession = Depends(get_session)):
    use_case = DeleteInsuranceProvider(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInsuranceClaimRepository(session),
    )
    _unwrap(await use_case.execute(insurance_provider_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Funding programs

@router.post("/funding-programs", response_model=FundingProgramResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_funding_program(
    request: CreateFundingProgramRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = CreateFundingProgram(SqlAlchemyUnitOfWork(session), SqlAlchemyFundingProgramRepository(session))
    command = build_dto(CreateFundingProgramCommandDTO, acting_user=acting_user, **request.model_dump())
    return _unwrap(await use_case.execute(command))


@router.get("/funding-programs", response_model=ListFundingProgramsResponseDTO)
async def list_funding_programs(
    active_only: bool = Query(default=False),
    session: AsyncSession = Depends(get_session),
):
    query = ListCatalogQueryDTO(active_only=active_only)
    return _unwrap(await ListFundingPrograms(SqlAlchemyFundingProgramRepository(session)).execute(query))


@router.get("/funding-programs/{funding_program_id}", response_model=FundingProgramResponseDTO)
async def get_funding_program(funding_program_id: int, session: AsyncSession = Depends(get_session)):
    return _unwrap(await GetFundingProgram(SqlAlchemyFundingProgramRepository(session)).execute(funding_program_id))


@router.patch("/funding-programs/{funding_program_id}", response_model=FundingProgramResponseDTO)
async def update_funding_program(
    funding_program_id: int,
    request: UpdateFundingProgramRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    use_case = UpdateFundingProgram(SqlAlchemyUnitOfWork(session), SqlAlchemyFundingProgramRepository(session))
    command = build_dto(
        UpdateFundingProgramCommandDTO,
        funding_program_id=funding_program_id,
        **request.model_dump(exclude_unset=True),
    )
    return _unwrap(await use_case.execute(command))


@router.delete("/funding-programs/{funding_program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_funding_program(funding_program_id: int, session: AsyncSession = Depends(get_session)):
    use_case = DeleteFundingProgram(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyFundingProgramRepository(session),
        SqlAlchemyInvoiceRepository(session),
    )
    _unwrap(await use_case.execute(funding_program_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
