"""Funding source registry use cases

Insurance providers and funding programs. Names are unique. A provider
referenced by invoices or claims, or a program referenced by invoices,
cannot be deleted; deactivate it instead.
"""

import logging
from libs.result import Result, Return
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.repositories.funding_program_repository import FundingProgramRepository
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.app.repositories.insurance_provider_repository import InsuranceProviderRepository
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.domain.errors import (
    DuplicateKeyError,
    FundingProgramNotFoundError,
    InsuranceProviderNotFoundError,
    ReferencedEntityError,
)
from billing_ledger.domain.funding_program import FundingProgram
from billing_ledger.domain.insurance_provider import InsuranceProvider
from .base import CatalogCommand, non_negative_money
from .dtos import (
    CreateFundingProgramCommandDTO,
    CreateInsuranceProviderCommandDTO,
    FundingProgramResponseDTO,
    InsuranceProviderResponseDTO,
    ListCatalogQueryDTO,
    ListFundingProgramsResponseDTO,
    ListInsuranceProvidersResponseDTO,
    UpdateFundingProgramCommandDTO,
    UpdateInsuranceProviderCommandDTO,
)

logger = logging.getLogger(__name__)

_PROVIDER_FIELDS = ("payer_id", "email", "phone", "website", "address", "notes", "is_active")
_PROGRAM_FIELDS = ("program_type", "description", "contact_email", "eligibility_requirements", "is_active")


def _apply_fields(entity, command, fields) -> None:
    for field in fields:
        value = getattr(command, field)
        if value is not None:
            setattr(entity, field, value)


# Insurance providers

class CreateInsuranceProvider(CatalogCommand):
    error_code = "CREATE_INSURANCE_PROVIDER_FAILED"
    error_message = "Failed to create insurance provider"

    def __init__(self, uow: UnitOfWork, provider_repo: InsuranceProviderRepository):
        super().__init__(uow)
        self.provider_repo = provider_repo

    async def execute(self, command: CreateInsuranceProviderCommandDTO) -> Result[InsuranceProviderResponseDTO]:
        try:
            if await self.provider_repo.get_by_name(command.name):
                raise DuplicateKeyError("Insurance provider", "name", command.name)

            provider = InsuranceProvider(name=command.name, created_by=command.acting_user)
            _apply_fields(provider, command, _PROVIDER_FIELDS)
            provider = await self.provider_repo.create(provider)
            await self.uow.commit()

            logger.info(f"Registered insurance provider '{provider.name}' ({provider.id})")
            return Return.ok(InsuranceProviderResponseDTO.from_entity(provider))

        except Exception as e:
            return await self._fail(command.name, e)


class UpdateInsuranceProvider(CatalogCommand):
    error_code = "UPDATE_INSURANCE_PROVIDER_FAILED"
    error_message = "Failed to update insurance provider"

    def __init__(self, uow: UnitOfWork, provider_repo: InsuranceProviderRepository):
        super().__init__(uow)
        self.provider_repo = provider_repo

    async def execute(self, command: UpdateInsuranceProviderCommandDTO) -> Result[InsuranceProviderResponseDTO]:
        try:
            provider = await self.provider_repo.get_by_id(command.insurance_provider_id)
            if not provider:
                raise InsuranceProviderNotFoundError(command.insurance_provider_id)

            if command.name is not None and command.name != provider.name:
                if await self.provider_repo.get_by_name(command.name):
                    raise DuplicateKeyError("Insurance provider", "name", command.name)
                provider.name = command.name

            _apply_fields(provider, command, _PROVIDER_FIELDS)
            provider = await self.provider_repo.update(provider)
            await self.uow.commit()
            return Return.ok(InsuranceProviderResponseDTO.from_entity(provider))

        except Exception as e:
            return await self._fail(command.insurance_provider_id, e)


class DeleteInsuranceProvider(CatalogCommand):
    error_code = "DELETE_INSURANCE_PROVIDER_FAILED"
    error_message = "Failed to delete insurance provider"

    def __init__(
        self,
        uow: UnitOfWork,
        provider_repo: InsuranceProviderRepository,
        invoice_repo: InvoiceRepository,
        claim_repo: InsuranceClaimRepository,
    ):
        super().__init__(uow)
        self.provider_repo = provider_repo
        self.invoice_repo = invoice_repo
        self.claim_repo = claim_repo

    async def execute(self, insurance_provider_id: int) -> Result[bool]:
        try:
            provider = await self.provider_repo.get_by_id(insurance_provider_id)
            if not provider:
                raise InsuranceProviderNotFoundError(insurance_provider_id)

            invoices = await self.invoice_repo.count_by_insurance_provider(insurance_provider_id)
            if invoices:
                raise ReferencedEntityError("Insurance provider", insurance_provider_id, "invoices", invoices)
            claims = await self.claim_repo.count_by_insurance_provider(insurance_provider_id)
            if claims:
                raise ReferencedEntityError("Insurance provider", insurance_provider_id, "claims", claims)

            await self.provider_repo.delete(provider)
            await self.uow.commit()
            return Return.ok(True)

        except Exception as e:
            return await self._fail(insurance_provider_id, e)


class GetInsuranceProvider:
    def __init__(self, provider_repo: InsuranceProviderRepository):
        self.provider_repo = provider_repo

    async def execute(self, insurance_provider_id: int) -> Result[InsuranceProviderResponseDTO]:
        provider = await self.provider_repo.get_by_id(insurance_provider_id)
        if not provider:
            return Return.err(InsuranceProviderNotFoundError(insurance_provider_id).to_error())
        return Return.ok(InsuranceProviderResponseDTO.from_entity(provider))


class ListInsuranceProviders:
    def __init__(self, provider_repo: InsuranceProviderRepository):
        self.provider_repo = provider_repo

    async def execute(self, query: ListCatalogQueryDTO) -> Result[ListInsuranceProvidersResponseDTO]:
        providers = await self.provider_repo.list(active_only=query.active_only)
        return Return.ok(
            ListInsuranceProvidersResponseDTO(
                insurance_providers=[InsuranceProviderResponseDTO.from_entity(p) for p in providers],
                count=len(providers),
            )
        )


# Funding programs

class CreateFundingProgram(CatalogCommand):
    error_code = "CREATE_FUNDING_PROGRAM_FAILED"
    error_message = "Failed to create funding program"

    def __init__(self, uow: UnitOfWork, program_repo: FundingProgramRepository):
        super().__init__(uow)
        self.program_repo = program_repo

    async def execute(self, command: CreateFundingProgramCommandDTO) -> Result[FundingProgramResponseDTO]:
        try:
            if await self.program_repo.get_by_name(command.name):
                raise DuplicateKeyError("Funding program", "name", command.name)

            program = FundingProgram(
                name=command.name,
                max_amount=non_negative_money(command.max_amount, "max_amount"),
                created_by=command.acting_user,
            )
            _apply_fields(program, command, _PROGRAM_FIELDS)
            program = await self.program_repo.create(program)
            await self.uow.commit()

            logger.info(f"Registered funding program '{program.name}' ({program.id})")
            return Return.ok(FundingProgramResponseDTO.from_entity(program))

        except Exception as e:
            return await self._fail(command.name, e)


class UpdateFundingProgram(CatalogCommand):
    error_code = "UPDATE_FUNDING_PROGRAM_FAILED"
    error_message = "Failed to update funding program"

    def __init__(self, uow: UnitOfWork, program_repo: FundingProgramRepository):
        super().__init__(uow)
        self.program_repo = program_repo

    async def execute(self, command: UpdateFundingProgramCommandDTO) -> Result[FundingProgramResponseDTO]:
        try:
            program = await self.program_repo.get_by_id(command.funding_program_id)
            if not program:
                raise FundingProgramNotFoundError(command.funding_program_id)

            if command.name is not None and command.name != program.name:
                if await self.program_repo.get_by_name(command.name):
                    raise DuplicateKeyError("Funding program", "name", command.name)
                program.name = command.name

            if command.max_amount is not None:
                program.max_amount = non_negative_money(command.max_amount, "max_amount")
            _apply_fields(program, command, _PROGRAM_FIELDS)

            program = await self.program_repo.update(program)
            await self.uow.commit()
            return Return.ok(FundingProgramResponseDTO.from_entity(program))

        except Exception as e:
            return await self._fail(command.funding_program_id, e)


class DeleteFundingProgram(CatalogCommand):
    error_code = "DELETE_FUNDING_PROGRAM_FAILED"
    error_message = "Failed to delete funding program"

    def __init__(self, uow: UnitOfWork, program_repo: FundingProgramRepository, invoice_repo: InvoiceRepository):
        super().__init__(uow)
        self.program_repo = program_repo
        self.invoice_repo = invoice_repo

    async def execute(self, funding_program_id: int) -> Result[bool]:
        try:
            program = await self.program_repo.get_by_id(funding_program_id)
            if not program:
                raise FundingProgramNotFoundError(funding_program_id)

            invoices = await self.invoice_repo.count_by_funding_program(funding_program_id)
            if invoices:
                raise ReferencedEntityError("Funding program", funding_program_id, "invoices", invoices)

            await self.program_repo.delete(program)
            await self.uow.commit()
            return Return.ok(True)

        except Exception as e:
            return await self._fail(funding_program_id, e)


class GetFundingProgram:
    def __init__(self, program_repo: FundingProgramRepository):
        self.program_repo = program_repo

    async def execute(self, funding_program_id: int) -> Result[FundingProgramResponseDTO]:
        program = await self.program_repo.get_by_id(funding_program_id)
        if not program:
            return Return.err(FundingProgramNotFoundError(funding_program_id).to_error())
        return Return.ok(FundingProgramResponseDTO.from_entity(program))


class ListFundingPrograms:
    def __init__(self, program_repo: FundingProgramRepository):
        self.program_repo = program_repo

    async def execute(self, query: ListCatalogQueryDTO) -> Result[ListFundingProgramsResponseDTO]:
        programs = await self.program_repo.list(active_only=query.active_only)
        return Return.ok(
            ListFundingProgramsResponseDTO(
                funding_programs=[FundingProgramResponseDTO.from_entity(p) for p in programs],
                count=len(programs),
            )
        )
