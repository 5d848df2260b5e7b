"""Service catalog use cases

Line items copy description and rate from their service code, so catalog
edits never change existing invoices. A code that line items reference
can be deactivated but neither renamed nor deleted.
"""

import logging
from libs.result import Result, Return
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.repositories.service_code_repository import ServiceCodeRepository
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.domain.errors import DuplicateKeyError, ReferencedEntityError, ServiceCodeNotFoundError
from billing_ledger.domain.service_code import ServiceCode
from .base import CatalogCommand, non_negative_money
from .dtos import (
    CreateServiceCodeCommandDTO,
    ListCatalogQueryDTO,
    ListServiceCodesResponseDTO,
    ServiceCodeResponseDTO,
    UpdateServiceCodeCommandDTO,
)

logger = logging.getLogger(__name__)


class CreateServiceCode(CatalogCommand):
    error_code = "CREATE_SERVICE_CODE_FAILED"
    error_message = "Failed to create service code"

    def __init__(self, uow: UnitOfWork, service_code_repo: ServiceCodeRepository):
        super().__init__(uow)
        self.service_code_repo = service_code_repo

    async def execute(self, command: CreateServiceCodeCommandDTO) -> Result[ServiceCodeResponseDTO]:
        try:
            if await self.service_code_repo.get_by_code(command.code):
                raise DuplicateKeyError("Service code", "code", command.code)

            service_code = await self.service_code_repo.create(
                ServiceCode(
                    code=command.code,
                    description=command.description,
                    default_rate=non_negative_money(command.default_rate, "default_rate"),
                    billable_unit=command.billable_unit,
                    category=command.category,
                    notes=command.notes,
                    is_active=command.is_active,
                    created_by=command.acting_user,
                )
            )
            await self.uow.commit()

            logger.info(f"Created service code {service_code.code} ({service_code.id})")
            return Return.ok(ServiceCodeResponseDTO.from_entity(service_code))

        except Exception as e:
            return await self._fail(command.code, e)


class UpdateServiceCode(CatalogCommand):
    error_code = "UPDATE_SERVICE_CODE_FAILED"
    error_message = "Failed to update service code"

    def __init__(
        self,
        uow: UnitOfWork,
        service_code_repo: ServiceCodeRepository,
        line_repo: InvoiceLineRepository,
    ):
        super().__init__(uow)
        self.service_code_repo = service_code_repo
        self.line_repo = line_repo

    async def execute(self, command: UpdateServiceCodeCommandDTO) -> Result[ServiceCodeResponseDTO]:
        try:
            service_code = await self.service_code_repo.get_by_id(command.service_code_id)
            if not service_code:
                raise ServiceCodeNotFoundError(command.service_code_id)

            if command.code is not None and command.code != service_code.code:
                references = await self.line_repo.count_by_service_code(service_code.id)
                if references:
                    raise ReferencedEntityError("Service code", service_code.id, "line items", references)
                if await self.service_code_repo.get_by_code(command.code):
                    raise DuplicateKeyError("Service code", "code", command.code)
                service_code.code = command.code

            if command.description is not None:
                service_code.description = command.description
            if command.default_rate is not None:
                service_code.default_rate = non_negative_money(command.default_rate, "default_rate")
            if command.billable_unit is not None:
                service_code.billable_unit = command.billable_unit
            if command.category is not None:
                service_code.category = command.category
            if command.notes is not None:
                service_code.notes = command.notes
            if command.is_active is not None:
                service_code.is_active = command.is_active

            service_code = await self.service_code_repo.update(service_code)
            await self.uow.commit()
            return Return.ok(ServiceCodeResponseDTO.from_entity(service_code))

        except Exception as e:
            return await self._fail(command.service_code_id, e)


class DeleteServiceCode(CatalogCommand):
    error_code = "DELETE_SERVICE_CODE_FAILED"
    error_message = "Failed to delete service code"

    def __init__(
        self,
        uow: UnitOfWork,
        service_code_repo: ServiceCodeRepository,
        line_repo: InvoiceLineRepository,
    ):
        super().__init__(uow)
        self.service_code_repo = service_code_repo
        self.line_repo = line_repo

    async def execute(self, service_code_id: int) -> Result[bool]:
        try:
            service_code = await self.service_code_repo.get_by_id(service_code_id)
            if not service_code:
                raise ServiceCodeNotFoundError(service_code_id)

            references = await self.line_repo.count_by_service_code(service_code_id)
            if references:
                raise ReferencedEntityError("Service code", service_code_id, "line items", references)

            await self.service_code_repo.delete(service_code)
            await self.uow.commit()

            logger.info(f"Deleted service code {service_code.code} ({service_code_id})")
            return Return.ok(True)

        except Exception as e:
            return await self._fail(service_code_id, e)


class GetServiceCode:
    def __init__(self, service_code_repo: ServiceCodeRepository):
        self.service_code_repo = service_code_repo

    async def execute(self, service_code_id: int) -> Result[ServiceCodeResponseDTO]:
        service_code = await self.service_code_repo.get_by_id(service_code_id)
        if not service_code:
            return Return.err(ServiceCodeNotFoundError(service_code_id).to_error())
        return Return.ok(ServiceCodeResponseDTO.from_entity(service_code))


class ListServiceCodes:
    def __init__(self, service_code_repo: ServiceCodeRepository):
        self.service_code_repo = service_code_repo

    async def execute(self, query: ListCatalogQueryDTO) -> Result[ListServiceCodesResponseDTO]:
        codes = await self.service_code_repo.list(active_only=query.active_only, category=query.category)
        return Return.ok(
            ListServiceCodesResponseDTO(
                service_codes=[ServiceCodeResponseDTO.from_entity(c) for c in codes],
                count=len(codes),
            )
        )
