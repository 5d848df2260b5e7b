"""Invoice API Routes

FastAPI routes for the invoice aggregate: create, edit, status changes,
deletion and reads.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from billing_ledger.api.error import ClientError, build_dto
from billing_ledger.api.schemas.invoice_request import (
    CreateInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
    UpdateInvoiceStatusRequestSchema,
)
from billing_ledger.adapter.repositories import (
    SqlAlchemyFundingProgramRepository,
    SqlAlchemyInsuranceClaimRepository,
    SqlAlchemyInsuranceProviderRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyServiceCodeRepository,
)
from billing_ledger.adapter.services import SqlAlchemyUnitOfWork
from billing_ledger.app.services import ClientRegistry, NotificationService
from billing_ledger.app.use_cases.invoicing import (
    CancelInvoice,
    CreateInvoice,
    CreateInvoiceCommandDTO,
    DeleteInvoice,
    GetInvoice,
    GetInvoiceByNumber,
    InvoiceResponseDTO,
    ListInvoices,
    ListInvoicesQueryDTO,
    ListInvoicesResponseDTO,
    SendInvoice,
    UpdateInvoice,
    UpdateInvoiceCommandDTO,
    UpdateInvoiceStatus,
    UpdateInvoiceStatusCommandDTO,
)
from billing_ledger.depends import (
    build_payment_ledger,
    get_acting_user,
    get_client_registry,
    get_invoice_sequencer,
    get_notification_service,
    get_session,
)
from billing_ledger.domain.invoice import InvoiceStatus

router = APIRouter(prefix="/billing/invoices", tags=["Invoices"])

_ERROR_EXAMPLE = {
    "application/json": {
        "example": {"error": {"code": "INVOICE_NOT_FOUND", "message": "Invoice 123 not found"}}
    }
}


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Client, service code or funding source not found", "content": _ERROR_EXAMPLE},
        409: {"description": "Invoice number already taken"},
        422: {"description": "Validation error"},
    },
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    client_registry: ClientRegistry = Depends(get_client_registry),
    notification_service: NotificationService = Depends(get_notification_service),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """
    Create a DRAFT invoice with its line items.

    The invoice number is generated as `INV-<issue year>-<5 digits>` unless
    one is supplied. Rates and descriptions default from the service catalog.
    """
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    use_case = CreateInvoice(
        SqlAlchemyUnitOfWork(session),
        invoice_repo,
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyFundingProgramRepository(session),
        client_registry,
        notification_service=notification_service,
        sequencer=get_invoice_sequencer(session),
    )
    command = build_dto(CreateInvoiceCommandDTO, **request.model_dump(), acting_user=acting_user)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=ListInvoicesResponseDTO)
async def list_invoices(
    client_id: Optional[str] = Query(default=None),
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    issue_date_from: Optional[date] = Query(default=None),
    issue_date_to: Optional[date] = Query(default=None),
    min_amount: Optional[Decimal] = Query(default=None),
    max_amount: Optional[Decimal] = Query(default=None),
    insurance_provider_id: Optional[int] = Query(default=None),
    funding_program_id: Optional[int] = Query(default=None),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    session: AsyncSession = Depends(get_session),
):
    """List invoices, newest first. Status filters use the derived status."""
    query = build_dto(
        ListInvoicesQueryDTO,
        client_id=client_id,
        status=status_filter,
        issue_date_from=issue_date_from,
        issue_date_to=issue_date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        insurance_provider_id=insurance_provider_id,
        funding_program_id=funding_program_id,
        limit=limit,
        offset=offset,
    )
    result = await ListInvoices(SqlAlchemyInvoiceRepository(session)).execute(query)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get(
    "/by-number/{invoice_number}", response_model=InvoiceResponseDTO, responses={404: {"content": _ERROR_EXAMPLE}}
)
async def get_invoice_by_number(invoice_number: str, session: AsyncSession = Depends(get_session)):
    use_case = GetInvoiceByNumber(SqlAlchemyInvoiceRepository(session), SqlAlchemyInvoiceLineRepository(session))
    result = await use_case.execute(invoice_number)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO, responses={404: {"content": _ERROR_EXAMPLE}})
async def get_invoice(invoice_id: int, session: AsyncSession = Depends(get_session)):
    use_case = GetInvoice(SqlAlchemyInvoiceRepository(session), SqlAlchemyInvoiceLineRepository(session))
    result = await use_case.execute(invoice_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.patch("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """
    Edit an invoice.

    Line items, issue date, tax and discount only change while the invoice
    is a draft. The total may never drop below the amount already paid.
    """
    use_case = UpdateInvoice(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyFundingProgramRepository(session),
        SqlAlchemyInsuranceClaimRepository(session),
    )
    command = build_dto(
        UpdateInvoiceCommandDTO,
        invoice_id=invoice_id,
        acting_user=acting_user,
        **request.model_dump(exclude_unset=True),
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{invoice_id}/send", response_model=InvoiceResponseDTO)
async def send_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """Issue a draft invoice. Its status is derived from here on."""
    use_case = SendInvoice(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(invoice_id, acting_user)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{invoice_id}/cancel", response_model=InvoiceResponseDTO)
async def cancel_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = CancelInvoice(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(invoice_id, acting_user)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.put("/{invoice_id}/status", response_model=InvoiceResponseDTO)
async def update_invoice_status(
    invoice_id: int,
    request: UpdateInvoiceStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """Set a manual status. Payment and date driven statuses are rejected."""
    use_case = UpdateInvoiceStatus(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    command = UpdateInvoiceStatusCommandDTO(invoice_id=invoice_id, status=request.status, acting_user=acting_user)
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: int, session: AsyncSession = Depends(get_session)):
    """Delete an invoice that has no payments and no submitted claims."""
    use_case = DeleteInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyPaymentRepository(session),
        SqlAlchemyInsuranceClaimRepository(session),
    )
    result = await use_case.execute(invoice_id)
    if result.is_err():
        raise ClientError(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
