"""Payment API Routes

Payments are recorded against an invoice; edits, removal and voiding
address the payment directly. Every response carries the invoice's new
balance.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from billing_ledger.api.error import ClientError, build_dto
from billing_ledger.api.schemas.payment_request import (
    ApplyPaymentRequestSchema,
    UpdatePaymentRequestSchema,
    VoidPaymentRequestSchema,
)
from billing_ledger.adapter.repositories import SqlAlchemyInvoiceRepository, SqlAlchemyPaymentRepository
from billing_ledger.adapter.services import SqlAlchemyUnitOfWork
from billing_ledger.app.use_cases.payments import (
    ApplyPayment,
    ApplyPaymentCommandDTO,
    GetPayment,
    ListPayments,
    ListPaymentsQueryDTO,
    ListPaymentsResponseDTO,
    PaymentResponseDTO,
    PaymentResultDTO,
    RemovePayment,
    UpdatePayment,
    UpdatePaymentCommandDTO,
    VoidPayment,
    VoidPaymentCommandDTO,
)
from billing_ledger.depends import build_payment_ledger, get_acting_user, get_session
from billing_ledger.domain.payment import PaymentMethod

router = APIRouter(prefix="/billing", tags=["Payments"])


@router.post(
    "/invoices/{invoice_id}/payments",
    response_model=PaymentResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Payment exceeds the outstanding balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "OVERPAYMENT",
                            "message": "Payment of 60.00 exceeds invoice total: 50.00 already paid of 100.00",
                        }
                    }
                }
            },
        },
        422: {"description": "Validation error"},
    },
)
async def apply_payment(
    invoice_id: int,
    request: ApplyPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """
    Record a payment against an invoice.

    The invoice row is locked for the duration, so concurrent payments can
    never together exceed the invoice total.
    """
    use_case = ApplyPayment(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceRepository(session),
    )
    command = build_dto(
        ApplyPaymentCommandDTO,
        invoice_id=invoice_id,
        acting_user=acting_user,
        **request.model_dump(),
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/payments", response_model=ListPaymentsResponseDTO)
async def list_payments(
    invoice_id: Optional[int] = Query(default=None),
    client_id: Optional[str] = Query(default=None),
    method: Optional[PaymentMethod] = Query(default=None),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    include_voided: bool = Query(default=False),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    session: AsyncSession = Depends(get_session),
):
    query = build_dto(
        ListPaymentsQueryDTO,
        invoice_id=invoice_id,
        client_id=client_id,
        method=method,
        date_from=date_from,
        date_to=date_to,
        include_voided=include_voided,
        limit=limit,
        offset=offset,
    )
    result = await ListPayments(SqlAlchemyPaymentRepository(session)).execute(query)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/payments/{payment_id}", response_model=PaymentResponseDTO)
async def get_payment(payment_id: int, session: AsyncSession = Depends(get_session)):
    result = await GetPayment(SqlAlchemyPaymentRepository(session)).execute(payment_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.patch("/payments/{payment_id}", response_model=PaymentResultDTO)
async def update_payment(
    payment_id: int,
    request: UpdatePaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """Edit a payment. A larger amount is checked against the invoice total again."""
    use_case = UpdatePayment(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceRepository(session),
    )
    command = build_dto(
        UpdatePaymentCommandDTO,
        payment_id=payment_id,
        acting_user=acting_user,
        **request.model_dump(exclude_unset=True),
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.delete("/payments/{payment_id}", response_model=PaymentResultDTO)
async def remove_payment(payment_id: int, session: AsyncSession = Depends(get_session)):
    """Remove a payment and return the invoice's recomputed balance."""
    use_case = RemovePayment(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceRepository(session),
    )
    result = await use_case.execute(payment_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/payments/{payment_id}/void", response_model=PaymentResultDTO)
async def void_payment(
    payment_id: int,
    request: VoidPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = VoidPayment(
        SqlAlchemyUnitOfWork(session),
        build_payment_ledger(session),
        SqlAlchemyInvoiceRepository(session),
    )
    command = VoidPaymentCommandDTO(payment_id=payment_id, reason=request.reason, acting_user=acting_user)
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value
