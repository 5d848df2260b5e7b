"""Insurance Claim API Routes

Claims move DRAFT -> SUBMITTED -> payer response -> PAID/CLOSED. A claim
paid with auto_generate_payment records an INSURANCE payment on its
invoice in the same transaction.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from billing_ledger.api.error import ClientError, build_dto
from billing_ledger.api.schemas.claim_request import (
    ClaimActionRequestSchema,
    ClaimPaymentRequestSchema,
    ClaimResponseRequestSchema,
    CreateClaimRequestSchema,
    SubmitClaimRequestSchema,
    UpdateClaimRequestSchema,
)
from billing_ledger.adapter.repositories import (
    SqlAlchemyInsuranceClaimRepository,
    SqlAlchemyInsuranceProviderRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
)
from billing_ledger.adapter.services import SqlAlchemyUnitOfWork
from billing_ledger.app.use_cases.claims import (
    AppealClaim,
    ClaimActionCommandDTO,
    ClaimResponseDTO,
    CloseClaim,
    CreateClaim,
    CreateClaimCommandDTO,
    DeleteClaim,
    GetClaim,
    ListClaims,
    ListClaimsQueryDTO,
    ListClaimsResponseDTO,
    RecordClaimPayment,
    RecordClaimPaymentCommandDTO,
    RecordClaimResponse,
    RecordClaimResponseCommandDTO,
    SubmitClaim,
    SubmitClaimCommandDTO,
    UpdateClaim,
    UpdateClaimCommandDTO,
)
from billing_ledger.depends import build_claim_workflow, get_acting_user, get_session
from billing_ledger.domain.insurance_claim import ClaimStatus

router = APIRouter(prefix="/billing/claims", tags=["Insurance Claims"])


@router.post("", response_model=ClaimResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_claim(
    request: CreateClaimRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """
    Draft a claim against an invoice.

    Without `line_item_ids` every bill-to-insurance line item joins the claim;
    `claimed_amount` defaults to their total.
    """
    use_case = CreateClaim(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyInsuranceClaimRepository(session),
    )
    command = build_dto(CreateClaimCommandDTO, acting_user=acting_user, **request.model_dump())
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("", response_model=ListClaimsResponseDTO)
async def list_claims(
    invoice_id: Optional[int] = Query(default=None),
    insurance_provider_id: Optional[int] = Query(default=None),
    status_filter: Optional[ClaimStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    session: AsyncSession = Depends(get_session),
):
    query = build_dto(
        ListClaimsQueryDTO,
        invoice_id=invoice_id,
        insurance_provider_id=insurance_provider_id,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    result = await ListClaims(SqlAlchemyInsuranceClaimRepository(session)).execute(query)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.get("/{claim_id}", response_model=ClaimResponseDTO)
async def get_claim(claim_id: int, session: AsyncSession = Depends(get_session)):
    result = await GetClaim(SqlAlchemyInsuranceClaimRepository(session)).execute(claim_id)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.patch("/{claim_id}", response_model=ClaimResponseDTO)
async def update_claim(
    claim_id: int,
    request: UpdateClaimRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = UpdateClaim(
        SqlAlchemyUnitOfWork(session),
        build_claim_workflow(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    command = build_dto(
        UpdateClaimCommandDTO,
        claim_id=claim_id,
        acting_user=acting_user,
        **request.model_dump(exclude_unset=True),
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{claim_id}/submit", response_model=ClaimResponseDTO)
async def submit_claim(
    claim_id: int,
    request: SubmitClaimRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """Submit a draft claim; its invoice shows PENDING_INSURANCE until the claim settles."""
    use_case = SubmitClaim(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    command = SubmitClaimCommandDTO(claim_id=claim_id, acting_user=acting_user, **request.model_dump())
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{claim_id}/response", response_model=ClaimResponseDTO)
async def record_claim_response(
    claim_id: int,
    request: ClaimResponseRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    """
    Record the payer's response.

    An approval that already includes `paid_amount` is recorded as paid and,
    when the claim generates payments, `payment_id` names the new payment.
    """
    use_case = RecordClaimResponse(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    command = build_dto(
        RecordClaimResponseCommandDTO,
        claim_id=claim_id,
        acting_user=acting_user,
        **request.model_dump(),
    )
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{claim_id}/payment", response_model=ClaimResponseDTO)
async def record_claim_payment(
    claim_id: int,
    request: ClaimPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = RecordClaimPayment(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    command = RecordClaimPaymentCommandDTO(claim_id=claim_id, acting_user=acting_user, **request.model_dump())
    result = await use_case.execute(command)
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{claim_id}/appeal", response_model=ClaimResponseDTO)
async def appeal_claim(
    claim_id: int,
    request: ClaimActionRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = AppealClaim(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    result = await use_case.execute(
        ClaimActionCommandDTO(claim_id=claim_id, notes=request.notes, acting_user=acting_user)
    )
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post("/{claim_id}/close", response_model=ClaimResponseDTO)
async def close_claim(
    claim_id: int,
    request: ClaimActionRequestSchema,
    session: AsyncSession = Depends(get_session),
    acting_user: Optional[str] = Depends(get_acting_user),
):
    use_case = CloseClaim(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    result = await use_case.execute(
        ClaimActionCommandDTO(claim_id=claim_id, notes=request.notes, acting_user=acting_user)
    )
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_claim(claim_id: int, session: AsyncSession = Depends(get_session)):
    """Delete a draft claim."""
    use_case = DeleteClaim(SqlAlchemyUnitOfWork(session), build_claim_workflow(session))
    result = await use_case.execute(claim_id)
    if result.is_err():
        raise ClientError(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
