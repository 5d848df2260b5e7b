import logging
from typing import Optional
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.domain.errors import LedgerError
from billing_ledger.domain.insurance_claim import InsuranceClaim
from .dtos import ClaimResponseDTO
from .workflow import ClaimWorkflow

logger = logging.getLogger(__name__)


class ClaimUseCase:
    """Common plumbing for use cases that act on one existing claim."""

    error_code = "CLAIM_OPERATION_FAILED"
    error_message = "Failed to process insurance claim"

    def __init__(self, uow: UnitOfWork, workflow: ClaimWorkflow):
        self.uow = uow
        self.workflow = workflow
        self.claim_repo = workflow.claim_repo

    async def _respond(self, claim: InsuranceClaim, payment_id: Optional[int] = None) -> ClaimResponseDTO:
        items = await self.claim_repo.get_items(claim.id)
        return ClaimResponseDTO.from_entity(claim, items, payment_id)

    async def _fail(self, claim_id: int, e: Exception) -> Result[ClaimResponseDTO]:
        await self.uow.rollback()
        e = self.uow.conflict_from(e) or e
        if isinstance(e, LedgerError):
            logger.warning(f"{type(self).__name__} on claim {claim_id} rejected: {e.message}")
            return Return.err(e.to_error())
        logger.exception(f"{type(self).__name__} on claim {claim_id} failed")
        return Return.err(Error(code=self.error_code, message=self.error_message, reason=str(e)))
