"""DeleteClaim Use Case"""

from libs.result import Result, Return
from billing_ledger.domain.errors import InvalidStateError
from billing_ledger.domain.insurance_claim import ClaimStatus
from .base import ClaimUseCase


class DeleteClaim(ClaimUseCase):
    """Delete a claim that was never submitted. Submitted claims are closed instead."""

    error_code = "DELETE_CLAIM_FAILED"
    error_message = "Failed to delete insurance claim"

    async def execute(self, claim_id: int) -> Result[bool]:
        try:
            claim = await self.workflow.lock(claim_id)
            if claim.status != ClaimStatus.DRAFT:
                raise InvalidStateError(
                    f"Claim {claim.id} was submitted; close it instead",
                    current_state=claim.status,
                )

            await self.claim_repo.delete(claim)
            await self.uow.commit()
            return Return.ok(True)

        except Exception as e:
            return await self._fail(claim_id, e)
