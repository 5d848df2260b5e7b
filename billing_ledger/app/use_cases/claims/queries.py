"""Insurance claim read use cases"""

from libs.result import Result, Return
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.domain.errors import ClaimNotFoundError
from .dtos import ClaimResponseDTO, ListClaimsQueryDTO, ListClaimsResponseDTO


class GetClaim:
    def __init__(self, claim_repo: InsuranceClaimRepository):
        self.claim_repo = claim_repo

    async def execute(self, claim_id: int) -> Result[ClaimResponseDTO]:
        claim = await self.claim_repo.get_by_id(claim_id)
        if not claim:
            return Return.err(ClaimNotFoundError(claim_id).to_error())
        items = await self.claim_repo.get_items(claim.id)
        return Return.ok(ClaimResponseDTO.from_entity(claim, items))


class ListClaims:
    """List claims without their item membership; fetch a single claim for that."""

    def __init__(self, claim_repo: InsuranceClaimRepository):
        self.claim_repo = claim_repo

    async def execute(self, query: ListClaimsQueryDTO) -> Result[ListClaimsResponseDTO]:
        claims = await self.claim_repo.list(
            invoice_id=query.invoice_id,
            insurance_provider_id=query.insurance_provider_id,
            status=query.status,
            limit=query.limit,
            offset=query.offset,
        )
        return Return.ok(
            ListClaimsResponseDTO(
                claims=[ClaimResponseDTO.from_entity(c) for c in claims],
                count=len(claims),
                limit=query.limit,
                offset=query.offset,
            )
        )
