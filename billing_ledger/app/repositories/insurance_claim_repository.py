"""Insurance Claim Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaim, InsuranceClaimItem


class InsuranceClaimRepository(ABC):
    """
    Repository interface for InsuranceClaim persistence

    Also owns claim membership rows (InsuranceClaimItem).
    """

    @abstractmethod
    async def create(self, claim: InsuranceClaim) -> InsuranceClaim:
        pass

    @abstractmethod
    async def get_by_id(self, claim_id: int, for_update: bool = False) -> Optional[InsuranceClaim]:
        """
        Retrieve claim by ID

        Args:
            claim_id: Claim ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            InsuranceClaim if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InsuranceClaim]:
        pass

    @abstractmethod
    async def list(
        self,
        invoice_id: Optional[int] = None,
        insurance_provider_id: Optional[int] = None,
        status: Optional[ClaimStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[InsuranceClaim]:
        pass

    @abstractmethod
    async def update(self, claim: InsuranceClaim) -> InsuranceClaim:
        pass

    @abstractmethod
    async def delete(self, claim: InsuranceClaim) -> None:
        """Delete a claim together with its membership rows"""
        pass

    @abstractmethod
    async def add_items(self, items: List[InsuranceClaimItem]) -> List[InsuranceClaimItem]:
        pass

    @abstractmethod
    async def get_items(self, claim_id: int) -> List[InsuranceClaimItem]:
        pass

    @abstractmethod
    async def remove_items(self, claim_id: int, line_item_ids: Sequence[int]) -> int:
        """Remove membership rows, returning the number removed"""
        pass

    @abstractmethod
    async def count_items_for_line(self, line_item_id: int) -> int:
        """Number of claims a line item belongs to"""
        pass

    @abstractmethod
    async def count_by_insurance_provider(self, insurance_provider_id: int) -> int:
        pass
