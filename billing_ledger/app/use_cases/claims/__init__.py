"""Insurance claim use cases"""
from .workflow import ClaimWorkflow
from .create_claim import CreateClaim
from .update_claim import UpdateClaim
from .transitions import SubmitClaim, RecordClaimResponse, RecordClaimPayment, AppealClaim, CloseClaim
from .delete_claim import DeleteClaim
from .queries import GetClaim, ListClaims
from .dtos import (
    CreateClaimCommandDTO,
    UpdateClaimCommandDTO,
    SubmitClaimCommandDTO,
    RecordClaimResponseCommandDTO,
    RecordClaimPaymentCommandDTO,
    ClaimActionCommandDTO,
    ListClaimsQueryDTO,
    ClaimItemDTO,
    ClaimResponseDTO,
    ListClaimsResponseDTO,
)

__all__ = [
    "ClaimWorkflow",
    "CreateClaim",
    "UpdateClaim",
    "SubmitClaim",
    "RecordClaimResponse",
    "RecordClaimPayment",
    "AppealClaim",
    "CloseClaim",
    "DeleteClaim",
    "GetClaim",
    "ListClaims",
    "CreateClaimCommandDTO",
    "UpdateClaimCommandDTO",
    "SubmitClaimCommandDTO",
    "RecordClaimResponseCommandDTO",
    "RecordClaimPaymentCommandDTO",
    "ClaimActionCommandDTO",
    "ListClaimsQueryDTO",
    "ClaimItemDTO",
    "ClaimResponseDTO",
    "ListClaimsResponseDTO",
]
