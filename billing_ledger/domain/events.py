"""Domain events

Events are plain immutable records. They are dispatched synchronously inside
the transaction that raised them.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class DomainEvent:
    pass


@dataclass(frozen=True)
class ClaimPaid(DomainEvent):
    """An insurance claim reached PAID with automatic payment generation enabled."""

    claim_id: int
    invoice_id: int
    amount: Decimal
    payment_date: date
    claim_number: Optional[str] = None
    acting_user: Optional[str] = None
