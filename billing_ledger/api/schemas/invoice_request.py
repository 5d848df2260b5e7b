"""Request schemas for the Invoice API

The acting user comes from the X-User-Id header and the invoice id from
the path, so neither appears here.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from billing_ledger.app.use_cases.invoicing.dtos import LineItemInputDTO, LineItemUpdateDTO
from billing_ledger.domain.invoice import InvoiceStatus


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /billing/invoices endpoint.
    """

    client_id: str = Field(..., min_length=1, description="Client identifier (required, non-empty)")
    issue_date: date = Field(default_factory=date.today)
    due_date: date
    line_items: List[LineItemInputDTO] = Field(..., min_length=1)
    invoice_number: Optional[str] = Field(default=None, description="Generated when omitted")
    tax_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    insurance_provider_id: Optional[int] = None
    funding_program_id: Optional[int] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    notes: Optional[str] = None
    send_notification: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.due_date < self.issue_date:
            raise ValueError("due_date must not be before issue_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_42",
                "issue_date": "2025-03-01",
                "due_date": "2025-03-31",
                "line_items": [
                    {"service_code_id": 1, "quantity": "2", "date_of_service": "2025-02-27"}
                ],
            }
        }


class UpdateInvoiceRequestSchema(BaseModel):
    """Request schema for PATCH /billing/invoices/{invoice_id}"""

    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    tax_amount: Optional[Decimal] = Field(default=None, ge=0)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)
    insurance_provider_id: Optional[int] = None
    funding_program_id: Optional[int] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    notes: Optional[str] = None
    add_line_items: List[LineItemInputDTO] = Field(default_factory=list)
    update_line_items: List[LineItemUpdateDTO] = Field(default_factory=list)
    remove_line_item_ids: List[int] = Field(default_factory=list)


class UpdateInvoiceStatusRequestSchema(BaseModel):
    status: InvoiceStatus

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        """Derived statuses are never set by hand"""
        if v in (InvoiceStatus.PAID, InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.OVERDUE):
            raise ValueError(f"Status {v.value} is derived from payments and dates")
        return v
