"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from billing_ledger.domain.invoice_line import InvoiceLineItem


class LineItemInputDTO(BaseModel):
    """
    Line item input

    description and rate default to the service code's values.
    """

    service_code_id: int = Field(..., description="Service code to bill")
    quantity: Decimal = Field(..., gt=0, description="Billed units (must be > 0)")
    rate: Optional[Decimal] = Field(default=None, ge=0, description="Override of the default rate")
    description: Optional[str] = Field(default=None, description="Override of the catalog description")
    date_of_service: date = Field(..., description="Date the service was delivered")
    bill_to_insurance: bool = Field(default=False)
    notes: Optional[str] = None


class LineItemUpdateDTO(BaseModel):
    line_item_id: int
    quantity: Optional[Decimal] = Field(default=None, gt=0)
    rate: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    date_of_service: Optional[date] = None
    bill_to_insurance: Optional[bool] = None
    notes: Optional[str] = None


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    client_id: str = Field(..., min_length=1, description="Client identifier")
    issue_date: date = Field(default_factory=date.today)
    due_date: date = Field(..., description="Payment due date (>= issue_date)")
    line_items: List[LineItemInputDTO] = Field(..., description="At least one line item")
    invoice_number: Optional[str] = Field(default=None, description="Explicit number; generated when omitted")
    tax_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    insurance_provider_id: Optional[int] = None
    funding_program_id: Optional[int] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    notes: Optional[str] = None
    send_notification: bool = Field(default=False, description="Ask the notifier to deliver the invoice")
    acting_user: Optional[str] = Field(default=None, description="Acting user id for audit")

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_42",
                "issue_date": "2025-03-01",
                "due_date": "2025-03-31",
                "line_items": [
                    {"service_code_id": 1, "quantity": "2", "date_of_service": "2025-02-27"}
                ],
                "send_notification": True,
            }
        }


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for editing an invoice

    Header fields may change in any non-cancelled state; line items only while DRAFT.
    """

    invoice_id: int
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
    acting_user: Optional[str] = None

    @property
    def touches_line_items(self) -> bool:
        return bool(self.add_line_items or self.update_line_items or self.remove_line_item_ids)

    @property
    def touches_totals(self) -> bool:
        return self.touches_line_items or self.tax_amount is not None or self.discount_amount is not None


class UpdateInvoiceStatusCommandDTO(BaseModel):
    invoice_id: int
    status: InvoiceStatus
    acting_user: Optional[str] = None


class ListInvoicesQueryDTO(BaseModel):
    client_id: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    issue_date_from: Optional[date] = None
    issue_date_to: Optional[date] = None
    min_amount: Optional[Decimal] = Field(default=None, ge=0)
    max_amount: Optional[Decimal] = Field(default=None, ge=0)
    insurance_provider_id: Optional[int] = None
    funding_program_id: Optional[int] = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.issue_date_from and self.issue_date_to and self.issue_date_from > self.issue_date_to:
            raise ValueError("issue_date_from must not be after issue_date_to")
        if self.min_amount is not None and self.max_amount is not None and self.min_amount > self.max_amount:
            raise ValueError("min_amount must not exceed max_amount")
        return self


class LineItemDTO(BaseModel):
    line_item_id: int
    service_code_id: int
    description: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    date_of_service: date
    bill_to_insurance: bool
    notes: Optional[str] = None

    @classmethod
    def from_entity(cls, line: InvoiceLineItem) -> "LineItemDTO":
        return cls(
            line_item_id=line.id,
            service_code_id=line.service_code_id,
            description=line.description,
            quantity=line.quantity,
            rate=line.rate,
            amount=line.amount,
            date_of_service=line.date_of_service,
            bill_to_insurance=line.bill_to_insurance,
            notes=line.notes,
        )


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    ``status`` is derived at response time, so overdue invoices show as
    OVERDUE without any background sweep.
    """

    invoice_id: int
    invoice_number: str
    client_id: str
    status: str
    issue_date: date
    due_date: date
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    insurance_provider_id: Optional[int] = None
    funding_program_id: Optional[int] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    notes: Optional[str] = None
    notification_requested_at: Optional[datetime] = None
    issued_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    line_items: List[LineItemDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls,
        invoice: Invoice,
        today: date,
        lines: Optional[List[InvoiceLineItem]] = None,
    ) -> "InvoiceResponseDTO":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            client_id=invoice.client_id,
            status=invoice.current_status(today).value,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            subtotal=invoice.subtotal,
            tax_amount=invoice.tax_amount,
            discount_amount=invoice.discount_amount,
            total_amount=invoice.total_amount,
            amount_paid=invoice.amount_paid,
            balance_due=invoice.total_amount - invoice.amount_paid,
            insurance_provider_id=invoice.insurance_provider_id,
            funding_program_id=invoice.funding_program_id,
            policy_number=invoice.policy_number,
            beneficiary_name=invoice.beneficiary_name,
            notes=invoice.notes,
            notification_requested_at=invoice.notification_requested_at,
            issued_at=invoice.issued_at,
            cancelled_at=invoice.cancelled_at,
            created_by=invoice.created_by,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
            line_items=[LineItemDTO.from_entity(line) for line in lines or []],
        )


class ListInvoicesResponseDTO(BaseModel):
    invoices: List[InvoiceResponseDTO]
    count: int
    limit: int
    offset: int
