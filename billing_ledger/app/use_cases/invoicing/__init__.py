"""Invoice aggregate use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .change_status import SendInvoice, UpdateInvoiceStatus, CancelInvoice
from .delete_invoice import DeleteInvoice
from .queries import GetInvoice, GetInvoiceByNumber, ListInvoices
from .dtos import (
    LineItemInputDTO,
    LineItemUpdateDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    UpdateInvoiceStatusCommandDTO,
    ListInvoicesQueryDTO,
    LineItemDTO,
    InvoiceResponseDTO,
    ListInvoicesResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "SendInvoice",
    "UpdateInvoiceStatus",
    "CancelInvoice",
    "DeleteInvoice",
    "GetInvoice",
    "GetInvoiceByNumber",
    "ListInvoices",
    "LineItemInputDTO",
    "LineItemUpdateDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "UpdateInvoiceStatusCommandDTO",
    "ListInvoicesQueryDTO",
    "LineItemDTO",
    "InvoiceResponseDTO",
    "ListInvoicesResponseDTO",
]
