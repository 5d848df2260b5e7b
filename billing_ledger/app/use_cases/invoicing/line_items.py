"""Line item construction shared by invoice creation and editing"""

from typing import Dict, List
from billing_ledger.app.repositories.service_code_repository import ServiceCodeRepository
from billing_ledger.domain.errors import InvalidStateError, ServiceCodeNotFoundError
from billing_ledger.domain.invoice_line import InvoiceLineItem
from billing_ledger.domain.money import line_amount, to_money
from billing_ledger.domain.service_code import ServiceCode
from .dtos import LineItemInputDTO


async def load_service_codes(
    service_code_repo: ServiceCodeRepository, inputs: List[LineItemInputDTO]
) -> Dict[int, ServiceCode]:
    """Fetch the service codes referenced by ``inputs``; each must exist and be active."""
    wanted = {item.service_code_id for item in inputs}
    codes = {code.id: code for code in await service_code_repo.get_by_ids(list(wanted))}

    for service_code_id in sorted(wanted):
        code = codes.get(service_code_id)
        if code is None:
            raise ServiceCodeNotFoundError(service_code_id)
        if not code.is_active:
            raise InvalidStateError(
                f"Service code {code.code} is inactive",
                current_state="inactive",
                service_code_id=service_code_id,
            )
    return codes


def build_line_item(item: LineItemInputDTO, code: ServiceCode, invoice_id: int = None) -> InvoiceLineItem:
    rate = to_money(item.rate if item.rate is not None else code.default_rate)
    return InvoiceLineItem(
        invoice_id=invoice_id,
        service_code_id=code.id,
        description=item.description or code.description,
        quantity=item.quantity,
        rate=rate,
        amount=line_amount(item.quantity, rate),
        date_of_service=item.date_of_service,
        bill_to_insurance=item.bill_to_insurance,
        notes=item.notes,
    )
