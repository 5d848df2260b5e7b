"""Payment read use cases"""

from libs.result import Result, Return
from billing_ledger.app.repositories.payment_repository import PaymentRepository
from billing_ledger.domain.errors import PaymentNotFoundError
from .dtos import ListPaymentsQueryDTO, ListPaymentsResponseDTO, PaymentResponseDTO


class GetPayment:
    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(self, payment_id: int) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id)
        if not payment:
            return Return.err(PaymentNotFoundError(payment_id).to_error())
        return Return.ok(PaymentResponseDTO.from_entity(payment))


class ListPayments:
    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(self, query: ListPaymentsQueryDTO) -> Result[ListPaymentsResponseDTO]:
        payments = await self.payment_repo.list(
            invoice_id=query.invoice_id,
            client_id=query.client_id,
            method=query.method,
            date_from=query.date_from,
            date_to=query.date_to,
            include_voided=query.include_voided,
            limit=query.limit,
            offset=query.offset,
        )
        return Return.ok(
            ListPaymentsResponseDTO(
                payments=[PaymentResponseDTO.from_entity(p) for p in payments],
                count=len(payments),
                limit=query.limit,
                offset=query.offset,
            )
        )
