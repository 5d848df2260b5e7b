"""Integration tests for the invoice ledger use cases

Tests cover:
- amount_paid always equals the sum of non-voided payments
- Draft-only edits and totals recomputation
- Overdue status derived from the due date
- Invoice number collision on an explicit number
- Line items on a claim keep their amount
- Timestamps stored and reloaded as UTC
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.adapter.repositories import (
    SqlAlchemyFundingProgramRepository,
    SqlAlchemyInsuranceClaimRepository,
    SqlAlchemyInsuranceProviderRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyServiceCodeRepository,
)
from billing_ledger.adapter.services import AllowAllClientRegistry, SqlAlchemyUnitOfWork
from billing_ledger.app.services import PaymentLedger
from billing_ledger.app.use_cases.invoicing import (
    CreateInvoice,
    CreateInvoiceCommandDTO,
    GetInvoice,
    LineItemInputDTO,
    LineItemUpdateDTO,
    ListInvoices,
    ListInvoicesQueryDTO,
    SendInvoice,
    UpdateInvoice,
    UpdateInvoiceCommandDTO,
)
from billing_ledger.app.use_cases.claims import CreateClaim, CreateClaimCommandDTO
from billing_ledger.app.use_cases.payments import (
    ApplyPayment,
    ApplyPaymentCommandDTO,
    RemovePayment,
    UpdatePayment,
    UpdatePaymentCommandDTO,
    VoidPayment,
    VoidPaymentCommandDTO,
)
from billing_ledger.domain.invoice import InvoiceStatus
from billing_ledger.domain.money import money_sum
from billing_ledger.domain.payment import PaymentMethod


def _ledger(session: AsyncSession) -> PaymentLedger:
    return PaymentLedger(SqlAlchemyInvoiceRepository(session), SqlAlchemyPaymentRepository(session))


async def _create(session: AsyncSession, service_code_id: int, issue_date: date, due_date: date, **overrides):
    use_case = CreateInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyFundingProgramRepository(session),
        AllowAllClientRegistry(),
    )
    fields = dict(
        client_id="client_7",
        issue_date=issue_date,
        due_date=due_date,
        line_items=[
            LineItemInputDTO(service_code_id=service_code_id, quantity=Decimal("2"), date_of_service=issue_date)
        ],
    )
    fields.update(overrides)
    result = await use_case.execute(CreateInvoiceCommandDTO(**fields))
    assert result.is_ok(), result.error
    return result.value


async def _send(session: AsyncSession, invoice_id: int):
    use_case = SendInvoice(SqlAlchemyUnitOfWork(session), _ledger(session), SqlAlchemyInvoiceLineRepository(session))
    result = await use_case.execute(invoice_id)
    assert result.is_ok(), result.error
    return result.value


def _update_invoice(session: AsyncSession) -> UpdateInvoice:
    return UpdateInvoice(
        SqlAlchemyUnitOfWork(session),
        _ledger(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyServiceCodeRepository(session),
        SqlAlchemyInsuranceProviderRepository(session),
        SqlAlchemyFundingProgramRepository(session),
        SqlAlchemyInsuranceClaimRepository(session),
    )


@pytest.mark.asyncio
class TestPaymentLedgerIntegration:
    async def test_amount_paid_tracks_payment_history(
        self, db_session: AsyncSession, service_code_id, issue_date, due_date
    ):
        """
        Given: A sent invoice of 300.00
        When: Payments are applied, edited, voided and removed
        Then: After every step amount_paid equals the sum of non-voided payments
        """
        # Arrange
        invoice = await _create(db_session, service_code_id, issue_date, due_date)
        await _send(db_session, invoice.invoice_id)

        uow = SqlAlchemyUnitOfWork(db_session)
        invoice_repo = SqlAlchemyInvoiceRepository(db_session)
        payment_repo = SqlAlchemyPaymentRepository(db_session)
        ledger = _ledger(db_session)

        async def assert_consistent():
            stored = await invoice_repo.get_by_id(invoice.invoice_id)
            payments = await payment_repo.get_by_invoice_id(invoice.invoice_id)
            assert stored.amount_paid == money_sum(p.amount for p in payments)
            assert stored.amount_paid <= stored.total_amount

        apply = ApplyPayment(uow, ledger, invoice_repo)
        payment_ids = []
        for amount in ("50.00", "75.00", "100.00"):
            result = await apply.execute(
                ApplyPaymentCommandDTO(
                    invoice_id=invoice.invoice_id,
                    amount=Decimal(amount),
                    method=PaymentMethod.CHECK,
                    payment_date=issue_date,
                )
            )
            assert result.is_ok(), result.error
            payment_ids.append(result.value.payment.payment_id)
            await assert_consistent()

        # Act + Assert: edit, void, remove
        updated = await UpdatePayment(uow, ledger, invoice_repo).execute(
            UpdatePaymentCommandDTO(payment_id=payment_ids[0], amount=Decimal("125.00"))
        )
        assert updated.is_ok(), updated.error
        assert updated.value.invoice.status == "paid"
        await assert_consistent()

        voided = await VoidPayment(uow, ledger, invoice_repo).execute(
            VoidPaymentCommandDTO(payment_id=payment_ids[1], reason="Check returned")
        )
        assert voided.is_ok(), voided.error
        assert voided.value.invoice.amount_paid == Decimal("225.00")
        await assert_consistent()

        removed = await RemovePayment(uow, ledger, invoice_repo).execute(payment_ids[2])
        assert removed.is_ok(), removed.error
        assert removed.value.invoice.amount_paid == Decimal("125.00")
        assert removed.value.invoice.status == "partially_paid"
        await assert_consistent()

    async def test_edit_cannot_push_past_total(self, db_session: AsyncSession, service_code_id, issue_date, due_date):
        invoice = await _create(db_session, service_code_id, issue_date, due_date)
        await _send(db_session, invoice.invoice_id)
        uow = SqlAlchemyUnitOfWork(db_session)
        invoice_repo = SqlAlchemyInvoiceRepository(db_session)
        ledger = _ledger(db_session)

        apply = ApplyPayment(uow, ledger, invoice_repo)
        await apply.execute(
            ApplyPaymentCommandDTO(invoice_id=invoice.invoice_id, amount=Decimal("200.00"), method=PaymentMethod.CASH)
        )
        second = await apply.execute(
            ApplyPaymentCommandDTO(invoice_id=invoice.invoice_id, amount=Decimal("100.00"), method=PaymentMethod.CASH)
        )

        result = await UpdatePayment(uow, ledger, invoice_repo).execute(
            UpdatePaymentCommandDTO(payment_id=second.value.payment.payment_id, amount=Decimal("100.01"))
        )

        assert result.is_err()
        assert result.error.code == "OVERPAYMENT"
        fetched = await GetInvoice(invoice_repo, SqlAlchemyInvoiceLineRepository(db_session)).execute(
            invoice.invoice_id
        )
        assert fetched.value.amount_paid == Decimal("300.00")
        assert fetched.value.status == "paid"


@pytest.mark.asyncio
class TestInvoiceEditsIntegration:
    async def test_draft_edit_recomputes_totals(self, db_session: AsyncSession, service_code_id, issue_date, due_date):
        invoice = await _create(db_session, service_code_id, issue_date, due_date)

        result = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(
                invoice_id=invoice.invoice_id,
                tax_amount=Decimal("15.00"),
                add_line_items=[
                    LineItemInputDTO(
                        service_code_id=service_code_id,
                        quantity=Decimal("1"),
                        rate=Decimal("80.00"),
                        date_of_service=issue_date,
                    )
                ],
            )
        )

        assert result.is_ok(), result.error
        assert result.value.subtotal == Decimal("380.00")
        assert result.value.total_amount == Decimal("395.00")
        assert len(result.value.line_items) == 2

    async def test_sent_invoice_freezes_lines_but_not_notes(
        self, db_session: AsyncSession, service_code_id, issue_date, due_date
    ):
        invoice = await _create(db_session, service_code_id, issue_date, due_date)
        await _send(db_session, invoice.invoice_id)

        frozen = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(invoice_id=invoice.invoice_id, discount_amount=Decimal("10.00"))
        )
        assert frozen.is_err()
        assert frozen.error.code == "INVALID_STATE"

        noted = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(invoice_id=invoice.invoice_id, notes="Mailed paper copy")
        )
        assert noted.is_ok(), noted.error
        assert noted.value.notes == "Mailed paper copy"
        assert noted.value.total_amount == Decimal("300.00")

    async def test_claimed_line_cannot_be_repriced(
        self, db_session: AsyncSession, service_code_id, insurance_provider_id, issue_date, due_date
    ):
        """
        Given: A draft invoice whose only line is on an insurance claim
        When: The line's rate is changed, or it is taken off insurance billing
        Then: ENTITY_REFERENCED and the line keeps its amount; a notes-only edit still works
        """
        invoice = await _create(
            db_session,
            service_code_id,
            issue_date,
            due_date,
            line_items=[
                LineItemInputDTO(
                    service_code_id=service_code_id,
                    quantity=Decimal("2"),
                    date_of_service=issue_date,
                    bill_to_insurance=True,
                )
            ],
        )
        line_id = invoice.line_items[0].line_item_id
        claim = await CreateClaim(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
            SqlAlchemyInsuranceProviderRepository(db_session),
            SqlAlchemyInsuranceClaimRepository(db_session),
        ).execute(CreateClaimCommandDTO(invoice_id=invoice.invoice_id, insurance_provider_id=insurance_provider_id))
        assert claim.is_ok(), claim.error

        repriced = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(
                invoice_id=invoice.invoice_id,
                update_line_items=[LineItemUpdateDTO(line_item_id=line_id, rate=Decimal("999.00"))],
            )
        )
        uninsured = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(
                invoice_id=invoice.invoice_id,
                update_line_items=[LineItemUpdateDTO(line_item_id=line_id, bill_to_insurance=False)],
            )
        )
        annotated = await _update_invoice(db_session).execute(
            UpdateInvoiceCommandDTO(
                invoice_id=invoice.invoice_id,
                update_line_items=[LineItemUpdateDTO(line_item_id=line_id, notes="Session notes on file")],
            )
        )

        assert repriced.is_err()
        assert repriced.error.code == "ENTITY_REFERENCED"
        assert uninsured.is_err()
        assert uninsured.error.code == "ENTITY_REFERENCED"
        assert annotated.is_ok(), annotated.error
        assert annotated.value.line_items[0].amount == Decimal("300.00")
        assert annotated.value.total_amount == Decimal("300.00")
        assert claim.value.claimed_amount == Decimal("300.00")


@pytest.mark.asyncio
class TestInvoiceQueriesIntegration:
    async def test_past_due_invoice_is_overdue(self, db_session: AsyncSession, service_code_id):
        today = date.today()
        late = await _create(
            db_session, service_code_id, today - timedelta(days=40), today - timedelta(days=10)
        )
        current = await _create(db_session, service_code_id, today, today + timedelta(days=30))
        await _send(db_session, late.invoice_id)
        await _send(db_session, current.invoice_id)

        overdue = await ListInvoices(SqlAlchemyInvoiceRepository(db_session)).execute(
            ListInvoicesQueryDTO(status=InvoiceStatus.OVERDUE)
        )
        sent = await ListInvoices(SqlAlchemyInvoiceRepository(db_session)).execute(
            ListInvoicesQueryDTO(status=InvoiceStatus.SENT)
        )

        assert [i.invoice_id for i in overdue.value.invoices] == [late.invoice_id]
        assert overdue.value.invoices[0].status == "overdue"
        assert [i.invoice_id for i in sent.value.invoices] == [current.invoice_id]

    async def test_explicit_duplicate_number_rejected(
        self, db_session: AsyncSession, service_code_id, issue_date, due_date
    ):
        first = await _create(db_session, service_code_id, issue_date, due_date, invoice_number="LEGACY-0001")
        assert first.invoice_number == "LEGACY-0001"

        use_case = CreateInvoice(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
            SqlAlchemyServiceCodeRepository(db_session),
            SqlAlchemyInsuranceProviderRepository(db_session),
            SqlAlchemyFundingProgramRepository(db_session),
            AllowAllClientRegistry(),
        )
        result = await use_case.execute(
            CreateInvoiceCommandDTO(
                client_id="client_7",
                issue_date=issue_date,
                due_date=due_date,
                invoice_number="LEGACY-0001",
                line_items=[
                    LineItemInputDTO(service_code_id=service_code_id, quantity=Decimal("1"), date_of_service=issue_date)
                ],
            )
        )

        assert result.is_err()
        assert result.error.code == "DUPLICATE_KEY"

    async def test_timestamps_round_trip_as_utc(self, db_session: AsyncSession, service_code_id, issue_date, due_date):
        """
        Given: An invoice written through the ledger
        When: The row is reloaded from the database
        Then: created_at and updated_at come back timezone-aware in UTC
        """
        invoice = await _create(db_session, service_code_id, issue_date, due_date)

        stored = await SqlAlchemyInvoiceRepository(db_session).get_by_id(invoice.invoice_id, for_update=True)

        assert stored.created_at.tzinfo is not None
        assert stored.created_at.utcoffset() == timedelta(0)
        assert stored.updated_at.utcoffset() == timedelta(0)
