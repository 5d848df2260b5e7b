"""Unit tests for CreateInvoice use case

Tests cover:
- Draft invoice creation with catalog defaults and totals
- Client, date and service code validation
- Invoice number allocation and collision retry
- Notification after commit
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from billing_ledger.app.use_cases.invoicing import CreateInvoice, CreateInvoiceCommandDTO, LineItemInputDTO
from billing_ledger.domain.errors import DuplicateKeyError
from billing_ledger.domain.service_code import ServiceCode


@pytest.fixture
def therapy_code():
    return ServiceCode(
        id=1,
        code="90837",
        description="Psychotherapy, 60 minutes",
        default_rate=Decimal("150.00"),
        is_active=True,
    )


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()

    async def create(invoice):
        invoice.id = 1
        return invoice

    repo.create = AsyncMock(side_effect=create)
    repo.get_by_invoice_number = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_line_repo():
    repo = MagicMock()

    async def create_many(lines):
        for index, line in enumerate(lines, start=1):
            line.id = index
        return lines

    repo.create_many = AsyncMock(side_effect=create_many)
    return repo


@pytest.fixture
def mock_service_code_repo(therapy_code):
    repo = MagicMock()
    repo.get_by_ids = AsyncMock(return_value=[therapy_code])
    return repo


@pytest.fixture
def mock_client_registry():
    registry = MagicMock()
    registry.exists = AsyncMock(return_value=True)
    return registry


@pytest.fixture
def mock_sequencer():
    sequencer = MagicMock()
    sequencer.next = AsyncMock(return_value="INV-2025-00001")
    return sequencer


@pytest.fixture
def mock_notification_service():
    service = MagicMock()
    service.send_invoice_notification = AsyncMock(return_value=True)
    return service


@pytest.fixture
def create_invoice_use_case(
    mock_uow,
    mock_invoice_repo,
    mock_line_repo,
    mock_service_code_repo,
    mock_client_registry,
    mock_sequencer,
    mock_notification_service,
):
    return CreateInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        line_repo=mock_line_repo,
        service_code_repo=mock_service_code_repo,
        provider_repo=MagicMock(),
        program_repo=MagicMock(),
        client_registry=mock_client_registry,
        notification_service=mock_notification_service,
        sequencer=mock_sequencer,
        today=lambda: date(2025, 3, 5),
    )


def _command(**overrides) -> CreateInvoiceCommandDTO:
    fields = dict(
        client_id="client_42",
        issue_date=date(2025, 3, 1),
        due_date=date(2025, 3, 31),
        line_items=[
            LineItemInputDTO(service_code_id=1, quantity=Decimal("2"), date_of_service=date(2025, 2, 27)),
        ],
        acting_user="staff_1",
    )
    fields.update(overrides)
    return CreateInvoiceCommandDTO(**fields)


@pytest.mark.asyncio
class TestCreateInvoiceSuccess:
    async def test_creates_draft_with_catalog_defaults(
        self, create_invoice_use_case, mock_invoice_repo, mock_line_repo, mock_uow
    ):
        """
        Given: A known client and an active service code at 150.00
        When: An invoice with two units is created
        Then: A DRAFT invoice of 300.00 with the generated number is committed
        """
        # Act
        result = await create_invoice_use_case.execute(_command())

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.invoice_number == "INV-2025-00001"
        assert response.status == "draft"
        assert response.subtotal == Decimal("300.00")
        assert response.total_amount == Decimal("300.00")
        assert response.amount_paid == Decimal("0.00")
        assert response.balance_due == Decimal("300.00")
        assert response.created_by == "staff_1"

        line = response.line_items[0]
        assert line.description == "Psychotherapy, 60 minutes"
        assert line.rate == Decimal("150.00")
        assert line.amount == Decimal("300.00")

        mock_invoice_repo.create.assert_called_once()
        mock_line_repo.create_many.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_rate_override_tax_and_discount(self, create_invoice_use_case):
        command = _command(
            line_items=[
                LineItemInputDTO(
                    service_code_id=1,
                    quantity=Decimal("1.5"),
                    rate=Decimal("120.00"),
                    description="Extended session",
                    date_of_service=date(2025, 2, 27),
                )
            ],
            tax_amount=Decimal("9.00"),
            discount_amount=Decimal("20.00"),
        )

        result = await create_invoice_use_case.execute(command)

        assert result.is_ok()
        assert result.value.subtotal == Decimal("180.00")
        assert result.value.total_amount == Decimal("169.00")
        assert result.value.line_items[0].description == "Extended session"

    async def test_number_collision_is_retried_once(self, create_invoice_use_case, mock_invoice_repo, mock_sequencer):
        mock_sequencer.next = AsyncMock(side_effect=["INV-2025-00007", "INV-2025-00008"])

        async def create(invoice):
            if invoice.invoice_number == "INV-2025-00007":
                raise DuplicateKeyError("Invoice", "invoice_number", invoice.invoice_number)
            invoice.id = 1
            return invoice

        mock_invoice_repo.create = AsyncMock(side_effect=create)

        result = await create_invoice_use_case.execute(_command())

        assert result.is_ok()
        assert result.value.invoice_number == "INV-2025-00008"
        assert mock_sequencer.next.call_count == 2

    async def test_notification_sent_after_commit(self, create_invoice_use_case, mock_notification_service, mock_uow):
        result = await create_invoice_use_case.execute(_command(send_notification=True))

        assert result.is_ok()
        assert result.value.notification_requested_at is not None
        mock_notification_service.send_invoice_notification.assert_called_once()

    async def test_notification_failure_does_not_fail_creation(
        self, create_invoice_use_case, mock_notification_service, mock_uow
    ):
        mock_notification_service.send_invoice_notification = AsyncMock(side_effect=RuntimeError("smtp down"))

        result = await create_invoice_use_case.execute(_command(send_notification=True))

        assert result.is_ok()
        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()


@pytest.mark.asyncio
class TestCreateInvoiceErrors:
    async def test_unknown_client(self, create_invoice_use_case, mock_client_registry, mock_uow):
        mock_client_registry.exists = AsyncMock(return_value=False)

        result = await create_invoice_use_case.execute(_command())

        assert result.is_err()
        assert result.error.code == "CLIENT_NOT_FOUND"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_due_date_before_issue_date(self, create_invoice_use_case):
        result = await create_invoice_use_case.execute(_command(due_date=date(2025, 2, 1)))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details["field"] == "due_date"

    async def test_no_line_items(self, create_invoice_use_case):
        result = await create_invoice_use_case.execute(_command(line_items=[]))

        assert result.is_err()
        assert result.error.details["field"] == "line_items"

    async def test_unknown_service_code(self, create_invoice_use_case, mock_service_code_repo):
        mock_service_code_repo.get_by_ids = AsyncMock(return_value=[])

        result = await create_invoice_use_case.execute(_command())

        assert result.is_err()
        assert result.error.code == "SERVICE_CODE_NOT_FOUND"

    async def test_inactive_service_code(self, create_invoice_use_case, therapy_code):
        therapy_code.is_active = False

        result = await create_invoice_use_case.execute(_command())

        assert result.is_err()
        assert result.error.code == "INVALID_STATE"

    async def test_discount_larger_than_subtotal(self, create_invoice_use_case):
        result = await create_invoice_use_case.execute(_command(discount_amount=Decimal("500.00")))

        assert result.is_err()
        assert result.error.details["field"] == "discount_amount"

    async def test_supplied_duplicate_number(self, create_invoice_use_case, mock_invoice_repo):
        mock_invoice_repo.get_by_invoice_number = AsyncMock(return_value=MagicMock())

        result = await create_invoice_use_case.execute(_command(invoice_number="INV-2025-00001"))

        assert result.is_err()
        assert result.error.code == "DUPLICATE_KEY"
        mock_invoice_repo.create.assert_not_called()

    async def test_two_collisions_surface_as_concurrency_error(
        self, create_invoice_use_case, mock_invoice_repo, mock_sequencer
    ):
        mock_invoice_repo.create = AsyncMock(
            side_effect=DuplicateKeyError("Invoice", "invoice_number", "INV-2025-00001")
        )

        result = await create_invoice_use_case.execute(_command())

        assert result.is_err()
        assert result.error.code == "INVOICE_NUMBER_COLLISION"
        assert result.error.category == "concurrency"

    async def test_unexpected_failure(self, create_invoice_use_case, mock_line_repo, mock_uow):
        mock_line_repo.create_many = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await create_invoice_use_case.execute(_command())

        assert result.is_err()
        assert result.error.code == "CREATE_INVOICE_FAILED"
        assert result.error.reason == "connection reset"
        mock_uow.rollback.assert_called_once()
