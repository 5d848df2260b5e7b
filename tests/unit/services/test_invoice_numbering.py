import pytest
from unittest.mock import AsyncMock, MagicMock

from billing_ledger.app.services.invoice_numbering import InvoiceNumberSequencer


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.lock_number_sequence = AsyncMock()
    return repo


@pytest.mark.asyncio
class TestInvoiceNumberSequencer:
    async def test_first_number_of_the_year(self, mock_invoice_repo):
        mock_invoice_repo.get_max_invoice_number = AsyncMock(return_value=None)

        number = await InvoiceNumberSequencer(mock_invoice_repo).next(2025)

        assert number == "INV-2025-00001"
        mock_invoice_repo.lock_number_sequence.assert_called_once_with(2025)
        mock_invoice_repo.get_max_invoice_number.assert_called_once_with("INV-2025-")

    async def test_increments_the_highest_number(self, mock_invoice_repo):
        mock_invoice_repo.get_max_invoice_number = AsyncMock(return_value="INV-2025-00041")

        number = await InvoiceNumberSequencer(mock_invoice_repo).next(2025)

        assert number == "INV-2025-00042"

    async def test_rolls_past_five_digits(self, mock_invoice_repo):
        mock_invoice_repo.get_max_invoice_number = AsyncMock(return_value="INV-2025-99999")

        number = await InvoiceNumberSequencer(mock_invoice_repo).next(2025)

        assert number == "INV-2025-100000"

    async def test_custom_prefix(self, mock_invoice_repo):
        mock_invoice_repo.get_max_invoice_number = AsyncMock(return_value="BIL-2026-00003")

        number = await InvoiceNumberSequencer(mock_invoice_repo, prefix="BIL").next(2026)

        assert number == "BIL-2026-00004"
        mock_invoice_repo.get_max_invoice_number.assert_called_once_with("BIL-2026-")
