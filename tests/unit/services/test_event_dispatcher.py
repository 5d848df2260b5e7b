import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

from billing_ledger.app.services.event_dispatcher import DomainEventDispatcher
from billing_ledger.domain.events import ClaimPaid, DomainEvent


def _claim_paid() -> ClaimPaid:
    return ClaimPaid(claim_id=5, invoice_id=1, amount=Decimal("200.00"), payment_date=date(2025, 3, 20))


@pytest.mark.asyncio
class TestDomainEventDispatcher:
    async def test_handlers_run_in_registration_order(self):
        dispatcher = DomainEventDispatcher()
        calls = []

        async def first(event):
            calls.append("first")
            return 1

        async def second(event):
            calls.append("second")
            return 2

        dispatcher.subscribe(ClaimPaid, first)
        dispatcher.subscribe(ClaimPaid, second)

        results = await dispatcher.dispatch(_claim_paid())

        assert calls == ["first", "second"]
        assert results == [1, 2]

    async def test_event_without_handlers(self):
        assert await DomainEventDispatcher().dispatch(_claim_paid()) == []

    async def test_handlers_only_receive_their_event_type(self):
        dispatcher = DomainEventDispatcher()
        handler = AsyncMock()
        dispatcher.subscribe(ClaimPaid, handler)

        await dispatcher.dispatch(DomainEvent())

        handler.assert_not_called()

    async def test_handler_failure_propagates(self):
        dispatcher = DomainEventDispatcher()
        dispatcher.subscribe(ClaimPaid, AsyncMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            await dispatcher.dispatch(_claim_paid())
