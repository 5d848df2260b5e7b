"""In-process domain event dispatcher

Handlers run synchronously, in registration order, inside the transaction
of the use case that raised the event. A handler failure propagates to that
use case, which rolls everything back.
"""

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Type
from billing_ledger.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Awaitable[Any]]


class DomainEventDispatcher:
    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    async def dispatch(self, event: DomainEvent) -> List[Any]:
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.debug(f"No handlers registered for {type(event).__name__}")
        results = []
        for handler in handlers:
            results.append(await handler(event))
        return results
