"""Client Registry Interface

The ledger does not own client data; it only asks whether a client exists.
"""

from abc import ABC, abstractmethod


class ClientRegistry(ABC):

    @abstractmethod
    async def exists(self, client_id: str) -> bool:
        """
        Check that a client is known to the practice

        Args:
            client_id: Client identifier

        Returns:
            True if the client exists
        """
        pass
