from abc import ABC, abstractmethod

from src.service.conference.app.interface.i_entity_store import ITransaction


class INotificationDispatcher(ABC):
    @abstractmethod
    def enqueue(self, txn: ITransaction, *, recipient: str, payload: str) -> None:
        """
        Bind a confirmation message to `txn`.

        The message is sent only if the transaction commits.
        """
        pass
