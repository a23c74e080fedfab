from src.service.conference.app.interface.i_entity_store import ITransaction
from src.service.conference.app.interface.i_notification_dispatcher import (
    INotificationDispatcher,
)
from src.service.conference.driven_adapter.notification.mock_email_sender import MockEmailSender


CONFIRMATION_SUBJECT = 'You created a new Conference!'
CONFIRMATION_BODY = 'Hi, you have created a following new conference.\n{payload}'


class EmailNotificationDispatcher(INotificationDispatcher):
    """Sends the conference-created confirmation once the creating transaction commits."""

    def __init__(self, email_sender: MockEmailSender):
        self.email_sender = email_sender

    def enqueue(self, txn: ITransaction, *, recipient: str, payload: str) -> None:
        async def deliver() -> None:
            await self.email_sender.send_email(
                recipient, CONFIRMATION_SUBJECT, CONFIRMATION_BODY.format(payload=payload)
            )

        txn.on_commit(deliver)
