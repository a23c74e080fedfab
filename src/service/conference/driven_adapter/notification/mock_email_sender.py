"""Mock e-mail sender: logs messages instead of delivering them."""

from datetime import datetime, timezone
from typing import List, Optional

from src.platform.logging.loguru_io import Logger


class MockEmailSender:
    def __init__(self, *, sender: str, echo: bool = False):
        self.sender = sender
        self.echo = echo
        self.sent_emails: List[dict] = []  # Kept for assertions in tests

    @Logger.io
    async def send_email(
        self, to: str, subject: str, body: str, cc: Optional[List[str]] = None
    ) -> bool:
        email_data = {
            'from': self.sender,
            'to': to,
            'subject': subject,
            'body': body,
            'cc': cc or [],
            'sent_at': datetime.now(timezone.utc),
        }
        self.sent_emails.append(email_data)

        Logger.base.info(f'📧 [MAIL] {subject} -> {to}')
        if self.echo:
            Logger.base.info(
                '\n'.join(
                    (
                        '=' * 50,
                        f'From: {self.sender}',
                        f'To: {to}',
                        *([f'CC: {", ".join(cc)}'] if cc else []),
                        f'Subject: {subject}',
                        f'Time: {email_data["sent_at"].strftime("%Y-%m-%d %H:%M:%S")}',
                        '-' * 50,
                        body,
                        '=' * 50,
                    )
                )
            )
        return True
