"""Builders for triage test data."""

from datetime import UTC, datetime, timedelta

from agentic_mailbox.schemas.mailbox import Email, EmailStatus
from agentic_mailbox.schemas.triage import ActionLogEntry, TriageAction

BASE_TIME = datetime(2024, 7, 29, 10, 0, tzinfo=UTC)


def make_entry(
    sender: str,
    action: TriageAction = TriageAction.DELETE,
    email_id: str = "1",
    minutes: int = 0,
) -> ActionLogEntry:
    return ActionLogEntry(
        action=action,
        email_id=email_id,
        sender=sender,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


def make_entries(sender: str, action: TriageAction, count: int) -> list[ActionLogEntry]:
    return [make_entry(sender, action, email_id=str(i), minutes=i) for i in range(count)]


def make_email(
    email_id: str = "1",
    sender: str = "GitHub",
    status: EmailStatus = EmailStatus.UNREAD,
    subject: str = "Your build has succeeded!",
) -> Email:
    return Email(
        id=email_id,
        sender=sender,
        sender_email=f"{sender.lower().replace(' ', '.')}@example.com",
        subject=subject,
        body="Hello.",
        timestamp=BASE_TIME,
        status=status,
    )
