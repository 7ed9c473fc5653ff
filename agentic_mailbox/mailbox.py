"""Local mailbox snapshot.

Holds the emails the triage loop works against, persisted as JSON.
Fetching mail from a provider is outside this package; the snapshot is
whatever the caller last wrote here.
"""

import json
import logging
from pathlib import Path

from agentic_mailbox.schemas.mailbox import Email, EmailStatus, MailboxFile
from agentic_mailbox.storage import atomic_write_text

logger = logging.getLogger(__name__)


class MailboxStore:
    """JSON-backed list of emails, newest first.

    Usage::

        mailbox = MailboxStore.load("data/mailbox.json")
        for email in mailbox.unread():
            print(email.sender, email.subject)
        mailbox.set_status("42", EmailStatus.ARCHIVED)
        mailbox.save()
    """

    def __init__(self, data: MailboxFile, path: Path) -> None:
        self._data = data
        self._path = path

    @classmethod
    def load(cls, path: str | Path) -> "MailboxStore":
        """Load the mailbox snapshot. A missing file means an empty mailbox."""
        path = Path(path)
        if not path.exists():
            logger.info("Mailbox file not found at %s, using empty mailbox", path)
            return cls(MailboxFile(), path)

        data = MailboxFile.model_validate(json.loads(path.read_text()))
        logger.debug("Loaded %d email(s) from %s", len(data.emails), path)
        return cls(data, path)

    @property
    def emails(self) -> list[Email]:
        return list(self._data.emails)

    def get(self, email_id: str) -> Email | None:
        for email in self._data.emails:
            if email.id == email_id:
                return email
        return None

    def unread(self) -> list[Email]:
        return [e for e in self._data.emails if e.status == EmailStatus.UNREAD]

    def set_status(self, email_id: str, status: EmailStatus) -> Email:
        """Change an email's status in memory.

        Raises:
            KeyError: If no email has this id.
        """
        for i, email in enumerate(self._data.emails):
            if email.id == email_id:
                updated = email.model_copy(update={"status": status})
                self._data.emails[i] = updated
                return updated
        raise KeyError(f"Email not found: {email_id}")

    def replace(self, emails: list[Email]) -> None:
        self._data.emails = list(emails)

    def save(self) -> None:
        content = json.dumps(self._data.model_dump(mode="json"), indent=2) + "\n"
        atomic_write_text(self._path, content)
