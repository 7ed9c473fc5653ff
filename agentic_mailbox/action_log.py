"""Append-only log of manual triage actions.

Writes ActionLogEntry records as JSON Lines (one JSON object per line).
This is the evidence the rule detector learns from; entries are never
rewritten or removed.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from agentic_mailbox.schemas.mailbox import Email
from agentic_mailbox.schemas.triage import ActionLogEntry, TriageAction
from agentic_mailbox.storage import read_jsonl

logger = logging.getLogger(__name__)


class ActionLog:
    """Append-only JSONL store of ActionLogEntry records.

    Usage::

        log = ActionLog("/path/to/action_log.jsonl")
        log.record_action(email, TriageAction.DELETE)

        entries = log.read_entries()
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, entry: ActionLogEntry) -> None:
        """Append a single entry to the log file."""
        with self._path.open("a") as f:
            f.write(entry.model_dump_json() + "\n")
        logger.debug(
            "Action log: %s email=%s sender=%s",
            entry.action,
            entry.email_id,
            entry.sender,
        )

    def record_action(
        self,
        email: Email,
        action: TriageAction,
        *,
        timestamp: datetime | None = None,
    ) -> ActionLogEntry:
        """Build and append an entry for an action taken on an email."""
        entry = ActionLogEntry(
            action=action,
            email_id=email.id,
            sender=email.sender,
            timestamp=timestamp or datetime.now(UTC),
        )
        self.record(entry)
        return entry

    def read_entries(
        self,
        *,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list[ActionLogEntry]:
        """Read entries oldest first, keeping the last ``limit`` after the ``since`` filter."""
        return read_jsonl(self._path, ActionLogEntry, since=since, limit=limit)

    def count(self) -> int:
        """Return the number of entries in the log."""
        return len(self.read_entries())
