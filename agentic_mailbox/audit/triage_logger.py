"""Append-only audit log for the triage-rule loop.

Writes TriageAuditEntry records as JSON Lines (one JSON object per line):
manual actions, suggestions and the user's decisions on them, rule
deletions, and every automatic rule application.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from agentic_mailbox.schemas.triage import (
    ActionLogEntry,
    RuleApplication,
    SuggestedRule,
    TriageAction,
    TriageAuditEntry,
    TriageRule,
)
from agentic_mailbox.storage import read_jsonl

logger = logging.getLogger(__name__)


class TriageAuditLog:
    """Append-only JSONL audit log for rule activity.

    Usage::

        audit = TriageAuditLog("/path/to/triage_audit.jsonl")
        audit.log_suggested(rule)

        entries = audit.read_entries(since=some_datetime)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: TriageAuditEntry) -> None:
        """Append a single audit entry to the log file."""
        with self._path.open("a") as f:
            f.write(entry.model_dump_json() + "\n")
        logger.debug(
            "Triage audit: %s sender=%s action=%s rule=%s",
            entry.event,
            entry.sender,
            entry.action,
            entry.rule_id,
        )

    def log_manual_action(self, entry: ActionLogEntry) -> TriageAuditEntry:
        return self._append(
            "manual_action", entry.sender, entry.action, email_id=entry.email_id
        )

    def log_suggested(self, rule: SuggestedRule) -> TriageAuditEntry:
        return self._append("suggested", rule.sender, rule.action)

    def log_accepted(self, rule: TriageRule) -> TriageAuditEntry:
        return self._append("accepted", rule.sender, rule.action, rule_id=rule.id)

    def log_declined(self, rule: SuggestedRule) -> TriageAuditEntry:
        return self._append("declined", rule.sender, rule.action)

    def log_rule_deleted(self, rule: TriageRule) -> TriageAuditEntry:
        return self._append("rule_deleted", rule.sender, rule.action, rule_id=rule.id)

    def log_rule_applied(self, application: RuleApplication) -> TriageAuditEntry:
        return self._append(
            "rule_applied",
            application.sender,
            application.action,
            rule_id=application.rule_id,
            email_id=application.email_id,
        )

    def read_entries(
        self,
        *,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list[TriageAuditEntry]:
        """Read audit entries oldest first, keeping the last ``limit`` after filtering."""
        return read_jsonl(self._path, TriageAuditEntry, since=since, limit=limit)

    def _append(
        self,
        event: str,
        sender: str,
        action: TriageAction,
        *,
        rule_id: str | None = None,
        email_id: str | None = None,
    ) -> TriageAuditEntry:
        entry = TriageAuditEntry(
            timestamp=datetime.now(UTC),
            event=event,
            sender=sender,
            action=action,
            rule_id=rule_id,
            email_id=email_id,
        )
        self.log(entry)
        return entry
