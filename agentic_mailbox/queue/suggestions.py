"""SQLite-backed queue of rule suggestions awaiting the user's decision.

At most one suggestion is pending at any time: no pending row means the
loop is idle, one pending row means a suggestion is on screen. Accepted
and declined rows are kept as history. Uses stdlib sqlite3, same pattern
as the other local stores.
"""

import logging
import sqlite3
import uuid
from datetime import UTC, datetime
from pathlib import Path

from agentic_mailbox.schemas.triage import (
    RuleSuggestion,
    SuggestedRule,
    SuggestionStatus,
    TriageAction,
)

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS rule_suggestions (
    id              TEXT PRIMARY KEY,
    created_at      TEXT NOT NULL,
    sender          TEXT NOT NULL,
    action          TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'pending',
    reviewed_at     TEXT,
    rule_id         TEXT
)
"""

_INSERT = """
INSERT INTO rule_suggestions (id, created_at, sender, action, status)
VALUES (?, ?, ?, ?, ?)
"""

_SELECT_BY_ID = "SELECT * FROM rule_suggestions WHERE id = ?"
_SELECT_PENDING = (
    "SELECT * FROM rule_suggestions WHERE status = 'pending' ORDER BY created_at ASC LIMIT 1"
)
_SELECT_DECLINED = (
    "SELECT * FROM rule_suggestions WHERE status = 'declined' ORDER BY created_at ASC, rowid ASC"
)
_SELECT_ALL = "SELECT * FROM rule_suggestions ORDER BY created_at DESC, rowid DESC LIMIT ?"

_UPDATE_STATUS = """
UPDATE rule_suggestions SET status = ?, reviewed_at = ?, rule_id = ? WHERE id = ?
"""


def _row_to_item(row: sqlite3.Row) -> RuleSuggestion:
    """Convert a database row to a RuleSuggestion."""
    return RuleSuggestion(
        id=row["id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        rule=SuggestedRule(sender=row["sender"], action=TriageAction(row["action"])),
        status=SuggestionStatus(row["status"]),
        reviewed_at=(
            datetime.fromisoformat(row["reviewed_at"]) if row["reviewed_at"] else None
        ),
        rule_id=row["rule_id"],
    )


class SuggestionQueue:
    """Holds the single pending rule suggestion and the decision history.

    Usage::

        with SuggestionQueue("/path/to/suggestions.db") as queue:
            if queue.pending() is None:
                queue.propose(rule)

            item = queue.pending()
            queue.accept(item.id, rule_id="rule-1722250000000")
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute(_CREATE_TABLE)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SuggestionQueue":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def propose(self, rule: SuggestedRule) -> RuleSuggestion:
        """Record a new pending suggestion.

        Raises:
            ValueError: If another suggestion is already pending.
        """
        current = self.pending()
        if current is not None:
            raise ValueError(
                f"Suggestion {current.id} is still pending; accept or decline it first"
            )

        item_id = str(uuid.uuid4())
        now = datetime.now(UTC)
        self._conn.execute(
            _INSERT,
            (
                item_id,
                now.isoformat(),
                rule.sender,
                rule.action.value,
                SuggestionStatus.PENDING.value,
            ),
        )
        self._conn.commit()

        logger.info(
            "Suggested rule %s -> %s (suggestion_id=%s)",
            rule.sender,
            rule.action.value,
            item_id,
        )
        return RuleSuggestion(id=item_id, created_at=now, rule=rule)

    def get(self, item_id: str) -> RuleSuggestion | None:
        """Fetch a single suggestion by ID."""
        row = self._conn.execute(_SELECT_BY_ID, (item_id,)).fetchone()
        if row is None:
            return None
        return _row_to_item(row)

    def pending(self) -> RuleSuggestion | None:
        """Return the pending suggestion, or None when idle."""
        row = self._conn.execute(_SELECT_PENDING).fetchone()
        if row is None:
            return None
        return _row_to_item(row)

    def count_pending(self) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM rule_suggestions WHERE status = 'pending'"
        ).fetchone()
        return row[0]

    def declined_rules(self) -> list[SuggestedRule]:
        """Rules the user has turned down, oldest first, without duplicates."""
        rows = self._conn.execute(_SELECT_DECLINED).fetchall()
        seen: dict[tuple[str, str], SuggestedRule] = {}
        for row in rows:
            rule = _row_to_item(row).rule
            seen.setdefault((rule.sender, rule.action.value), rule)
        return list(seen.values())

    def list_all(self, limit: int = 50) -> list[RuleSuggestion]:
        """List suggestions, newest first."""
        rows = self._conn.execute(_SELECT_ALL, (limit,)).fetchall()
        return [_row_to_item(r) for r in rows]

    def accept(self, item_id: str, *, rule_id: str) -> RuleSuggestion:
        """Mark a suggestion as accepted, linking the confirmed rule.

        Raises:
            ValueError: If the suggestion doesn't exist or isn't pending.
        """
        return self._set_status(item_id, SuggestionStatus.ACCEPTED, rule_id)

    def decline(self, item_id: str) -> RuleSuggestion:
        """Mark a suggestion as declined.

        Raises:
            ValueError: If the suggestion doesn't exist or isn't pending.
        """
        return self._set_status(item_id, SuggestionStatus.DECLINED, None)

    def _set_status(
        self,
        item_id: str,
        status: SuggestionStatus,
        rule_id: str | None,
    ) -> RuleSuggestion:
        item = self.get(item_id)
        if item is None:
            raise ValueError(f"Suggestion not found: {item_id}")
        if item.status != SuggestionStatus.PENDING:
            raise ValueError(
                f"Cannot mark suggestion {item_id} {status.value}: "
                f"current status is {item.status.value}"
            )

        now = datetime.now(UTC)
        self._conn.execute(_UPDATE_STATUS, (status.value, now.isoformat(), rule_id, item_id))
        self._conn.commit()

        logger.info("Rule suggestion %s: %s", item_id, status.value)

        item.status = status
        item.reviewed_at = now
        item.rule_id = rule_id
        return item
