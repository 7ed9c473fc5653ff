"""Store of confirmed triage rules.

Loads rules from a JSON file, assigns ids on acceptance, and supports
lookup and deletion with atomic saves.
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from agentic_mailbox.schemas.triage import RulesFile, SuggestedRule, TriageRule
from agentic_mailbox.storage import atomic_write_text

logger = logging.getLogger(__name__)


class RuleStore:
    """Authoritative set of active triage rules, in acceptance order.

    Usage::

        store = RuleStore.load("data/rules.json")
        rule = store.add(SuggestedRule(sender="Promo Co", action="DELETE"))
        store.delete(rule.id)
    """

    def __init__(self, data: RulesFile, path: Path) -> None:
        self._data = data
        self._path = path

    @classmethod
    def load(cls, path: str | Path) -> "RuleStore":
        """Load rules from a JSON file.

        If the file does not exist, returns a store with no rules.
        """
        path = Path(path)
        if not path.exists():
            logger.info("Rules file not found at %s, starting with no rules", path)
            return cls(RulesFile(), path)

        data = RulesFile.model_validate(json.loads(path.read_text()))
        logger.info("Loaded %d rule(s) from %s", len(data.rules), path)
        return cls(data, path)

    @property
    def rules(self) -> list[TriageRule]:
        """Snapshot of the active rules."""
        return list(self._data.rules)

    def get(self, rule_id: str) -> TriageRule | None:
        """Fetch a rule by id."""
        for rule in self._data.rules:
            if rule.id == rule_id:
                return rule
        return None

    def find(self, sender: str) -> TriageRule | None:
        """Return the first rule for an exact sender string, if any."""
        for rule in self._data.rules:
            if rule.sender == sender:
                return rule
        return None

    def add(self, suggested: SuggestedRule, *, now: datetime | None = None) -> TriageRule:
        """Confirm a suggested rule, assigning it an id. Saves to disk.

        Ids take the form ``rule-<epoch milliseconds>``; a numeric suffix
        keeps them unique when two rules are added within the same millisecond.

        Raises:
            ValueError: If a rule with the same sender and action already exists.
        """
        for rule in self._data.rules:
            if rule.sender == suggested.sender and rule.action == suggested.action:
                raise ValueError(
                    f"Rule already exists for {suggested.sender!r} ({suggested.action.value})"
                )

        now = now or datetime.now(UTC)
        rule = TriageRule(
            id=self._next_id(now),
            sender=suggested.sender,
            action=suggested.action,
        )
        self._data.rules.append(rule)
        self.save()
        logger.info("Added rule %s: %s -> %s", rule.id, rule.sender, rule.action.value)
        return rule

    def delete(self, rule_id: str) -> bool:
        """Remove a rule. Returns True if removed, False if not found."""
        original_len = len(self._data.rules)
        self._data.rules = [r for r in self._data.rules if r.id != rule_id]
        if len(self._data.rules) == original_len:
            return False

        self.save()
        logger.info("Deleted rule %s", rule_id)
        return True

    def save(self) -> None:
        """Write the rules file atomically."""
        content = json.dumps(self._data.model_dump(mode="json"), indent=2) + "\n"
        atomic_write_text(self._path, content)

    def _next_id(self, now: datetime) -> str:
        base = f"rule-{int(now.timestamp() * 1000)}"
        taken = {r.id for r in self._data.rules}
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate
