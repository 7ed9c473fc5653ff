"""Rule detector executor: infers a per-sender triage rule from the action log.

Stateless: receives the full action log and the rules to exclude, returns at
most one suggestion. No side effects, no logging, no I/O. Callers own the log,
the rule store and the pending-suggestion state.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from agentic_mailbox.schemas.triage import ActionLogEntry, SuggestedRule, TriageAction

# Minimum number of actions, both overall and per sender, before a pattern counts.
MIN_ACTIONS_FOR_RULE = 3


class RuleLike(Protocol):
    """Anything carrying a (sender, action) pair: TriageRule or SuggestedRule."""

    sender: str
    action: TriageAction


def group_actions_by_sender(
    log: Sequence[ActionLogEntry],
) -> dict[str, list[TriageAction]]:
    """Partition actions by exact sender string.

    Dict order follows each sender's first appearance in the log; each list
    keeps log order.
    """
    by_sender: dict[str, list[TriageAction]] = {}
    for entry in log:
        by_sender.setdefault(entry.sender, []).append(entry.action)
    return by_sender


def detect_rule(
    log: Sequence[ActionLogEntry],
    active_rules: Iterable[RuleLike],
) -> SuggestedRule | None:
    """Suggest a rule for the first sender with a unanimous pattern.

    A sender qualifies when it has at least ``MIN_ACTIONS_FOR_RULE`` actions,
    every one of them identical, and no rule in ``active_rules`` already
    carries the same (sender, action) pair. Senders are checked in order of
    first appearance and only the first qualifying one is returned.

    Args:
        log: Complete action history observed so far.
        active_rules: Confirmed rules, plus any pairs the caller wants
            excluded (e.g. declined suggestions).

    Returns:
        The suggested rule, or None if no pattern is found.
    """
    if len(log) < MIN_ACTIONS_FOR_RULE:
        return None

    existing = {(rule.sender, rule.action) for rule in active_rules}

    for sender, actions in group_actions_by_sender(log).items():
        if len(actions) < MIN_ACTIONS_FOR_RULE:
            continue

        candidate = actions[0]
        # A single dissenting action disqualifies the sender.
        if any(action != candidate for action in actions):
            continue

        if (sender, candidate) not in existing:
            return SuggestedRule(sender=sender, action=candidate)

    return None
