"""Deterministic router that applies active triage rules to unread mail.

A rule matches an email when its sender exactly equals the email's sender
display name. No I/O: returns updated copies and a record of what was applied.
"""

from collections.abc import Iterable, Sequence

from agentic_mailbox.schemas.mailbox import Email, EmailStatus
from agentic_mailbox.schemas.triage import RuleApplication, TriageAction, TriageRule

_ACTION_STATUS: dict[TriageAction, EmailStatus] = {
    TriageAction.DELETE: EmailStatus.TRASH,
    TriageAction.ARCHIVE: EmailStatus.ARCHIVED,
}


def status_for_action(action: TriageAction) -> EmailStatus:
    """Map a triage action to the mailbox status it produces."""
    return _ACTION_STATUS[action]


def match_rule(email: Email, rules: Iterable[TriageRule]) -> TriageRule | None:
    """Return the first rule whose sender matches the email, if any."""
    for rule in rules:
        if rule.sender == email.sender:
            return rule
    return None


def apply_rules(
    emails: Sequence[Email],
    rules: Sequence[TriageRule],
) -> tuple[list[Email], list[RuleApplication]]:
    """Apply rules to every unread email.

    Args:
        emails: Current mailbox contents. Not mutated.
        rules: Active rules, in store order (first match wins).

    Returns:
        Tuple of (updated email list in the same order, applications).
    """
    updated: list[Email] = []
    applications: list[RuleApplication] = []

    for email in emails:
        rule = match_rule(email, rules) if email.status == EmailStatus.UNREAD else None
        if rule is None:
            updated.append(email)
            continue

        new_status = status_for_action(rule.action)
        updated.append(email.model_copy(update={"status": new_status}))
        applications.append(
            RuleApplication(
                email_id=email.id,
                rule_id=rule.id,
                sender=rule.sender,
                action=rule.action,
                new_status=new_status,
            )
        )

    return updated, applications
