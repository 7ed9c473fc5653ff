"""Pipeline handlers for the triage-rule loop.

Each handler takes the stores it touches as keyword arguments and returns
a typed result. The CLI calls these; nothing here talks to a mail provider.

State machine for suggestions (held by SuggestionQueue):

    Idle --(detector finds a rule)--> Suggested(rule)
    Suggested --accept--> Idle (rule added to the RuleStore)
    Suggested --decline--> Idle (pair excluded from later detection)
"""

import logging
from collections.abc import Callable

from agentic_mailbox.action_log import ActionLog
from agentic_mailbox.audit.triage_logger import TriageAuditLog
from agentic_mailbox.executors.rule_detector import detect_rule
from agentic_mailbox.mailbox import MailboxStore
from agentic_mailbox.queue.suggestions import SuggestionQueue
from agentic_mailbox.router.rules import apply_rules, status_for_action
from agentic_mailbox.rule_store import RuleStore
from agentic_mailbox.schemas.triage import (
    ManualTriageResult,
    RuleApplicationResult,
    RuleSuggestion,
    TriageAction,
    TriageRule,
)

logger = logging.getLogger(__name__)


def refresh_suggestion(
    *,
    action_log: ActionLog,
    rule_store: RuleStore,
    suggestions: SuggestionQueue,
    audit_log: TriageAuditLog,
) -> RuleSuggestion | None:
    """Return the pending suggestion, detecting a new one if idle.

    While a suggestion is pending the detector is not consulted. Declined
    pairs are passed to the detector alongside the active rules so they are
    never offered again.
    """
    pending = suggestions.pending()
    if pending is not None:
        return pending

    excluded = [*rule_store.rules, *suggestions.declined_rules()]
    rule = detect_rule(action_log.read_entries(), excluded)
    if rule is None:
        logger.debug("No rule pattern detected")
        return None

    logger.info("Detected potential rule: %s -> %s", rule.sender, rule.action.value)
    item = suggestions.propose(rule)
    audit_log.log_suggested(rule)
    return item


def triage_manually(
    email_id: str,
    action: TriageAction,
    *,
    mailbox: MailboxStore,
    action_log: ActionLog,
    rule_store: RuleStore,
    suggestions: SuggestionQueue,
    audit_log: TriageAuditLog,
    bulk: bool = False,
) -> ManualTriageResult:
    """Archive or delete an email on the user's behalf and learn from it.

    The action is logged for rule detection only when it targets a single
    email and the sender has no active rule yet. Repeating an action on an
    email that is already in the resulting state changes nothing.

    Raises:
        KeyError: If the email is not in the mailbox.
    """
    email = mailbox.get(email_id)
    if email is None:
        raise KeyError(f"Email not found: {email_id}")

    new_status = status_for_action(action)
    if email.status == new_status:
        logger.debug("Email %s already %s, nothing to do", email_id, new_status.value)
        return ManualTriageResult(
            email_id=email_id,
            action=action,
            logged=False,
            suggestion=suggestions.pending(),
        )

    mailbox.set_status(email_id, new_status)
    mailbox.save()

    logged = False
    if bulk:
        logger.debug("Bulk %s of email %s not logged", action.value, email_id)
    elif rule_store.find(email.sender) is not None:
        logger.debug("Sender %s already covered by a rule, not logged", email.sender)
    else:
        entry = action_log.record_action(email, action)
        audit_log.log_manual_action(entry)
        logged = True

    suggestion = refresh_suggestion(
        action_log=action_log,
        rule_store=rule_store,
        suggestions=suggestions,
        audit_log=audit_log,
    )

    return ManualTriageResult(
        email_id=email_id,
        action=action,
        logged=logged,
        suggestion=suggestion,
    )


def accept_suggestion(
    *,
    rule_store: RuleStore,
    suggestions: SuggestionQueue,
    audit_log: TriageAuditLog,
) -> TriageRule:
    """Confirm the pending suggestion as an active rule.

    Raises:
        ValueError: If no suggestion is pending.
    """
    pending = suggestions.pending()
    if pending is None:
        raise ValueError("No rule suggestion is pending")

    rule = rule_store.add(pending.rule)
    suggestions.accept(pending.id, rule_id=rule.id)
    audit_log.log_accepted(rule)
    return rule


def decline_suggestion(
    *,
    suggestions: SuggestionQueue,
    audit_log: TriageAuditLog,
) -> RuleSuggestion:
    """Dismiss the pending suggestion.

    Raises:
        ValueError: If no suggestion is pending.
    """
    pending = suggestions.pending()
    if pending is None:
        raise ValueError("No rule suggestion is pending")

    item = suggestions.decline(pending.id)
    audit_log.log_declined(item.rule)
    return item


def delete_rule(
    rule_id: str,
    *,
    rule_store: RuleStore,
    audit_log: TriageAuditLog,
) -> TriageRule:
    """Remove an active rule.

    Raises:
        KeyError: If no rule has this id.
    """
    rule = rule_store.get(rule_id)
    if rule is None:
        raise KeyError(f"Rule not found: {rule_id}")

    rule_store.delete(rule_id)
    audit_log.log_rule_deleted(rule)
    return rule


def run_rule_application(
    *,
    mailbox: MailboxStore,
    rule_store: RuleStore,
    audit_log: TriageAuditLog,
    on_progress: Callable[[str], None] | None = None,
) -> RuleApplicationResult:
    """Apply active rules to every unread email in the mailbox.

    Args:
        mailbox: The mailbox snapshot; saved if anything changed.
        rule_store: Active rules.
        audit_log: Receives one entry per application.
        on_progress: Optional callback for progress messages.

    Returns:
        RuleApplicationResult with counts per action.
    """

    def _emit(msg: str) -> None:
        if on_progress:
            on_progress(msg)

    rules = rule_store.rules
    scanned = len(mailbox.unread())

    if not rules:
        _emit("No active rules.")
        return RuleApplicationResult(scanned=scanned)

    _emit(f"Applying {len(rules)} rule(s) to {scanned} unread email(s)...")
    updated, applications = apply_rules(mailbox.emails, rules)

    by_action: dict[str, int] = {}
    for application in applications:
        by_action[application.action.value] = by_action.get(application.action.value, 0) + 1
        audit_log.log_rule_applied(application)
        _emit(
            f"  {application.action.value.lower()} email {application.email_id} "
            f"from {application.sender} (rule {application.rule_id})"
        )

    if applications:
        mailbox.replace(updated)
        mailbox.save()

    logger.info(
        "Rule application: scanned=%d applied=%d", scanned, len(applications)
    )

    return RuleApplicationResult(
        scanned=scanned,
        applied=len(applications),
        by_action=by_action,
        applications=applications,
    )
