"""CLI entry point for the agentic mailbox triage loop.

Commands:
    mailbox inbox           - list unread (or all) emails
    mailbox archive/delete  - triage emails by hand (single actions are learned from)
    mailbox suggest         - show the pending rule suggestion, detecting one if idle
    mailbox accept/decline  - decide on the pending suggestion
    mailbox review          - interactively decide on the pending suggestion
    mailbox rules           - list or delete active rules
    mailbox apply           - auto-triage unread mail with active rules
    mailbox log             - show recent manual actions
    mailbox status          - quick overview
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import click

from agentic_mailbox.action_log import ActionLog
from agentic_mailbox.audit.triage_logger import TriageAuditLog
from agentic_mailbox.config import (
    ACTION_LOG_PATH,
    MAILBOX_PATH,
    RULES_PATH,
    SUGGESTIONS_DB_PATH,
    TRIAGE_AUDIT_LOG_PATH,
)
from agentic_mailbox.mailbox import MailboxStore
from agentic_mailbox.queue.suggestions import SuggestionQueue
from agentic_mailbox.rule_store import RuleStore
from agentic_mailbox.schemas.triage import RuleSuggestion, TriageAction

logger = logging.getLogger("agentic_mailbox")


@dataclass
class _Stores:
    mailbox: MailboxStore
    action_log: ActionLog
    rule_store: RuleStore
    suggestions: SuggestionQueue
    audit_log: TriageAuditLog


@contextmanager
def _open_stores() -> Iterator[_Stores]:
    """Open every store the triage loop needs for one command."""
    with SuggestionQueue(SUGGESTIONS_DB_PATH) as suggestions:
        yield _Stores(
            mailbox=MailboxStore.load(MAILBOX_PATH),
            action_log=ActionLog(ACTION_LOG_PATH),
            rule_store=RuleStore.load(RULES_PATH),
            suggestions=suggestions,
            audit_log=TriageAuditLog(TRIAGE_AUDIT_LOG_PATH),
        )


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _echo_suggestion(item: RuleSuggestion) -> None:
    verb = item.rule.action.value.lower()
    click.echo("Automation suggestion:")
    click.echo(
        f"  You've {verb}d several emails from {item.rule.sender}. "
        f"Automatically {verb} them in the future?"
    )
    click.echo("  Run 'mailbox accept' or 'mailbox decline'.")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Agentic mailbox - learns triage rules from how you archive and delete."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ------------------------------------------------------------------
# mailbox inbox
# ------------------------------------------------------------------


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Include read, archived and trashed mail.")
def inbox(show_all: bool) -> None:
    """List emails in the mailbox snapshot."""
    mailbox = MailboxStore.load(MAILBOX_PATH)
    emails = mailbox.emails if show_all else mailbox.unread()
    if not emails:
        click.echo("No emails to show.")
        return

    for email in emails:
        click.echo(f"[{email.id}] {email.status.value:<9} {email.sender}: {email.subject}")


# ------------------------------------------------------------------
# mailbox archive / delete
# ------------------------------------------------------------------


def _triage(email_ids: tuple[str, ...], action: TriageAction) -> None:
    from agentic_mailbox.orchestrator.triage_pipelines import triage_manually

    bulk = len(email_ids) > 1
    suggestion: RuleSuggestion | None = None

    with _open_stores() as stores:
        missing = [email_id for email_id in email_ids if stores.mailbox.get(email_id) is None]
        if missing:
            _fail(f"Email not found: {', '.join(missing)}")

        for email_id in email_ids:
            result = triage_manually(
                email_id,
                action,
                mailbox=stores.mailbox,
                action_log=stores.action_log,
                rule_store=stores.rule_store,
                suggestions=stores.suggestions,
                audit_log=stores.audit_log,
                bulk=bulk,
            )
            click.echo(f"{action.value.capitalize()}d email {email_id}.")
            suggestion = result.suggestion

    if suggestion is not None:
        click.echo()
        _echo_suggestion(suggestion)


@cli.command()
@click.argument("email_ids", nargs=-1, required=True)
def archive(email_ids: tuple[str, ...]) -> None:
    """Archive one or more emails. Several ids make a bulk action."""
    _triage(email_ids, TriageAction.ARCHIVE)


@cli.command()
@click.argument("email_ids", nargs=-1, required=True)
def delete(email_ids: tuple[str, ...]) -> None:
    """Delete one or more emails. Several ids make a bulk action."""
    _triage(email_ids, TriageAction.DELETE)


# ------------------------------------------------------------------
# mailbox suggest / accept / decline / review
# ------------------------------------------------------------------


@cli.command()
def suggest() -> None:
    """Show the pending rule suggestion, detecting one if none is pending."""
    from agentic_mailbox.orchestrator.triage_pipelines import refresh_suggestion

    with _open_stores() as stores:
        item = refresh_suggestion(
            action_log=stores.action_log,
            rule_store=stores.rule_store,
            suggestions=stores.suggestions,
            audit_log=stores.audit_log,
        )

    if item is None:
        click.echo("No rule suggestion.")
        return
    _echo_suggestion(item)


@cli.command()
def accept() -> None:
    """Accept the pending suggestion as an active rule."""
    from agentic_mailbox.orchestrator.triage_pipelines import accept_suggestion

    with _open_stores() as stores:
        try:
            rule = accept_suggestion(
                rule_store=stores.rule_store,
                suggestions=stores.suggestions,
                audit_log=stores.audit_log,
            )
        except ValueError as exc:
            _fail(str(exc))

    click.echo(f"Automation rule for {rule.sender} created ({rule.id}).")


@cli.command()
def decline() -> None:
    """Decline the pending suggestion."""
    from agentic_mailbox.orchestrator.triage_pipelines import decline_suggestion

    with _open_stores() as stores:
        try:
            item = decline_suggestion(
                suggestions=stores.suggestions,
                audit_log=stores.audit_log,
            )
        except ValueError as exc:
            _fail(str(exc))

    click.echo(f"Declined rule for {item.rule.sender}. It won't be suggested again.")


@cli.command()
def review() -> None:
    """Interactively accept or decline rule suggestions until none remain."""
    from agentic_mailbox.orchestrator.triage_pipelines import (
        accept_suggestion,
        decline_suggestion,
        refresh_suggestion,
    )

    accepted = 0
    declined = 0

    with _open_stores() as stores:
        while True:
            item = refresh_suggestion(
                action_log=stores.action_log,
                rule_store=stores.rule_store,
                suggestions=stores.suggestions,
                audit_log=stores.audit_log,
            )
            if item is None:
                if accepted + declined == 0:
                    click.echo("No rule suggestions to review.")
                break

            verb = item.rule.action.value.lower()
            click.echo(f"--- {item.rule.sender}: always {verb} ---")
            choice = click.prompt(
                "  Action",
                type=click.Choice(["a", "d", "s"], case_sensitive=False),
                prompt_suffix=" [a]ccept / [d]ecline / [s]kip: ",
            )

            if choice == "a":
                try:
                    rule = accept_suggestion(
                        rule_store=stores.rule_store,
                        suggestions=stores.suggestions,
                        audit_log=stores.audit_log,
                    )
                except ValueError as exc:
                    _fail(str(exc))
                click.echo(f"  -> Rule {rule.id} created.")
                accepted += 1
            elif choice == "d":
                decline_suggestion(suggestions=stores.suggestions, audit_log=stores.audit_log)
                click.echo("  -> Declined.")
                declined += 1
            else:
                click.echo("  -> Skipped. The suggestion stays pending.")
                break

    if accepted + declined:
        click.echo(f"\nReview complete. Accepted: {accepted}, Declined: {declined}")


# ------------------------------------------------------------------
# mailbox rules
# ------------------------------------------------------------------


@cli.group()
def rules() -> None:
    """Manage active triage rules."""


@rules.command("list")
def rules_list() -> None:
    """List active rules."""
    store = RuleStore.load(RULES_PATH)
    if not store.rules:
        click.echo("No active rules.")
        return

    for rule in store.rules:
        click.echo(f"{rule.id}  {rule.action.value:<7} {rule.sender}")


@rules.command("delete")
@click.argument("rule_id")
def rules_delete(rule_id: str) -> None:
    """Delete an active rule."""
    from agentic_mailbox.orchestrator.triage_pipelines import delete_rule

    try:
        rule = delete_rule(
            rule_id,
            rule_store=RuleStore.load(RULES_PATH),
            audit_log=TriageAuditLog(TRIAGE_AUDIT_LOG_PATH),
        )
    except KeyError as exc:
        _fail(exc.args[0])

    click.echo(f"Rule deleted: {rule.sender} ({rule.action.value}).")


# ------------------------------------------------------------------
# mailbox apply
# ------------------------------------------------------------------


@cli.command()
def apply() -> None:
    """Apply active rules to unread mail."""
    from agentic_mailbox.orchestrator.triage_pipelines import run_rule_application

    result = run_rule_application(
        mailbox=MailboxStore.load(MAILBOX_PATH),
        rule_store=RuleStore.load(RULES_PATH),
        audit_log=TriageAuditLog(TRIAGE_AUDIT_LOG_PATH),
        on_progress=click.echo,
    )
    click.echo(f"\nDone. Scanned: {result.scanned}, Applied: {result.applied}")


# ------------------------------------------------------------------
# mailbox log
# ------------------------------------------------------------------


@cli.command("log")
@click.option("--limit", "-n", default=20, show_default=True, help="Max entries to show.")
def show_log(limit: int) -> None:
    """Show recent manual actions used for rule detection."""
    entries = ActionLog(ACTION_LOG_PATH).read_entries(limit=limit)
    if not entries:
        click.echo("Action log is empty.")
        return

    for entry in entries:
        click.echo(
            f"{entry.timestamp:%Y-%m-%d %H:%M:%S}  {entry.action.value:<7} "
            f"{entry.sender} (email {entry.email_id})"
        )


# ------------------------------------------------------------------
# mailbox status
# ------------------------------------------------------------------


@cli.command()
def status() -> None:
    """Quick overview of the mailbox, rules and suggestions."""
    with _open_stores() as stores:
        pending = stores.suggestions.pending()
        click.echo("Mailbox Status")
        click.echo(f"  Unread emails:      {len(stores.mailbox.unread())}")
        click.echo(f"  Logged actions:     {stores.action_log.count()}")
        click.echo(f"  Active rules:       {len(stores.rule_store.rules)}")
        if pending is None:
            click.echo("  Pending suggestion: none")
        else:
            click.echo(
                f"  Pending suggestion: {pending.rule.action.value} {pending.rule.sender}"
            )
