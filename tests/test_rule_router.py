"""Tests for the rule router (agentic_mailbox/router/rules.py)."""

from helpers import make_email

from agentic_mailbox.router.rules import apply_rules, match_rule, status_for_action
from agentic_mailbox.schemas.mailbox import EmailStatus
from agentic_mailbox.schemas.triage import TriageAction, TriageRule


def _rule(rule_id: str, sender: str, action: TriageAction) -> TriageRule:
    return TriageRule(id=rule_id, sender=sender, action=action)


class TestStatusForAction:
    def test_delete_goes_to_trash(self):
        assert status_for_action(TriageAction.DELETE) == EmailStatus.TRASH

    def test_archive_goes_to_archived(self):
        assert status_for_action(TriageAction.ARCHIVE) == EmailStatus.ARCHIVED


class TestMatchRule:
    def test_exact_sender_match(self):
        rule = _rule("r1", "Figma", TriageAction.ARCHIVE)
        assert match_rule(make_email(sender="Figma"), [rule]) == rule

    def test_case_sensitive(self):
        rule = _rule("r1", "Figma", TriageAction.ARCHIVE)
        assert match_rule(make_email(sender="figma"), [rule]) is None

    def test_matches_display_name_not_address(self):
        rule = _rule("r1", "figma@example.com", TriageAction.ARCHIVE)
        assert match_rule(make_email(sender="Figma"), [rule]) is None

    def test_first_rule_wins(self):
        first = _rule("r1", "Figma", TriageAction.ARCHIVE)
        second = _rule("r2", "Figma", TriageAction.DELETE)
        assert match_rule(make_email(sender="Figma"), [first, second]) == first

    def test_no_rules(self):
        assert match_rule(make_email(), []) is None


class TestApplyRules:
    def test_applies_to_unread_only(self):
        emails = [
            make_email("1", sender="Slack"),
            make_email("2", sender="Slack", status=EmailStatus.READ),
            make_email("3", sender="Slack", status=EmailStatus.IMPORTANT),
        ]
        rules = [_rule("r1", "Slack", TriageAction.DELETE)]

        updated, applications = apply_rules(emails, rules)

        assert [e.status for e in updated] == [
            EmailStatus.TRASH,
            EmailStatus.READ,
            EmailStatus.IMPORTANT,
        ]
        assert len(applications) == 1
        assert applications[0].email_id == "1"
        assert applications[0].rule_id == "r1"
        assert applications[0].new_status == EmailStatus.TRASH

    def test_unmatched_emails_pass_through(self):
        emails = [make_email("1", sender="Jane Doe"), make_email("2", sender="Framer")]
        rules = [_rule("r1", "Framer", TriageAction.ARCHIVE)]

        updated, applications = apply_rules(emails, rules)

        assert updated[0] is emails[0]
        assert updated[1].status == EmailStatus.ARCHIVED
        assert [a.email_id for a in applications] == ["2"]

    def test_preserves_order(self):
        emails = [make_email(str(i), sender="Framer") for i in range(5)]
        updated, _ = apply_rules(emails, [_rule("r1", "Framer", TriageAction.ARCHIVE)])
        assert [e.id for e in updated] == ["0", "1", "2", "3", "4"]

    def test_inputs_not_mutated(self):
        emails = [make_email("1", sender="Framer")]
        apply_rules(emails, [_rule("r1", "Framer", TriageAction.ARCHIVE)])
        assert emails[0].status == EmailStatus.UNREAD

    def test_no_rules_no_changes(self):
        emails = [make_email("1")]
        updated, applications = apply_rules(emails, [])
        assert updated == emails
        assert applications == []
