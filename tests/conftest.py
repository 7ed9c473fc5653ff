"""Shared fixtures for agentic mailbox tests."""

import pytest

from agentic_mailbox.action_log import ActionLog
from agentic_mailbox.audit.triage_logger import TriageAuditLog
from agentic_mailbox.queue.suggestions import SuggestionQueue
from agentic_mailbox.rule_store import RuleStore


@pytest.fixture()
def action_log(tmp_path):
    return ActionLog(tmp_path / "action_log.jsonl")


@pytest.fixture()
def rule_store(tmp_path):
    return RuleStore.load(tmp_path / "rules.json")


@pytest.fixture()
def audit_log(tmp_path):
    return TriageAuditLog(tmp_path / "triage_audit.jsonl")


@pytest.fixture()
def suggestions(tmp_path):
    with SuggestionQueue(tmp_path / "suggestions.db") as queue:
        yield queue
