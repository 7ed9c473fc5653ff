"""Schemas for the triage-rule learning loop.

Covers the full lifecycle:
  manual archive/delete -> action log -> rule detection -> suggestion
  -> accept/decline -> active rule -> auto-triage -> audit log
"""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from agentic_mailbox.schemas.mailbox import EmailStatus


class TriageAction(StrEnum):
    """Manual triage action the user can take (and a rule can automate)."""

    DELETE = "DELETE"
    ARCHIVE = "ARCHIVE"


# --- Action log ---


class ActionLogEntry(BaseModel):
    """One manual archive/delete performed by the user. Never mutated."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    action: TriageAction
    email_id: str  # opaque; numeric ids are stored as strings
    sender: str  # display name at action time, not a normalized address
    timestamp: datetime


# --- Rules ---


class SuggestedRule(BaseModel):
    """A detected pattern: a rule shape without an id."""

    model_config = ConfigDict(frozen=True)

    sender: str
    action: TriageAction


class TriageRule(BaseModel):
    """A confirmed automation rule."""

    id: str
    sender: str
    action: TriageAction


class RulesFile(BaseModel):
    """Top-level schema for the rules.json file."""

    rules: list[TriageRule] = Field(default_factory=list)


# --- Suggestions ---


class SuggestionStatus(StrEnum):
    """Status of a rule suggestion."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class RuleSuggestion(BaseModel):
    """A suggestion surfaced to the user for accept/decline."""

    id: str = Field(description="Unique suggestion ID")
    created_at: datetime
    rule: SuggestedRule
    status: SuggestionStatus = SuggestionStatus.PENDING
    reviewed_at: datetime | None = None
    rule_id: str | None = None  # set once accepted


# --- Rule application ---


class RuleApplication(BaseModel):
    """A rule auto-applied to a single email."""

    email_id: str
    rule_id: str
    sender: str
    action: TriageAction
    new_status: EmailStatus


# --- Pipeline results ---


class RuleApplicationResult(BaseModel):
    """Pipeline result for applying active rules to unread mail."""

    scanned: int = 0
    applied: int = 0
    by_action: dict[str, int] = Field(default_factory=dict)  # action -> count
    applications: list[RuleApplication] = Field(default_factory=list)


class ManualTriageResult(BaseModel):
    """Pipeline result for a user-initiated archive/delete."""

    email_id: str
    action: TriageAction
    logged: bool  # False when bulk or already covered by a rule
    suggestion: RuleSuggestion | None = None


# --- Audit ---


class TriageAuditEntry(BaseModel):
    """A record of a rule-related event."""

    timestamp: datetime
    event: Literal[
        "manual_action",
        "suggested",
        "accepted",
        "declined",
        "rule_deleted",
        "rule_applied",
    ]
    sender: str
    action: TriageAction
    rule_id: str | None = None
    email_id: str | None = None
