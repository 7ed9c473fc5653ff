"""Schemas for the local mailbox snapshot."""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field


class EmailStatus(StrEnum):
    """Where an email currently lives in the mailbox."""

    UNREAD = "UNREAD"
    READ = "READ"
    ARCHIVED = "ARCHIVED"
    IMPORTANT = "IMPORTANT"
    TRASH = "TRASH"
    DRAFT = "DRAFT"
    SNOOZED = "SNOOZED"


class Email(BaseModel):
    """An email as shown in the mailbox list."""

    id: str
    sender: str  # display name, e.g. "GitHub"
    sender_email: str = ""
    recipient_email: str | None = None
    subject: str
    body: str = ""
    summary: str | None = None
    timestamp: datetime
    status: EmailStatus = EmailStatus.UNREAD
    category: Literal["PRIMARY", "PROMOTIONS", "UPDATES"] | None = None
    attachments: list[str] = Field(default_factory=list)


class MailboxFile(BaseModel):
    """Top-level schema for the mailbox.json snapshot."""

    emails: list[Email] = Field(default_factory=list)
