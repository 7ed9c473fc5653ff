"""Tests for the mailbox snapshot store."""

import json

import pytest
from helpers import make_email

from agentic_mailbox.mailbox import MailboxStore
from agentic_mailbox.schemas.mailbox import EmailStatus, MailboxFile


@pytest.fixture
def mailbox_path(tmp_path):
    path = tmp_path / "mailbox.json"
    data = MailboxFile(
        emails=[
            make_email("1", sender="GitHub"),
            make_email("2", sender="Elon Musk", status=EmailStatus.READ),
            make_email("3", sender="Notion"),
        ]
    )
    path.write_text(json.dumps(data.model_dump(mode="json")))
    return path


class TestLoad:
    def test_load(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        assert [e.id for e in mailbox.emails] == ["1", "2", "3"]

    def test_missing_file(self, tmp_path):
        assert MailboxStore.load(tmp_path / "none.json").emails == []

    def test_unread(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        assert [e.id for e in mailbox.unread()] == ["1", "3"]

    def test_get(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        assert mailbox.get("2").sender == "Elon Musk"
        assert mailbox.get("99") is None


class TestUpdate:
    def test_set_status_and_save(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        updated = mailbox.set_status("1", EmailStatus.ARCHIVED)
        mailbox.save()

        assert updated.status == EmailStatus.ARCHIVED
        reloaded = MailboxStore.load(mailbox_path)
        assert reloaded.get("1").status == EmailStatus.ARCHIVED

    def test_set_status_unknown_id(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        with pytest.raises(KeyError):
            mailbox.set_status("99", EmailStatus.TRASH)

    def test_replace(self, mailbox_path):
        mailbox = MailboxStore.load(mailbox_path)
        mailbox.replace([make_email("10")])
        assert [e.id for e in mailbox.emails] == ["10"]
