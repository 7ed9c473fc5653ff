"""Single source of truth for all configuration.

All modules import from here - never from os.environ directly.

Values come from a plain .env file at the project root (or the file named
by MAILBOX_ENV_FILE). A missing file leaves every setting at its default.
"""

import os
from pathlib import Path

from dotenv import dotenv_values

PROJECT_ROOT = Path(__file__).resolve().parent.parent

ENV_FILE = Path(os.environ.get("MAILBOX_ENV_FILE", str(PROJECT_ROOT / ".env")))


def _load(path: Path) -> dict[str, str | None]:
    """Load key-value pairs from a .env file, or nothing if it is absent."""
    if not path.exists():
        return {}
    return dict(dotenv_values(path))


_env = _load(ENV_FILE)

DATA_DIR = Path(_env.get("MAILBOX_DATA_DIR") or PROJECT_ROOT / "data")

# --- Stores ---
MAILBOX_PATH: str = _env.get("MAILBOX_PATH") or str(DATA_DIR / "mailbox.json")
ACTION_LOG_PATH: str = _env.get("ACTION_LOG_PATH") or str(DATA_DIR / "action_log.jsonl")
RULES_PATH: str = _env.get("RULES_PATH") or str(DATA_DIR / "rules.json")
SUGGESTIONS_DB_PATH: str = _env.get("SUGGESTIONS_DB_PATH") or str(DATA_DIR / "suggestions.db")
TRIAGE_AUDIT_LOG_PATH: str = _env.get("TRIAGE_AUDIT_LOG_PATH") or str(
    DATA_DIR / "triage_audit.jsonl"
)
