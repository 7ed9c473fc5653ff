"""File helpers shared by the JSON and JSONL backed stores."""

import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

RecordT = TypeVar("RecordT", bound=BaseModel)


def atomic_write_text(path: Path, content: str) -> None:
    """Atomic write: temp file + rename to prevent corruption."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp_path, str(path))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def read_jsonl(
    path: Path,
    model: type[RecordT],
    *,
    since: datetime | None = None,
    limit: int | None = None,
) -> list[RecordT]:
    """Read timestamped records from a JSON Lines file.

    Blank lines are skipped and a missing file reads as empty.

    Args:
        path: The JSONL file.
        model: Record model; must carry a ``timestamp`` field.
        since: Only return records strictly after this timestamp.
        limit: Keep only the last ``limit`` records after filtering.

    Returns:
        Records in file order (oldest first).
    """
    if not path.exists():
        return []

    records: list[RecordT] = []
    with path.open() as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            record = model.model_validate_json(line)
            if since and record.timestamp <= since:
                continue
            records.append(record)

    if limit is not None:
        records = records[-limit:]

    return records
