"""Interaction log — durable JSON Lines record of every write action.

Only mutations are logged: posts, replies, threads, likes/unlikes, follows,
DMs and deletes. Reads (search, profiles, mentions, DM history) never are.
The agent reads this back through x_get_interaction_log to see what it has
already done and avoid repeating itself.

Logging is strictly best-effort relative to the action it records:
  - log() and clear() never raise. Filesystem errors are dropped and only
    noted at DEBUG level.
  - get_entries() never raises. A missing or unreadable file reads as empty;
    a corrupt line is skipped and the rest of the history is kept. Bytes
    that are not valid UTF-8 are replaced rather than failing the read.

Timestamps are UTC ISO-8601 with a "Z" suffix, the same form the
rate-limit payloads use.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from clawbird.models import AuditEntry

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = "clawbird-interactions.jsonl"
LOG_PATH_ENV_VAR = "CLAWBIRD_LOG_PATH"


def default_log_path() -> str:
    """Log location: CLAWBIRD_LOG_PATH if set, else a file in the working directory."""
    return os.environ.get(LOG_PATH_ENV_VAR) or DEFAULT_LOG_PATH


class AuditLog:
    """Append-only JSONL log bound to a single file for its lifetime."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else Path(default_log_path())
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_path(self) -> str:
        return str(self._path)

    def log(self, action: str, summary: str, details: dict[str, Any] | None = None) -> None:
        """Append one entry stamped with the current UTC time. Never raises."""
        entry = AuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            action=action,
            summary=summary,
            details=details or {},
        )
        try:
            line = json.dumps(entry.model_dump(), default=str)
            with self._lock, self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except (OSError, TypeError, ValueError) as e:
            logger.debug(f"Interaction log write to {self._path} dropped: {e}")

    def get_entries(self) -> list[AuditEntry]:
        """Return every entry in write order, skipping lines that don't parse."""
        try:
            content = self._path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return []

        entries: list[AuditEntry] = []
        for lineno, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                entries.append(AuditEntry.model_validate(json.loads(line)))
            except (ValueError, PydanticValidationError) as e:
                logger.warning(
                    f"Skipping corrupt interaction log line {lineno} in {self._path}: {e}"
                )
        return entries

    def clear(self) -> None:
        """Truncate the log file. Never raises."""
        try:
            with self._lock:
                self._path.write_text("", encoding="utf-8")
        except OSError as e:
            logger.debug(f"Interaction log clear of {self._path} dropped: {e}")
