"""TranscriptStore for persisting completed chat session summaries.

The store is a process-wide resource with an explicit lifecycle:
- created once in the application lifespan
- open() prepares the storage directory; until it has run, save() and load()
  raise StoreNotReadyError
- close() is called on shutdown

Each save writes one JSON document: <session_id>-<record_id>.json
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from toolchat_server.errors import StoreNotReadyError, ValidationError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

ANONYMOUS_USER = "anonymous"


def _parse_timestamp(value: str | None, field_name: str) -> str | None:
    """Normalize an ISO 8601 timestamp to UTC with a trailing Z.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError(
            f"Invalid timestamp for {field_name}: {value!r}",
            details={"field": field_name},
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class SessionSummary:
    """A completed chat session as submitted for storage."""

    session_id: str | None
    bot_id: str | None
    messages: list[dict[str, Any]] = field(default_factory=list)
    user_id: str | None = None
    start_time: str | None = None
    end_time: str | None = None

    def validate(self) -> None:
        """Check that the summary is complete.

        Raises:
            ValidationError: If identifiers are missing, the message list is
                empty, the session id is unsafe or a timestamp is invalid
        """
        missing = [
            name
            for name, value in (("session_id", self.session_id), ("bot_id", self.bot_id))
            if not value
        ]
        if not self.messages:
            missing.append("messages")
        if missing:
            raise ValidationError(
                "Incomplete transcript data", details={"missing": missing}
            )

        if not _SAFE_ID.match(self.session_id or ""):
            raise ValidationError(
                f"Invalid session id: {self.session_id!r}",
                details={"field": "session_id"},
            )

        _parse_timestamp(self.start_time, "start_time")
        _parse_timestamp(self.end_time, "end_time")

    def to_record(self) -> dict[str, Any]:
        """Build the document that is written to storage."""
        return {
            "session_id": self.session_id,
            "user_id": self.user_id or ANONYMOUS_USER,
            "bot_id": self.bot_id,
            "start_time": _parse_timestamp(self.start_time, "start_time"),
            "end_time": _parse_timestamp(self.end_time, "end_time"),
            "messages": self.messages,
            "logged_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }


class TranscriptStore:
    """Durable storage for session summaries, one JSON file per save."""

    def __init__(self, transcripts_dir: Path):
        """Initialize the TranscriptStore.

        Args:
            transcripts_dir: Directory where transcript JSON files are stored
        """
        self.transcripts_dir = transcripts_dir
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def open(self) -> None:
        """Prepare the storage directory and mark the store ready."""
        self.transcripts_dir.mkdir(parents=True, exist_ok=True)
        self._ready = True
        logger.info(f"Transcript store opened at {self.transcripts_dir}")

    def close(self) -> None:
        self._ready = False
        logger.info("Transcript store closed")

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotReadyError("Transcript store is not initialized")

    def save(self, summary: SessionSummary) -> str:
        """Validate and persist a session summary.

        Validation happens before anything is written.

        Args:
            summary: The session summary to store

        Returns:
            The session id of the stored summary

        Raises:
            ValidationError: If the summary is incomplete
            StoreNotReadyError: If open() has not been called
        """
        summary.validate()
        self._require_ready()

        record = summary.to_record()
        record_id = uuid.uuid4().hex[:10]
        file_path = self.transcripts_dir / f"{summary.session_id}-{record_id}.json"

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2, ensure_ascii=False)

        logger.info(
            f"Saved transcript for session {summary.session_id} "
            f"({len(summary.messages)} messages) to {file_path}"
        )
        return summary.session_id  # type: ignore[return-value]

    def load(self, session_id: str) -> list[dict[str, Any]]:
        """Load all stored records for a session, oldest first.

        Raises:
            ValidationError: If the session id is unsafe
            FileNotFoundError: If nothing is stored for the session
            StoreNotReadyError: If open() has not been called
        """
        if not _SAFE_ID.match(session_id):
            raise ValidationError(
                f"Invalid session id: {session_id!r}", details={"field": "session_id"}
            )
        self._require_ready()

        records = []
        for file_path in self.transcripts_dir.glob(f"{session_id}-*.json"):
            with open(file_path, "r", encoding="utf-8") as f:
                record = json.load(f)
            # Prefix match could also pick up "<session_id>-x" sessions
            if record.get("session_id") == session_id:
                records.append(record)

        if not records:
            raise FileNotFoundError(f"No transcripts stored for session {session_id}")

        records.sort(key=lambda r: r.get("logged_at", ""))
        logger.debug(f"Loaded {len(records)} transcripts for session {session_id}")
        return records
