"""Event log of claim submissions and reversals kept in a JSON file."""

from __future__ import annotations

import enum
import json
import re
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

LOG_FILE_NAME = "pharmacy_events.json"

_TIMESTAMP = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})",
    re.IGNORECASE,
)


class EventType(str, enum.Enum):
    """Kinds of logged events."""

    CLAIM_SUBMITTED = "claim_submitted"
    CLAIM_REVERSED = "claim_reversed"


def _format_timestamp(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    return text + "Z"


def _parse_timestamp(text: str) -> datetime:
    match = _TIMESTAMP.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    base, fraction, zone = match.groups()
    fraction = (fraction or "")[:6].ljust(6, "0")
    zone = "+00:00" if zone.upper() == "Z" else zone
    return datetime.fromisoformat(f"{base}.{fraction}{zone}")


@dataclass(frozen=True)
class Event:
    """One logged event."""

    id: str
    type: EventType
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "timestamp": _format_timestamp(self.timestamp),
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        return cls(
            id=data["id"],
            type=EventType(data["type"]),
            timestamp=_parse_timestamp(data["timestamp"]),
            data=dict(data.get("data") or {}),
        )


class EventLogger:
    """Appends events to ``pharmacy_events.json`` inside a log directory."""

    def __init__(self, log_dir: str | Path) -> None:
        directory = Path(log_dir)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create log directory: {exc}") from exc
        self.file_path = directory / LOG_FILE_NAME
        self._lock = threading.Lock()

    def log_claim_submission(
        self, claim_id: uuid.UUID, ndc: str, npi: str, quantity: int, price: float
    ) -> Event:
        """Record that a claim was submitted."""
        return self._log(
            EventType.CLAIM_SUBMITTED,
            {
                "claim_id": str(claim_id),
                "ndc": ndc,
                "npi": npi,
                "quantity": quantity,
                "price": price,
            },
        )

    def log_claim_reversal(self, claim_id: uuid.UUID) -> Event:
        """Record that a claim was reversed."""
        return self._log(EventType.CLAIM_REVERSED, {"claim_id": str(claim_id)})

    def get_events(self) -> list[Event]:
        """Return every logged event in order."""
        with self._lock:
            return self._read()

    def get_events_by_type(self, event_type: EventType) -> list[Event]:
        """Return the logged events of one type."""
        wanted = EventType(event_type)
        return [event for event in self.get_events() if event.type is wanted]

    def _log(self, event_type: EventType, data: dict[str, Any]) -> Event:
        event = Event(
            id=str(uuid.uuid4()),
            type=event_type,
            timestamp=datetime.now(timezone.utc),
            data=data,
        )
        with self._lock:
            events = self._read()
            events.append(event)
            self._write(events)
        return event

    def _read(self) -> list[Event]:
        if not self.file_path.exists():
            return []
        try:
            text = self.file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise OSError(f"failed to read log file: {exc}") from exc
        if not text:
            return []
        try:
            raw = json.loads(text)
            return [Event.from_dict(item) for item in raw or []]
        except (ValueError, KeyError, TypeError) as exc:
            raise ValueError(f"failed to parse log file: {exc}") from exc

    def _write(self, events: list[Event]) -> None:
        payload = json.dumps(
            [event.to_dict() for event in events], indent=2, ensure_ascii=False
        )
        try:
            self.file_path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise OSError(f"failed to write log file: {exc}") from exc