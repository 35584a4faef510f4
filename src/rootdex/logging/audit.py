"""Structured JSONL audit log utilities."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

_PLAIN_STRING_KEYS = {"path", "strategy", "fallback_reason", "command"}
_INT_KEYS = {"width", "limit", "file_count", "removed"}
_BOOL_KEYS = {"silent", "search_in_path"}
_TEXT_KEYS = {"choice", "query"}


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Sanitized representation of a single command request."""

    timestamp: str
    request_id: str
    command: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]

    @classmethod
    def for_response(
        cls,
        request_id: str,
        command: str,
        response: dict[str, object],
        metadata: dict[str, object],
    ) -> AuditEvent:
        """Build an event whose outcome fields mirror a response envelope."""
        error = response.get("error")
        code = error.get("code") if isinstance(error, dict) else None
        return cls(
            timestamp=utc_timestamp(),
            request_id=request_id,
            command=command,
            ok=response.get("ok") is True,
            error_code=code if isinstance(code, str) else None,
            metadata=metadata,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), sort_keys=True) + "\n"


def utc_timestamp(now: datetime | None = None) -> str:
    """Format ``now`` (default: the current time) as ISO-8601 UTC milliseconds."""
    moment = now or datetime.now(tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Reduce arguments to loggable scalars; free text is logged by length only."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments.keys()):
        value = arguments[key]
        if key in _PLAIN_STRING_KEYS and isinstance(value, str):
            sanitized[key] = value
            continue
        if key in _INT_KEYS and isinstance(value, int) and not isinstance(value, bool):
            sanitized[key] = value
            continue
        if key in _BOOL_KEYS and isinstance(value, bool):
            sanitized[key] = value
            continue
        if key in _TEXT_KEYS and isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, list):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value.keys())
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlAuditLogger:
    """One JSON event per line under the data directory."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(event.to_json_line())

    def read(self, since: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Return the newest ``limit`` events stamped at or after ``since``.

        Lines that are blank or not valid JSON are skipped.
        """
        if limit < 1 or not self._path.exists():
            return []
        tail: deque[dict[str, object]] = deque(maxlen=limit)
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                record = _parse_line(line)
                if record is None:
                    continue
                if since is not None and not _stamped_since(record, since):
                    continue
                tail.append(record)
        return list(tail)


def _parse_line(line: str) -> dict[str, object] | None:
    stripped = line.strip()
    if not stripped:
        return None
    try:
        record = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    return record if isinstance(record, dict) else None


def _stamped_since(record: dict[str, object], since: str) -> bool:
    stamp = record.get("timestamp")
    return isinstance(stamp, str) and stamp >= since
