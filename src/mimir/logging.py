"""JSONL audit log of memory writes and agent events."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Write paths into the memory store
DIRECT = "direct"
REVIEWED = "reviewed"
TOOL = "tool"


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    session_id: str | None = None
    write_path: str | None = None
    action: str | None = None
    record_id: str | None = None
    reasoning: str | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Logger that writes structured logs in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "audit.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".mimir" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_session_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_session_id(self, session_id: str | None) -> None:
        """Set the current session_id for all subsequent logs."""
        self._current_session_id = session_id

    def _rotate_if_needed(self) -> None:
        """Move the log aside once it reaches max size.

        Rotated files are named ``<stem>_<UTC timestamp>[_<n>].jsonl``; the
        counter keeps rotations within the same second apart.
        """
        if not self.log_path.exists() or self.log_path.stat().st_size < self.max_size_bytes:
            return

        stem = f"{self.log_path.stem}_{datetime.now(timezone.utc):%Y%m%d_%H%M%S}"
        target = self.log_dir / f"{stem}.jsonl"
        counter = 1
        while target.exists():
            target = self.log_dir / f"{stem}_{counter}.jsonl"
            counter += 1
        self.log_path.rename(target)

    def _write(self, entry: LogEntry) -> None:
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        session_id: str | None = None,
        write_path: str | None = None,
        action: str | None = None,
        record_id: str | None = None,
        reasoning: str | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            session_id=session_id or self._current_session_id,
            write_path=write_path,
            action=action,
            record_id=record_id,
            reasoning=reasoning,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_memory_write(
        self,
        write_path: str,
        action: str,
        record_id: str | None,
        *,
        session_id: str | None = None,
        reasoning: str | None = None,
        **extra: Any,
    ) -> None:
        """Log a write into the memory store and the path it came through.

        Args:
            write_path: DIRECT (unreviewed command), REVIEWED (model
                decision) or TOOL (memory tool call).
            action: What happened to the record, e.g. "created".
            record_id: The record touched, if any.
        """
        self.log(
            "memory_write",
            session_id=session_id,
            write_path=write_path,
            action=action,
            record_id=record_id,
            reasoning=reasoning,
            **extra,
        )

    def log_memory_update_failed(
        self,
        error: str,
        *,
        session_id: str | None = None,
    ) -> None:
        """Log a failed memory-update decision."""
        self.log("memory_update_failed", session_id=session_id, error=error)


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
