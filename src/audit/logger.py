"""Delivery audit trail: hash-chained JSON Lines for webhook and send events."""

from __future__ import annotations

import fcntl
import hashlib
import json
import os
from dataclasses import dataclass
from pathlib import Path

from src.models import AuditEvent, AuditEventType


@dataclass
class ChainValidationResult:
    valid: bool
    broken_at_line: int | None = None


def _digest(line: str) -> str:
    return hashlib.sha256(line.encode()).hexdigest()


def validate_audit_chain(log_path: Path) -> ChainValidationResult:
    """Check that every entry's prev_hash matches the digest of the line before it."""
    lines = [line for line in log_path.read_text().split("\n") if line]
    previous: str | None = None
    for number, line in enumerate(lines, start=1):
        expected = _digest(previous) if previous is not None else None
        if json.loads(line).get("prev_hash") != expected:
            return ChainValidationResult(valid=False, broken_at_line=number)
        previous = line
    return ChainValidationResult(valid=True)


class AuditLogger:
    """Append-only record of inbound webhooks and outbound deliveries."""

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 5_242_880,
        backup_count: int = 3,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._last_line: str | None = self._read_last_line()

    @classmethod
    def from_env(cls, log_path: str) -> AuditLogger:
        return cls(
            log_path=log_path,
            max_bytes=int(os.environ.get("WHATSAPP_AUDIT_MAX_BYTES", "5242880")),
            backup_count=int(os.environ.get("WHATSAPP_AUDIT_BACKUP_COUNT", "3")),
        )

    def _read_last_line(self) -> str | None:
        if not self.log_path.exists():
            return None
        lines = [line for line in self.log_path.read_text().split("\n") if line]
        return lines[-1] if lines else None

    def _backup(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    def _rotate_if_full(self) -> None:
        if not self.log_path.exists() or self.log_path.stat().st_size < self._max_bytes:
            return
        self._backup(self._backup_count).unlink(missing_ok=True)
        for index in range(self._backup_count - 1, 0, -1):
            if self._backup(index).exists():
                self._backup(index).rename(self._backup(index + 1))
        self.log_path.rename(self._backup(1))

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        entry = json.loads(event.model_dump_json())
        entry["prev_hash"] = _digest(self._last_line) if self._last_line is not None else None
        line = json.dumps(entry, separators=(",", ":"))

        lock_path = self.log_path.with_name(f".{self.log_path.name}.lock")
        with open(lock_path, "w") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                self._rotate_if_full()
                with open(self.log_path, "a") as out:
                    out.write(line + "\n")
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)

        self._last_line = line

    def record_delivery(
        self,
        url: str,
        status_code: int,
        success: bool,
        recipient_id: str | None = None,
    ) -> None:
        self.log(AuditEvent(
            event_type=AuditEventType.MESSAGE_SENT if success else AuditEventType.MESSAGE_FAILED,
            recipient_id=recipient_id,
            action="send",
            result="success" if success else "failure",
            details={"url": url, "status_code": status_code},
        ))
