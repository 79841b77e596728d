"""In-memory export log enforcing a rolling per-visitor export limit."""
from __future__ import annotations

import hashlib
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from core.errors import ExportRateLimitError

logger = logging.getLogger(__name__)


@dataclass
class ExportEntry:
    fingerprint: str
    calculator: str
    timestamp: datetime


@dataclass(frozen=True)
class ExportCheck:
    allowed: bool
    remaining: int
    reset_time: Optional[datetime]


class ExportLog:
    """Track exports per fingerprint inside a rolling window.

    One instance is shared by every session thread, so reads and the
    check-then-append in :meth:`record` hold ``_lock``.
    """

    def __init__(self, max_exports: int = 15, window: timedelta = timedelta(hours=24)) -> None:
        self.max_exports = max_exports
        self.window = window
        self.entries: List[ExportEntry] = []
        self._lock = threading.Lock()

    def _recent(self, fingerprint: str, now: datetime) -> List[ExportEntry]:
        cutoff = now - self.window
        return [e for e in self.entries if e.fingerprint == fingerprint and e.timestamp > cutoff]

    def check(self, fingerprint: str, now: Optional[datetime] = None) -> ExportCheck:
        """Report whether ``fingerprint`` may export, how many remain and when the oldest expires."""
        now = now or datetime.now()
        with self._lock:
            return self._status(fingerprint, now)

    def _status(self, fingerprint: str, now: datetime) -> ExportCheck:
        recent = self._recent(fingerprint, now)
        reset = min(e.timestamp for e in recent) + self.window if recent else None
        remaining = max(0, self.max_exports - len(recent))
        return ExportCheck(allowed=remaining > 0, remaining=remaining, reset_time=reset)

    def record(self, fingerprint: str, calculator: str, now: Optional[datetime] = None) -> ExportCheck:
        """Record an export, raising :class:`ExportRateLimitError` when the limit is reached."""
        now = now or datetime.now()
        with self._lock:
            status = self._status(fingerprint, now)
            if status.allowed:
                self.entries.append(ExportEntry(fingerprint=fingerprint, calculator=calculator, timestamp=now))
                self._prune(now)
                return self._status(fingerprint, now)
        logger.warning("export refused for %s on %s", fingerprint, calculator)
        raise ExportRateLimitError(
            f"Export limit reached. Try again in {format_time_remaining(status.reset_time, now)}.",
            reset_time=status.reset_time,
        )

    def prune(self, now: Optional[datetime] = None) -> None:
        with self._lock:
            self._prune(now or datetime.now())

    def _prune(self, now: datetime) -> None:
        cutoff = now - self.window
        self.entries = [e for e in self.entries if e.timestamp > cutoff]

    def as_dict(self) -> List[dict]:
        with self._lock:
            entries = list(self.entries)
        return [
            {"fingerprint": e.fingerprint, "calculator": e.calculator, "timestamp": e.timestamp.isoformat()}
            for e in entries
        ]

    def counts(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        with self._lock:
            entries = list(self.entries)
        for e in entries:
            out[e.fingerprint] = out.get(e.fingerprint, 0) + 1
        return out


def format_time_remaining(reset_time: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human text such as ``"3 hours and 5 minutes"`` until ``reset_time``."""
    if reset_time is None:
        return "now"
    seconds = int((reset_time - (now or datetime.now())).total_seconds())
    if seconds <= 0:
        return "now"
    hours, rem = divmod(seconds, 3600)
    minutes = rem // 60
    minute_text = f"{minutes} minute{'s' if minutes != 1 else ''}"
    if hours > 0:
        return f"{hours} hour{'s' if hours != 1 else ''} and {minute_text}"
    return minute_text


def make_fingerprint(*components) -> str:
    """Stable short id for a visitor built from request or browser traits."""
    digest = hashlib.sha256("|".join(str(c) for c in components).encode("utf-8")).hexdigest()
    return f"fp_{digest[:12]}"
