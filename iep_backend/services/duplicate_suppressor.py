# FILE: iep_backend/services/duplicate_suppressor.py
"""
Duplicate question suppression (simple in-memory, per process)
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Any, Optional

from iep_backend.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class RecentQuery:
    timestamp: float
    question: str


def make_key(user_id: str, question: str) -> str:
    """Normalized (user, question) key"""
    return f"{user_id}:{question.strip().lower()}"


class DuplicateSuppressor:
    """Tracks recently shared questions within a fixed window"""

    def __init__(self, window_seconds: float = 60.0, clock: Callable[[], float] = time.time):
        self.window_seconds = window_seconds
        self.clock = clock
        self._recent: Dict[str, RecentQuery] = {}

    def __len__(self) -> int:
        return len(self._recent)

    def check_and_record(self, user_id: str, question: str) -> bool:
        """
        Return True if the same question was recorded for this user inside
        the window. Duplicates do not refresh the stored timestamp.
        """
        now = self.clock()
        self._evict_expired(now)

        key = make_key(user_id, question)
        entry = self._recent.get(key)
        if entry is not None and now - entry.timestamp < self.window_seconds:
            logger.info(f"Duplicate question suppressed: {key}")
            return True

        self._recent[key] = RecentQuery(timestamp=now, question=question)
        return False

    def snapshot(self) -> List[Dict[str, Any]]:
        """Live entries, newest first (read-only view)"""
        now = self.clock()
        rows = [
            {
                "key": key,
                "question": entry.question,
                "timestamp": entry.timestamp,
                "secondsAgo": int(now - entry.timestamp)
            }
            for key, entry in self._recent.items()
            if now - entry.timestamp < self.window_seconds
        ]
        rows.sort(key=lambda r: r["timestamp"], reverse=True)
        return rows

    def _evict_expired(self, now: float):
        expired = [
            key for key, entry in self._recent.items()
            if now - entry.timestamp >= self.window_seconds
        ]
        for key in expired:
            del self._recent[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired recent queries")


_suppressor: Optional[DuplicateSuppressor] = None


def get_duplicate_suppressor() -> DuplicateSuppressor:
    """Get or create the process-wide suppressor"""
    global _suppressor
    if _suppressor is None:
        _suppressor = DuplicateSuppressor(window_seconds=settings.duplicate_window_seconds)
    return _suppressor
