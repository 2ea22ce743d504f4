"""
ProgressTracker - Track lesson completion in the user_progress table.

Stores one record per (user, lesson):
- Completion flag and completion time
- Last time the lesson was watched

Records are created on first completion and only updated afterwards.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from coursepath.errors import AuthenticationRequired, StoreUnavailable
from coursepath.schemas import CompletionMap, ProgressRecord
from coursepath.store import USER_PROGRESS, DataStore, Identity
from coursepath.utils.rows import parse_rows

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _prefer(current: Optional[ProgressRecord], candidate: ProgressRecord) -> ProgressRecord:
    """Pick the record to keep when legacy data holds duplicates for one lesson."""
    if current is None:
        return candidate
    if candidate.completed and not current.completed:
        return candidate
    return current


class ProgressTracker:
    """
    Read and write per-user lesson progress through a DataStore.

    The store's row-level rules restrict rows to the signed-in user; queries
    still filter on user_id so the tracker also works with a service key.
    """

    def __init__(self, store: DataStore, clock: Callable[[], datetime] = utc_now):
        """
        Initialize progress tracker.

        Args:
            store: DataStore holding the user_progress table
            clock: Source of "now" for completion timestamps
        """
        self.store = store
        self.clock = clock

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_records(self, user_id: str, lesson_id: Optional[str] = None) -> list[ProgressRecord]:
        """Get progress records of a user by last_watched_at, optionally for one lesson."""
        filters = {"user_id": user_id}
        if lesson_id is not None:
            filters["lesson_id"] = lesson_id
        rows = self.store.query(USER_PROGRESS, filters, order_by="last_watched_at")
        return parse_rows(ProgressRecord, rows, USER_PROGRESS)

    def get_completion_map(
        self,
        user_id: str,
        lesson_ids: Optional[Iterable[str]] = None,
    ) -> CompletionMap:
        """
        Get lesson_id -> ProgressRecord for a user.

        Args:
            user_id: Viewing user
            lesson_ids: Restrict to these lessons (e.g. the lessons of one course)
        """
        filters: dict = {"user_id": user_id}
        if lesson_ids is not None:
            ids = sorted(set(lesson_ids))
            if not ids:
                return {}
            filters["lesson_id"] = ids

        rows = self.store.query(USER_PROGRESS, filters)
        completion_map: CompletionMap = {}
        for record in parse_rows(ProgressRecord, rows, USER_PROGRESS):
            completion_map[record.lesson_id] = _prefer(completion_map.get(record.lesson_id), record)
        return completion_map

    def find_record(self, user_id: str, lesson_id: str) -> Optional[ProgressRecord]:
        """Get the record for (user, lesson). Absence is normal and returns None."""
        records = self.get_records(user_id, lesson_id)
        if len(records) > 1:
            logger.warning(
                f"Found {len(records)} progress records for user {user_id} "
                f"and lesson {lesson_id}; updating the least recently watched"
            )
        return records[0] if records else None

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def resolve_user(self) -> Identity:
        """
        Get the signed-in user.

        Raises:
            AuthenticationRequired: If there is no session or it cannot be resolved
        """
        try:
            identity = self.store.current_user()
        except StoreUnavailable as exc:
            raise AuthenticationRequired("Could not resolve the current session") from exc
        if identity is None:
            raise AuthenticationRequired("Sign in to track lesson progress")
        return identity

    def complete_lesson(self, lesson_id: str) -> ProgressRecord:
        """
        Mark a lesson as completed for the signed-in user.

        Updates the existing record in place or inserts the first one. Calling
        it again on a completed lesson refreshes both timestamps and never
        creates a second record.

        Raises:
            AuthenticationRequired: If nobody is signed in (nothing is written)
            StoreUnavailable: If the lookup or the write fails
        """
        user = self.resolve_user()
        now = self.clock().isoformat()
        existing = self.find_record(user.id, lesson_id)

        if existing is not None:
            row = self.store.update(
                USER_PROGRESS,
                existing.id,
                {"completed": True, "completed_at": now, "last_watched_at": now},
            )
        else:
            row = self.store.insert(
                USER_PROGRESS,
                {
                    "user_id": user.id,
                    "lesson_id": lesson_id,
                    "completed": True,
                    "completed_at": now,
                    "last_watched_at": now,
                },
            )

        record = parse_rows(ProgressRecord, [row], USER_PROGRESS)[0]
        logger.info(
            f"Lesson {lesson_id} completed by user {user.id} "
            f"({'updated' if existing else 'created'} record {record.id})"
        )
        return record

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @staticmethod
    def get_completion_stats(total_lessons: int, completion_map: CompletionMap) -> dict:
        """
        Get completion statistics for one course.

        Args:
            total_lessons: Number of lessons in the course
            completion_map: Completion map restricted to the course's lessons

        Returns:
            Dictionary with completion stats
        """
        completed = sum(1 for record in completion_map.values() if record.completed)
        return {
            "total_lessons": total_lessons,
            "completed": completed,
            "remaining": max(total_lessons - completed, 0),
            "completion_percent": round(completed / total_lessons * 100, 1) if total_lessons > 0 else 0,
        }
