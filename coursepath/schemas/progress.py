"""
Progress tracking schemas for CoursePath.

Defines the per-user, per-lesson completion record and the completion map
used by the lesson access evaluator.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, model_validator


class ProgressRecord(BaseModel):
    """
    Completion state of one lesson for one user.

    At most one record exists per (user_id, lesson_id). completed_at is set
    exactly when completed is True.
    """
    id: str
    user_id: str
    lesson_id: str
    completed: bool = False
    completed_at: Optional[datetime] = None
    last_watched_at: Optional[datetime] = None

    @model_validator(mode="after")
    def completion_timestamp_matches_flag(self):
        if self.completed and self.completed_at is None:
            raise ValueError("completed record must carry completed_at")
        if not self.completed and self.completed_at is not None:
            raise ValueError("incomplete record must not carry completed_at")
        return self


# lesson_id -> ProgressRecord for one user; missing keys mean "not started"
CompletionMap = dict[str, ProgressRecord]
