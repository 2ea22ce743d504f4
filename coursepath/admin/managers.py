"""
Admin managers - CRUD over the catalog tables.

One manager per table. Every manager validates form input before writing and
raises MalformedInput for missing or invalid fields; store failures surface
as StoreUnavailable. Row-level rules on the hosted database restrict writes
to administrators.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from coursepath.errors import MalformedInput
from coursepath.schemas import (
    Company,
    Course,
    Enrollment,
    Lesson,
    LessonMaterial,
    Module,
    UserProfile,
)
from coursepath.store import (
    COMPANIES,
    COURSES,
    ENROLLMENTS,
    LESSON_MATERIALS,
    LESSONS,
    MODULES,
    USER_PROFILES,
    DataStore,
)
from coursepath.utils.rows import parse_rows

logger = logging.getLogger(__name__)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class TableManager:
    """
    Generic list/create/update/delete for one table.

    Subclasses set the table, the row model, the listing order and the
    fields a row cannot exist without, and may normalize input in clean().
    """

    table: str = ""
    model: type[BaseModel] = BaseModel
    order_by: Optional[str] = None
    descending: bool = False
    required: tuple[str, ...] = ()
    label: str = "record"

    def __init__(self, store: DataStore):
        self.store = store

    def clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Normalize form input. Blank strings become None."""
        return {key: _blank_to_none(value) for key, value in fields.items()}

    def _require(self, fields: dict[str, Any], partial: bool = False):
        for name in self.required:
            if partial and name not in fields:
                continue
            if fields.get(name) is None:
                raise MalformedInput(f"{self.label.capitalize()} {name.replace('_', ' ')} is required")

    def _parse(self, rows: list[dict]) -> list:
        return parse_rows(self.model, rows, self.table)

    def list(self, **filters) -> list:
        rows = self.store.query(self.table, filters or None, order_by=self.order_by, descending=self.descending)
        return self._parse(rows)

    def get(self, record_id: str):
        records = self._parse(self.store.query(self.table, {"id": record_id}))
        return records[0] if records else None

    def create(self, **fields):
        fields = self.clean(fields)
        self._require(fields)
        record = self._parse([self.store.insert(self.table, fields)])[0]
        logger.info(f"Created {self.label} {record.id}")
        return record

    def update(self, record_id: str, **fields):
        fields = self.clean(fields)
        self._require(fields, partial=True)
        record = self._parse([self.store.update(self.table, record_id, fields)])[0]
        logger.info(f"Updated {self.label} {record_id}")
        return record

    def delete(self, record_id: str):
        self.store.delete(self.table, record_id)
        logger.info(f"Deleted {self.label} {record_id}")


class CompanyManager(TableManager):
    table = COMPANIES
    model = Company
    order_by = "created_at"
    descending = True
    required = ("name",)
    label = "company"


class CourseManager(TableManager):
    table = COURSES
    model = Course
    order_by = "created_at"
    descending = True
    required = ("title",)
    label = "course"

    def clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        fields = super().clean(fields)
        if "is_active" in fields:
            fields["is_active"] = bool(fields["is_active"])
        return fields

    def create(self, **fields) -> Course:
        fields.setdefault("is_active", True)
        return super().create(**fields)

    def list_active(self) -> list[Course]:
        rows = self.store.query(self.table, {"is_active": True}, order_by="title")
        return self._parse(rows)


class _OrderedManager(TableManager):
    """Manager for rows carrying an order_index within a parent."""
    order_by = "order_index"

    def clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        fields = super().clean(fields)
        if "order_index" in fields:
            try:
                fields["order_index"] = int(fields["order_index"] or 0)
            except (TypeError, ValueError) as exc:
                raise MalformedInput("Order must be a whole number") from exc
            if fields["order_index"] < 0:
                raise MalformedInput("Order must not be negative")
        return fields


class ModuleManager(_OrderedManager):
    table = MODULES
    model = Module
    required = ("title", "course_id")
    label = "module"

    def list_for_course(self, course_id: str) -> list[Module]:
        return self.list(course_id=course_id)


class LessonManager(_OrderedManager):
    table = LESSONS
    model = Lesson
    required = ("title", "module_id", "video_url")
    label = "lesson"

    def clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        fields = super().clean(fields)
        if "duration_seconds" in fields:
            duration = fields["duration_seconds"]
            if duration is not None:
                try:
                    duration = int(duration)
                except (TypeError, ValueError) as exc:
                    raise MalformedInput("Duration must be a whole number of seconds") from exc
                if duration < 0:
                    raise MalformedInput("Duration must not be negative")
            # 0 means "unknown", as in the lesson form
            fields["duration_seconds"] = duration or None
        return fields

    def list_for_module(self, module_id: str) -> list[Lesson]:
        return self.list(module_id=module_id)


class MaterialManager(TableManager):
    table = LESSON_MATERIALS
    model = LessonMaterial
    order_by = "created_at"
    required = ("lesson_id", "title", "file_url", "file_type")
    label = "material"

    def list_for_lesson(self, lesson_id: str) -> list[LessonMaterial]:
        return self.list(lesson_id=lesson_id)


class EnrollmentManager(TableManager):
    table = ENROLLMENTS
    model = Enrollment
    order_by = "enrolled_at"
    descending = True
    required = ("user_id", "course_id")
    label = "enrollment"

    def enroll(self, user_id: str, course_id: str) -> Enrollment:
        """
        Enroll a user in a course.

        Raises:
            MalformedInput: If a field is missing or the user is already enrolled
        """
        fields = self.clean({"user_id": user_id, "course_id": course_id})
        self._require(fields)
        existing = self.store.query(self.table, fields)
        if existing:
            raise MalformedInput("User is already enrolled in this course")
        return self.create(**fields)

    def list_for_user(self, user_id: str) -> list[Enrollment]:
        return self.list(user_id=user_id)


class UserDirectory:
    """Read-only listing of user profiles for the enrollment form."""

    def __init__(self, store: DataStore):
        self.store = store

    def list(self) -> list[UserProfile]:
        rows = self.store.query(USER_PROFILES, order_by="full_name")
        return parse_rows(UserProfile, rows, USER_PROFILES)

    def get(self, user_id: str) -> Optional[UserProfile]:
        profiles = parse_rows(UserProfile, self.store.query(USER_PROFILES, {"id": user_id}), USER_PROFILES)
        return profiles[0] if profiles else None
