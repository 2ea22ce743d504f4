"""
Schema validation tests for CoursePath.

Tests all Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from coursepath.schemas import (
    # Catalog
    Company,
    Course,
    Module,
    Lesson,
    LessonMaterial,
    UserProfile,
    Enrollment,
    # Progress
    ProgressRecord,
    # Outline
    CourseOutline,
)


class TestCatalogSchemas:
    """Test catalog schemas."""

    def test_course_defaults(self):
        course = Course(id="c1", title="Data Analysis")
        assert course.is_active is True
        assert course.company_id is None
        assert course.description is None

    def test_module_parses_store_row(self):
        module = Module.model_validate({
            "id": "m1",
            "course_id": "c1",
            "title": "Getting Started",
            "order_index": 2,
            "created_at": "2024-01-01T10:00:00+00:00",
        })
        assert module.order_index == 2
        assert module.created_at == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    def test_lesson_valid(self):
        lesson = Lesson(
            id="l1",
            module_id="m1",
            title="Welcome",
            video_url="https://youtu.be/abc",
            duration_seconds=245,
        )
        assert lesson.order_index == 0
        assert lesson.duration_seconds == 245

    def test_lesson_requires_video_url(self):
        with pytest.raises(ValidationError):
            Lesson(id="l1", module_id="m1", title="Welcome")

    def test_lesson_negative_duration(self):
        with pytest.raises(ValidationError):
            Lesson(id="l1", module_id="m1", title="Welcome", video_url="x", duration_seconds=-1)

    def test_material_valid(self):
        material = LessonMaterial(
            id="mat1",
            lesson_id="l1",
            title="Slides",
            file_url="https://example.com/slides.pdf",
            file_type="pdf",
        )
        assert material.file_size is None

    def test_user_profile_defaults(self):
        profile = UserProfile(id="u1")
        assert profile.is_admin is False
        assert profile.full_name is None

    def test_company_and_enrollment(self):
        company = Company(id="co1", name="Acme")
        enrollment = Enrollment(id="e1", user_id="u1", course_id="c1")
        assert company.logo_url is None
        assert enrollment.enrolled_at is None


class TestProgressSchemas:
    """Test progress tracking schemas."""

    def test_progress_record_defaults(self):
        record = ProgressRecord(id="p1", user_id="u1", lesson_id="l1")
        assert record.completed is False
        assert record.completed_at is None
        assert record.last_watched_at is None

    def test_completed_record_valid(self):
        now = datetime(2024, 1, 1, 10, 30, tzinfo=timezone.utc)
        record = ProgressRecord(
            id="p1",
            user_id="u1",
            lesson_id="l1",
            completed=True,
            completed_at=now,
            last_watched_at=now,
        )
        assert record.completed_at == now

    def test_completed_requires_timestamp(self):
        with pytest.raises(ValidationError):
            ProgressRecord(id="p1", user_id="u1", lesson_id="l1", completed=True)

    def test_incomplete_rejects_timestamp(self):
        with pytest.raises(ValidationError):
            ProgressRecord(
                id="p1",
                user_id="u1",
                lesson_id="l1",
                completed=False,
                completed_at=datetime(2024, 1, 1),
            )


class TestOutlineSchemas:
    """Test course outline schemas."""

    def test_outline_valid(self):
        outline = CourseOutline.model_validate({
            "company": {"name": "Acme"},
            "title": "Data Analysis",
            "modules": [
                {"title": "Start", "lessons": [
                    {"title": "Welcome", "video_url": "https://youtu.be/a"},
                    {"title": "Setup", "video_url": "https://youtu.be/b",
                     "materials": [{"title": "Checklist", "file_url": "x.pdf", "file_type": "pdf"}]},
                ]},
                {"title": "Empty"},
            ],
        })
        assert outline.is_active is True
        assert outline.lesson_count == 2
        assert outline.modules[1].lessons == []
        assert outline.modules[0].lessons[1].materials[0].file_type == "pdf"

    def test_outline_requires_company(self):
        with pytest.raises(ValidationError):
            CourseOutline.model_validate({"title": "No company"})


class TestSchemaImports:
    """Test that all schemas can be imported from the main module."""

    def test_import_from_coursepath_schemas(self):
        from coursepath.schemas import (
            CompletionMap,
            CourseOutline,
            Lesson,
            ProgressRecord,
        )
        assert CompletionMap is not None
        assert CourseOutline is not None
        assert Lesson is not None
        assert ProgressRecord is not None
