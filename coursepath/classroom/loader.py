"""
ClassroomLoader - Load course content from the data store.

Provides read-only access to:
- The ordered module -> lesson content tree of a course
- Lesson materials
- Enrolled, active courses of a student (with owning company)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional

from coursepath.schemas import Company, Course, Lesson, LessonMaterial, Module
from coursepath.store import (
    COMPANIES,
    COURSES,
    ENROLLMENTS,
    LESSON_MATERIALS,
    LESSONS,
    MODULES,
    DataStore,
)
from coursepath.utils.rows import parse_rows

logger = logging.getLogger(__name__)

DEFAULT_FETCH_WORKERS = 4


@dataclass(frozen=True)
class ModuleWithLessons:
    """A module and its lessons, sorted by order_index."""
    module: Module
    lessons: tuple[Lesson, ...]


@dataclass(frozen=True)
class ContentTree:
    """Ordered module -> lesson hierarchy of one course."""
    course_id: str
    modules: tuple[ModuleWithLessons, ...]

    @property
    def lesson_count(self) -> int:
        return sum(len(node.lessons) for node in self.modules)

    @property
    def is_empty(self) -> bool:
        return self.lesson_count == 0


@dataclass
class CourseCard:
    """Course shown on the student dashboard."""
    course: Course
    company: Optional[Company]


class ClassroomLoader:
    """
    Load classroom data through a DataStore.

    Nothing is cached: every call goes to the store, so a content tree always
    reflects the current state of the course.
    """

    def __init__(self, store: DataStore, max_workers: int = DEFAULT_FETCH_WORKERS):
        """
        Initialize loader.

        Args:
            store: DataStore used for every read
            max_workers: Thread pool size for per-module lesson fetches
        """
        self.store = store
        self.max_workers = max(1, max_workers)

    # -------------------------------------------------------------------------
    # Courses
    # -------------------------------------------------------------------------

    def get_course(self, course_id: str) -> Optional[Course]:
        rows = self.store.query(COURSES, {"id": course_id})
        courses = parse_rows(Course, rows, COURSES)
        return courses[0] if courses else None

    def get_enrolled_courses(self, user_id: str) -> list[CourseCard]:
        """Get active courses the user is enrolled in, each with its company."""
        enrollments = self.store.query(ENROLLMENTS, {"user_id": user_id})
        course_ids = sorted({row["course_id"] for row in enrollments})
        if not course_ids:
            return []

        courses = parse_rows(
            Course,
            self.store.query(COURSES, {"id": course_ids, "is_active": True}, order_by="title"),
            COURSES,
        )
        company_ids = sorted({c.company_id for c in courses if c.company_id})
        companies: dict[str, Company] = {}
        if company_ids:
            for company in parse_rows(
                Company, self.store.query(COMPANIES, {"id": company_ids}), COMPANIES
            ):
                companies[company.id] = company

        return [
            CourseCard(course=course, company=companies.get(course.company_id or ""))
            for course in courses
        ]

    # -------------------------------------------------------------------------
    # Modules and lessons
    # -------------------------------------------------------------------------

    def get_modules(self, course_id: str) -> list[Module]:
        """Get all modules of a course ordered by order_index."""
        rows = self.store.query(MODULES, {"course_id": course_id}, order_by="order_index")
        modules = parse_rows(Module, rows, MODULES)
        return sorted(modules, key=lambda m: m.order_index)

    def get_lessons_for_module(self, module_id: str) -> list[Lesson]:
        """Get all lessons of a module ordered by order_index."""
        rows = self.store.query(LESSONS, {"module_id": module_id}, order_by="order_index")
        lessons = parse_rows(Lesson, rows, LESSONS)
        return sorted(lessons, key=lambda lesson: lesson.order_index)

    def load_content_tree(self, course_id: str) -> ContentTree:
        """
        Assemble the content tree of a course.

        Lessons of each module are fetched concurrently; results are placed
        back by module index so arrival order never changes the tree. If any
        fetch fails the error propagates and no tree is returned.
        """
        modules = self.get_modules(course_id)
        lessons_by_index: list[Optional[list[Lesson]]] = [None] * len(modules)

        if modules:
            workers = min(self.max_workers, len(modules))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self.get_lessons_for_module, module.id): idx
                    for idx, module in enumerate(modules)
                }
                try:
                    for future in as_completed(futures):
                        lessons_by_index[futures[future]] = future.result()
                except Exception:
                    for pending in futures:
                        pending.cancel()
                    raise

        tree = ContentTree(
            course_id=course_id,
            modules=tuple(
                ModuleWithLessons(module=module, lessons=tuple(lessons or []))
                for module, lessons in zip(modules, lessons_by_index)
            ),
        )
        logger.info(
            f"Loaded course {course_id}: {len(tree.modules)} modules, {tree.lesson_count} lessons"
        )
        return tree

    # -------------------------------------------------------------------------
    # Materials
    # -------------------------------------------------------------------------

    def get_materials_for_lesson(self, lesson_id: str) -> list[LessonMaterial]:
        rows = self.store.query(LESSON_MATERIALS, {"lesson_id": lesson_id}, order_by="created_at")
        return parse_rows(LessonMaterial, rows, LESSON_MATERIALS)
