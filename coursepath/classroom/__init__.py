"""
CoursePath Classroom - Runtime components for loading and navigating courses.

This module provides:
- ClassroomLoader: Load content trees, materials and enrolled courses
- access: Sequential unlock rules over a content tree
- ProgressTracker: Track and complete lesson progress
- Navigator: Lesson sequencing and availability
- CourseSession: One student viewing one course
"""

from .loader import (
    ClassroomLoader,
    ContentTree,
    ModuleWithLessons,
    CourseCard,
    DEFAULT_FETCH_WORKERS,
)

from .access import (
    flatten_lessons,
    is_completed,
    locate_lesson,
    is_accessible,
    accessible_lesson_ids,
)

from .progress import (
    ProgressTracker,
    utc_now,
)

from .navigator import (
    Navigator,
    LessonAvailability,
    NavigationLesson,
    NavigationModule,
)

from .session import CourseSession

__all__ = [
    # Loader
    "ClassroomLoader",
    "ContentTree",
    "ModuleWithLessons",
    "CourseCard",
    "DEFAULT_FETCH_WORKERS",
    # Access
    "flatten_lessons",
    "is_completed",
    "locate_lesson",
    "is_accessible",
    "accessible_lesson_ids",
    # Progress
    "ProgressTracker",
    "utc_now",
    # Navigator
    "Navigator",
    "LessonAvailability",
    "NavigationLesson",
    "NavigationModule",
    # Session
    "CourseSession",
]
