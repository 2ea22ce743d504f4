"""
Shared fixtures for CoursePath tests.

Courses are built in an InMemoryStore; pure access tests build ContentTree
objects directly with make_tree().
"""

from datetime import datetime, timezone

import pytest

from coursepath.classroom import ClassroomLoader, ContentTree, ModuleWithLessons, ProgressTracker
from coursepath.schemas import Lesson, Module, ProgressRecord
from coursepath.store import COURSES, LESSONS, MODULES, InMemoryStore

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_tree(lessons_per_module: list[int], course_id: str = "course") -> ContentTree:
    """Tree with lesson ids "m{module}l{lesson}" (0-based) in sequence order."""
    modules = []
    for m, count in enumerate(lessons_per_module):
        module = Module(id=f"m{m}", course_id=course_id, title=f"Module {m + 1}", order_index=m)
        lessons = tuple(
            Lesson(
                id=f"m{m}l{l}",
                module_id=module.id,
                title=f"Lesson {m + 1}.{l + 1}",
                video_url=f"https://youtu.be/video{m}{l}",
                order_index=l,
            )
            for l in range(count)
        )
        modules.append(ModuleWithLessons(module=module, lessons=lessons))
    return ContentTree(course_id=course_id, modules=tuple(modules))


def completed(*lesson_ids: str, user_id: str = "user") -> dict[str, ProgressRecord]:
    """Completion map with the given lessons completed."""
    return {
        lesson_id: ProgressRecord(
            id=f"progress-{lesson_id}",
            user_id=user_id,
            lesson_id=lesson_id,
            completed=True,
            completed_at=FIXED_NOW,
            last_watched_at=FIXED_NOW,
        )
        for lesson_id in lesson_ids
    }


def seed_course(store: InMemoryStore, lessons_per_module: list[int], title: str = "Course") -> dict:
    """
    Insert a course into the store.

    Returns {"course_id": ..., "module_ids": [...], "lesson_ids": [[...], ...]}
    with lesson ids grouped by module in sequence order.
    """
    course = store.insert(COURSES, {"title": title, "is_active": True})
    module_ids, lesson_ids = [], []
    for m, count in enumerate(lessons_per_module):
        module = store.insert(
            MODULES, {"course_id": course["id"], "title": f"Module {m + 1}", "order_index": m}
        )
        module_ids.append(module["id"])
        ids = []
        for l in range(count):
            lesson = store.insert(
                LESSONS,
                {
                    "module_id": module["id"],
                    "title": f"Lesson {m + 1}.{l + 1}",
                    "video_url": f"https://youtu.be/video{m}{l}",
                    "order_index": l,
                },
            )
            ids.append(lesson["id"])
        lesson_ids.append(ids)
    return {"course_id": course["id"], "module_ids": module_ids, "lesson_ids": lesson_ids}


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def student(store):
    """A signed-in student."""
    identity = store.register_user("student@example.com", "secret", {"full_name": "Ada Student"})
    store.set_current_user(identity)
    return identity


@pytest.fixture
def loader(store):
    return ClassroomLoader(store, max_workers=4)


@pytest.fixture
def tracker(store):
    return ProgressTracker(store, clock=lambda: FIXED_NOW)
