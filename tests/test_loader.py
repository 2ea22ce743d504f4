"""
Tests for ClassroomLoader.

Covers content tree ordering, concurrent fetch reassembly, failures and the
enrolled course listing.
"""

import threading
import time

import pytest

from conftest import seed_course
from coursepath.classroom import ClassroomLoader
from coursepath.errors import MalformedInput, StoreUnavailable
from coursepath.store import COMPANIES, COURSES, ENROLLMENTS, LESSON_MATERIALS, LESSONS, MODULES


class SlowStore:
    """Wraps a store and delays lesson queries so later modules finish first."""

    def __init__(self, store, delays: dict[str, float]):
        self.store = store
        self.delays = delays
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def query(self, table, filters=None, order_by=None, descending=False):
        if table == LESSONS:
            with self._lock:
                self.active += 1
                self.max_active = max(self.max_active, self.active)
            try:
                time.sleep(self.delays.get(filters["module_id"], 0))
                return self.store.query(table, filters, order_by, descending)
            finally:
                with self._lock:
                    self.active -= 1
        return self.store.query(table, filters, order_by, descending)


class TestContentTree:
    """Test content tree assembly."""

    def test_modules_and_lessons_sorted_by_order_index(self, store, loader):
        course = store.insert(COURSES, {"title": "Shuffled"})
        for idx in [2, 0, 1]:
            module = store.insert(MODULES, {"course_id": course["id"], "title": f"M{idx}", "order_index": idx})
            for lesson_idx in [1, 0]:
                store.insert(LESSONS, {
                    "module_id": module["id"],
                    "title": f"L{idx}.{lesson_idx}",
                    "video_url": "https://youtu.be/x",
                    "order_index": lesson_idx,
                })

        tree = loader.load_content_tree(course["id"])

        assert [node.module.title for node in tree.modules] == ["M0", "M1", "M2"]
        assert [lesson.title for lesson in tree.modules[2].lessons] == ["L2.0", "L2.1"]
        assert tree.lesson_count == 6

    def test_reassembles_by_module_index(self, store):
        course = seed_course(store, [1, 1, 1])
        first, second, third = course["module_ids"]
        slow = SlowStore(store, {first: 0.2, second: 0.1, third: 0.0})
        loader = ClassroomLoader(slow, max_workers=3)

        tree = loader.load_content_tree(course["course_id"])

        assert [node.module.id for node in tree.modules] == course["module_ids"]
        assert [node.lessons[0].id for node in tree.modules] == [ids[0] for ids in course["lesson_ids"]]
        assert slow.max_active > 1

    def test_respects_worker_limit(self, store):
        course = seed_course(store, [1, 1, 1, 1])
        slow = SlowStore(store, {module_id: 0.05 for module_id in course["module_ids"]})
        loader = ClassroomLoader(slow, max_workers=2)

        loader.load_content_tree(course["course_id"])

        assert slow.max_active <= 2

    def test_course_without_modules(self, store, loader):
        course = store.insert(COURSES, {"title": "Empty"})
        tree = loader.load_content_tree(course["id"])
        assert tree.modules == ()
        assert tree.is_empty

    def test_module_without_lessons(self, store, loader):
        course = seed_course(store, [0, 2])
        tree = loader.load_content_tree(course["course_id"])
        assert len(tree.modules) == 2
        assert tree.modules[0].lessons == ()
        assert tree.lesson_count == 2

    def test_lesson_fetch_failure_propagates(self, store, loader):
        course = seed_course(store, [1, 1])
        store.fail_on("query", LESSONS)
        with pytest.raises(StoreUnavailable):
            loader.load_content_tree(course["course_id"])

    def test_module_fetch_failure_propagates(self, store, loader):
        course = seed_course(store, [1])
        store.fail_on("query", MODULES)
        with pytest.raises(StoreUnavailable):
            loader.load_content_tree(course["course_id"])

    def test_malformed_lesson_row(self, store, loader):
        course = seed_course(store, [1])
        store.insert(LESSONS, {"module_id": course["module_ids"][0], "title": "No video"})
        with pytest.raises(MalformedInput):
            loader.load_content_tree(course["course_id"])


class TestMaterials:
    """Test lesson materials."""

    def test_materials_for_lesson(self, store, loader):
        store.insert(LESSON_MATERIALS, {
            "lesson_id": "l1", "title": "Slides", "file_url": "s.pdf", "file_type": "pdf",
            "created_at": "2024-01-02T00:00:00+00:00",
        })
        store.insert(LESSON_MATERIALS, {
            "lesson_id": "l1", "title": "Data", "file_url": "d.csv", "file_type": "csv",
            "created_at": "2024-01-01T00:00:00+00:00",
        })
        store.insert(LESSON_MATERIALS, {"lesson_id": "l2", "title": "Other", "file_url": "o.pdf", "file_type": "pdf"})

        materials = loader.get_materials_for_lesson("l1")

        assert [material.title for material in materials] == ["Data", "Slides"]


class TestEnrolledCourses:
    """Test the student's course list."""

    def test_active_enrolled_courses_with_company(self, store, loader):
        company = store.insert(COMPANIES, {"name": "Acme", "logo_url": "https://example.com/acme.png"})
        beta = store.insert(COURSES, {"title": "Beta", "company_id": company["id"], "is_active": True})
        alpha = store.insert(COURSES, {"title": "Alpha", "is_active": True})
        hidden = store.insert(COURSES, {"title": "Hidden", "is_active": False})
        store.insert(COURSES, {"title": "Not enrolled", "is_active": True})
        for course in (beta, alpha, hidden):
            store.insert(ENROLLMENTS, {"user_id": "u1", "course_id": course["id"]})

        cards = loader.get_enrolled_courses("u1")

        assert [card.course.title for card in cards] == ["Alpha", "Beta"]
        assert cards[0].company is None
        assert cards[1].company.name == "Acme"

    def test_no_enrollments(self, store, loader):
        store.fail_on("query", COURSES)
        assert loader.get_enrolled_courses("u1") == []

    def test_get_course(self, store, loader):
        course = store.insert(COURSES, {"title": "Alpha"})
        assert loader.get_course(course["id"]).title == "Alpha"
        assert loader.get_course("missing") is None
