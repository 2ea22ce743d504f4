"""
Tests for Navigator.

Covers availability, sequencing, labels and the sidebar tree.
"""

from conftest import completed, make_tree
from coursepath.classroom import LessonAvailability, Navigator


class TestAvailability:
    """Test lesson availability states."""

    def test_fresh_course(self):
        nav = Navigator(make_tree([2, 1]), {})
        assert nav.get_lesson_availability("m0l0") == LessonAvailability.AVAILABLE
        assert nav.get_lesson_availability("m0l1") == LessonAvailability.LOCKED
        assert nav.get_lesson_availability("m1l0") == LessonAvailability.LOCKED
        assert [lesson.id for lesson in nav.get_available_lessons()] == ["m0l0"]

    def test_completed_lessons(self):
        nav = Navigator(make_tree([2, 1]), completed("m0l0"))
        assert nav.get_lesson_availability("m0l0") == LessonAvailability.COMPLETED
        assert nav.get_lesson_availability("m0l1") == LessonAvailability.AVAILABLE
        assert nav.is_lesson_available("m0l1") is True
        assert nav.is_lesson_available("m1l0") is False

    def test_completed_behind_gap_shows_locked(self):
        nav = Navigator(make_tree([3]), completed("m0l2"))
        assert nav.get_lesson_availability("m0l2") == LessonAvailability.LOCKED
        assert nav.is_lesson_completed("m0l2") is True

    def test_unknown_lesson_not_available(self):
        nav = Navigator(make_tree([1]), {})
        assert nav.is_lesson_available("missing") is False
        assert nav.get_lesson("missing") is None


class TestSequencing:
    """Test next/previous and recommendations."""

    def test_next_and_previous_cross_modules(self):
        nav = Navigator(make_tree([2, 0, 1]), {})
        assert nav.get_next_lesson_id("m0l1") == "m2l0"
        assert nav.get_previous_lesson_id("m2l0") == "m0l1"
        assert nav.get_previous_lesson_id("m0l0") is None
        assert nav.get_next_lesson_id("m2l0") is None
        assert nav.get_next_lesson_id("missing") is None

    def test_recommended_is_first_open_incomplete(self):
        nav = Navigator(make_tree([2, 2]), completed("m0l0", "m0l1"))
        assert nav.get_recommended_lesson_id() == "m1l0"

    def test_recommended_when_all_completed(self):
        nav = Navigator(make_tree([1, 1]), completed("m0l0", "m1l0"))
        assert nav.get_recommended_lesson_id() == "m0l0"

    def test_empty_course(self):
        nav = Navigator(make_tree([0]), {})
        assert nav.total_lessons == 0
        assert nav.get_first_lesson_id() is None
        assert nav.get_recommended_lesson_id() is None


class TestLabels:
    """Test positions and labels."""

    def test_lesson_position(self):
        nav = Navigator(make_tree([2, 3]), {})
        assert nav.get_lesson_position("m1l1") == (4, 5)
        assert nav.get_lesson_position("missing") == (0, 5)

    def test_module_position(self):
        nav = Navigator(make_tree([2, 3]), {})
        assert nav.get_module_position("m1l2") == (2, 3)
        assert nav.get_module_position("missing") == (0, 0)

    def test_lesson_label(self):
        nav = Navigator(make_tree([2, 0, 3]), {})
        assert nav.get_lesson_label("m2l0") == "Module 3 · Lesson 1 of 5"


class TestNavigationTree:
    """Test the sidebar tree."""

    def test_tree_metadata(self):
        nav = Navigator(make_tree([2, 1]), completed("m0l0"), current_lesson_id="m0l1")
        tree = nav.get_navigation_tree()

        assert [module.number for module in tree] == [1, 2]
        assert tree[0].completed_count == 1
        assert tree[0].total_count == 2
        assert tree[0].lessons[1].is_current is True
        assert tree[1].lessons[0].position == 3
        assert tree[1].lessons[0].availability == LessonAvailability.LOCKED

    def test_status_indicators(self):
        nav = Navigator(make_tree([3, 1]), completed("m0l0"), current_lesson_id="m0l1")
        assert nav.get_status_indicator("m0l0") == "✓"
        assert nav.get_status_indicator("m0l1") == "→"
        assert nav.get_status_indicator("m0l2") == "◌"

        nav = Navigator(make_tree([3, 1]), completed("m0l0"), current_lesson_id="m0l0")
        assert nav.get_status_indicator("m0l1") == "○"

    def test_progress_summary(self):
        nav = Navigator(make_tree([2, 2]), completed("m0l0", "m0l1"))
        summary = nav.get_progress_summary()

        assert summary["total_lessons"] == 4
        assert summary["completed"] == 2
        assert summary["completion_percent"] == 50.0
        assert summary["modules"][1]["completed"] == 0
        assert summary["recommended_lesson_id"] == "m1l0"
