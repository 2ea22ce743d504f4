"""
Navigator - Lesson sequencing, unlock state, and navigation labels.

Provides:
- Next/previous lesson navigation
- Lesson availability from the sequential unlock gate
- Course tree with status indicators
- "Lesson N of T" positions, computed once per navigator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from coursepath.schemas import CompletionMap, Lesson, Module

from .access import accessible_lesson_ids, flatten_lessons, is_accessible, is_completed
from .loader import ContentTree


class LessonAvailability(str, Enum):
    """Lesson availability status for UI display."""
    LOCKED = "locked"           # An earlier lesson is not completed
    AVAILABLE = "available"     # Open, not completed yet
    COMPLETED = "completed"     # Open and completed


@dataclass
class NavigationLesson:
    """Lesson with navigation metadata."""
    lesson: Lesson
    availability: LessonAvailability
    is_current: bool
    position: int  # 1-based position in the whole course


@dataclass
class NavigationModule:
    """Module with lessons and navigation metadata."""
    module: Module
    number: int  # 1-based
    lessons: list[NavigationLesson]
    completed_count: int
    total_count: int


class Navigator:
    """
    Navigate one course for one user.

    Built from a ContentTree and the user's completion map; rebuild it after
    the map changes. Positions and the accessible set are computed once here
    instead of on every render.
    """

    def __init__(
        self,
        tree: ContentTree,
        completion_map: CompletionMap,
        current_lesson_id: Optional[str] = None,
    ):
        self.tree = tree
        self.completion_map = completion_map
        self.current_lesson_id = current_lesson_id

        self._lessons = flatten_lessons(tree)
        self._lesson_order = [lesson.id for lesson in self._lessons]
        self._lesson_index = {lid: idx for idx, lid in enumerate(self._lesson_order)}
        self._tree_position: dict[str, tuple[int, int]] = {
            lesson.id: (m, l)
            for m, node in enumerate(tree.modules)
            for l, lesson in enumerate(node.lessons)
        }
        self._accessible = accessible_lesson_ids(tree, completion_map)

    @property
    def total_lessons(self) -> int:
        return len(self._lesson_order)

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        idx = self._lesson_index.get(lesson_id)
        return self._lessons[idx] if idx is not None else None

    # -------------------------------------------------------------------------
    # Availability Checking
    # -------------------------------------------------------------------------

    def is_lesson_available(self, lesson_id: str) -> bool:
        """Check if a lesson can be opened. Unknown lessons are never available."""
        position = self._tree_position.get(lesson_id)
        if position is None:
            return False
        return is_accessible(self.tree, self.completion_map, *position)

    def is_lesson_completed(self, lesson_id: str) -> bool:
        return is_completed(self.completion_map, lesson_id)

    def get_lesson_availability(self, lesson_id: str) -> LessonAvailability:
        if lesson_id not in self._accessible:
            return LessonAvailability.LOCKED
        if self.is_lesson_completed(lesson_id):
            return LessonAvailability.COMPLETED
        return LessonAvailability.AVAILABLE

    def get_available_lessons(self) -> list[Lesson]:
        return [lesson for lesson in self._lessons if lesson.id in self._accessible]

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def get_first_lesson_id(self) -> Optional[str]:
        return self._lesson_order[0] if self._lesson_order else None

    def get_next_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the next lesson in order."""
        if current_id not in self._lesson_index:
            return None
        current_idx = self._lesson_index[current_id]
        if current_idx + 1 >= len(self._lesson_order):
            return None
        return self._lesson_order[current_idx + 1]

    def get_previous_lesson_id(self, current_id: str) -> Optional[str]:
        """Get the ID of the previous lesson in order."""
        if current_id not in self._lesson_index:
            return None
        current_idx = self._lesson_index[current_id]
        if current_idx <= 0:
            return None
        return self._lesson_order[current_idx - 1]

    def get_recommended_lesson_id(self) -> Optional[str]:
        """
        Get the lesson a student should open next.

        Priority:
        1. First open lesson that is not completed
        2. First lesson (everything completed, or an empty course)
        """
        for lesson_id in self._lesson_order:
            if self.get_lesson_availability(lesson_id) == LessonAvailability.AVAILABLE:
                return lesson_id
        return self.get_first_lesson_id()

    def get_lesson_position(self, lesson_id: str) -> tuple[int, int]:
        """
        Get lesson position in the course as (current, total).

        Returns (0, total) if lesson not found.
        """
        if lesson_id not in self._lesson_index:
            return (0, len(self._lesson_order))
        return (self._lesson_index[lesson_id] + 1, len(self._lesson_order))

    def get_module_position(self, lesson_id: str) -> tuple[int, int]:
        """
        Get (module number, lesson number within module), both 1-based.

        Returns (0, 0) if lesson not found.
        """
        if lesson_id not in self._tree_position:
            return (0, 0)
        m, l = self._tree_position[lesson_id]
        return (m + 1, l + 1)

    def get_lesson_label(self, lesson_id: str) -> str:
        """Header label, e.g. "Module 2 · Lesson 1 of 7"."""
        module_number, lesson_number = self.get_module_position(lesson_id)
        return f"Module {module_number} · Lesson {lesson_number} of {self.total_lessons}"

    # -------------------------------------------------------------------------
    # Course Tree
    # -------------------------------------------------------------------------

    def get_navigation_tree(self) -> list[NavigationModule]:
        """
        Get the course tree with navigation metadata.

        Returns list of modules with lessons, each annotated with:
        - Availability status
        - Whether it's the current lesson
        - Position in the whole course
        """
        tree = []
        for number, node in enumerate(self.tree.modules, start=1):
            nav_lessons = []
            completed_count = 0

            for lesson in node.lessons:
                availability = self.get_lesson_availability(lesson.id)
                if availability == LessonAvailability.COMPLETED:
                    completed_count += 1

                nav_lessons.append(NavigationLesson(
                    lesson=lesson,
                    availability=availability,
                    is_current=lesson.id == self.current_lesson_id,
                    position=self._lesson_index[lesson.id] + 1,
                ))

            tree.append(NavigationModule(
                module=node.module,
                number=number,
                lessons=nav_lessons,
                completed_count=completed_count,
                total_count=len(node.lessons),
            ))

        return tree

    def get_status_indicator(self, lesson_id: str) -> str:
        """
        Get status indicator for sidebar display.

        Returns:
            ✓ for completed
            → for current
            ○ for available
            ◌ for locked
        """
        availability = self.get_lesson_availability(lesson_id)

        if availability == LessonAvailability.COMPLETED:
            return "✓"
        elif availability == LessonAvailability.AVAILABLE and lesson_id == self.current_lesson_id:
            return "→"
        elif availability == LessonAvailability.AVAILABLE:
            return "○"
        else:
            return "◌"

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        tree = self.get_navigation_tree()
        completed = sum(nav_module.completed_count for nav_module in tree)
        total = self.total_lessons

        return {
            "total_lessons": total,
            "completed": completed,
            "completion_percent": round(completed / total * 100, 1) if total > 0 else 0,
            "modules": [
                {
                    "id": nav_module.module.id,
                    "title": nav_module.module.title,
                    "completed": nav_module.completed_count,
                    "total": nav_module.total_count,
                }
                for nav_module in tree
            ],
            "recommended_lesson_id": self.get_recommended_lesson_id(),
        }
