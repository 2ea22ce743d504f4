"""
CourseSession - One student viewing one course.

Ties the loader, the progress tracker and the navigator together the way the
lesson viewer uses them: load the tree and completion map, select lessons
that are open, and complete the current lesson.
"""

import logging
from typing import Optional

from coursepath.errors import CoursePathError, MalformedInput
from coursepath.schemas import CompletionMap, Lesson, LessonMaterial, ProgressRecord

from .access import flatten_lessons
from .loader import ClassroomLoader, ContentTree
from .navigator import Navigator
from .progress import ProgressTracker

logger = logging.getLogger(__name__)


class CourseSession:
    """
    View state for one course and one user.

    The content tree and completion map are rebuilt from the store on every
    load() and after every completion; nothing survives between views.
    """

    def __init__(
        self,
        course_id: str,
        user_id: str,
        loader: ClassroomLoader,
        tracker: ProgressTracker,
    ):
        self.course_id = course_id
        self.user_id = user_id
        self.loader = loader
        self.tracker = tracker

        self.tree: Optional[ContentTree] = None
        self.completion_map: CompletionMap = {}
        self.navigator: Optional[Navigator] = None
        self.current_lesson_id: Optional[str] = None
        self.materials: list[LessonMaterial] = []
        self.refresh_error: Optional[CoursePathError] = None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> Navigator:
        """
        Rebuild tree, completion map and navigator from the store.

        State is replaced only after every fetch succeeded, so a failed load
        leaves the previous view untouched.
        """
        tree = self.loader.load_content_tree(self.course_id)
        lesson_ids = [lesson.id for lesson in flatten_lessons(tree)]
        completion_map = self.tracker.get_completion_map(self.user_id, lesson_ids)

        navigator = Navigator(tree, completion_map)
        current = self.current_lesson_id
        if current is None or not navigator.is_lesson_available(current):
            current = navigator.get_recommended_lesson_id()
        materials = self.loader.get_materials_for_lesson(current) if current else []

        self.tree = tree
        self.completion_map = completion_map
        self.current_lesson_id = current
        self.navigator = Navigator(tree, completion_map, current)
        self.materials = materials
        self.refresh_error = None
        return self.navigator

    def _require_navigator(self) -> Navigator:
        if self.navigator is None:
            raise MalformedInput("Course session has not been loaded")
        return self.navigator

    @property
    def current_lesson(self) -> Optional[Lesson]:
        if self.navigator is None or self.current_lesson_id is None:
            return None
        return self.navigator.get_lesson(self.current_lesson_id)

    # -------------------------------------------------------------------------
    # Lesson Actions
    # -------------------------------------------------------------------------

    def select_lesson(self, lesson_id: str) -> bool:
        """
        Open a lesson if it is unlocked.

        Returns True if the lesson was selected, False if it is locked or unknown.
        """
        navigator = self._require_navigator()
        if not navigator.is_lesson_available(lesson_id):
            return False

        self.materials = self.loader.get_materials_for_lesson(lesson_id)
        self.current_lesson_id = lesson_id
        self.navigator = Navigator(self.tree, self.completion_map, lesson_id)
        return True

    def complete_current_lesson(self) -> ProgressRecord:
        """
        Mark the current lesson completed and refresh the view.

        The returned record goes into the completion map before the navigator
        is rebuilt, so the next lesson unlocks immediately. Errors from the
        write propagate before the map is touched. The completion is saved
        even if the reload afterwards fails: that error is kept in
        refresh_error and the view stays on the updated map.
        """
        self._require_navigator()
        if self.current_lesson_id is None:
            raise MalformedInput("No lesson selected")

        record = self.tracker.complete_lesson(self.current_lesson_id)
        self.completion_map = {**self.completion_map, record.lesson_id: record}
        self.navigator = Navigator(self.tree, self.completion_map, self.current_lesson_id)

        try:
            self.load()
        except CoursePathError as exc:
            logger.warning(f"Lesson {record.lesson_id} completed but course {self.course_id} could not be refreshed: {exc}")
            self.refresh_error = exc
        return record
