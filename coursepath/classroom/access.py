"""
Lesson access rules - the sequential unlock gate.

A lesson unlocks only when every lesson before it in the global lesson
sequence (modules by order_index, then lessons by order_index) is completed.
The first lesson of the course is always open.

All functions here are pure: they read a ContentTree and a completion map
and never touch the store.
"""

from typing import Optional

from coursepath.errors import MalformedInput
from coursepath.schemas import CompletionMap, Lesson

from .loader import ContentTree


def flatten_lessons(tree: ContentTree) -> list[Lesson]:
    """Global lesson sequence of the course. Empty modules add nothing."""
    return [lesson for node in tree.modules for lesson in node.lessons]


def is_completed(completion_map: CompletionMap, lesson_id: str) -> bool:
    record = completion_map.get(lesson_id)
    return record is not None and record.completed


def locate_lesson(tree: ContentTree, lesson_id: str) -> Optional[tuple[int, int]]:
    """Return (module_index, lesson_index) of a lesson, or None if absent."""
    for m, node in enumerate(tree.modules):
        for l, lesson in enumerate(node.lessons):
            if lesson.id == lesson_id:
                return m, l
    return None


def is_accessible(
    tree: ContentTree,
    completion_map: CompletionMap,
    module_index: int,
    lesson_index: int,
) -> bool:
    """
    Check whether the lesson at (module_index, lesson_index) can be opened.

    Walks the global sequence in order and stops at the first incomplete
    lesson strictly before the target.

    Raises:
        MalformedInput: If the position does not exist in the tree
    """
    if module_index == 0 and lesson_index == 0:
        return True

    if not 0 <= module_index < len(tree.modules):
        raise MalformedInput(f"Module index {module_index} out of range")
    if not 0 <= lesson_index < len(tree.modules[module_index].lessons):
        raise MalformedInput(
            f"Lesson index {lesson_index} out of range for module {module_index}"
        )

    for m, node in enumerate(tree.modules):
        for l, lesson in enumerate(node.lessons):
            if m == module_index and l == lesson_index:
                return True
            if not is_completed(completion_map, lesson.id):
                return False

    return False


def accessible_lesson_ids(tree: ContentTree, completion_map: CompletionMap) -> set[str]:
    """
    Ids of every accessible lesson, in one pass.

    Same rule as is_accessible: the prefix of the global sequence up to and
    including the first incomplete lesson.
    """
    accessible = set()
    for lesson in flatten_lessons(tree):
        accessible.add(lesson.id)
        if not is_completed(completion_map, lesson.id):
            break
    return accessible
