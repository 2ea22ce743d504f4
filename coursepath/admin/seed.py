"""
Seed a course from a validated outline.

Creates the company (reusing one with the same name), the course, and its
modules, lessons and materials through the admin managers. Ordering keys
follow list position in the outline.
"""

import logging
from dataclasses import dataclass

from coursepath.schemas import Course, CourseOutline
from coursepath.store import DataStore

from .managers import (
    CompanyManager,
    CourseManager,
    LessonManager,
    MaterialManager,
    ModuleManager,
)

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    course: Course
    modules: int = 0
    lessons: int = 0
    materials: int = 0


def seed_outline(outline: CourseOutline, store: DataStore) -> SeedResult:
    companies = CompanyManager(store)
    existing = companies.list(name=outline.company.name)
    if existing:
        company = existing[0]
        logger.info(f"Using existing company {company.name} ({company.id})")
    else:
        company = companies.create(name=outline.company.name, logo_url=outline.company.logo_url)

    course = CourseManager(store).create(
        company_id=company.id,
        title=outline.title,
        description=outline.description,
        is_active=outline.is_active,
    )
    result = SeedResult(course=course)

    modules = ModuleManager(store)
    lessons = LessonManager(store)
    materials = MaterialManager(store)

    for module_index, module_outline in enumerate(outline.modules):
        module = modules.create(
            course_id=course.id,
            title=module_outline.title,
            description=module_outline.description,
            order_index=module_index,
        )
        result.modules += 1

        for lesson_index, lesson_outline in enumerate(module_outline.lessons):
            lesson = lessons.create(
                module_id=module.id,
                title=lesson_outline.title,
                description=lesson_outline.description,
                video_url=lesson_outline.video_url,
                order_index=lesson_index,
                duration_seconds=lesson_outline.duration_seconds,
            )
            result.lessons += 1

            for material_outline in lesson_outline.materials:
                materials.create(lesson_id=lesson.id, **material_outline.model_dump())
                result.materials += 1

        logger.info(f"  Module {module_index + 1}: {module.title} ({len(module_outline.lessons)} lessons)")

    return result
