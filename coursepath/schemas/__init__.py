"""
CoursePath Schemas - Pydantic models for the course platform.

This module exports all schema classes for:
- Catalog: companies, courses, modules, lessons, materials, profiles, enrollments
- Progress: per-lesson completion records
- Outline: YAML course outlines used for seeding
"""

# Catalog schemas
from .catalog import (
    Company,
    Course,
    Module,
    Lesson,
    LessonMaterial,
    UserProfile,
    Enrollment,
)

# Progress schemas
from .progress import (
    ProgressRecord,
    CompletionMap,
)

# Outline schemas
from .outline import (
    MaterialOutline,
    LessonOutline,
    ModuleOutline,
    CompanyOutline,
    CourseOutline,
)

__all__ = [
    # Catalog
    'Company',
    'Course',
    'Module',
    'Lesson',
    'LessonMaterial',
    'UserProfile',
    'Enrollment',
    # Progress
    'ProgressRecord',
    'CompletionMap',
    # Outline
    'MaterialOutline',
    'LessonOutline',
    'ModuleOutline',
    'CompanyOutline',
    'CourseOutline',
]
