"""
CoursePath Admin - Catalog and enrollment management.

This module provides one manager per table:
- CompanyManager, CourseManager, ModuleManager, LessonManager, MaterialManager
- EnrollmentManager and UserDirectory
- seed_outline for creating a whole course from a YAML outline
"""

from .managers import (
    TableManager,
    CompanyManager,
    CourseManager,
    ModuleManager,
    LessonManager,
    MaterialManager,
    EnrollmentManager,
    UserDirectory,
)
from .seed import SeedResult, seed_outline

__all__ = [
    "TableManager",
    "CompanyManager",
    "CourseManager",
    "ModuleManager",
    "LessonManager",
    "MaterialManager",
    "EnrollmentManager",
    "UserDirectory",
    "SeedResult",
    "seed_outline",
]
