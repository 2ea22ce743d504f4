"""
Course outline schemas for CoursePath.

A course outline is a YAML document describing one company, one course and
its nested modules, lessons and materials. Outlines are validated here and
written to the store by scripts/seed_course.py. Ordering keys are not part of
the outline: they follow list position.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MaterialOutline(BaseModel):
    title: str
    file_url: str
    file_type: str
    file_size: Optional[int] = None


class LessonOutline(BaseModel):
    title: str
    video_url: str
    description: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    materials: list[MaterialOutline] = []


class ModuleOutline(BaseModel):
    title: str
    description: Optional[str] = None
    lessons: list[LessonOutline] = []


class CompanyOutline(BaseModel):
    name: str
    logo_url: Optional[str] = None


class CourseOutline(BaseModel):
    company: CompanyOutline
    title: str
    description: Optional[str] = None
    is_active: bool = True
    modules: list[ModuleOutline] = []

    @property
    def lesson_count(self) -> int:
        return sum(len(module.lessons) for module in self.modules)
