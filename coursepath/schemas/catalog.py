"""
Catalog schemas for CoursePath.

Defines Pydantic models for the rows administrators curate:
- Companies owning courses
- Courses, modules and lessons (ordered by order_index)
- Downloadable lesson materials
- User profiles and course enrollments
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Company(BaseModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None


class Course(BaseModel):
    id: str
    company_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class Module(BaseModel):
    """A course section. order_index is unique within the course."""
    id: str
    course_id: str
    title: str
    description: Optional[str] = None
    order_index: int = 0
    created_at: Optional[datetime] = None


class Lesson(BaseModel):
    """A single video lesson. order_index is unique within the module."""
    id: str
    module_id: str
    title: str
    description: Optional[str] = None
    video_url: str
    order_index: int = 0
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    created_at: Optional[datetime] = None


class LessonMaterial(BaseModel):
    id: str
    lesson_id: str
    title: str
    file_url: str
    file_type: str
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None


class UserProfile(BaseModel):
    id: str  # same id as the auth user
    full_name: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class Enrollment(BaseModel):
    id: str
    user_id: str
    course_id: str
    enrolled_at: Optional[datetime] = None
