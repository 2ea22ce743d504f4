"""
CoursePath Store - data-access collaborators.

This module provides:
- DataStore: the table/session interface consumed by the core
- SupabaseStore: hosted backend (PostgREST tables + GoTrue auth)
- InMemoryStore: dictionaries, for tests and dry runs
"""

from .base import (
    DataStore,
    Identity,
    COMPANIES,
    COURSES,
    MODULES,
    LESSONS,
    LESSON_MATERIALS,
    USER_PROGRESS,
    USER_PROFILES,
    ENROLLMENTS,
)

from .memory import InMemoryStore

from .supabase_store import SessionStorage, SupabaseStore

__all__ = [
    "DataStore",
    "Identity",
    "InMemoryStore",
    "SupabaseStore",
    "SessionStorage",
    # Tables
    "COMPANIES",
    "COURSES",
    "MODULES",
    "LESSONS",
    "LESSON_MATERIALS",
    "USER_PROGRESS",
    "USER_PROFILES",
    "ENROLLMENTS",
]
