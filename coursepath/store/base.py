"""
DataStore - the data-access collaborator consumed by the classroom core.

The core never talks to Supabase directly. It depends on this small
table-oriented interface so the same code runs against the hosted backend
(SupabaseStore) and against InMemoryStore in tests and dry runs.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol


# Table names in the hosted database
COMPANIES = "companies"
COURSES = "courses"
MODULES = "modules"
LESSONS = "lessons"
LESSON_MATERIALS = "lesson_materials"
USER_PROGRESS = "user_progress"
USER_PROFILES = "user_profiles"
ENROLLMENTS = "user_course_enrollments"


@dataclass
class Identity:
    """Authenticated user as reported by the auth service."""
    id: str
    email: Optional[str] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class DataStore(Protocol):
    """
    Table-oriented request/response store with a session.

    Filter values that are lists, tuples or sets mean "column in values";
    None means "column is null"; anything else is an equality match.
    Implementations raise StoreUnavailable when a call fails.
    """

    def query(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]: ...

    def insert(self, table: str, record: dict[str, Any]) -> dict: ...

    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict: ...

    def delete(self, table: str, record_id: str) -> None: ...

    def current_user(self) -> Optional[Identity]: ...

    def sign_in_with_password(self, email: str, password: str) -> Identity: ...

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        redirect_to: Optional[str] = None,
    ) -> Optional[Identity]: ...

    def oauth_sign_in_url(self, provider: str, redirect_to: Optional[str] = None) -> str: ...

    def pending_code_verifier(self) -> Optional[str]:
        """PKCE verifier created by the last oauth_sign_in_url call, if any."""
        ...

    def exchange_code(self, auth_code: str, code_verifier: str) -> Identity:
        """Turn the code from an OAuth redirect into a signed-in session."""
        ...

    def sign_out(self) -> None: ...
