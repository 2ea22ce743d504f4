"""
SupabaseStore - DataStore backed by a supabase-py client.

Tables are reached through PostgREST (`client.table(name)`), sessions through
GoTrue (`client.auth`). Row-level security on the hosted database decides
which rows the signed-in user may read or write; this adapter only shapes
requests and normalizes failures into StoreUnavailable.
"""

import logging
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AuthError, Client, ClientOptions, create_client

from coursepath.errors import AuthenticationRequired, StoreUnavailable

from .base import Identity

logger = logging.getLogger(__name__)


def _identity(user: Any) -> Identity:
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None),
        user_metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


class SessionStorage:
    """
    Auth storage handed to the client.

    Holds the session and the PKCE code verifier the client writes while
    starting an OAuth sign in, so the verifier can be read back and carried
    across the provider redirect.
    """

    CODE_VERIFIER_SUFFIX = "-code-verifier"

    def __init__(self):
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def code_verifier(self) -> Optional[str]:
        for key, value in self._items.items():
            if key.endswith(self.CODE_VERIFIER_SUFFIX):
                return value
        return None


class SupabaseStore:
    """DataStore over a supabase-py Client."""

    def __init__(self, client: Client, storage: Optional[SessionStorage] = None):
        self._client = client
        self._storage = storage

    @classmethod
    def connect(cls, url: str, key: str) -> "SupabaseStore":
        """Create a PKCE client for the project at `url` using an anon or service key."""
        storage = SessionStorage()
        options = ClientOptions(flow_type="pkce", storage=storage)
        return cls(create_client(url, key, options=options), storage)

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def _execute(self, operation: str, table: str, request) -> list[dict]:
        try:
            response = request.execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.error(f"{operation} on {table} failed: {exc}")
            raise StoreUnavailable(f"{operation} on {table} failed: {exc}") from exc
        return list(response.data or [])

    def query(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        request = self._client.table(table).select("*")
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                request = request.in_(column, list(value))
            elif value is None:
                request = request.is_(column, "null")
            else:
                request = request.eq(column, value)
        if order_by:
            request = request.order(order_by, desc=descending)
        return self._execute("query", table, request)

    def insert(self, table: str, record: dict[str, Any]) -> dict:
        rows = self._execute("insert", table, self._client.table(table).insert(record))
        if not rows:
            raise StoreUnavailable(f"insert on {table} returned no row")
        return rows[0]

    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict:
        request = self._client.table(table).update(patch).eq("id", record_id)
        rows = self._execute("update", table, request)
        if not rows:
            # RLS hides rows the user may not touch; PostgREST reports success with no data
            raise StoreUnavailable(f"update on {table} affected no rows (id={record_id})")
        return rows[0]

    def delete(self, table: str, record_id: str) -> None:
        self._execute("delete", table, self._client.table(table).delete().eq("id", record_id))

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def current_user(self) -> Optional[Identity]:
        try:
            response = self._client.auth.get_user()
        except AuthError:
            # No session or an expired token: nobody is signed in
            return None
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"session lookup failed: {exc}") from exc
        if response is None or response.user is None:
            return None
        return _identity(response.user)

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthenticationRequired(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"sign in failed: {exc}") from exc
        if response.user is None:
            raise AuthenticationRequired("Sign in returned no user")
        return _identity(response.user)

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        redirect_to: Optional[str] = None,
    ) -> Optional[Identity]:
        options: dict[str, Any] = {"data": {"full_name": full_name}}
        if redirect_to:
            options["email_redirect_to"] = redirect_to
        try:
            response = self._client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except AuthError as exc:
            raise AuthenticationRequired(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"sign up failed: {exc}") from exc
        return _identity(response.user) if response.user is not None else None

    def oauth_sign_in_url(self, provider: str, redirect_to: Optional[str] = None) -> str:
        credentials: dict[str, Any] = {"provider": provider}
        if redirect_to:
            credentials["options"] = {"redirect_to": redirect_to}
        try:
            response = self._client.auth.sign_in_with_oauth(credentials)
        except AuthError as exc:
            raise AuthenticationRequired(str(exc)) from exc
        return response.url

    def pending_code_verifier(self) -> Optional[str]:
        return self._storage.code_verifier() if self._storage is not None else None

    def exchange_code(self, auth_code: str, code_verifier: str) -> Identity:
        try:
            response = self._client.auth.exchange_code_for_session(
                {"auth_code": auth_code, "code_verifier": code_verifier}
            )
        except AuthError as exc:
            raise AuthenticationRequired(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"code exchange failed: {exc}") from exc
        if response.user is None:
            raise AuthenticationRequired("Code exchange returned no user")
        return _identity(response.user)

    def sign_out(self) -> None:
        try:
            self._client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as exc:
            raise StoreUnavailable(f"sign out failed: {exc}") from exc
