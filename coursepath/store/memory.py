"""
InMemoryStore - process-local DataStore used by tests and dry runs.

Rows live in plain dicts keyed by table name. Identifiers are UUID strings
and created_at is stamped on insert, mirroring the hosted database defaults.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from coursepath.errors import AuthenticationRequired, StoreUnavailable

from .base import Identity


class InMemoryStore:
    """
    DataStore backed by dictionaries.

    Thread-safe: the content tree loader queries it from worker threads.
    Failures can be injected per operation with fail_on().
    """

    def __init__(self):
        self._tables: dict[str, list[dict]] = {}
        self._users: dict[str, tuple[str, Identity]] = {}  # email -> (password, identity)
        self._session: Optional[Identity] = None
        self._code_verifier: Optional[str] = None
        self._oauth_codes: dict[str, tuple[str, Identity]] = {}  # code -> (verifier, identity)
        self._failures: set[tuple[str, Optional[str]]] = set()
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Failure injection
    # -------------------------------------------------------------------------

    def fail_on(self, operation: str, table: Optional[str] = None):
        """Make every later `operation` call (optionally on one table) fail."""
        self._failures.add((operation, table))

    def clear_failures(self):
        self._failures.clear()

    def _check(self, operation: str, table: Optional[str] = None):
        if (operation, None) in self._failures or (operation, table) in self._failures:
            target = f" on {table}" if table else ""
            raise StoreUnavailable(f"{operation}{target} failed") from ConnectionError(
                "injected failure"
            )

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def rows(self, table: str) -> list[dict]:
        """Return copies of every row in a table, in insertion order."""
        with self._lock:
            return [dict(row) for row in self._tables.get(table, [])]

    @staticmethod
    def _matches(row: dict, filters: dict[str, Any]) -> bool:
        for column, value in filters.items():
            if isinstance(value, (list, tuple, set)):
                if row.get(column) not in value:
                    return False
            elif value is None:
                if row.get(column) is not None:
                    return False
            elif row.get(column) != value:
                return False
        return True

    def query(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        self._check("query", table)
        with self._lock:
            result = [
                dict(row) for row in self._tables.get(table, [])
                if self._matches(row, filters or {})
            ]
        if order_by:
            # Nulls sort last, as PostgREST does for ascending order
            present = [row for row in result if row.get(order_by) is not None]
            missing = [row for row in result if row.get(order_by) is None]
            present.sort(key=lambda row: row[order_by], reverse=descending)
            result = present + missing
        return result

    def insert(self, table: str, record: dict[str, Any]) -> dict:
        self._check("insert", table)
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        with self._lock:
            self._tables.setdefault(table, []).append(row)
        return dict(row)

    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict:
        self._check("update", table)
        with self._lock:
            for row in self._tables.get(table, []):
                if row.get("id") == record_id:
                    row.update(patch)
                    return dict(row)
        raise StoreUnavailable(f"update on {table} affected no rows (id={record_id})")

    def delete(self, table: str, record_id: str) -> None:
        self._check("delete", table)
        with self._lock:
            rows = self._tables.get(table, [])
            self._tables[table] = [row for row in rows if row.get("id") != record_id]

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def register_user(
        self,
        email: str,
        password: str,
        user_metadata: Optional[dict[str, Any]] = None,
    ) -> Identity:
        """Create an auth user without signing in."""
        identity = Identity(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata=dict(user_metadata or {}),
        )
        self._users[email] = (password, identity)
        return identity

    def set_current_user(self, identity: Optional[Identity]):
        self._session = identity

    def current_user(self) -> Optional[Identity]:
        self._check("current_user")
        return self._session

    def sign_in_with_password(self, email: str, password: str) -> Identity:
        self._check("sign_in")
        stored = self._users.get(email)
        if stored is None or stored[0] != password:
            raise AuthenticationRequired("Invalid login credentials")
        self._session = stored[1]
        return stored[1]

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        redirect_to: Optional[str] = None,
    ) -> Optional[Identity]:
        self._check("sign_up")
        if email in self._users:
            raise AuthenticationRequired("User already registered")
        identity = self.register_user(email, password, {"full_name": full_name})
        self._session = identity
        return identity

    def oauth_sign_in_url(self, provider: str, redirect_to: Optional[str] = None) -> str:
        self._code_verifier = uuid.uuid4().hex
        url = f"memory://auth/{provider}"
        return f"{url}?redirect_to={redirect_to}" if redirect_to else url

    def pending_code_verifier(self) -> Optional[str]:
        return self._code_verifier

    def grant_oauth_code(self, identity: Identity) -> str:
        """Issue the code the provider would append to the redirect URL."""
        if self._code_verifier is None:
            raise AuthenticationRequired("No OAuth sign in was started")
        code = uuid.uuid4().hex
        self._oauth_codes[code] = (self._code_verifier, identity)
        return code

    def exchange_code(self, auth_code: str, code_verifier: str) -> Identity:
        self._check("exchange_code")
        grant = self._oauth_codes.pop(auth_code, None)
        if grant is None or grant[0] != code_verifier:
            raise AuthenticationRequired("Invalid or expired authorization code")
        self._session = grant[1]
        return grant[1]

    def sign_out(self) -> None:
        self._session = None
