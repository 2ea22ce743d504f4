"""
AuthService - Sign-in flows and user profiles.

Provides:
- Email/password sign in and sign up, Google OAuth sign in, sign out
- Profile bootstrap: every signed-in user gets a non-admin user_profiles row
- Admin check used by the shell to pick the dashboard
"""

import logging
import secrets
import threading
import time
from typing import Callable, Optional
from urllib.parse import urlencode

from coursepath.errors import AuthenticationRequired, MalformedInput, StoreUnavailable
from coursepath.schemas import UserProfile
from coursepath.store import USER_PROFILES, DataStore, Identity
from coursepath.utils.rows import parse_rows

logger = logging.getLogger(__name__)

OAUTH_FLOW_TTL_SECONDS = 600
OAUTH_FLOW_PARAM = "flow"


def ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


def resolve_redirect_url(configured: Optional[str], origin: Optional[str] = None) -> Optional[str]:
    """
    URL the auth service sends users back to after email confirmation or OAuth.

    A configured URL wins over the app's own origin. None when neither is known.
    """
    if configured and configured.strip():
        return ensure_trailing_slash(configured.strip())
    if origin:
        return ensure_trailing_slash(origin)
    return None


def resolve_full_name(identity: Identity) -> str:
    """Best display name from auth metadata, falling back to the email."""
    metadata = identity.user_metadata or {}
    name = metadata.get("full_name") or metadata.get("name")
    if not name:
        parts = [
            part for part in (metadata.get("given_name"), metadata.get("family_name"))
            if isinstance(part, str) and part
        ]
        name = " ".join(parts)
    return name or identity.email or ""


class OAuthFlowRegistry:
    """
    PKCE verifiers of OAuth sign ins in progress, keyed by flow id.

    The provider redirect opens a new app session, so the registry must be
    shared by the whole process. Entries expire after ttl_seconds.
    """

    def __init__(
        self,
        ttl_seconds: float = OAUTH_FLOW_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._flows: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float):
        expired = [key for key, (_, started) in self._flows.items() if now - started > self.ttl_seconds]
        for key in expired:
            del self._flows[key]

    def put(self, flow_id: str, code_verifier: str):
        with self._lock:
            now = self.clock()
            self._prune(now)
            self._flows[flow_id] = (code_verifier, now)

    def pop(self, flow_id: str) -> Optional[str]:
        """Remove and return the verifier of a flow; None if unknown or expired."""
        with self._lock:
            self._prune(self.clock())
            entry = self._flows.pop(flow_id, None)
        return entry[0] if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)


class AuthService:
    """Authentication and profile bootstrap through a DataStore."""

    def __init__(
        self,
        store: DataStore,
        redirect_url: Optional[str] = None,
        flows: Optional[OAuthFlowRegistry] = None,
    ):
        self.store = store
        self.redirect_url = redirect_url
        self.flows = flows if flows is not None else OAuthFlowRegistry()

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def current_user(self) -> Optional[Identity]:
        return self.store.current_user()

    def sign_in(self, email: str, password: str) -> Identity:
        identity = self.store.sign_in_with_password(email, password)
        logger.info(f"User {identity.id} signed in")
        return identity

    def sign_up(self, email: str, password: str, full_name: str) -> Optional[Identity]:
        """
        Register a new account and create its profile.

        Returns None when the backend requires email confirmation before the
        user exists. A failed profile insert is logged only: the profile is
        created again on the next sign in.
        """
        identity = self.store.sign_up(email, password, full_name, redirect_to=self.redirect_url)
        if identity is None:
            return None
        try:
            self.store.insert(USER_PROFILES, {"id": identity.id, "full_name": full_name, "is_admin": False})
        except StoreUnavailable as exc:
            logger.error(f"Could not create profile after sign up for {identity.id}: {exc}")
        return identity

    def google_sign_in_url(self) -> Optional[str]:
        """
        Start a Google sign in and return the provider URL.

        The redirect URL carries a flow id under which the PKCE verifier is
        kept until the user comes back. None when no redirect URL is known.
        """
        if not self.redirect_url:
            return None
        flow_id = secrets.token_urlsafe(16)
        redirect_to = f"{self.redirect_url}?{urlencode({OAUTH_FLOW_PARAM: flow_id})}"
        url = self.store.oauth_sign_in_url("google", redirect_to=redirect_to)
        verifier = self.store.pending_code_verifier()
        if verifier:
            self.flows.put(flow_id, verifier)
        return url

    def complete_oauth_sign_in(self, auth_code: str, flow_id: Optional[str]) -> Identity:
        """
        Finish an OAuth sign in from the code on the redirect URL.

        Raises:
            AuthenticationRequired: If the flow is unknown or expired, or the code is rejected
        """
        verifier = self.flows.pop(flow_id) if flow_id else None
        if verifier is None:
            raise AuthenticationRequired("Sign in link expired, please start again")
        identity = self.store.exchange_code(auth_code, verifier)
        logger.info(f"User {identity.id} signed in with OAuth")
        return identity

    def sign_out(self):
        self.store.sign_out()

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        rows = self.store.query(USER_PROFILES, {"id": user_id})
        profiles = parse_rows(UserProfile, rows, USER_PROFILES)
        return profiles[0] if profiles else None

    def ensure_user_profile(self, identity: Identity) -> UserProfile:
        """
        Get the user's profile, creating a non-admin one on first sign in.

        A failed lookup or an unreadable profile row yields a transient
        non-admin profile so the user still reaches the student dashboard.
        """
        try:
            profile = self.get_profile(identity.id)
        except (StoreUnavailable, MalformedInput) as exc:
            logger.error(f"Error fetching profile for {identity.id}: {exc}")
            return UserProfile(id=identity.id, full_name=resolve_full_name(identity), is_admin=False)

        if profile is not None:
            return profile

        profile = UserProfile(id=identity.id, full_name=resolve_full_name(identity), is_admin=False)
        try:
            self.store.insert(
                USER_PROFILES,
                {"id": profile.id, "full_name": profile.full_name, "is_admin": False},
            )
            logger.info(f"Created profile for {identity.id}")
        except StoreUnavailable as exc:
            logger.error(f"Error creating profile for {identity.id}: {exc}")
        return profile

    def is_admin(self, identity: Identity) -> bool:
        return self.ensure_user_profile(identity).is_admin
