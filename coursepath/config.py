"""
Configuration for CoursePath.

Settings come from the environment, after loading an optional .env file:

    SUPABASE_URL                 Project URL
    SUPABASE_ANON_KEY            Public key used by the app (row-level rules apply)
    SUPABASE_SERVICE_ROLE_KEY    Privileged key, only for scripts
    COURSEPATH_REDIRECT_URL      Where auth emails and OAuth send users back
    COURSEPATH_FETCH_WORKERS     Parallel lesson fetches per course (default 4)
    COURSEPATH_LOG_LEVEL         Logging level (default INFO)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from coursepath.store import SupabaseStore

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    redirect_url: Optional[str] = None
    fetch_workers: int = Field(default=4, ge=1, le=32)
    log_level: str = "INFO"

    @property
    def is_configured(self) -> bool:
        """True when the app can reach the hosted backend."""
        return bool(self.supabase_url and self.supabase_anon_key)


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from .env and the process environment.

    Variables already set in the environment take precedence over the file.
    """
    load_dotenv(env_file or DEFAULT_ENV_FILE)
    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL", "").strip(),
        supabase_anon_key=os.environ.get("SUPABASE_ANON_KEY", "").strip(),
        supabase_service_role_key=os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "").strip(),
        redirect_url=os.environ.get("COURSEPATH_REDIRECT_URL") or None,
        fetch_workers=int(os.environ.get("COURSEPATH_FETCH_WORKERS", "4")),
        log_level=os.environ.get("COURSEPATH_LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_store(settings: Settings, service_role: bool = False) -> SupabaseStore:
    """
    Connect to the hosted backend.

    Args:
        settings: Loaded settings
        service_role: Use the service role key (scripts only; bypasses row-level rules)

    Raises:
        ValueError: If the URL or the requested key is missing
    """
    key = settings.supabase_service_role_key if service_role else settings.supabase_anon_key
    if not settings.supabase_url or not key:
        missing = "SUPABASE_SERVICE_ROLE_KEY" if service_role else "SUPABASE_ANON_KEY"
        raise ValueError(f"Supabase is not configured: set SUPABASE_URL and {missing}")
    return SupabaseStore.connect(settings.supabase_url, key)
