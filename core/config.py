"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the alert service happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. database_url -> DATABASE_URL). Type coercion and validation are
      built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Out-of-range values are a hard startup
      failure rather than a surprise at the first login.

Session state note:
  Sessions live in process memory (auth/sessions.py). They do not survive a
  restart and are not shared between worker processes. Run a single worker,
  or swap in a shared SessionRegistry implementation.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or alerts/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("alertservice.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'alertservice.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # bcrypt work factor. 10 keeps a login under ~100ms on commodity hardware.
    bcrypt_rounds: int = 10
    # 0 disables the max-age policy: a session lives until revoked or restart.
    session_max_age_seconds: int = 0

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    # Default for GET /api/alerts when the caller omits ?include_deleted=.
    list_include_deleted: bool = True

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["*"]
    allowed_hosts: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        """Reject settings that would make auth unsafe or unusable.

        bcrypt accepts cost factors 4..31. Below 4 the library raises; above
        ~14 a single login takes seconds.
        """
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        if self.session_max_age_seconds < 0:
            raise ValueError("SESSION_MAX_AGE_SECONDS must be zero (disabled) or positive.")
        if not self.database_url:
            raise ValueError("DATABASE_URL must not be empty.")
        if self.bcrypt_rounds < 10 and not self.debug:
            logger.warning("BCRYPT_ROUNDS=%d is below the recommended minimum of 10", self.bcrypt_rounds)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
