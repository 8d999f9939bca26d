"""
core/config.py -- Centralized client configuration via pydantic-settings.

All environment variable reads for the Synapse client happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. Credentials
      are therefore read once per process.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Every field is prefixed with
      SYNAPSE_ (e.g. username -> SYNAPSE_USERNAME). Type coercion and
      validation are built in.

  @model_validator(mode="after"): Normalizes api_url after all fields are
      resolved, so path joining in core/transport.py never produces "//".

Security notes:
  password and api_key are never logged. Missing credentials are not a
  startup failure -- Settings() must be constructible in test environments.
  The login call in auth/session.py raises AuthError when they are absent.

Layer rule: core/ is the kernel. This module may not import from auth/.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("synapse.config")

DEFAULT_API_URL = "https://repo-prod.prod.sagebase.org"


class Settings(BaseSettings):
    """Client settings loaded from SYNAPSE_* environment variables and .env.

    All fields have defaults so Settings() can be instantiated without a
    real .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SYNAPSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    username: str = ""
    password: str = ""
    # Only needed for signature-mode requests (auth/signing.py).
    api_key: str = ""

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    api_url: str = DEFAULT_API_URL
    # None means no timeout: a hung call hangs the operation.
    request_timeout: Optional[float] = None

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def normalize_api_url(self) -> "Settings":
        """Strip trailing slashes and reject non-HTTP base URLs."""
        url = self.api_url.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"SYNAPSE_API_URL must be an http(s) URL, got {self.api_url!r}")
        if url.startswith("http://"):
            logger.warning("SYNAPSE_API_URL uses plain HTTP -- credentials will be sent unencrypted.")
        self.api_url = url
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
