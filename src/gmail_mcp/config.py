"""Environment-driven settings and the OAuth2 client credential."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from gmail_mcp.exceptions import ConfigError

GMAIL_API_BASE = os.environ.get("GMAIL_API_BASE", "https://gmail.googleapis.com/gmail/v1")
GOOGLE_TOKEN_URL = os.environ.get("GOOGLE_TOKEN_URL", "https://oauth2.googleapis.com/token")
DEFAULT_TIMEOUT = float(os.environ.get("GMAIL_MCP_TIMEOUT", "30"))
DEFAULT_LOG_LEVEL = os.environ.get("GMAIL_MCP_LOG_LEVEL", "INFO")

CREDENTIAL_KEYS = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REFRESH_TOKEN")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Credential:
    """Long-lived OAuth2 refresh credential for one Gmail account."""

    client_id: str
    client_secret: str
    refresh_token: str

    def __repr__(self) -> str:
        return f"Credential(client_id={self.client_id!r})"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Credential:
        """Build a credential from ``GOOGLE_*`` keys (env vars or tool arguments)."""
        client_id, client_secret, refresh_token = (values.get(k) for k in CREDENTIAL_KEYS)
        if not client_id or not client_secret or not refresh_token:
            raise ConfigError(
                "GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, and GOOGLE_REFRESH_TOKEN "
                "are all required. Pass them directly or set them in your environment."
            )
        return cls(
            client_id=str(client_id),
            client_secret=str(client_secret),
            refresh_token=str(refresh_token),
        )


@dataclass
class Settings:
    """Process-wide settings for the server and client."""

    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None
    api_base: str = GMAIL_API_BASE
    token_url: str = GOOGLE_TOKEN_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        try:
            timeout = float(env.get("GMAIL_MCP_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError as e:
            raise ConfigError(f"GMAIL_MCP_TIMEOUT must be a number: {e}") from e
        log_level = env.get("GMAIL_MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(
                f"GMAIL_MCP_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )
        return cls(
            client_id=env.get("GOOGLE_CLIENT_ID") or None,
            client_secret=env.get("GOOGLE_CLIENT_SECRET") or None,
            refresh_token=env.get("GOOGLE_REFRESH_TOKEN") or None,
            api_base=env.get("GMAIL_API_BASE", GMAIL_API_BASE),
            token_url=env.get("GOOGLE_TOKEN_URL", GOOGLE_TOKEN_URL),
            timeout=timeout,
            log_level=log_level,
        )

    def credential(self) -> Credential | None:
        """Return the configured credential, or None if any part is missing."""
        if self.client_id and self.client_secret and self.refresh_token:
            return Credential(self.client_id, self.client_secret, self.refresh_token)
        return None

    def credential_for(self, args: Mapping[str, Any]) -> Credential:
        """Resolve a credential field by field: configured value first, then ``args``."""
        return Credential.from_mapping({
            "GOOGLE_CLIENT_ID": self.client_id or args.get("GOOGLE_CLIENT_ID"),
            "GOOGLE_CLIENT_SECRET": self.client_secret or args.get("GOOGLE_CLIENT_SECRET"),
            "GOOGLE_REFRESH_TOKEN": self.refresh_token or args.get("GOOGLE_REFRESH_TOKEN"),
        })
