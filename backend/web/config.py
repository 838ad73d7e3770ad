"""
Configuration and startup security checks for the voting portal.

Why: The offline fallback is a development convenience that signs people in
without a server. This module provides the helpers that read the portal's
environment and a single guard that refuses obviously unsafe production
deployments without burdening local development.

Permissions: The caller needs no special privileges. The functions simply read
environment variables; the guard raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os

from identity_access.api_client import DEFAULT_API_BASE


def is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes")


def resolve_api_base(runtime_override: str | None = None) -> str:
    """Resolve the remote API base address.

    Order of precedence:
      1. VOTING_API_BASE environment variable (deployment-time setting)
      2. Runtime override (e.g., set by an embedding process or a test)
      3. Fallback to http://localhost:5148/api
    """
    env_value = (os.getenv("VOTING_API_BASE", "") or "").strip()
    if env_value:
        return env_value
    if runtime_override:
        return runtime_override
    return DEFAULT_API_BASE


def api_timeout_seconds() -> float | None:
    """Return VOTING_API_TIMEOUT as seconds, or None (no timeout) when unset/invalid."""
    raw = (os.getenv("VOTING_API_TIMEOUT", "") or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def fallback_enabled() -> bool:
    return _flag("VOTING_ENABLE_FALLBACK", "true")


def mock_verify_password() -> bool:
    return _flag("VOTING_MOCK_VERIFY_PASSWORD", "false")


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Intent: Abort process startup when obviously insecure settings are detected
    in production/staging. Development remains permissive for convenience.

    Checks:
    - The remote API base must use HTTPS (bearer tokens travel with every call).
    - The offline fallback must not sign people in without a password check.
    - DATABASE_URL must not explicitly disable TLS.
    """

    env = os.getenv("VOTING_ENV", "dev")
    if not is_prod_like(env):
        return  # dev/test remain permissive

    # 1) Remote API must be reached over TLS
    base = resolve_api_base().strip().lower()
    if base.startswith("http://"):
        raise SystemExit(
            "Refusing to start: VOTING_API_BASE must use https in production (got http)."
        )

    # 2) Offline fallback accepts any password unless verification is on
    if fallback_enabled() and not mock_verify_password():
        raise SystemExit(
            "Refusing to start: VOTING_ENABLE_FALLBACK=true requires VOTING_MOCK_VERIFY_PASSWORD=true in production."
        )

    # 3) Postgres TLS: basic guard to avoid explicit disable
    dsn = os.getenv("DATABASE_URL", "")
    if "sslmode=disable" in dsn:
        raise SystemExit(
            "Refusing to start: DATABASE_URL contains sslmode=disable in production. Use sslmode=require or verify TLS."
        )
