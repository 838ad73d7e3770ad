"""
Shared cookie utilities.

Why:
    Avoid duplicating environment-dependent cookie policy logic across modules
    (e.g., main app middleware and auth router).

Design:
    The helper is framework-agnostic and pure: it accepts an environment string
    and returns the corresponding cookie flags. Callers decide where the
    environment comes from (e.g., settings object).
"""

from __future__ import annotations

CLIENT_COOKIE_NAME = "voting_client"


def cookie_opts(environment: str) -> dict:
    """Return cookie flags for the client cookie.

    Returns a mapping with keys:
      - secure: True in prod-like environments, False in dev (plain http on localhost)
      - samesite: "lax"  # sent on top-level navigations, e.g. the post-login redirect
    """
    env = (environment or "").lower()
    return {"secure": env in {"prod", "production", "stage", "staging"}, "samesite": "lax"}
