"Student Voting Portal"
from __future__ import annotations

from pathlib import Path
import hmac
import os
import logging
import secrets
from typing import Optional, Dict, Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
import httpx
from dotenv import load_dotenv

# Component Imports
from components import Layout, dashboard_page, vote_page, profile_page

# Identity Imports
from identity_access.api_client import ApiClient
from identity_access.domain import CSRF_KEY, MOCK_IDENTITY_KEY, TOKEN_KEY, MockSessionIdentity
from identity_access.stores import ClientState, ClientStateStore, new_client_id

from auth_utils import CLIENT_COOKIE_NAME, cookie_opts
import config as _cfg


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via VOTING_ENABLE_DOTENV (default true outside pytest).
    """
    import sys
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("VOTING_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config)
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------

class PortalSettings:
    def __init__(self) -> None:
        self._env_override: str | None = None
        self._api_base_override: str | None = None

    @property
    def environment(self) -> str:
        if self._env_override is not None:
            return self._env_override
        return os.getenv("VOTING_ENV", "dev").lower()

    def override_environment(self, env: str | None) -> None:
        """Override environment for tests (e.g., "prod"), or reset with None."""
        self._env_override = env

    @property
    def api_base(self) -> str:
        return _cfg.resolve_api_base(self._api_base_override)

    def override_api_base(self, base: str | None) -> None:
        """Process-wide runtime override of the API base; VOTING_API_BASE still wins."""
        self._api_base_override = base


logger = logging.getLogger("votingportal.web")
SETTINGS = PortalSettings()

app = FastAPI(title="Student Voting Portal", description="Registration and login for student voting", version="0.1.0")

# --- Static Files & Routers -----------------------------------------------------

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

from routes.auth import auth_router

# --- Client State & API Setup ---------------------------------------------------

def _under_pytest() -> bool:
    import sys
    return "pytest" in sys.modules or bool(os.getenv("PYTEST_CURRENT_TEST"))


if (not _under_pytest()) and os.getenv("CLIENT_STATE_BACKEND", "memory").lower() == "db":
    from identity_access.stores_db import DBClientStateStore
    CLIENT_STATE_STORE = DBClientStateStore()
else:
    CLIENT_STATE_STORE = ClientStateStore()

# Tests replace this with httpx.MockTransport; None means real network.
API_TRANSPORT: httpx.AsyncBaseTransport | None = None


def build_api_client(state: ClientState) -> ApiClient:
    """API client bound to one client's state (bearer token read per request)."""
    return ApiClient(
        SETTINGS.api_base,
        token_source=lambda: state.get(TOKEN_KEY),
        transport=API_TRANSPORT,
        timeout=_cfg.api_timeout_seconds(),
    )

# --- Navigation Guard & Client Middleware ---------------------------------------

PROTECTED_PATHS = frozenset({"/", "/vote", "/profile"})


def _set_client_cookie(response: Response, client_id: str) -> None:
    opts = cookie_opts(SETTINGS.environment)
    response.set_cookie(
        key=CLIENT_COOKIE_NAME,
        value=client_id,
        httponly=True,
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
    )


def _load_client_state(request: Request) -> tuple[ClientState, bool]:
    """Return (state, is_new) for the requesting client.

    Store failures are logged and answered with a transient, unsaved state so
    the request proceeds as an anonymous client.
    """
    cid = request.cookies.get(CLIENT_COOKIE_NAME)
    try:
        state = CLIENT_STATE_STORE.get(cid) if cid else None
        if state is not None:
            return state, False
        return CLIENT_STATE_STORE.create(), True
    except Exception as exc:
        logger.warning("Client state store failed: %s", exc.__class__.__name__)
        return ClientState(new_client_id()), False


def _is_authenticated(state: ClientState) -> bool:
    try:
        return bool(state.get(TOKEN_KEY))
    except Exception as exc:
        logger.warning("Client state read failed: %s", exc.__class__.__name__)
        return False


@app.middleware("http")
async def client_state_and_guard(request: Request, call_next):
    if request.url.path.startswith("/static/"):
        return await call_next(request)

    state, is_new = _load_client_state(request)
    request.state.client = state

    # Guard is evaluated on every request; no caching of the decision.
    if request.url.path in PROTECTED_PATHS and not _is_authenticated(state):
        response = RedirectResponse(url="/login", status_code=302)
        response.headers["Cache-Control"] = "private, no-store"
    else:
        response = await call_next(request)

    # New clients get a cookie only once the request stored something for them.
    if is_new and state.written:
        _set_client_cookie(response, state.client_id)
    return response

# --- Security Headers Middleware ----------------------------------------------

@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    prod_like = _cfg.is_prod_like(SETTINGS.environment)
    if prod_like:
        csp = (
            "default-src 'self'; script-src 'self'; style-src 'self'; "
            "img-src 'self' data:; font-src 'self' data:; connect-src 'self';"
        )
    else:
        # Developer experience: allow inline styles while iterating on pages.
        csp = (
            "default-src 'self'; script-src 'self'; style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; font-src 'self' data:; connect-src 'self';"
        )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    if prod_like:
        response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response

# --- Request Helpers ------------------------------------------------------------

def client_state(request: Request) -> ClientState:
    state = getattr(request.state, "client", None)
    if state is None:  # pragma: no cover - middleware always sets it
        state = ClientState(new_client_id())
        request.state.client = state
    return state


def current_user(request: Request) -> Optional[Dict[str, Any]]:
    """Return the header identity: None when not signed in, else name/matric (may be empty)."""
    state = client_state(request)
    if not _is_authenticated(state):
        return None
    identity = MockSessionIdentity.from_payload(state.get(MOCK_IDENTITY_KEY))
    return identity.to_payload() if identity else {}


def get_or_create_csrf_token(state: ClientState) -> str:
    token = state.get(CSRF_KEY)
    if not token or not isinstance(token, str):
        token = secrets.token_urlsafe(24)
        state.set(CSRF_KEY, token)
    return token


def validate_csrf(state: ClientState, form_value: Optional[str]) -> bool:
    if not form_value:
        return False
    expected = state.get(CSRF_KEY)
    if not expected or not isinstance(expected, str):
        return False
    return hmac.compare_digest(expected, str(form_value))


def layout_response(
    request: Request,
    layout: Layout,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> HTMLResponse:
    """Render a Layout into an HTMLResponse.

    Every page depends on the client's state (greeting, CSRF token), so the
    default cache policy is `private, no-store` unless the caller overrides it.
    """
    response = HTMLResponse(content=layout.render(), status_code=status_code)
    response.headers["Cache-Control"] = "private, no-store"
    if headers:
        for key, value in headers.items():
            response.headers[key] = value
    return response

# --- Protected Views --------------------------------------------------------------

@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    layout = Layout(title="Dashboard", content=dashboard_page().render(), user=current_user(request), current_path=request.url.path)
    return layout_response(request, layout)


@app.get("/vote", response_class=HTMLResponse)
async def vote(request: Request):
    layout = Layout(title="Vote", content=vote_page().render(), user=current_user(request), current_path=request.url.path)
    return layout_response(request, layout)


@app.get("/profile", response_class=HTMLResponse)
async def profile(request: Request):
    layout = Layout(title="Profile", content=profile_page().render(), user=current_user(request), current_path=request.url.path)
    return layout_response(request, layout)

# --- Other Routes & App Includes -----------------------------------------------

app.include_router(auth_router)


@app.get("/health")
async def health_check():
    # Minimal health endpoint used by orchestrators and tests.
    return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "private, no-store"})


# Registered last so every explicit route above wins.
@app.get("/{unknown_path:path}", include_in_schema=False)
async def unknown_path_redirect(unknown_path: str):
    return RedirectResponse(url="/", status_code=302)
