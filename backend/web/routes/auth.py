"""
Authentication-related FastAPI routes (router-only module).

Why:
    Keep the register/login/logout pages in a dedicated router so `main.py`
    only holds app wiring, the navigation guard and the protected views.

Notes:
    - This module imports `main` inside functions to reuse the shared client
      state store, settings and API transport. Tests monkeypatch those module
      globals, so they must be looked up per request.
    - Remote calls and their fallbacks live in `identity_access.usecases`; the
      handlers here only translate form fields and use case results to HTML.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
import logging

import config

from components import Layout, LoginForm, RegisterForm
from identity_access.domain import CredentialRecord
from identity_access.usecases import (
    LoginInput,
    LoginUseCase,
    LogoutUseCase,
    RegisterInput,
    RegisterUseCase,
)


auth_router = APIRouter(tags=["Auth"])
logger = logging.getLogger("votingportal.web.auth")

_NO_STORE = {"Cache-Control": "private, no-store"}

# Form fields re-rendered after a failed submit; never the password.
_REGISTER_ECHO_FIELDS = ("surname", "first_name", "email", "matric_no", "phone")


def _main():
    """Return the active `main` module (imported lazily to avoid a cycle)."""
    import sys as _sys
    mod = _sys.modules.get("main")
    if mod is None:  # pragma: no cover - router used without the app module
        import main as mod  # type: ignore
    return mod


def _csrf_error() -> HTMLResponse:
    return HTMLResponse(content="CSRF Error", status_code=403, headers=_NO_STORE)


def _render_register(request: Request, *, status_code: int = 200, error: str | None = None,
                     success: str | None = None, values: dict | None = None,
                     refresh: tuple[int, str] | None = None) -> HTMLResponse:
    mod = _main()
    state = mod.client_state(request)
    form = RegisterForm(
        csrf_token=mod.get_or_create_csrf_token(state),
        error=error,
        success=success,
        values=values,
    )
    layout = Layout(
        title="Register",
        content=form.render(),
        user=mod.current_user(request),
        current_path=request.url.path,
        refresh=refresh,
    )
    return mod.layout_response(request, layout, status_code=status_code)


def _render_login(request: Request, *, status_code: int = 200, error: str | None = None,
                  values: dict | None = None) -> HTMLResponse:
    mod = _main()
    state = mod.client_state(request)
    form = LoginForm(csrf_token=mod.get_or_create_csrf_token(state), error=error, values=values)
    layout = Layout(title="Login", content=form.render(), user=mod.current_user(request), current_path=request.url.path)
    return mod.layout_response(request, layout, status_code=status_code)


@auth_router.get("/register", response_class=HTMLResponse)
async def register_form(request: Request):
    """Render the registration form. Public."""
    return _render_register(request)


@auth_router.post("/register", response_class=HTMLResponse)
async def register_submit(request: Request):
    """
    Register a student via the remote API, falling back to the local roster.

    Behavior:
        - Rejects a missing/wrong CSRF token with 403 (no side effects).
        - Missing required fields: 400 with inline error, no network call.
        - Remote success: success message, navigate to /login after 2s.
        - Any other outcome: record appended to the local roster, "(mock)"
          success message, navigate to /login after 1s.
    Permissions:
        Public.
    """
    mod = _main()
    state = mod.client_state(request)
    form = await request.form()
    if not mod.validate_csrf(state, form.get("csrf_token")):
        return _csrf_error()

    record = CredentialRecord.from_form(form)
    use_case = RegisterUseCase(
        mod.build_api_client(state),
        state,
        enable_fallback=config.fallback_enabled(),
    )
    result = await use_case.execute(RegisterInput(record=record))
    values = {name: str(form.get(name, "") or "") for name in _REGISTER_ECHO_FIELDS}

    if not result.ok:
        return _render_register(request, status_code=400, error=result.message, values=values)

    logger.info("Registration completed: %s", result.status)
    return _render_register(
        request,
        success=result.message,
        values=values,
        refresh=(result.redirect_delay or 0, result.redirect_to or "/login"),
    )


@auth_router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request):
    """Render the login form. Public."""
    return _render_login(request)


@auth_router.post("/login")
async def login_submit(request: Request):
    """
    Log in with matric number and password.

    Behavior:
        - Rejects a missing/wrong CSRF token with 403 (no side effects).
        - Missing fields: 400 with inline error, no network call.
        - Token from the API, or a matching local roster entry when the API is
          unreachable: session token stored, 303 redirect to "/".
        - API answered without a token, or no roster match: 400 with inline error.
    Permissions:
        Public.
    """
    mod = _main()
    state = mod.client_state(request)
    form = await request.form()
    if not mod.validate_csrf(state, form.get("csrf_token")):
        return _csrf_error()

    matric = str(form.get("matric_number", "") or "")
    password = str(form.get("password", "") or "")
    use_case = LoginUseCase(
        mod.build_api_client(state),
        state,
        enable_fallback=config.fallback_enabled(),
        verify_password=config.mock_verify_password(),
    )
    result = await use_case.execute(LoginInput(matric_number=matric, password=password))

    if not result.ok:
        logger.info("Login rejected: %s", result.status)
        return _render_login(request, status_code=400, error=result.message, values={"matric_number": matric})

    logger.info("Login completed: %s", result.status)
    return RedirectResponse(url=result.redirect_to or "/", status_code=303, headers=_NO_STORE)


@auth_router.get("/logout")
async def logout(request: Request):
    """Forget the session token and mock identity, then show the login page.

    The local roster is kept, so offline registrations survive a logout.
    """
    mod = _main()
    LogoutUseCase(mod.client_state(request)).execute()
    return RedirectResponse(url="/login", status_code=302, headers=_NO_STORE)
