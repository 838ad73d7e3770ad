"""
Registration flow through the web app.

Exercises GET/POST /register with a mocked remote API: inline validation,
remote success, the offline roster fallback, and CSRF enforcement.
"""

from __future__ import annotations

from pathlib import Path
import sys

import httpx
import pytest
from httpx import ASGITransport


REPO_ROOT = Path(__file__).resolve().parents[2]
WEB_DIR = REPO_ROOT / "backend" / "web"
sys.path.insert(0, str(WEB_DIR))
import main  # type: ignore
from auth_utils import CLIENT_COOKIE_NAME  # type: ignore
from utils.portal import RecordingApi, extract_csrf, respond_json, unreachable


pytestmark = pytest.mark.anyio("asyncio")

FORM = {
    "surname": "Obi",
    "first_name": "Ada",
    "email": "ada@example.edu",
    "matric_no": "M1",
    "phone": "",
    "password": "secret",
}


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test")


def _state(client: httpx.AsyncClient):
    return main.CLIENT_STATE_STORE.get(client.cookies.get(CLIENT_COOKIE_NAME))


async def _open_form(client: httpx.AsyncClient) -> str:
    r = await client.get("/register")
    assert r.status_code == 200
    token = extract_csrf(r.text)
    assert token
    return token


@pytest.mark.anyio
async def test_register_page_renders_fields_and_sets_client_cookie():
    async with _client() as client:
        r = await client.get("/register")

    assert r.status_code == 200
    assert client.cookies.get(CLIENT_COOKIE_NAME)
    html = r.text
    for name in ("surname", "first_name", "email", "matric_no", "phone", "password"):
        assert f'name="{name}"' in html
    assert 'action="/register"' in html
    assert 'href="/login"' in html and "Back to login" in html
    assert "Student Voting Portal" in html
    assert r.headers.get("Cache-Control") == "private, no-store"


@pytest.mark.anyio
async def test_missing_fields_show_error_and_make_no_call(monkeypatch: pytest.MonkeyPatch):
    api = RecordingApi(respond_json(200, {"success": True}))
    monkeypatch.setattr(main, "API_TRANSPORT", api.transport)

    async with _client() as client:
        csrf = await _open_form(client)
        r = await client.post("/register", data={**FORM, "email": "", "csrf_token": csrf})
        state = _state(client)

    assert r.status_code == 400
    assert "Please fill required fields" in r.text
    assert api.requests == []
    assert state.get("mock_users") is None
    # Entered values are kept, the password is not echoed
    assert 'value="Obi"' in r.text
    assert 'value="secret"' not in r.text


@pytest.mark.anyio
async def test_remote_success_redirects_to_login_after_delay(monkeypatch: pytest.MonkeyPatch):
    api = RecordingApi(respond_json(200, {"success": True}))
    monkeypatch.setattr(main, "API_TRANSPORT", api.transport)

    async with _client() as client:
        csrf = await _open_form(client)
        r = await client.post("/register", data={**FORM, "csrf_token": csrf})
        state = _state(client)

    assert r.status_code == 200
    assert "Registration successful! Redirecting to login..." in r.text
    assert 'http-equiv="refresh" content="2;url=/login"' in r.text
    assert state.get("mock_users") is None

    assert len(api.requests) == 1
    sent = api.requests[0]
    assert sent.url.path == "/api/Auth/register"
    assert api.json_bodies()[0] == {
        "surname": "Obi",
        "firstName": "Ada",
        "email": "ada@example.edu",
        "matricNo": "M1",
        "phone": "",
        "password": "secret",
    }
    assert "Authorization" not in sent.headers


@pytest.mark.anyio
@pytest.mark.parametrize(
    "responder",
    [unreachable, respond_json(500, {"error": "boom"}), respond_json(200, {"success": False})],
)
async def test_unconfirmed_registration_falls_back_to_local_roster(monkeypatch: pytest.MonkeyPatch, responder):
    monkeypatch.setattr(main, "API_TRANSPORT", RecordingApi(responder).transport)

    async with _client() as client:
        csrf = await _open_form(client)
        r = await client.post("/register", data={**FORM, "csrf_token": csrf})
        state = _state(client)

    assert r.status_code == 200
    assert "Registered (mock). Redirecting to login..." in r.text
    assert 'content="1;url=/login"' in r.text
    assert state.get("mock_users") == [
        {
            "surname": "Obi",
            "firstName": "Ada",
            "email": "ada@example.edu",
            "matricNo": "M1",
            "phone": "",
            "password": "secret",
        }
    ]


@pytest.mark.anyio
async def test_fallback_disabled_reports_failure(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("VOTING_ENABLE_FALLBACK", "false")
    monkeypatch.setattr(main, "API_TRANSPORT", RecordingApi(unreachable).transport)

    async with _client() as client:
        csrf = await _open_form(client)
        r = await client.post("/register", data={**FORM, "csrf_token": csrf})
        state = _state(client)

    assert r.status_code == 400
    assert "Registration failed" in r.text
    assert state.get("mock_users") is None


@pytest.mark.anyio
async def test_register_requires_csrf_token(monkeypatch: pytest.MonkeyPatch):
    api = RecordingApi(respond_json(200, {"success": True}))
    monkeypatch.setattr(main, "API_TRANSPORT", api.transport)

    async with _client() as client:
        await _open_form(client)
        missing = await client.post("/register", data=FORM)
        wrong = await client.post("/register", data={**FORM, "csrf_token": "forged"})

    assert missing.status_code == 403
    assert wrong.status_code == 403
    assert "CSRF Error" in missing.text
    assert api.requests == []


@pytest.mark.anyio
async def test_register_uses_runtime_api_base_override(monkeypatch: pytest.MonkeyPatch):
    api = RecordingApi(respond_json(200, {"success": True}))
    monkeypatch.setattr(main, "API_TRANSPORT", api.transport)
    main.SETTINGS.override_api_base("http://votes.test/v2")

    async with _client() as client:
        csrf = await _open_form(client)
        await client.post("/register", data={**FORM, "csrf_token": csrf})

    assert str(api.requests[0].url) == "http://votes.test/v2/Auth/register"
