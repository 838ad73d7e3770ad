"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend and reset the portal's global
state (client state store, API transport, settings overrides) before each test
so cases never leak tokens or roster entries into each other.
"""
import importlib
import sys
from pathlib import Path
import pytest

# Ensure modules in backend/ and backend/web are importable across tests
REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
WEB_DIR = BACKEND_DIR / "web"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(REPO_ROOT), str(BACKEND_DIR), str(WEB_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_portal_env(monkeypatch: pytest.MonkeyPatch):
    """Clear env-driven toggles so every test starts from dev defaults.

    Tests that need a toggle set it themselves via monkeypatch.setenv.
    """
    for var in (
        "VOTING_ENV",
        "VOTING_API_BASE",
        "VOTING_API_TIMEOUT",
        "VOTING_ENABLE_FALLBACK",
        "VOTING_MOCK_VERIFY_PASSWORD",
        "CLIENT_STATE_BACKEND",
        "DATABASE_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_client_state_and_transport(monkeypatch: pytest.MonkeyPatch):
    """Give each test a fresh in-memory store and no API transport override.

    Why:
        Tests swap `main.API_TRANSPORT` for an httpx.MockTransport and inspect
        `main.CLIENT_STATE_STORE`; neither may survive into the next test.
    """
    try:
        main = importlib.import_module("main")
        from identity_access.stores import ClientStateStore  # type: ignore
    except Exception:
        yield
        return

    monkeypatch.setattr(main, "CLIENT_STATE_STORE", ClientStateStore(), raising=False)
    monkeypatch.setattr(main, "API_TRANSPORT", None, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_settings_overrides():
    """Reset main.SETTINGS overrides between tests.

    Why:
        Some tests force `prod` semantics or a runtime API base. If a test
        aborts early the override would leak into unrelated tests.
    """
    mod = sys.modules.get("main")
    if mod is not None and hasattr(mod, "SETTINGS"):
        mod.SETTINGS.override_environment(None)
        mod.SETTINGS.override_api_base(None)
    yield
    if mod is not None and hasattr(mod, "SETTINGS"):
        mod.SETTINGS.override_environment(None)
        mod.SETTINGS.override_api_base(None)
