from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import secrets

from ..api_client import OutcomeKind, RemoteOutcome
from ..domain import (
    MOCK_IDENTITY_KEY,
    MOCK_TOKEN_PREFIX,
    ROSTER_KEY,
    TOKEN_KEY,
    CredentialRecord,
    MockSessionIdentity,
)
from .ports import ClientStateProtocol, RemoteApiProtocol


logger = logging.getLogger("votingportal.identity_access")

LOGIN_PATH = "/Auth/login"

MSG_REQUIRED = "Please provide matric and password"
MSG_NO_TOKEN = "Login failed: no token"
MSG_FAILED = "Login failed — check backend."


def _token_of(body: Dict[str, Any]) -> Optional[str]:
    token = body.get("token")
    return token if isinstance(token, str) and token else None


def _has_token(body: Dict[str, Any]) -> bool:
    return _token_of(body) is not None


def new_mock_token() -> str:
    return MOCK_TOKEN_PREFIX + secrets.token_urlsafe(12)


@dataclass
class LoginInput:
    matric_number: str
    password: str


@dataclass(frozen=True)
class LoginResult:
    """status is one of "invalid", "signed_in", "signed_in_mock", "no_token", "failed"."""

    status: str
    message: str = ""
    redirect_to: Optional[str] = None
    identity: Optional[MockSessionIdentity] = None
    outcome: Optional[RemoteOutcome] = None

    @property
    def ok(self) -> bool:
        return self.status in ("signed_in", "signed_in_mock")


class LoginUseCase:
    def __init__(
        self,
        api: RemoteApiProtocol,
        state: ClientStateProtocol,
        *,
        enable_fallback: bool = True,
        verify_password: bool = False,
    ) -> None:
        self._api = api
        self._state = state
        self._enable_fallback = enable_fallback
        self._verify_password = verify_password

    async def execute(self, req: LoginInput) -> LoginResult:
        """Log in remotely; fall back to the local roster only on transport failure.

        Behavior:
            - Missing matric number or password: no network call.
            - SUCCESS: persist the returned token and go home.
            - SOFT_FAILURE: the API answered without a token; report it, no fallback.
            - TRANSPORT_FAILURE: look the matric number up in the local roster.
              Unless `verify_password` is set, any password is accepted.
        """
        if not req.matric_number or not req.password:
            return LoginResult(status="invalid", message=MSG_REQUIRED)

        payload = {"matricNumber": req.matric_number, "password": req.password}
        outcome = await self._api.post_json(LOGIN_PATH, payload, is_success=_has_token)

        if outcome.kind is OutcomeKind.SUCCESS:
            self._state.set(TOKEN_KEY, _token_of(outcome.body or {}))
            # An identity left by an earlier offline login belongs to someone else.
            self._state.delete(MOCK_IDENTITY_KEY)
            return LoginResult(status="signed_in", redirect_to="/", outcome=outcome)

        if outcome.kind is OutcomeKind.SOFT_FAILURE:
            return LoginResult(status="no_token", message=MSG_NO_TOKEN, outcome=outcome)

        if self._enable_fallback:
            identity = self._fallback_login(req)
            if identity is not None:
                return LoginResult(status="signed_in_mock", redirect_to="/", identity=identity, outcome=outcome)
        return LoginResult(status="failed", message=MSG_FAILED, outcome=outcome)

    def _find_record(self, matric_number: str) -> Optional[CredentialRecord]:
        roster = self._state.get(ROSTER_KEY)
        if not isinstance(roster, list):
            return None
        for entry in roster:
            if isinstance(entry, dict) and entry.get("matricNo") == matric_number:
                return CredentialRecord.from_payload(entry)
        return None

    def _fallback_login(self, req: LoginInput) -> Optional[MockSessionIdentity]:
        record = self._find_record(req.matric_number)
        if record is None:
            return None
        if self._verify_password:
            if not secrets.compare_digest(record.password.encode("utf-8"), req.password.encode("utf-8")):
                return None
        else:
            logger.warning("Offline login accepted without password check")
        identity = MockSessionIdentity.for_record(record)
        self._state.set(TOKEN_KEY, new_mock_token())
        self._state.set(MOCK_IDENTITY_KEY, identity.to_payload())
        return identity


class LogoutUseCase:
    """Forget the session token and mock identity; the local roster stays."""

    def __init__(self, state: ClientStateProtocol) -> None:
        self._state = state

    def execute(self) -> None:
        self._state.delete(TOKEN_KEY)
        self._state.delete(MOCK_IDENTITY_KEY)
