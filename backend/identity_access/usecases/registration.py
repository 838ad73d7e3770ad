from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from ..api_client import OutcomeKind, RemoteOutcome
from ..domain import ROSTER_KEY, CredentialRecord
from .ports import ClientStateProtocol, RemoteApiProtocol


logger = logging.getLogger("votingportal.identity_access")

REGISTER_PATH = "/Auth/register"

MSG_REQUIRED = "Please fill required fields"
MSG_REGISTERED = "Registration successful! Redirecting to login..."
MSG_REGISTERED_MOCK = "Registered (mock). Redirecting to login..."
MSG_REGISTER_FAILED = "Registration failed, please try again later."

# Whole seconds before the success page navigates to the login view; a meta
# refresh ignores fractions, so 1.5 s and 1.2 s round to 2 and 1 to keep the
# offline path the quicker one.
REMOTE_REDIRECT_DELAY = 2
MOCK_REDIRECT_DELAY = 1


def _registration_accepted(body: Dict[str, Any]) -> bool:
    return bool(body.get("success"))


@dataclass
class RegisterInput:
    record: CredentialRecord


@dataclass(frozen=True)
class RegisterResult:
    """What the web adapter should show after a registration attempt.

    status is one of "invalid", "registered", "registered_mock", "failed".
    """

    status: str
    message: str
    redirect_to: Optional[str] = None
    redirect_delay: Optional[int] = None
    outcome: Optional[RemoteOutcome] = None

    @property
    def ok(self) -> bool:
        return self.status in ("registered", "registered_mock")


class RegisterUseCase:
    def __init__(self, api: RemoteApiProtocol, state: ClientStateProtocol, *, enable_fallback: bool = True) -> None:
        self._api = api
        self._state = state
        self._enable_fallback = enable_fallback

    async def execute(self, req: RegisterInput) -> RegisterResult:
        """Register remotely; on any unconfirmed outcome append to the local roster.

        Behavior:
            - Missing required fields: no network call, no state write.
            - SUCCESS: the local roster stays untouched.
            - SOFT_FAILURE or TRANSPORT_FAILURE: the record is appended to the
              roster once, even when the remote side might have stored it.
        """
        record = req.record
        if record.missing_fields():
            return RegisterResult(status="invalid", message=MSG_REQUIRED)

        outcome = await self._api.post_json(REGISTER_PATH, record.to_payload(), is_success=_registration_accepted)
        if outcome.kind is OutcomeKind.SUCCESS:
            return RegisterResult(
                status="registered",
                message=MSG_REGISTERED,
                redirect_to="/login",
                redirect_delay=REMOTE_REDIRECT_DELAY,
                outcome=outcome,
            )

        if not self._enable_fallback:
            return RegisterResult(status="failed", message=MSG_REGISTER_FAILED, outcome=outcome)

        size = self._state.append(ROSTER_KEY, record.to_payload())
        logger.info("Registration fell back to local roster (%s), roster size=%d", outcome.kind.value, size)
        return RegisterResult(
            status="registered_mock",
            message=MSG_REGISTERED_MOCK,
            redirect_to="/login",
            redirect_delay=MOCK_REDIRECT_DELAY,
            outcome=outcome,
        )
