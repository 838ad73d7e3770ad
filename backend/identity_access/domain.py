"""
Identity domain records and state keys for the voting portal.

Why:
- Centralize the client-state key names so the web layer, the use cases and
  the stores never drift apart.
- Keep the JSON field names of the remote API in one place (camelCase on the
  wire, snake_case in Python).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

# Client-state keys. Stable for the lifetime of the process.
TOKEN_KEY = "token"
ROSTER_KEY = "mock_users"
MOCK_IDENTITY_KEY = "mock_user"
CSRF_KEY = "csrf_token"

# Prefix of tokens synthesized by the offline fallback login.
MOCK_TOKEN_PREFIX = "mock_"


@dataclass(frozen=True)
class CredentialRecord:
    surname: str
    first_name: str
    email: str
    matric_no: str
    phone: str
    password: str

    # Phone is the only optional field of the registration form.
    REQUIRED_FIELDS = ("surname", "first_name", "email", "matric_no", "password")

    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name)]

    def to_payload(self) -> dict[str, str]:
        """Return the record in the remote API's JSON shape."""
        return {
            "surname": self.surname,
            "firstName": self.first_name,
            "email": self.email,
            "matricNo": self.matric_no,
            "phone": self.phone,
            "password": self.password,
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "CredentialRecord":
        def _s(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        return cls(
            surname=_s("surname"),
            first_name=_s("firstName"),
            email=_s("email"),
            matric_no=_s("matricNo"),
            phone=_s("phone"),
            password=_s("password"),
        )

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "CredentialRecord":
        """Build a record from submitted form fields (snake_case names)."""
        return cls(**{name: str(form.get(name, "") or "") for name in
                      ("surname", "first_name", "email", "matric_no", "phone", "password")})


@dataclass(frozen=True)
class MockSessionIdentity:
    name: str
    matric_number: str

    @classmethod
    def for_record(cls, record: CredentialRecord) -> "MockSessionIdentity":
        return cls(name=f"{record.first_name} {record.surname}", matric_number=record.matric_no)

    def to_payload(self) -> dict[str, str]:
        return {"name": self.name, "matricNumber": self.matric_number}

    @classmethod
    def from_payload(cls, data: Any) -> Optional["MockSessionIdentity"]:
        if not isinstance(data, Mapping):
            return None
        return cls(name=str(data.get("name") or ""), matric_number=str(data.get("matricNumber") or ""))


__all__ = [
    "TOKEN_KEY",
    "ROSTER_KEY",
    "MOCK_IDENTITY_KEY",
    "CSRF_KEY",
    "MOCK_TOKEN_PREFIX",
    "CredentialRecord",
    "MockSessionIdentity",
]
