"""Use case layer for the Identity context.

Re-export the auth use cases for convenient imports in the web layer and tests.
"""

from .registration import (
    RegisterInput,
    RegisterResult,
    RegisterUseCase,
)
from .login import (
    LoginInput,
    LoginResult,
    LoginUseCase,
    LogoutUseCase,
)

__all__ = [
    "RegisterInput",
    "RegisterResult",
    "RegisterUseCase",
    "LoginInput",
    "LoginResult",
    "LoginUseCase",
    "LogoutUseCase",
]
