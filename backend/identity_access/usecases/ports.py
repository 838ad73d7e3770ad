from __future__ import annotations

from typing import Any, Callable, Dict, Protocol

from ..api_client import RemoteOutcome


class ClientStateProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def append(self, key: str, item: Any) -> int:
        ...

    def delete(self, key: str) -> None:
        ...


class RemoteApiProtocol(Protocol):
    async def post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        is_success: Callable[[Dict[str, Any]], bool],
    ) -> RemoteOutcome:
        ...
