"""Structured errors returned across the remote-call boundary."""

from __future__ import annotations

from typing import Any, Dict, Optional

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
UNKNOWN_VIEW = -32001
BUSY = -32002


class RemoteError(RuntimeError):
    """Error reported to the host, distinct from plugin-side ``HostError``."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def method_not_found(cls, method: str) -> "RemoteError":
        return cls(METHOD_NOT_FOUND, f"Unknown method '{method}'", {"method": method})

    @classmethod
    def invalid_params(cls, message: str, data: Optional[Any] = None) -> "RemoteError":
        return cls(INVALID_PARAMS, message, data)

    @classmethod
    def unknown_view(cls, view_id: str) -> "RemoteError":
        return cls(UNKNOWN_VIEW, f"View '{view_id}' is not open", {"view_id": view_id})

    @classmethod
    def internal(cls, exc: BaseException) -> "RemoteError":
        return cls(INTERNAL_ERROR, str(exc) or type(exc).__name__, {"type": type(exc).__name__})

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload

    def __repr__(self) -> str:
        return f"RemoteError(code={self.code}, message={self.message!r})"


__all__ = [
    "BUSY",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "RemoteError",
    "UNKNOWN_VIEW",
]
