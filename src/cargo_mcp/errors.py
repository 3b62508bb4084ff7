from __future__ import annotations

from typing import Any


class CargoMCPError(RuntimeError):
    """Base class for every failure that is reported back to the caller.

    `kind` is the stable name surfaced in the JSON-RPC error object and `code`
    is the matching JSON-RPC error code.
    """

    kind: str = "InternalError"
    code: int = -32603

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_obj(self) -> dict[str, Any]:
        return {"code": self.code, "kind": self.kind, "message": self.message}


class ParseError(CargoMCPError):
    kind = "ParseError"
    code = -32700


class InvalidRequest(CargoMCPError):
    kind = "InvalidRequest"
    code = -32600


class UnknownMethod(CargoMCPError):
    kind = "UnknownMethod"
    code = -32601


class UnknownTool(CargoMCPError):
    kind = "UnknownTool"
    code = -32602


class ValidationError(CargoMCPError):
    kind = "ValidationError"
    code = -32602


class InvalidProject(CargoMCPError):
    kind = "InvalidProject"
    code = -32602


class SpawnError(CargoMCPError):
    kind = "SpawnError"
    code = -32603


class ConfigError(ValueError):
    """Raised at startup for unusable configuration. Never sent over the wire."""
