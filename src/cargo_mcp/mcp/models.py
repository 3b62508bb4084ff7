from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..errors import InvalidRequest

_NO_ID = object()


@dataclass(frozen=True)
class RawRequest:
    """One inbound JSON-RPC message: `{id, method, params}`."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: Any = _NO_ID

    @property
    def is_notification(self) -> bool:
        return self.id is _NO_ID

    @staticmethod
    def from_obj(obj: Any) -> "RawRequest":
        if not isinstance(obj, dict):
            raise InvalidRequest("Request must be a JSON object.")
        rid = obj.get("id", _NO_ID)
        if rid is not _NO_ID and rid is not None and (isinstance(rid, bool) or not isinstance(rid, (int, str))):
            raise InvalidRequest("Request id must be a string or an integer.")
        method = obj.get("method")
        if not isinstance(method, str) or not method:
            raise InvalidRequest("Request method must be a non-empty string.")
        params = obj.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidRequest("Request params must be an object.")
        return RawRequest(method=method, params=params, id=rid)


def request_id_of(obj: Any) -> Any:
    """Best-effort id for error replies to requests that failed to parse."""
    if isinstance(obj, dict):
        rid = obj.get("id")
        if isinstance(rid, (int, str)) and not isinstance(rid, bool):
            return rid
    return None
