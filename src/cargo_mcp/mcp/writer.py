from __future__ import annotations

import json
import threading
from dataclasses import replace
from typing import Any, TextIO

from ..errors import CargoMCPError
from ..util.subprocess import ProcessResult, ProcessSpec


class ResponseWriter:
    """Line-delimited JSON-RPC responses, one whole line per lock hold."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()

    def write(self, msg: dict[str, Any]) -> None:
        line = json.dumps(msg, ensure_ascii=False) + "\n"
        with self._lock:
            self._stream.write(line)
            self._stream.flush()

    def write_result(self, request_id: Any, result: Any) -> None:
        self.write({"jsonrpc": "2.0", "id": request_id, "result": result})

    def write_error(self, request_id: Any, error: CargoMCPError) -> None:
        self.write({"jsonrpc": "2.0", "id": request_id, "error": error.to_obj()})


def _truncate(text: str, max_bytes: int | None) -> tuple[str, bool]:
    if max_bytes is None:
        return text, False
    data = text.encode("utf-8")
    if len(data) <= max_bytes:
        return text, False
    return data[:max_bytes].decode("utf-8", errors="ignore"), True


def format_report(title: str, spec: ProcessSpec, result: ProcessResult) -> str:
    lines = [
        f"=== {title} ===",
        f"📁 Working directory: {spec.cwd}",
        f"🔧 Command: {spec.display()}",
        "",
    ]
    if result.timed_out:
        lines.append(f"⏱️  Command timed out after {result.duration:.1f}s and was killed")
    elif result.signal is not None:
        lines.append(f"❌ Command terminated by signal {result.signal}")
    elif result.success:
        lines.append("✅ Command completed successfully")
    else:
        lines.append(f"❌ Command failed with exit code: {result.exit_code}")
    lines.append("")

    out = "\n".join(lines) + "\n"
    for label, text in (("STDOUT", result.stdout), ("STDERR", result.stderr)):
        if text:
            out += f"📤 {label}:\n{text}"
            if not text.endswith("\n"):
                out += "\n"
            out += "\n"
    if not result.stdout and not result.stderr:
        out += "ℹ️  No output produced\n"
    return out


def encode_tool_result(
    title: str,
    spec: ProcessSpec,
    result: ProcessResult,
    *,
    max_output_bytes: int | None = None,
) -> dict[str, Any]:
    """Payload of a successful tools/call response.

    A failing cargo run is still a result: `isError` carries the outcome.
    """
    stdout, cut_out = _truncate(result.stdout, max_output_bytes)
    stderr, cut_err = _truncate(result.stderr, max_output_bytes)
    shown = replace(result, stdout=stdout, stderr=stderr)
    payload: dict[str, Any] = {
        "content": [{"type": "text", "text": format_report(title, spec, shown)}],
        "isError": not result.success,
        "exit_code": result.exit_code,
        "stdout": stdout,
        "stderr": stderr,
        "duration": round(result.duration, 3),
        "command": list(spec.argv),
        "cwd": str(spec.cwd),
        "timed_out": result.timed_out,
    }
    if result.signal is not None:
        payload["signal"] = result.signal
    if cut_out or cut_err:
        payload["truncated"] = True
    return payload
