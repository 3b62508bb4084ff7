from __future__ import annotations

import threading

from cargo_mcp.util.subprocess import ProcessResult


class RecordingExecutor:
    """Stands in for run_process; remembers every spec it was asked to run."""

    def __init__(self, exit_code: int | None = 0, stdout: str = "ok\n", stderr: str = ""):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.specs = []
        self.kwargs = []
        self._lock = threading.Lock()

    def __call__(self, spec, **kwargs):
        with self._lock:
            self.specs.append(spec)
            self.kwargs.append(kwargs)
        return ProcessResult(
            exit_code=self.exit_code,
            stdout=self.stdout,
            stderr=self.stderr,
            duration=0.01,
        )


def call(rid, name, **arguments):
    return {"jsonrpc": "2.0", "id": rid, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
