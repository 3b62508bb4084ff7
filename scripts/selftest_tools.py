from __future__ import annotations
import io
import json
import tempfile
from pathlib import Path

from cargo_mcp.app_context import AppContext
from cargo_mcp.config.models import ServerConfig
from cargo_mcp.mcp.server import StdioServer
from cargo_mcp.mcp.writer import ResponseWriter
from cargo_mcp.util.subprocess import ProcessResult

# Prints the argv each tool would run, without needing cargo installed.
CALLS = [
    ("cargo_check", {"package": "core"}),
    ("cargo_clippy", {"fix": True, "cargo_env": {"RUSTFLAGS": "-D warnings"}}),
    ("cargo_test", {"test_name": "parses", "no_capture": True}),
    ("cargo_fmt_check", {}),
    ("cargo_build", {"release": True, "package": "mylib"}),
    ("cargo_bench", {"bench_name": "decode", "baseline": "main"}),
    ("cargo_add", {"dependencies": ["serde", "tokio@1.0"], "features": ["derive"]}),
    ("cargo_remove", {"dependencies": ["old-lib"], "dev": True}),
    ("cargo_update", {"dependencies": ["serde", "tokio"], "dry_run": True}),
    ("cargo_clean", {}),
    ("cargo_run", {"bin": "worker", "args": ["--config", "prod.toml"]}),
]


def echo_executor(spec, **_):
    return ProcessResult(exit_code=0, stdout=" ".join(spec.argv) + "\n", stderr="", duration=0.0)


def main():
    with tempfile.TemporaryDirectory() as td:
        (Path(td) / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
        ctx = AppContext.from_config(ServerConfig(default_toolchain="stable"))
        out = io.StringIO()
        server = StdioServer(ctx, ResponseWriter(out), executor=echo_executor)
        lines = [
            json.dumps({"jsonrpc": "2.0", "id": i, "method": "tools/call",
                        "params": {"name": name, "arguments": {"path": td, **args}}})
            for i, (name, args) in enumerate(CALLS, start=1)
        ]
        server.serve(lines)
        for line in out.getvalue().splitlines():
            msg = json.loads(line)
            if "error" in msg:
                print(msg["id"], "ERROR", msg["error"])
            else:
                print(msg["id"], msg["result"]["command"])

if __name__ == "__main__":
    main()
