from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from cargo_mcp.app_context import AppContext
from cargo_mcp.config.models import ServerConfig
from cargo_mcp.mcp.server import StdioServer
from cargo_mcp.mcp.writer import ResponseWriter

from tests.helpers import RecordingExecutor


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "demo"
    root.mkdir()
    (root / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n', encoding="utf-8")
    return root


@pytest.fixture
def ctx(tmp_path: Path) -> AppContext:
    return AppContext.from_config(ServerConfig(), cwd=tmp_path)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def run_server(ctx: AppContext, executor: RecordingExecutor):
    """Feed request dicts through a server and return the parsed responses."""

    def _run(*requests, context: AppContext | None = None, exe=None):
        out = io.StringIO()
        server = StdioServer(context or ctx, ResponseWriter(out), executor=exe or executor)
        server.serve([r if isinstance(r, str) else json.dumps(r) for r in requests])
        return [json.loads(line) for line in out.getvalue().splitlines()]

    return _run
