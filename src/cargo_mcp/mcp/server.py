"""
Stdio JSON-RPC server exposing the whitelisted cargo tools.

One reader consumes stdin a line at a time. Lookup, argument validation and
the project check run inline on the reader; each accepted tool call then gets
its own worker thread that builds the argv, runs cargo and writes the
response. Responses are written in completion order, each tagged with the
request id.

Protocol:
    - "initialize" → server info, capabilities and instructions
    - "ping"       → {}
    - "tools/list" → {"tools": [{name, description, inputSchema}]}
    - "tools/call" → {"name": <tool>, "arguments": {...}}

CRITICAL: nothing but protocol lines may be written to stdout.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Iterable

from .. import __version__
from ..app_context import AppContext
from ..errors import CargoMCPError, InvalidRequest, ParseError, UnknownMethod
from ..runner import Executor, Invocation, execute_invocation, prepare_invocation
from ..util.subprocess import run_process
from .models import RawRequest, request_id_of
from .writer import ResponseWriter, encode_tool_result

logger = logging.getLogger(__name__)

SERVER_NAME = "cargo-mcp"
DEFAULT_PROTOCOL_VERSION = "2024-11-05"
INSTRUCTIONS = """Cargo operations for Rust projects.

Every tool takes `path`, the directory containing the project's Cargo.toml."""


class StdioServer:
    def __init__(self, ctx: AppContext, writer: ResponseWriter, *, executor: Executor = run_process):
        self.ctx = ctx
        self.writer = writer
        self._executor = executor
        self._lock = threading.Lock()
        self._inflight: dict[Any, threading.Thread] = {}

    def serve(self, instream: Iterable[str]) -> None:
        """Main loop. Returns once input is exhausted and every worker has answered."""
        logger.info(
            "cargo-mcp server starting with %d tools: %s",
            len(self.ctx.tools.names()),
            self.ctx.tools.names(),
        )
        try:
            for line in instream:
                self.handle_line(line)
        finally:
            self.wait()
        logger.info("input closed, server exiting")

    def wait(self) -> None:
        while True:
            with self._lock:
                threads = list(self._inflight.values())
            if not threads:
                return
            for t in threads:
                t.join()

    def handle_line(self, line: str) -> None:
        line = line.strip()
        if not line:
            return

        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            self.writer.write_error(None, ParseError(f"Parse error: {e}"))
            return

        try:
            req = RawRequest.from_obj(obj)
        except InvalidRequest as e:
            self.writer.write_error(request_id_of(obj), e)
            return

        if req.is_notification:
            logger.debug("ignoring notification %s", req.method)
            return

        try:
            result = self._dispatch(req)
        except CargoMCPError as e:
            logger.info("request %r failed: %s: %s", req.id, e.kind, e.message)
            self.writer.write_error(req.id, e)
            return
        except Exception as e:
            logger.exception("unexpected failure handling %s", req.method)
            self.writer.write_error(req.id, CargoMCPError(f"Internal error: {e}"))
            return
        if result is not None:
            self.writer.write_result(req.id, result)

    def _dispatch(self, req: RawRequest) -> Any:
        """Route a request. Returns None when a worker will answer later."""
        method = req.method

        if method == "initialize":
            return {
                "protocolVersion": req.params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
                "instructions": INSTRUCTIONS,
            }

        if method == "ping":
            return {}

        if method == "tools/list":
            return {"tools": [s.to_obj() for s in self.ctx.tools.list_specs()]}

        if method == "tools/call":
            if req.id is None:
                # replies are matched by id, and null cannot tell concurrent calls apart
                raise InvalidRequest("tools/call requires a non-null id")
            inv = prepare_invocation(self.ctx, req.params.get("name"), req.params.get("arguments"))
            self._start(req.id, inv)
            return None

        raise UnknownMethod(f"Unknown method: '{method}'")

    def _start(self, request_id: Any, inv: Invocation) -> None:
        t = threading.Thread(
            target=self._work,
            args=(request_id, inv),
            name=f"cargo-mcp-{inv.tool.spec.name}",
            daemon=True,
        )
        with self._lock:
            if request_id in self._inflight:
                raise InvalidRequest(f"Request id {request_id!r} is already in flight")
            self._inflight[request_id] = t
        t.start()

    def _work(self, request_id: Any, inv: Invocation) -> None:
        try:
            spec, result = execute_invocation(self.ctx, inv, executor=self._executor)
            payload = encode_tool_result(
                f"cargo {inv.tool.spec.subcommand}",
                spec,
                result,
                max_output_bytes=self.ctx.config.max_output_bytes,
            )
        except CargoMCPError as e:
            logger.warning("%s failed: %s", inv.tool.spec.name, e.message)
            self._finish(request_id, error=e)
        except Exception as e:
            logger.exception("unexpected failure running %s", inv.tool.spec.name)
            self._finish(request_id, error=CargoMCPError(f"Internal error: {e}"))
        else:
            self._finish(request_id, result=payload)

    def _finish(self, request_id: Any, *, result: Any = None, error: CargoMCPError | None = None) -> None:
        try:
            if error is not None:
                self.writer.write_error(request_id, error)
            else:
                self.writer.write_result(request_id, result)
        finally:
            with self._lock:
                self._inflight.pop(request_id, None)
