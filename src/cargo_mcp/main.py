from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .app_context import AppContext
from .config.loader import load_server_config
from .errors import CargoMCPError, ConfigError
from .events.store import EventStore
from .mcp.server import StdioServer
from .mcp.writer import ResponseWriter, encode_tool_result
from .runner import execute_invocation, prepare_invocation

app = typer.Typer(add_completion=False, help="cargo-mcp: whitelisted cargo operations over stdio JSON-RPC.")

# stdout carries protocol traffic; everything human-facing goes to stderr
console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_context(
    config: Path | None,
    toolchain: str | None = None,
    timeout: float | None = None,
    max_output_bytes: int | None = None,
    audit_log: bool | None = None,
) -> AppContext:
    try:
        cfg = load_server_config(
            explicit_path=config,
            overrides={
                "default_toolchain": toolchain,
                "timeout": timeout,
                "max_output_bytes": max_output_bytes,
                "audit_log": audit_log,
            },
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from e
    return AppContext.from_config(cfg)


@app.command()
def serve(
    config: Path = typer.Option(None, "--config", help="YAML config path (merged over the global config)."),
    toolchain: str = typer.Option(None, "--toolchain", help="Default toolchain (overrides CARGO_MCP_DEFAULT_TOOLCHAIN)."),
    timeout: float = typer.Option(None, "--timeout", help="Kill cargo after this many seconds (default: no limit)."),
    max_output_bytes: int = typer.Option(None, "--max-output-bytes", help="Truncate stdout/stderr in responses (default: no limit)."),
    audit_log: bool = typer.Option(None, "--audit-log/--no-audit-log", help="Append every invocation to the audit log."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for stderr diagnostics."),
):
    """Serve JSON-RPC requests on stdin/stdout until stdin closes."""
    _configure_logging(log_level)
    ctx = _load_context(config, toolchain, timeout, max_output_bytes, audit_log)
    logging.getLogger(__name__).info(
        "cargo-mcp %s (config: %s, default toolchain: %s)",
        __version__,
        ctx.config.loaded_from or "(none)",
        ctx.config.default_toolchain or "(none)",
    )
    server = StdioServer(ctx, ResponseWriter(sys.stdout))
    server.serve(sys.stdin)


@app.command()
def tools(
    config: Path = typer.Option(None, "--config", help="YAML config path."),
):
    """List the available tools."""
    ctx = _load_context(config)
    table = Table(title="cargo-mcp tools")
    table.add_column("tool", style="bold green", no_wrap=True)
    table.add_column("command", style="bright_cyan")
    table.add_column("parameters")
    table.add_column("description")
    for spec in ctx.tools.list_specs():
        params = ", ".join(
            f"{k}*" if p.required else k for k, p in spec.all_parameters.items()
        )
        table.add_row(spec.name, f"cargo {spec.subcommand}", params, spec.description)
    Console().print(table)


@app.command()
def schema(
    config: Path = typer.Option(None, "--config", help="YAML config path."),
):
    """Print the tools/list payload as JSON."""
    ctx = _load_context(config)
    typer.echo(json.dumps({"tools": [s.to_obj() for s in ctx.tools.list_specs()]}, indent=2, ensure_ascii=False))


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. cargo_check."),
    path: Path = typer.Option(Path("."), "--path", help="Project directory."),
    args: str = typer.Option("{}", "--args", help="Extra tool arguments as a JSON object."),
    config: Path = typer.Option(None, "--config", help="YAML config path."),
    toolchain: str = typer.Option(None, "--toolchain", help="Default toolchain."),
    timeout: float = typer.Option(None, "--timeout", help="Kill cargo after this many seconds."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level."),
):
    """Run a single tool locally, exactly as the server would."""
    _configure_logging(log_level)
    try:
        extra = json.loads(args)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--args is not valid JSON: {e}") from e
    if not isinstance(extra, dict):
        raise typer.BadParameter("--args must be a JSON object.")

    ctx = _load_context(config, toolchain, timeout)
    try:
        inv = prepare_invocation(ctx, name, {"path": str(path), **extra})
        spec, result = execute_invocation(ctx, inv)
    except CargoMCPError as e:
        console.print(f"[red]{e.kind}[/red]: {e.message}")
        raise typer.Exit(code=2)

    payload = encode_tool_result(f"cargo {inv.tool.spec.subcommand}", spec, result)
    typer.echo(payload["content"][0]["text"])
    raise typer.Exit(code=0 if result.success else 1)


@app.command()
def audit(
    day: str = typer.Option(None, "--day", help="Day to show, YYYY-MM-DD (default: today)."),
    limit: int = typer.Option(20, "--limit", min=1, help="Show at most this many of the latest invocations."),
):
    """Show cargo invocations recorded in the audit log."""
    store = EventStore.open()
    path = store.root / f"{day}.jsonl" if day else store.path_for(time.time())
    events = [e for e in store.iter_events(path) if e.type == "invocation"][-limit:]
    if not events:
        console.print(f"[yellow]No invocations recorded in {path}[/yellow]")
        return
    table = Table(title=f"cargo-mcp audit {path.stem}")
    table.add_column("time", no_wrap=True)
    table.add_column("tool", style="bold green", no_wrap=True)
    table.add_column("exit", justify="right")
    table.add_column("seconds", justify="right")
    table.add_column("command", style="bright_cyan")
    for ev in events:
        d = ev.data
        if d.get("timed_out"):
            status = "timeout"
        else:
            status = "-" if d.get("exit_code") is None else str(d["exit_code"])
        table.add_row(
            time.strftime("%H:%M:%S", time.localtime(ev.ts)),
            str(d.get("tool", "?")),
            status,
            f"{float(d.get('duration') or 0.0):.2f}",
            " ".join(d.get("argv") or []),
        )
    Console().print(table)


if __name__ == "__main__":
    app()
