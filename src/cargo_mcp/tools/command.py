from __future__ import annotations
from pathlib import Path

from ..util.subprocess import ProcessSpec
from .base import CommonArgs, Tool

DEFAULT_CARGO_BIN = "cargo"


def build_process_spec(
    tool: Tool,
    args: CommonArgs,
    project: Path,
    *,
    cargo_bin: str = DEFAULT_CARGO_BIN,
    default_toolchain: str | None = None,
) -> ProcessSpec:
    """Map validated arguments to `cargo [+toolchain] <subcommand> ...`.

    `project` must already have passed `resolve_project`.
    """
    argv = [cargo_bin]
    toolchain = args.toolchain or default_toolchain
    if toolchain:
        argv.append(f"+{toolchain}")
    argv.append(tool.spec.subcommand)
    argv.extend(tool.command_args(args))
    return ProcessSpec(
        executable=cargo_bin,
        argv=tuple(argv),
        cwd=project,
        env=dict(args.cargo_env),
    )
