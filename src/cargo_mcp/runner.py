from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .app_context import AppContext
from .tools.base import CommonArgs, Tool
from .tools.command import build_process_spec
from .tools.validator import validate
from .util.fs import resolve_project
from .util.subprocess import ProcessResult, ProcessSpec, run_process

logger = logging.getLogger(__name__)

Executor = Callable[..., ProcessResult]


@dataclass(frozen=True)
class Invocation:
    """A tool call that passed every local check and may now be executed."""

    tool: Tool
    args: CommonArgs
    project: Path


def prepare_invocation(ctx: AppContext, name: Any, raw_args: Any) -> Invocation:
    """Registry lookup, argument validation and the project check.

    Cheap and side-effect free; raises UnknownTool, ValidationError or
    InvalidProject before anything is spawned.
    """
    tool = ctx.tools.get(name)
    args = validate(tool, raw_args)
    project = resolve_project(args.path, base=ctx.cwd)
    return Invocation(tool=tool, args=args, project=project)


def execute_invocation(
    ctx: AppContext,
    inv: Invocation,
    *,
    executor: Executor = run_process,
) -> tuple[ProcessSpec, ProcessResult]:
    cfg = ctx.config
    spec = build_process_spec(
        inv.tool,
        inv.args,
        inv.project,
        cargo_bin=cfg.cargo_bin,
        default_toolchain=cfg.default_toolchain,
    )
    logger.info("%s: %s", inv.tool.spec.name, spec.display())
    result = executor(spec, timeout=cfg.timeout, passthrough_env=cfg.passthrough_env)
    logger.info(
        "%s finished: exit=%s in %.2fs%s",
        inv.tool.spec.name,
        result.exit_code,
        result.duration,
        " (timed out)" if result.timed_out else "",
    )
    if ctx.events is not None:
        ctx.events.append(
            "invocation",
            {
                "tool": inv.tool.spec.name,
                "argv": list(spec.argv),
                "cwd": str(spec.cwd),
                "env_keys": sorted(spec.env),
                "exit_code": result.exit_code,
                "duration": round(result.duration, 3),
                "timed_out": result.timed_out,
            },
        )
    return spec, result
