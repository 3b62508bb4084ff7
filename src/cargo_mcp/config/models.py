from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..tools.command import DEFAULT_CARGO_BIN
from ..util.subprocess import DEFAULT_PASSTHROUGH_ENV


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, built once at startup and never mutated.

    `timeout` and `max_output_bytes` default to None (no limit); long
    benchmarks and test runs are expected, so bounding them is an explicit
    operator decision.
    """

    cargo_bin: str = DEFAULT_CARGO_BIN
    default_toolchain: str | None = None
    timeout: float | None = None
    max_output_bytes: int | None = None
    passthrough_env: tuple[str, ...] = DEFAULT_PASSTHROUGH_ENV
    audit_log: bool = False

    loaded_from: Path | None = None
