from __future__ import annotations
import logging
import os
import shlex
import signal
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..errors import SpawnError

logger = logging.getLogger(__name__)

# Variables a child may see from the host, and only so cargo/rustup can be
# located and can find their own homes.
DEFAULT_PASSTHROUGH_ENV: tuple[str, ...] = (
    "PATH",
    "HOME",
    "CARGO_HOME",
    "RUSTUP_HOME",
)
WINDOWS_PASSTHROUGH_ENV: tuple[str, ...] = ("SYSTEMROOT", "PATHEXT", "USERPROFILE")

# how long to keep draining pipes after a timed-out child was killed
KILL_DRAIN_TIMEOUT = 5.0


@dataclass(frozen=True)
class ProcessSpec:
    executable: str
    argv: tuple[str, ...]
    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)

    def display(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ProcessResult:
    exit_code: int | None
    stdout: str
    stderr: str
    duration: float
    timed_out: bool = False
    signal: int | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def child_environment(
    overlay: Mapping[str, str],
    passthrough: Sequence[str] = DEFAULT_PASSTHROUGH_ENV,
    host: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build a fresh environment: pass-through names from the host, then the overlay."""
    host = os.environ if host is None else host
    names = list(passthrough)
    if os.name == "nt":
        names.extend(WINDOWS_PASSTHROUGH_ENV)
    env = {k: host[k] for k in names if k in host}
    env.update(overlay)
    return env


def run_process(
    spec: ProcessSpec,
    *,
    timeout: Optional[float] = None,
    passthrough_env: Sequence[str] = DEFAULT_PASSTHROUGH_ENV,
) -> ProcessResult:
    env = child_environment(spec.env, passthrough_env)
    logger.debug("spawn %s (cwd=%s)", spec.display(), spec.cwd)
    started = time.monotonic()
    try:
        p = subprocess.Popen(
            list(spec.argv),
            cwd=str(spec.cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
            # own process group, so a timeout can take down rustc and test binaries too
            start_new_session=(os.name == "posix"),
        )
    except FileNotFoundError as e:
        raise SpawnError(f"Executable not found: {spec.executable}") from e
    except PermissionError as e:
        raise SpawnError(f"Permission denied executing {spec.executable}") from e
    except OSError as e:
        raise SpawnError(f"Failed to start {spec.executable}: {e}") from e

    timed_out = False
    with p:
        try:
            stdout, stderr = p.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.warning("timeout after %ss, killing: %s", timeout, spec.display())
            _kill_tree(p)
            try:
                stdout, stderr = p.communicate(timeout=KILL_DRAIN_TIMEOUT)
            except subprocess.TimeoutExpired as e:
                # a descendant left the group and still holds the pipes
                logger.warning("output pipes still open after kill, dropping the rest: %s", spec.display())
                stdout, stderr = _as_text(e.stdout), _as_text(e.stderr)
                p.wait()
    duration = time.monotonic() - started

    rc = p.returncode
    exit_code: int | None = rc
    sig: int | None = None
    if timed_out:
        exit_code = None
    elif rc is not None and rc < 0:
        # POSIX: killed by signal -rc
        exit_code = None
        sig = -rc
    return ProcessResult(
        exit_code=exit_code,
        stdout=stdout or "",
        stderr=stderr or "",
        duration=duration,
        timed_out=timed_out,
        signal=sig,
    )


def _kill_tree(p: subprocess.Popen) -> None:
    if os.name != "posix":
        p.kill()
        return
    try:
        os.killpg(p.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _as_text(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
