from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from platformdirs import user_config_dir

from ..errors import ConfigError
from .models import ServerConfig

APP_NAME = "cargo-mcp"
TOOLCHAIN_ENV = "CARGO_MCP_DEFAULT_TOOLCHAIN"

logger = logging.getLogger(__name__)


def _global_candidate_paths() -> list[Path]:
    cfg_dir = Path(user_config_dir(APP_NAME))
    return [
        cfg_dir / "cargo-mcp.yaml",
        cfg_dir / "cargo-mcp.yml",
    ]


def _load_yaml(p: Path) -> dict[str, Any]:
    try:
        obj = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {p}: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError(f"Config {p} must be a mapping at top level.")
    return obj


def _opt_str(merged: Mapping[str, Any], key: str) -> str | None:
    v = merged.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ConfigError(f"'{key}' must be a string.")
    v = v.strip()
    return v or None


def _opt_positive(merged: Mapping[str, Any], key: str, kind: type) -> Any:
    v = merged.get(key)
    if v is None:
        return None
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
        raise ConfigError(f"'{key}' must be a positive number.")
    if kind is int and not isinstance(v, int):
        raise ConfigError(f"'{key}' must be an integer.")
    return kind(v)


def load_server_config(
    *,
    explicit_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load server config.

    Merge order: global < explicit_path < environment < overrides (CLI flags).
    Override values of None are ignored.
    """
    environ = os.environ if environ is None else environ
    merged: dict[str, Any] = {}
    loaded_from: Path | None = None

    for p in _global_candidate_paths():
        if p.exists() and p.is_file():
            merged.update(_load_yaml(p))
            loaded_from = p
            break

    if explicit_path is not None:
        p = explicit_path.expanduser().resolve()
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        merged.update(_load_yaml(p))
        loaded_from = p

    tc = environ.get(TOOLCHAIN_ENV, "").strip()
    if tc:
        logger.info("Setting default toolchain from %s: %s", TOOLCHAIN_ENV, tc)
        merged["default_toolchain"] = tc

    for k, v in (overrides or {}).items():
        if v is not None:
            merged[k] = v

    known = {"cargo_bin", "default_toolchain", "timeout", "max_output_bytes", "passthrough_env", "audit_log"}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(map(str, unknown))}")

    cfg: dict[str, Any] = {"loaded_from": loaded_from}

    cargo_bin = _opt_str(merged, "cargo_bin")
    if cargo_bin:
        cfg["cargo_bin"] = cargo_bin

    toolchain = _opt_str(merged, "default_toolchain")
    if toolchain:
        toolchain = toolchain.lstrip("+")
        if not toolchain or toolchain.startswith("-") or any(c.isspace() for c in toolchain):
            raise ConfigError(f"Invalid default_toolchain: {merged['default_toolchain']!r}")
        cfg["default_toolchain"] = toolchain

    cfg["timeout"] = _opt_positive(merged, "timeout", float)
    cfg["max_output_bytes"] = _opt_positive(merged, "max_output_bytes", int)

    pe = merged.get("passthrough_env")
    if pe is not None:
        if not isinstance(pe, list) or not all(isinstance(x, str) and x for x in pe):
            raise ConfigError("'passthrough_env' must be a list of variable names.")
        cfg["passthrough_env"] = tuple(pe)

    al = merged.get("audit_log")
    if al is not None:
        if not isinstance(al, bool):
            raise ConfigError("'audit_log' must be a boolean.")
        cfg["audit_log"] = al

    return ServerConfig(**cfg)
