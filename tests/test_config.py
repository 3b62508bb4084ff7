from __future__ import annotations

from pathlib import Path

import pytest

from cargo_mcp.config import loader
from cargo_mcp.config.loader import load_server_config
from cargo_mcp.errors import ConfigError
from cargo_mcp.util.subprocess import DEFAULT_PASSTHROUGH_ENV


@pytest.fixture(autouse=True)
def no_global_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "_global_candidate_paths", lambda: [])


def test_defaults() -> None:
    cfg = load_server_config(environ={})
    assert cfg.cargo_bin == "cargo"
    assert cfg.default_toolchain is None
    assert cfg.timeout is None
    assert cfg.max_output_bytes is None
    assert cfg.passthrough_env == DEFAULT_PASSTHROUGH_ENV
    assert cfg.audit_log is False
    assert cfg.loaded_from is None


def test_yaml_file(tmp_path: Path) -> None:
    p = tmp_path / "cargo-mcp.yaml"
    p.write_text(
        "default_toolchain: stable\n"
        "timeout: 600\n"
        "max_output_bytes: 1048576\n"
        "passthrough_env: [PATH, HOME, CARGO_HOME, RUSTUP_HOME, SSL_CERT_FILE]\n"
        "audit_log: true\n",
        encoding="utf-8",
    )
    cfg = load_server_config(explicit_path=p, environ={})
    assert cfg.default_toolchain == "stable"
    assert cfg.timeout == 600.0
    assert cfg.max_output_bytes == 1048576
    assert cfg.passthrough_env[-1] == "SSL_CERT_FILE"
    assert cfg.audit_log is True
    assert cfg.loaded_from == p.resolve()


def test_precedence_file_env_flags(tmp_path: Path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text("default_toolchain: stable\n", encoding="utf-8")
    env = {"CARGO_MCP_DEFAULT_TOOLCHAIN": "beta"}
    assert load_server_config(explicit_path=p, environ=env).default_toolchain == "beta"
    cfg = load_server_config(explicit_path=p, environ=env, overrides={"default_toolchain": "+nightly", "timeout": None})
    assert cfg.default_toolchain == "nightly"
    assert cfg.timeout is None


def test_global_config_is_read(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    p = tmp_path / "cargo-mcp.yaml"
    p.write_text("cargo_bin: /opt/cargo/bin/cargo\n", encoding="utf-8")
    monkeypatch.setattr(loader, "_global_candidate_paths", lambda: [p])
    cfg = load_server_config(environ={})
    assert cfg.cargo_bin == "/opt/cargo/bin/cargo"
    assert cfg.loaded_from == p


@pytest.mark.parametrize(
    "body",
    [
        "timeout: -1\n",
        "timeout: forever\n",
        "max_output_bytes: 1.5\n",
        "audit_log: maybe\n",
        "passthrough_env: PATH\n",
        "default_toolchain: 'stable nightly'\n",
        "shell: /bin/sh\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config(tmp_path: Path, body: str) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_server_config(explicit_path=p, environ={})


def test_missing_explicit_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_server_config(explicit_path=tmp_path / "absent.yaml", environ={})
