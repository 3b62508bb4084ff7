from __future__ import annotations

from pathlib import Path

import pytest

from cargo_mcp.tools.builtin import register_builtin_tools
from cargo_mcp.tools.command import build_process_spec
from cargo_mcp.tools.registry import ToolRegistry
from cargo_mcp.tools.validator import validate
from cargo_mcp.util.subprocess import child_environment

SUBCOMMANDS = {
    "cargo_check": "check",
    "cargo_clippy": "clippy",
    "cargo_test": "test",
    "cargo_fmt_check": "fmt",
    "cargo_build": "build",
    "cargo_bench": "bench",
    "cargo_add": "add",
    "cargo_remove": "remove",
    "cargo_update": "update",
    "cargo_clean": "clean",
    "cargo_run": "run",
}

REQUIRED = {"cargo_add": {"dependencies": ["serde"]}, "cargo_remove": {"dependencies": ["serde"]}}


@pytest.fixture(scope="module")
def registry() -> ToolRegistry:
    reg = ToolRegistry()
    register_builtin_tools(reg)
    return reg


def argv(registry: ToolRegistry, name: str, default_toolchain: str | None = None, **bag) -> list[str]:
    tool = registry.get(name)
    args = validate(tool, {"path": ".", **bag})
    spec = build_process_spec(tool, args, Path("/work/demo"), default_toolchain=default_toolchain)
    return list(spec.argv)


@pytest.mark.parametrize("name,sub", sorted(SUBCOMMANDS.items()))
def test_argv_prefix(registry: ToolRegistry, name: str, sub: str) -> None:
    plain = argv(registry, name, **REQUIRED.get(name, {}))
    assert plain[:2] == ["cargo", sub]

    pinned = argv(registry, name, toolchain="nightly", **REQUIRED.get(name, {}))
    assert pinned[:3] == ["cargo", "+nightly", sub]


def test_default_toolchain_applies_unless_overridden(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_check", default_toolchain="stable") == ["cargo", "+stable", "check"]
    assert argv(registry, "cargo_check", default_toolchain="stable", toolchain="beta") == ["cargo", "+beta", "check"]


def test_add_example(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_add", dependencies=["serde", "tokio@1.0"], features=["derive"]) == [
        "cargo", "add", "serde", "tokio@1.0", "--features", "derive",
    ]


def test_add_all_options(registry: ToolRegistry) -> None:
    assert argv(
        registry, "cargo_add",
        dependencies=["criterion"], package="bench-utils", dev=True, optional=True, features=["html", "csv"],
    ) == ["cargo", "add", "-p", "bench-utils", "criterion", "--dev", "--optional", "--features", "html,csv"]


def test_build_example(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_build", release=True, package="mylib") == [
        "cargo", "build", "-p", "mylib", "--release",
    ]


def test_clippy_fix_is_last(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_clippy", fix=True)[-1] == "--fix"


def test_test_harness_flags_follow_separator(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_test", package="core", test_name="parses", no_capture=True) == [
        "cargo", "test", "-p", "core", "parses", "--", "--no-capture",
    ]
    assert "--" not in argv(registry, "cargo_test")


def test_fmt_check_always_checks(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_fmt_check") == ["cargo", "fmt", "--check"]


def test_bench_baseline(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_bench", bench_name="decode", baseline="main") == [
        "cargo", "bench", "decode", "--", "--save-baseline", "main",
    ]


def test_remove_and_update_preserve_order(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_remove", dependencies=["zeta", "alpha", "mid"], dev=True) == [
        "cargo", "remove", "zeta", "alpha", "mid", "--dev",
    ]
    assert argv(registry, "cargo_update", dependencies=["tokio", "serde"], dry_run=True) == [
        "cargo", "update", "tokio", "serde", "--dry-run",
    ]
    assert argv(registry, "cargo_update") == ["cargo", "update"]


def test_clean(registry: ToolRegistry) -> None:
    assert argv(registry, "cargo_clean", package="mylib", release=True) == ["cargo", "clean", "-p", "mylib", "--release"]


def test_run_options(registry: ToolRegistry) -> None:
    assert argv(
        registry, "cargo_run",
        package="app", bin="worker", release=True, features=["a", "b"],
        all_features=True, no_default_features=True, args=["--config", "prod.toml"],
    ) == [
        "cargo", "run", "-p", "app", "--bin", "worker", "--release", "--features", "a,b",
        "--all-features", "--no-default-features", "--", "--config", "prod.toml",
    ]
    assert argv(registry, "cargo_run", example="hello") == ["cargo", "run", "--example", "hello"]


def test_spec_carries_cwd_and_only_the_caller_env(registry: ToolRegistry) -> None:
    tool = registry.get("cargo_clippy")
    args = validate(tool, {"path": ".", "fix": True, "cargo_env": {"RUSTFLAGS": "-D warnings"}})
    spec = build_process_spec(tool, args, Path("/work/demo"))
    assert spec.cwd == Path("/work/demo")
    assert dict(spec.env) == {"RUSTFLAGS": "-D warnings"}
    assert spec.argv[-1] == "--fix"

    host = {"PATH": "/usr/bin", "HOME": "/home/u", "AWS_SECRET_ACCESS_KEY": "hunter2"}
    env = child_environment(spec.env, host=host)
    assert env["RUSTFLAGS"] == "-D warnings"
    assert env["PATH"] == "/usr/bin"
    assert "AWS_SECRET_ACCESS_KEY" not in env


def test_caller_env_wins_over_passthrough() -> None:
    env = child_environment({"PATH": "/opt/rust/bin"}, passthrough=("PATH",), host={"PATH": "/usr/bin"})
    assert env == {"PATH": "/opt/rust/bin"}
