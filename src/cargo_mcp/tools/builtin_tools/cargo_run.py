from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoRunArgs(CommonArgs):
    package: str | None = None
    bin: str | None = None
    example: str | None = None
    release: bool = False
    features: tuple[str, ...] = ()
    all_features: bool = False
    no_default_features: bool = False
    args: tuple[str, ...] = ()


@dataclass
class CargoRunTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_run",
        description="Run a binary or example from the current package.",
        subcommand="run",
        examples=(
            ("Run the default binary", {"path": "."}),
            ("Run a binary with arguments", {"path": ".", "bin": "cli", "args": ["--verbose", "input.txt"]}),
        ),
        parameters={
            "package": PACKAGE_PARAM,
            "bin": Param("string", "Binary to run (if the package has several).", token=True),
            "example": Param("string", "Example to run instead of a binary.", token=True),
            "release": Param("boolean", "Run in release mode (optimized).", default=False),
            "features": Param("string_list", "Features to activate.", token=True),
            "all_features": Param("boolean", "Activate all available features.", default=False),
            "no_default_features": Param("boolean", "Do not activate the `default` feature.", default=False),
            "args": Param("string_list", "Arguments passed to the binary after `--`."),
        },
        exclusive=(("bin", "example"),),
    )
    args_type: type = CargoRunArgs

    def command_args(self, args: CargoRunArgs) -> list[str]:
        out = package_args(args.package)
        if args.bin:
            out.extend(["--bin", args.bin])
        if args.example:
            out.extend(["--example", args.example])
        if args.release:
            out.append("--release")
        if args.features:
            out.extend(["--features", ",".join(args.features)])
        if args.all_features:
            out.append("--all-features")
        if args.no_default_features:
            out.append("--no-default-features")
        if args.args:
            out.append("--")
            out.extend(args.args)
        return out
