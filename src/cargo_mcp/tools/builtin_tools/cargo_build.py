from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoBuildArgs(CommonArgs):
    package: str | None = None
    release: bool = False


@dataclass
class CargoBuildTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_build",
        description="Build the project with cargo build.",
        subcommand="build",
        examples=(
            ("Debug build", {"path": "."}),
            ("Release build of one package", {"path": ".", "package": "app", "release": True}),
        ),
        parameters={
            "package": PACKAGE_PARAM,
            "release": Param("boolean", "Build in release mode.", default=False),
        },
    )
    args_type: type = CargoBuildArgs

    def command_args(self, args: CargoBuildArgs) -> list[str]:
        out = package_args(args.package)
        if args.release:
            out.append("--release")
        return out
