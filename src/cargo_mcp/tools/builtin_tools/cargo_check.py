from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoCheckArgs(CommonArgs):
    package: str | None = None


@dataclass
class CargoCheckTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_check",
        description="Run cargo check to verify the code compiles.",
        subcommand="check",
        examples=(
            ("Check the project", {"path": "."}),
            ("Check one workspace member", {"path": ".", "package": "core"}),
        ),
        parameters={"package": PACKAGE_PARAM},
    )
    args_type: type = CargoCheckArgs

    def command_args(self, args: CargoCheckArgs) -> list[str]:
        return package_args(args.package)
