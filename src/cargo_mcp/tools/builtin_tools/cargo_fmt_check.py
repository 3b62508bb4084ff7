from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoFmtCheckArgs(CommonArgs):
    package: str | None = None


@dataclass
class CargoFmtCheckTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_fmt_check",
        description="Check if code is properly formatted without modifying files.",
        subcommand="fmt",
        examples=(
            ("Check formatting", {"path": "."}),
        ),
        parameters={"package": PACKAGE_PARAM},
    )
    args_type: type = CargoFmtCheckArgs

    def command_args(self, args: CargoFmtCheckArgs) -> list[str]:
        return package_args(args.package) + ["--check"]
