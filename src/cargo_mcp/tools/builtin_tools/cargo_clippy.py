from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoClippyArgs(CommonArgs):
    package: str | None = None
    fix: bool = False


@dataclass
class CargoClippyTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_clippy",
        description="Run cargo clippy for linting suggestions.",
        subcommand="clippy",
        examples=(
            ("Lint the project", {"path": "."}),
            ("Apply suggested fixes", {"path": ".", "fix": True}),
        ),
        parameters={
            "package": PACKAGE_PARAM,
            "fix": Param("boolean", "Apply suggested fixes automatically.", default=False),
        },
    )
    args_type: type = CargoClippyArgs

    def command_args(self, args: CargoClippyArgs) -> list[str]:
        out = package_args(args.package)
        if args.fix:
            out.append("--fix")
        return out
