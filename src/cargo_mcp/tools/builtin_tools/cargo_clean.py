from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoCleanArgs(CommonArgs):
    package: str | None = None
    release: bool = False


@dataclass
class CargoCleanTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_clean",
        description="Remove artifacts that cargo has generated in the past.",
        subcommand="clean",
        examples=(
            ("Clean all build artifacts", {"path": "."}),
            ("Clean release artifacts only", {"path": ".", "release": True}),
        ),
        parameters={
            "package": PACKAGE_PARAM,
            "release": Param("boolean", "Only remove release artifacts.", default=False),
        },
    )
    args_type: type = CargoCleanArgs

    def command_args(self, args: CargoCleanArgs) -> list[str]:
        out = package_args(args.package)
        if args.release:
            out.append("--release")
        return out
