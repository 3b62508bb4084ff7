from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoUpdateArgs(CommonArgs):
    package: str | None = None
    dependencies: tuple[str, ...] = ()
    dry_run: bool = False


@dataclass
class CargoUpdateTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_update",
        description="Update dependencies in Cargo.lock using cargo update.",
        subcommand="update",
        examples=(
            ("Update all dependencies", {"path": "."}),
            ("Preview updating one dependency", {"path": ".", "dependencies": ["serde"], "dry_run": True}),
        ),
        parameters={
            "package": PACKAGE_PARAM,
            "dependencies": Param("string_list", "Only update these dependencies, in the given order.", token=True),
            "dry_run": Param("boolean", "Show what would be updated without writing Cargo.lock.", default=False),
        },
    )
    args_type: type = CargoUpdateArgs

    def command_args(self, args: CargoUpdateArgs) -> list[str]:
        out = package_args(args.package)
        out.extend(args.dependencies)
        if args.dry_run:
            out.append("--dry-run")
        return out
