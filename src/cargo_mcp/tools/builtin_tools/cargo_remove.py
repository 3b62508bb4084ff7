from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoRemoveArgs(CommonArgs):
    dependencies: tuple[str, ...]
    package: str | None = None
    dev: bool = False


@dataclass
class CargoRemoveTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_remove",
        description="Remove dependencies from Cargo.toml using cargo remove.",
        subcommand="remove",
        examples=(
            ("Remove a dependency", {"path": ".", "dependencies": ["serde"]}),
            ("Remove a dev dependency", {"path": ".", "dependencies": ["tokio"], "dev": True}),
        ),
        parameters={
            "dependencies": Param(
                "string_list", "Dependencies to remove.", required=True, token=True, min_items=1
            ),
            "package": PACKAGE_PARAM,
            "dev": Param("boolean", "Remove from development dependencies.", default=False),
        },
    )
    args_type: type = CargoRemoveArgs

    def command_args(self, args: CargoRemoveArgs) -> list[str]:
        out = package_args(args.package)
        out.extend(args.dependencies)
        if args.dev:
            out.append("--dev")
        return out
