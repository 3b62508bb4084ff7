from __future__ import annotations
from dataclasses import dataclass

from ..base import CommonArgs, PACKAGE_PARAM, Param, ToolSpec, package_args


@dataclass(frozen=True, kw_only=True)
class CargoAddArgs(CommonArgs):
    dependencies: tuple[str, ...]
    package: str | None = None
    dev: bool = False
    optional: bool = False
    features: tuple[str, ...] = ()


@dataclass
class CargoAddTool:
    spec: ToolSpec = ToolSpec(
        name="cargo_add",
        description="Add dependencies to Cargo.toml using cargo add.",
        subcommand="add",
        examples=(
            ("Add a dependency", {"path": ".", "dependencies": ["serde"]}),
            ("Add a dev dependency with features", {"path": ".", "dependencies": ["tokio"], "dev": True, "features": ["macros", "rt"]}),
        ),
        parameters={
            "dependencies": Param(
                "string_list",
                "Dependencies to add (e.g. ['serde', 'tokio@1.0']).",
                required=True,
                token=True,
                min_items=1,
            ),
            "package": PACKAGE_PARAM,
            "dev": Param("boolean", "Add as development dependencies.", default=False),
            "optional": Param("boolean", "Add as optional dependencies.", default=False),
            "features": Param("string_list", "Features to enable on the added dependencies.", token=True),
        },
    )
    args_type: type = CargoAddArgs

    def command_args(self, args: CargoAddArgs) -> list[str]:
        out = package_args(args.package)
        out.extend(args.dependencies)
        if args.dev:
            out.append("--dev")
        if args.optional:
            out.append("--optional")
        if args.features:
            out.extend(["--features", ",".join(args.features)])
        return out
