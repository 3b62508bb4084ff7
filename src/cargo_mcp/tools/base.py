from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Protocol

ParamType = Literal["string", "boolean", "string_list", "string_map"]


@dataclass(frozen=True)
class Param:
    type: ParamType
    description: str
    required: bool = False
    default: Any = None
    # value is emitted as its own argv token, so it may never look like a flag
    token: bool = False
    min_items: int = 0

    def json_schema(self) -> dict[str, Any]:
        if self.type == "string_list":
            out: dict[str, Any] = {"type": "array", "items": {"type": "string"}}
            if self.min_items:
                out["minItems"] = self.min_items
        elif self.type == "string_map":
            out = {"type": "object", "additionalProperties": {"type": "string"}}
        else:
            out = {"type": self.type}
        out["description"] = self.description
        if self.default is not None:
            out["default"] = self.default
        return out


COMMON_PARAMS: dict[str, Param] = {
    "path": Param("string", "Path to the Rust project directory (must contain Cargo.toml).", required=True),
    "toolchain": Param("string", "Optional Rust toolchain to use (e.g. 'stable', 'nightly', '1.70.0').", token=True),
    "cargo_env": Param("string_map", "Optional environment variables to set for the cargo command."),
}

PACKAGE_PARAM = Param("string", "Optional package name (for workspaces).", token=True)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    subcommand: str
    parameters: Mapping[str, Param] = field(default_factory=dict)
    # pairs of fields that may not both be set
    exclusive: tuple[tuple[str, str], ...] = ()
    # (what it does, arguments) pairs shown to callers in tools/list
    examples: tuple[tuple[str, Mapping[str, Any]], ...] = ()

    @property
    def all_parameters(self) -> dict[str, Param]:
        return {**COMMON_PARAMS, **self.parameters}

    def input_schema(self) -> dict[str, Any]:
        params = self.all_parameters
        return {
            "type": "object",
            "properties": {k: p.json_schema() for k, p in params.items()},
            "required": [k for k, p in params.items() if p.required],
            "additionalProperties": False,
        }

    def full_description(self) -> str:
        if not self.examples:
            return self.description
        lines = [self.description, "", "Examples:"]
        lines.extend(f"- {what}: {json.dumps(dict(args))}" for what, args in self.examples)
        return "\n".join(lines)

    def to_obj(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.full_description(), "inputSchema": self.input_schema()}


@dataclass(frozen=True, kw_only=True)
class CommonArgs:
    path: str
    toolchain: str | None = None
    cargo_env: Mapping[str, str] = field(default_factory=dict)


class Tool(Protocol):
    spec: ToolSpec
    args_type: type[CommonArgs]

    def command_args(self, args: Any) -> list[str]:
        """Tokens that follow the subcommand."""
        ...


def package_args(package: str | None) -> list[str]:
    return ["-p", package] if package else []
