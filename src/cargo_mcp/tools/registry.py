from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from ..errors import UnknownTool
from .base import Tool, ToolSpec

@dataclass
class ToolRegistry:
    _tools: Dict[str, Tool] = None  # type: ignore

    def __post_init__(self):
        if self._tools is None:
            self._tools = {}

    def register(self, tool: Tool) -> None:
        name = tool.spec.name
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        tool = self._tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise UnknownTool(f"Unknown tool: {name!r}. Available: {', '.join(self._tools)}")
        return tool

    def names(self) -> list[str]:
        return list(self._tools)

    def list_specs(self) -> list[ToolSpec]:
        return [t.spec for t in self._tools.values()]
