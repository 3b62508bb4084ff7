from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config.models import ServerConfig
from .events.store import EventStore
from .tools.builtin import register_builtin_tools
from .tools.registry import ToolRegistry


@dataclass(frozen=True)
class AppContext:
    """Read-only state shared by every request handler."""

    cwd: Path
    config: ServerConfig
    tools: ToolRegistry
    events: EventStore | None = None

    @staticmethod
    def from_config(config: ServerConfig, cwd: Path | None = None) -> "AppContext":
        tools = ToolRegistry()
        register_builtin_tools(tools)
        events = EventStore.open() if config.audit_log else None
        return AppContext(
            cwd=(cwd or Path.cwd()).resolve(),
            config=config,
            tools=tools,
            events=events,
        )
