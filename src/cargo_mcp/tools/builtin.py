from __future__ import annotations

from .registry import ToolRegistry

from .builtin_tools.cargo_check import CargoCheckTool
from .builtin_tools.cargo_clippy import CargoClippyTool
from .builtin_tools.cargo_test import CargoTestTool
from .builtin_tools.cargo_fmt_check import CargoFmtCheckTool
from .builtin_tools.cargo_build import CargoBuildTool
from .builtin_tools.cargo_bench import CargoBenchTool
from .builtin_tools.cargo_add import CargoAddTool
from .builtin_tools.cargo_remove import CargoRemoveTool
from .builtin_tools.cargo_update import CargoUpdateTool
from .builtin_tools.cargo_clean import CargoCleanTool
from .builtin_tools.cargo_run import CargoRunTool

def register_builtin_tools(registry: ToolRegistry) -> None:
    registry.register(CargoCheckTool())
    registry.register(CargoClippyTool())
    registry.register(CargoTestTool())
    registry.register(CargoFmtCheckTool())
    registry.register(CargoBuildTool())
    registry.register(CargoBenchTool())
    registry.register(CargoAddTool())
    registry.register(CargoRemoveTool())
    registry.register(CargoUpdateTool())
    registry.register(CargoCleanTool())
    registry.register(CargoRunTool())