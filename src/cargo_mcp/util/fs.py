from __future__ import annotations
from pathlib import Path

from ..errors import InvalidProject

MANIFEST_NAME = "Cargo.toml"


def resolve_project(path_str: str, *, base: Path | None = None) -> Path:
    """Resolve `path_str` to a canonical cargo project directory.

    The manifest must sit directly inside the resolved directory. Parent
    directories are never searched.
    """
    try:
        p = Path(path_str).expanduser()
        if not p.is_absolute():
            p = (base or Path.cwd()) / p
        p = p.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidProject(f"Could not resolve path '{path_str}': {e}") from e
    if not p.is_dir():
        raise InvalidProject(f"Not a directory: {p}")
    if not (p / MANIFEST_NAME).is_file():
        raise InvalidProject(f"Not a Rust project: {MANIFEST_NAME} not found in {p}")
    return p
