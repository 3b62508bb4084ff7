from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from platformdirs import user_data_dir

APP_NAME = "cargo-mcp"

logger = logging.getLogger(__name__)


def _events_dir() -> Path:
    return Path(user_data_dir(APP_NAME)) / "events"


@dataclass
class Event:
    ts: float
    type: str
    data: dict[str, Any]


@dataclass
class EventStore:
    """Append-only jsonl log of cargo invocations, one file per day.

    Tolerant of partial corruption when read back. Write failures are logged
    and dropped so auditing never changes a tool response.
    """

    root: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @staticmethod
    def open(root: Path | None = None) -> "EventStore":
        return EventStore(root=root or _events_dir())

    def path_for(self, ts: float) -> Path:
        return self.root / f"{time.strftime('%Y-%m-%d', time.localtime(ts))}.jsonl"

    def append(self, event_type: str, data: dict[str, Any]) -> None:
        ev = Event(ts=time.time(), type=event_type, data=data)
        line = json.dumps(ev.__dict__, ensure_ascii=False) + "\n"
        try:
            with self._lock:
                self.root.mkdir(parents=True, exist_ok=True)
                with self.path_for(ev.ts).open("a", encoding="utf-8") as f:
                    f.write(line)
        except OSError as e:
            logger.warning("Could not write audit event: %s", e)

    def iter_events(self, path: Path) -> Iterable[Event]:
        if not path.exists():
            return []
        out: list[Event] = []
        for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
                out.append(Event(ts=float(obj.get("ts", 0.0)), type=str(obj.get("type")), data=obj.get("data") or {}))
            except (ValueError, AttributeError):
                continue
        return out
