from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from engine.error_handler import get_logger

log = get_logger("telemetry")


def _now_iso() -> str:
    # ISO-ish without importing datetime (fast + good enough for logs)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """
    Append-only JSON-lines record of simulation events (moves, attacks,
    deaths, turn ends). Disabled until `init` is given a path.
    """
    path: Optional[Path] = None
    enabled: bool = True
    flush_each_write: bool = False
    context: Dict[str, Any] = field(default_factory=dict)
    events_written: int = 0

    def init(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don't overwrite)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def set_context(self, **fields: Any) -> None:
        """Fields merged into every subsequent row (map name, session...)."""
        self.context.update(fields)

    @property
    def active(self) -> bool:
        return self.enabled and self.path is not None

    def log(self, event: str, **fields: Any) -> None:
        if not self.active:
            return

        row: Dict[str, Any] = {
            "t": time.time(),
            "ts": _now_iso(),
            "event": event,
            **self.context,
            **fields,
        }

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
                if self.flush_each_write:
                    f.flush()
        except OSError as e:
            # Telemetry must never break the game.
            log.debug("Telemetry write failed: %s", e)
            return
        self.events_written += 1


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
