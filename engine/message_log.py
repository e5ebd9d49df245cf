from __future__ import annotations

from typing import List, Optional, Tuple

from settings import COLOR_ENEMY, COLOR_PLAYER

# Type alias for RGB colors used in UI rendering
Color = Tuple[int, int, int]

COLOR_DIALOGUE: Color = (220, 220, 240)
COLOR_DEATH: Color = COLOR_ENEMY
COLOR_TURN: Color = COLOR_PLAYER


class MessageLog:
    """
    Battle message history shown in the side panel.

    Features:
    - Stores message history with an optional color per line
    - Tracks the latest visible message (last_message)
    - Supports multi-line messages (each line becomes a log entry)
    - Automatically clamps log size to prevent memory bloat
    """

    def __init__(self, max_size: int = 60) -> None:
        self.lines: List[str] = []
        # Parallel list; None means "use the default text color".
        self.colors: List[Optional[Color]] = []
        self.max_size: int = max_size
        self._last_message: str = ""

    @property
    def last_message(self) -> str:
        return self._last_message

    def add_message(self, text: str, color: Optional[Color] = None) -> None:
        """Append a (possibly multi-line) message."""
        lines = [line for line in str(text).splitlines() if line.strip()]
        if not lines:
            return

        self.lines.extend(lines)
        self.colors.extend([color] * len(lines))
        self._last_message = lines[-1]

        # Clamp log size (keep most recent entries)
        max_len = max(1, int(self.max_size))
        if len(self.lines) > max_len:
            self.lines = self.lines[-max_len:]
            self.colors = self.colors[-max_len:]

    def recent(self, count: int) -> List[Tuple[str, Optional[Color]]]:
        """The last `count` lines with their colors, oldest first."""
        if count <= 0:
            return []
        return list(zip(self.lines[-count:], self.colors[-count:]))

    def clear(self) -> None:
        self.lines.clear()
        self.colors.clear()
        self._last_message = ""
