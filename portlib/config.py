"""
Settings data classes for the port monitor.

MonitorSettings holds one parsed settings snapshot: the raw hosts tree (still
un-normalized), label/emoji/color overrides, status icons and the polling
interval. A new snapshot replaces the old one on every settings change.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .portApi import DEFAULT_EMOJI_MODE, DisplayConfig, StatusIcons

DEFAULT_INTERVAL_MS = 3000
MIN_INTERVAL_MS = 1000
DEFAULT_POSITION = "right"


def defaultHosts() -> dict[str, Any]:
    return {"Node.js": [3000, 3001, 3002, 3003]}


@dataclass
class MonitorSettings:
    hosts: Any = field(default_factory=defaultHosts)
    portLabels: dict[str, str] = field(default_factory=dict)
    portEmojis: dict[str, Any] = field(default_factory=dict)
    emojiMode: str = DEFAULT_EMOJI_MODE
    statusIcons: StatusIcons = field(default_factory=StatusIcons)
    backgroundColor: str | None = None
    portColors: dict[str, str] = field(default_factory=dict)
    statusBarPosition: str = DEFAULT_POSITION  # left | right
    intervalMs: int = DEFAULT_INTERVAL_MS

    @property
    def intervalSec(self) -> float:
        return self.intervalMs / 1000.0

    def displayConfig(self) -> DisplayConfig:
        return DisplayConfig(
            statusIcons=self.statusIcons,
            globalEmojiMode=self.emojiMode,
            backgroundColor=self.backgroundColor,
        )
