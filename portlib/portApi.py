
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .utils import parseBool, parseStr

STATUS_FREE = "free"
STATUS_IN_USE = "inUse"

EMOJI_MODES = ("prefix", "replace", "suffix")
DEFAULT_EMOJI_MODE = "replace"
DEFAULT_SEPARATOR = "|"


@dataclass(frozen=True)
class GroupSettings:
    compact: bool = False
    bgcolor: str | None = None
    separator: str = DEFAULT_SEPARATOR
    showTitle: bool = True

    @staticmethod
    def fromConfigBlock(block: Any) -> GroupSettings:
        if not isinstance(block, dict):
            return GroupSettings()

        sep = block.get("separator")
        # brackets would end the compact region early
        if not isinstance(sep, str) or not sep or "[" in sep or "]" in sep:
            sep = DEFAULT_SEPARATOR
        return GroupSettings(
            compact=parseBool(block.get("compact"), False),
            bgcolor=parseStr(block.get("bgcolor")),
            separator=sep,
            showTitle=parseBool(block.get("show_title"), True),
        )

    def toConfigBlock(self) -> dict[str, Any]:
        outObj: dict[str, Any] = {
            "compact": self.compact,
            "separator": self.separator,
            "show_title": self.showTitle,
        }
        if self.bgcolor:
            outObj["bgcolor"] = self.bgcolor
        return outObj


@dataclass(frozen=True)
class MonitorTarget:
    host: str
    port: int
    label: str = ""
    group: str = ""
    groupSettings: GroupSettings = field(default_factory=GroupSettings)


@dataclass(frozen=True)
class ProbeResult:
    host: str
    port: int
    isOpen: bool
    label: str = ""
    group: str = ""
    groupSettings: GroupSettings | None = None
    pid: int | None = None
    processName: str | None = None

    @staticmethod
    def forTarget(
        target: MonitorTarget,
        isOpen: bool,
        *,
        pid: int | None = None,
        processName: str | None = None,
    ) -> ProbeResult:
        return ProbeResult(
            host=target.host,
            port=target.port,
            isOpen=bool(isOpen),
            label=target.label,
            group=target.group,
            groupSettings=target.groupSettings,
            pid=pid,
            processName=processName,
        )


@dataclass
class PortObject:
    # only statusIcon changes between ticks
    port: int
    label: str = ""
    group: str = ""
    host: str = "localhost"
    statusIcon: str = STATUS_FREE
    groupSettings: GroupSettings = field(default_factory=GroupSettings)
    emoji: str | dict[str, str] | None = None
    emojiMode: str | None = None
    color: str | None = None

    @property
    def inUse(self) -> bool:
        return self.statusIcon == STATUS_IN_USE


@dataclass(frozen=True)
class StatusIcons:
    inUse: str = "🟢"
    free: str = "⚪️"


@dataclass(frozen=True)
class DisplayConfig:
    statusIcons: StatusIcons = field(default_factory=StatusIcons)
    globalEmojiMode: str = DEFAULT_EMOJI_MODE
    backgroundColor: str | None = None


@dataclass(frozen=True)
class RenderResult:
    text: str
    tooltip: str = ""
    backgroundColor: str | None = None
