from __future__ import annotations

from pathlib import Path
from typing import Any

from .config import *
from .portApi import EMOJI_MODES, StatusIcons
from .utils import *

SETTINGS_SECTION = "portMonitor"
KEY_PREFIX = SETTINGS_SECTION + "."

DEFAULT_ICONS = StatusIcons()


def unwrapSettings(data: dict[str, Any]) -> dict[str, Any]:
    # accepts a [portMonitor] table, "portMonitor.<key>" keys, or bare keys
    section = data.get(SETTINGS_SECTION)
    prefixed = {k[len(KEY_PREFIX) :]: v for k, v in data.items() if isinstance(k, str) and k.startswith(KEY_PREFIX)}

    if not isinstance(section, dict) and not prefixed:
        return dict(data)

    return deepMerge(dict(section) if isinstance(section, dict) else {}, prefixed)


def parseStrMap(val: Any) -> dict[str, str]:
    if not isinstance(val, dict):
        return {}
    outObj: dict[str, str] = {}
    for k, v in val.items():
        s = parseStr(v)
        if s is not None:
            outObj[safeStr(k)] = s
    return outObj


def parseStatusIcons(val: Any) -> StatusIcons:
    if not isinstance(val, dict):
        return StatusIcons()

    inUse = val.get("inUse")
    if inUse is None:
        inUse = val.get("open")
    free = val.get("free")
    if free is None:
        free = val.get("closed")

    return StatusIcons(
        inUse=safeStr(inUse) if inUse is not None else DEFAULT_ICONS.inUse,
        free=safeStr(free) if free is not None else DEFAULT_ICONS.free,
    )


def parseSettings(data: dict[str, Any]) -> MonitorSettings:
    raw = unwrapSettings(data)

    hosts = raw.get("hosts")
    if not hosts or not isinstance(hosts, (dict, list)):
        hosts = defaultHosts()

    emojiMode = parseStrLower(raw.get("emojiMode"))
    position = parseStrLower(raw.get("statusBarPosition"))
    intervalMs = parseInt(raw.get("intervalMs"), DEFAULT_INTERVAL_MS) or DEFAULT_INTERVAL_MS

    portEmojis = raw.get("portEmojis")

    return MonitorSettings(
        hosts=hosts,
        portLabels=parseStrMap(raw.get("portLabels")),
        portEmojis=dict(portEmojis) if isinstance(portEmojis, dict) else {},
        emojiMode=emojiMode if emojiMode in EMOJI_MODES else "replace",
        statusIcons=parseStatusIcons(raw.get("statusIcons")),
        backgroundColor=parseStr(raw.get("backgroundColor")),
        portColors=parseStrMap(raw.get("portColors")),
        statusBarPosition=position if position in ("left", "right") else DEFAULT_POSITION,
        intervalMs=max(MIN_INTERVAL_MS, intervalMs),
    )


def loadSettingsFile(path: str | Path) -> dict[str, Any]:
    pathObj = Path(path)
    if pathObj.suffix.lower() == ".json":
        dataObj = loadJson(pathObj)
    else:
        dataObj = loadToml(pathObj)
    return unwrapSettings(dataObj)


class SettingsFile:
    """Settings source backed by one TOML or JSON file, reloaded on mtime change."""

    def __init__(self, path: str | Path) -> None:
        self.pathObj = Path(path)
        self.lastMtime: float | None = None

    @property
    def name(self) -> str:
        return self.pathObj.name

    def currentMtime(self) -> float | None:
        try:
            return self.pathObj.stat().st_mtime
        except FileNotFoundError:
            return None

    def hasChanged(self) -> bool:
        mtime = self.currentMtime()
        return mtime is not None and mtime != self.lastMtime

    def load(self) -> dict[str, Any]:
        # a broken file is retried only after its next edit
        self.lastMtime = self.currentMtime()
        return loadSettingsFile(self.pathObj)


class StaticSettings:
    """In-memory settings source; reports a change only until first loaded."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = dict(data)
        self.name = "<static>"
        self.loaded = False

    def hasChanged(self) -> bool:
        return not self.loaded

    def update(self, data: dict[str, Any]) -> None:
        self.data = dict(data)
        self.loaded = False

    def load(self) -> dict[str, Any]:
        self.loaded = True
        return unwrapSettings(self.data)
