"""
Per-tick rendering of a display template against live probe results.

PortObjects are created once per configuration (createPortObjects) and only
their statusIcon is touched on each tick. Ports missing from a result batch
keep their last known state.
"""
from __future__ import annotations

import re
from typing import Any, Iterable

from .portApi import (
    DEFAULT_EMOJI_MODE,
    DEFAULT_SEPARATOR,
    EMOJI_MODES,
    STATUS_FREE,
    STATUS_IN_USE,
    DisplayConfig,
    MonitorTarget,
    PortObject,
    ProbeResult,
    RenderResult,
)
from .template import PLACEHOLDER_PREFIX
from .utils import parseStr, parseStrLower

_compactRe = re.compile(r"(\d{2,})\[([^\]]+)\]")
_placeholderRe = re.compile(re.escape(PLACEHOLDER_PREFIX) + r"(\d+)")
_separatorRe = re.compile(re.escape(PLACEHOLDER_PREFIX) + r"\d+(.+?)" + re.escape(PLACEHOLDER_PREFIX) + r"\d+")

THEME_COLORS: dict[str, str] = {
    "red": "statusBarItem.errorBackground",
    "yellow": "statusBarItem.warningBackground",
    "blue": "statusBarItem.prominentBackground",
    "green": "statusBarItem.remoteBackground",
}

PortObjects = dict[int, PortObject]


def parseEmojiMode(val: Any, defaultVal: str = DEFAULT_EMOJI_MODE) -> str:
    s = parseStrLower(val)
    return s if s in EMOJI_MODES else defaultVal


def applyPortEmojis(portObjects: PortObjects, portEmojis: dict[str, Any] | None, globalMode: str) -> None:
    if not portEmojis:
        return

    for obj in portObjects.values():
        emoji = portEmojis.get(obj.label) if obj.label else None
        if emoji is None:
            emoji = portEmojis.get(str(obj.port))

        if isinstance(emoji, str) and emoji:
            obj.emoji = emoji
            obj.emojiMode = globalMode
        elif isinstance(emoji, dict):
            detailed = {k: v for k, v in emoji.items() if k in EMOJI_MODES and isinstance(v, str) and v}
            if detailed:
                obj.emoji = detailed
                obj.emojiMode = None


def applyPortColors(portObjects: PortObjects, portColors: dict[str, Any] | None) -> None:
    # port > label > group
    if not portColors:
        return

    for obj in portObjects.values():
        color = parseStr(portColors.get(str(obj.port)))
        if color is None and obj.label:
            color = parseStr(portColors.get(obj.label))
        if color is None and obj.group:
            color = parseStr(portColors.get(obj.group))
        if color is not None:
            obj.color = color


def createPortObjects(
    targets: list[MonitorTarget],
    portEmojis: dict[str, Any] | None = None,
    globalEmojiMode: str = DEFAULT_EMOJI_MODE,
    portColors: dict[str, Any] | None = None,
) -> PortObjects:
    portObjects: PortObjects = {}
    for target in targets:
        # a port listed in several groups keeps the last one
        portObjects[target.port] = PortObject(
            port=target.port,
            label=target.label,
            group=target.group,
            host=target.host,
            groupSettings=target.groupSettings,
        )

    applyPortEmojis(portObjects, portEmojis, parseEmojiMode(globalEmojiMode))
    applyPortColors(portObjects, portColors)
    return portObjects


def updatePortStatuses(portObjects: PortObjects, results: Iterable[ProbeResult]) -> None:
    for result in results:
        obj = portObjects.get(result.port)
        if obj is None:
            continue
        obj.statusIcon = STATUS_IN_USE if result.isOpen else STATUS_FREE


def resolveEmoji(obj: PortObject, globalMode: str) -> tuple[str | None, str]:
    emoji = obj.emoji
    if isinstance(emoji, dict):
        for mode in EMOJI_MODES:
            value = emoji.get(mode)
            if isinstance(value, str) and value:
                return value, mode
        return None, globalMode
    if isinstance(emoji, str) and emoji:
        return emoji, parseEmojiMode(obj.emojiMode, parseEmojiMode(globalMode))
    return None, globalMode


def renderPortDisplay(obj: PortObject, displayConfig: DisplayConfig, suffix: str | None = None) -> str:
    icons = displayConfig.statusIcons
    icon = icons.inUse if obj.inUse else icons.free
    name = obj.label

    emoji, mode = resolveEmoji(obj, displayConfig.globalEmojiMode)
    if emoji:
        if mode == "prefix":
            icon = emoji + icon
        elif mode == "replace":
            # free ports always show the free icon
            if obj.inUse:
                icon = emoji
        elif mode == "suffix":
            name = name + emoji

    num = str(obj.port) if suffix is None else suffix
    if not num:
        return icon + name
    if name:
        return f"{icon}{name}:{num}"
    return icon + num


def detectSeparator(inner: str) -> str:
    m = _separatorRe.search(inner)
    return m.group(1) if m else DEFAULT_SEPARATOR


def processCompactDisplays(template: str, portObjects: PortObjects, displayConfig: DisplayConfig) -> str:
    def renderCompact(m: re.Match[str]) -> str:
        prefix, inner = m.group(1), m.group(2)
        separator = detectSeparator(inner)

        pieces: list[str] = []
        for piece in inner.split(separator):
            pm = _placeholderRe.fullmatch(piece)
            obj = portObjects.get(int(pm.group(1))) if pm else None
            if obj is None:
                pieces.append(piece)
                continue
            portStr = str(obj.port)
            suffix = portStr[len(prefix):] if portStr.startswith(prefix) else portStr
            pieces.append(renderPortDisplay(obj, displayConfig, suffix))
        return f"{prefix}[{separator.join(pieces)}]"

    return _compactRe.sub(renderCompact, template)


def processPlaceholders(text: str, portObjects: PortObjects, displayConfig: DisplayConfig) -> str:
    def renderFull(m: re.Match[str]) -> str:
        obj = portObjects.get(int(m.group(1)))
        return renderPortDisplay(obj, displayConfig) if obj is not None else m.group(0)

    return _placeholderRe.sub(renderFull, text)


def themeColor(color: str | None) -> str | None:
    if not color:
        return None
    return THEME_COLORS.get(color.strip().lower(), color)


def resolveBackgroundColor(
    results: list[ProbeResult],
    displayConfig: DisplayConfig,
    portObjects: PortObjects | None = None,
) -> str | None:
    for result in results:
        settings = result.groupSettings
        if settings is not None and settings.bgcolor:
            return themeColor(settings.bgcolor)

    if displayConfig.backgroundColor:
        return themeColor(displayConfig.backgroundColor)

    if portObjects:
        for wantOpen in (True, False):
            for result in results:
                obj = portObjects.get(result.port)
                if obj is not None and obj.color and result.isOpen == wantOpen:
                    return themeColor(obj.color)

    return None


def generateTooltip(results: list[ProbeResult], portObjects: PortObjects | None = None) -> str:
    lines: list[str] = []
    for result in results:
        label = result.label
        if not label and portObjects and result.port in portObjects:
            label = portObjects[result.port].label

        status = "IN USE" if result.isOpen else "FREE"
        line = f"{result.host}:{result.port} ({label}) - {status}"
        if result.isOpen and result.processName:
            line += f" - {result.processName}"
            if result.pid:
                line += f" (PID: {result.pid})"
        lines.append(line)
    return "\n".join(lines)


def render(
    template: str,
    portObjects: PortObjects,
    liveResults: list[ProbeResult],
    displayConfig: DisplayConfig,
) -> RenderResult:
    updatePortStatuses(portObjects, liveResults)

    text = processCompactDisplays(template, portObjects, displayConfig)
    text = processPlaceholders(text, portObjects, displayConfig)

    return RenderResult(
        text=text,
        tooltip=generateTooltip(liveResults, portObjects),
        backgroundColor=resolveBackgroundColor(liveResults, displayConfig, portObjects),
    )
