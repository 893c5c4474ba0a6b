from __future__ import annotations

from typing import Any

from .nodeKinds import Reserved, isPassThroughKey, isReservedKey
from .patternMatcher import findBestMatch, hasWildcard
from .portApi import GroupSettings, MonitorTarget
from .utils import parsePortKey, safeStr
from .wellKnown import portName

LOCAL_HOST = "localhost"


def resolveLabelForPort(port: int, portLabels: dict[str, Any] | None) -> str:
    if not portLabels:
        return ""

    exact = portLabels.get(str(port))
    if isinstance(exact, str) and exact:
        return exact

    patterns = [k for k in portLabels if isinstance(k, str) and hasWildcard(k)]
    if patterns:
        matched = findBestMatch(patterns, port)
        if matched is not None:
            return safeStr(portLabels[matched])
    return ""


def describePort(port: int, label: str = "", portLabels: dict[str, Any] | None = None) -> str:
    # "label:port", then pattern label, then service name, else the bare port
    name = label or resolveLabelForPort(port, portLabels) or portName(port)
    return f"{name}:{port}" if name else str(port)


def hasNestedGroups(body: dict[str, Any]) -> bool:
    for value in body.values():
        if not isinstance(value, dict):
            continue
        if any(parsePortKey(k) is not None for k in value if not isReservedKey(k)):
            return True
    return False


def flattenGroup(
    groupName: str,
    body: Any,
    portLabels: dict[str, Any] | None,
    out: list[MonitorTarget],
) -> None:
    if not isinstance(body, dict):
        return

    if groupName == Reserved.NOTITLE.value and hasNestedGroups(body):
        for subName, subBody in body.items():
            if isReservedKey(subName):
                continue
            flattenGroup(subName, subBody, portLabels, out)
        return

    settings = GroupSettings.fromConfigBlock(body.get(Reserved.CONFIG.value))

    for key, label in body.items():
        if isReservedKey(key):
            continue
        port = parsePortKey(key)
        if port is None:
            continue

        inline = label if isinstance(label, str) else ""
        out.append(
            MonitorTarget(
                host=LOCAL_HOST,
                port=port,
                label=inline or resolveLabelForPort(port, portLabels),
                group=groupName,
                groupSettings=settings,
            )
        )


def flatten(canonical: dict[str, Any], portLabels: dict[str, Any] | None = None) -> list[MonitorTarget]:
    out: list[MonitorTarget] = []
    if not isinstance(canonical, dict):
        return out

    for groupName, body in canonical.items():
        if isPassThroughKey(groupName):
            continue
        flattenGroup(safeStr(groupName), body, portLabels, out)
    return out
