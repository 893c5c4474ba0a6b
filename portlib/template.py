"""
Static display template built once per configuration change.

Every monitored port becomes a "__PORT_<n>" placeholder. Compact groups are
bracketed behind their shared leading digits ("300[__PORT_3000|__PORT_3001]")
so the renderer only has to print each port's differing suffix.
"""
from __future__ import annotations

from .nodeKinds import Reserved
from .portApi import GroupSettings, MonitorTarget

PLACEHOLDER_PREFIX = "__PORT_"
MIN_PREFIX_LEN = 2


def placeholder(port: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{port}"


def commonPortPrefix(ports: list[int]) -> str:
    if not ports:
        return ""
    lo, hi = str(min(ports)), str(max(ports))
    n = 0
    for a, b in zip(lo, hi):
        if a != b:
            break
        n += 1
    return lo[:n]


def createCompactTemplate(ports: list[int], separator: str = "|") -> str:
    if not ports:
        return ""

    body = separator.join(placeholder(p) for p in ports)
    prefix = commonPortPrefix(ports)
    if len(prefix) >= MIN_PREFIX_LEN:
        return f"{prefix}[{body}]"
    return f"[{body}]"


def showsTitle(groupName: str, settings: GroupSettings) -> bool:
    if not groupName or not settings.showTitle:
        return False
    return not groupName.startswith(Reserved.NOTITLE.value)


def buildGroupTemplate(groupName: str, targets: list[MonitorTarget]) -> str:
    settings = targets[0].groupSettings
    ports = [t.port for t in targets]

    if settings.compact:
        body = createCompactTemplate(ports, settings.separator)
    else:
        body = " ".join(placeholder(p) for p in ports)

    if showsTitle(groupName, settings):
        return f"{groupName}: {body}"
    return body


def groupTargets(targets: list[MonitorTarget]) -> dict[str, dict[str, list[MonitorTarget]]]:
    # host -> group -> targets, first-seen order
    grouped: dict[str, dict[str, list[MonitorTarget]]] = {}
    for target in targets:
        grouped.setdefault(target.host, {}).setdefault(target.group, []).append(target)
    return grouped


def buildTemplate(targets: list[MonitorTarget]) -> str:
    hostParts: list[str] = []
    for groups in groupTargets(targets).values():
        groupParts = [buildGroupTemplate(name, members) for name, members in groups.items()]
        hostParts.append(" ".join(groupParts))
    return " ".join(hostParts)
