"""
Node classification for raw host configurations.

Every key or array item of a raw configuration is classified once into a
NodeKind; the normalizer stages dispatch on that instead of re-probing types.
Reserved sentinels keep their literal external spelling ("__NOTITLE",
"__CONFIG", "__port", "__originalName").
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .utils import isDigits, isInteger
from .wellKnown import servicePort

RESERVED_PREFIX = "__"

_rangeRe = re.compile(r"^([0-9]+)-([0-9]+)$")


class Reserved(str, Enum):
    NOTITLE = "__NOTITLE"
    CONFIG = "__CONFIG"
    PORT = "__port"
    ORIGINAL_NAME = "__originalName"


class NodeKind(Enum):
    PORT_NUMBER = "portNumber"
    PORT_RANGE = "portRange"
    WELL_KNOWN_NAME = "wellKnownName"
    GROUP_MAP = "groupMap"
    CONFIG_BLOCK = "configBlock"
    RESERVED = "reserved"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class WellKnownPort:
    port: int
    originalName: str

    def toDict(self) -> dict[str, Any]:
        return {Reserved.PORT.value: self.port, Reserved.ORIGINAL_NAME.value: self.originalName}

    @staticmethod
    def fromNode(node: Any) -> WellKnownPort | None:
        if isinstance(node, WellKnownPort):
            return node
        if not isinstance(node, dict):
            return None
        port = node.get(Reserved.PORT.value)
        name = node.get(Reserved.ORIGINAL_NAME.value)
        if isInteger(port) and port and isinstance(name, str) and name:
            return WellKnownPort(port=port, originalName=name)
        return None


def isReservedKey(key: Any) -> bool:
    return isinstance(key, str) and key.startswith(RESERVED_PREFIX)


def isPassThroughKey(key: Any) -> bool:
    # "__NOTITLE" is a group like any other; every other "__" key is opaque
    return isReservedKey(key) and key != Reserved.NOTITLE.value


def parseRange(token: Any) -> tuple[int, int] | None:
    if not isinstance(token, str):
        return None
    m = _rangeRe.match(token)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def classifyKey(key: Any) -> NodeKind:
    if not isinstance(key, str):
        return NodeKind.PORT_NUMBER if isInteger(key) else NodeKind.UNKNOWN
    if key == Reserved.CONFIG.value:
        return NodeKind.CONFIG_BLOCK
    if key == Reserved.NOTITLE.value:
        return NodeKind.GROUP_MAP
    if isReservedKey(key):
        return NodeKind.RESERVED
    if isDigits(key):
        return NodeKind.PORT_NUMBER
    if parseRange(key) is not None:
        return NodeKind.PORT_RANGE
    if servicePort(key) is not None:
        return NodeKind.WELL_KNOWN_NAME
    return NodeKind.GROUP_MAP


def classifyItem(item: Any) -> NodeKind:
    if WellKnownPort.fromNode(item) is not None:
        return NodeKind.WELL_KNOWN_NAME
    if isInteger(item):
        return NodeKind.PORT_NUMBER
    if isinstance(item, str):
        if isDigits(item):
            return NodeKind.PORT_NUMBER
        if parseRange(item) is not None:
            return NodeKind.PORT_RANGE
        if servicePort(item) is not None:
            return NodeKind.WELL_KNOWN_NAME
        return NodeKind.UNKNOWN
    if isinstance(item, dict):
        return NodeKind.GROUP_MAP
    return NodeKind.UNKNOWN
