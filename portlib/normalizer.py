"""
Five-stage normalization of raw host configurations.

    raw -> replaceWellKnownPorts -> expandPortRanges -> addDefaultGroupWrapper
        -> convertArraysToObjects -> normalizeStructure -> canonical

Every stage is a pure function over plain dict/list trees and never raises;
leaves that cannot be interpreted are dropped. Reserved "__" keys other than the
"__NOTITLE" group are passed through untouched by every stage.
"""
from __future__ import annotations

import copy
from typing import Any, Callable

from .nodeKinds import (
    NodeKind,
    Reserved,
    WellKnownPort,
    classifyItem,
    classifyKey,
    isPassThroughKey,
    isReservedKey,
    parseRange,
)
from .portRange import expandRange
from .utils import isValidPort, parsePortKey, safeStr
from .wellKnown import servicePort

CanonicalHosts = dict[str, Any]
StageFn = Callable[[Any], Any]

LOCALHOST = "localhost"


def keyToStr(key: Any) -> str:
    return key if isinstance(key, str) else safeStr(key)


def replaceWellKnownPorts(config: Any) -> Any:
    if isinstance(config, list):
        outList: list[Any] = []
        for item in config:
            port = servicePort(item)
            if port is not None:
                outList.append(WellKnownPort(port=port, originalName=item))
            else:
                outList.append(replaceWellKnownPorts(item))
        return outList

    if isinstance(config, dict):
        outObj: dict[str, Any] = {}
        for key, value in config.items():
            keyStr = keyToStr(key)
            if isPassThroughKey(keyStr):
                outObj[keyStr] = value
                continue
            if classifyKey(keyStr) is NodeKind.WELL_KNOWN_NAME:
                # bare key replacement has no slot for the original name
                keyStr = str(servicePort(keyStr))
            outObj[keyStr] = replaceWellKnownPorts(value)
        return outObj

    return config


def expandPortRanges(config: Any) -> Any:
    if isinstance(config, list):
        outList: list[Any] = []
        for item in config:
            kind = classifyItem(item)
            if kind is NodeKind.PORT_RANGE:
                start, end = parseRange(item)
                outList.extend(expandRange(start, end))
            elif kind is NodeKind.WELL_KNOWN_NAME and not isinstance(item, str):
                outList.append(item)
            else:
                outList.append(expandPortRanges(item))
        return outList

    if isinstance(config, dict):
        outObj: dict[str, Any] = {}
        for key, value in config.items():
            keyStr = keyToStr(key)
            kind = classifyKey(keyStr)
            if kind in (NodeKind.CONFIG_BLOCK, NodeKind.RESERVED):
                outObj[keyStr] = value
            elif kind is NodeKind.PORT_RANGE:
                start, end = parseRange(keyStr)
                expandedValue = expandPortRanges(value)
                for port in expandRange(start, end):
                    outObj[str(port)] = copy.deepcopy(expandedValue)
            else:
                outObj[keyStr] = expandPortRanges(value)
        return outObj

    return config


def renameEmptyHost(config: dict[str, Any]) -> dict[str, Any]:
    if "" not in config:
        return config
    outObj: dict[str, Any] = {}
    for key, value in config.items():
        outObj[LOCALHOST if key == "" else key] = value
    return outObj


def isDirectPortMapping(config: dict[str, Any]) -> bool:
    portKeys = [k for k in config if not isReservedKey(k)]
    return bool(portKeys) and all(parsePortKey(k) is not None for k in portKeys)


def addDefaultGroupWrapper(config: Any) -> Any:
    if isinstance(config, list):
        return {Reserved.NOTITLE.value: config} if config else {}
    if not isinstance(config, dict) or not config:
        return {}

    config = renameEmptyHost(config)

    if isDirectPortMapping(config):
        return {Reserved.NOTITLE.value: config}

    # mixed array/object top levels are wrapped as a whole
    if any(isinstance(v, list) for v in config.values()):
        return {Reserved.NOTITLE.value: config}

    return config


def portListToObject(items: list[Any]) -> dict[str, str]:
    portObj: dict[str, str] = {}
    for item in items:
        placeholder = WellKnownPort.fromNode(item)
        if placeholder is not None:
            port, label = placeholder.port, placeholder.originalName
        elif classifyItem(item) is NodeKind.PORT_NUMBER:
            port, label = int(item), ""
        else:
            continue

        if not isValidPort(port):
            continue

        portKey = str(port)
        if label or portKey not in portObj:
            portObj[portKey] = label
    return portObj


def convertArraysToObjects(config: Any) -> Any:
    if isinstance(config, list):
        return portListToObject(config)

    if isinstance(config, dict):
        outObj: dict[str, Any] = {}
        for key, value in config.items():
            if isPassThroughKey(key):
                outObj[key] = value
            elif isinstance(value, list):
                outObj[key] = portListToObject(value)
            else:
                outObj[key] = convertArraysToObjects(value)
        return outObj

    return config


def normalizeStructure(config: Any) -> Any:
    if not isinstance(config, dict):
        return config

    outObj: dict[str, Any] = {}
    for key, value in config.items():
        if not isPassThroughKey(key) and isinstance(value, dict):
            outObj[key] = normalizeStructure(value)
        else:
            outObj[key] = value
    return outObj


STAGES: tuple[tuple[str, StageFn], ...] = (
    ("wellKnown", replaceWellKnownPorts),
    ("ranges", expandPortRanges),
    ("groups", addDefaultGroupWrapper),
    ("arrays", convertArraysToObjects),
    ("structure", normalizeStructure),
)


def iterStages(raw: Any) -> list[tuple[str, Any]]:
    processed = copy.deepcopy(raw)
    out: list[tuple[str, Any]] = []
    for stageName, stageFn in STAGES:
        processed = stageFn(processed)
        out.append((stageName, processed))
    return out


def normalize(raw: Any) -> CanonicalHosts:
    stages = iterStages(raw)
    result = stages[-1][1]
    return result if isinstance(result, dict) else {}
