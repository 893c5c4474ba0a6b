from __future__ import annotations

from typing import Any, Callable

from .utils import MAX_PORT, MIN_PORT, isDigits, isInteger, isValidPort
from .wellKnown import lookupServicePort

WriteLogFn = Callable[[str], None]

DEFAULT_MAX_PORTS = 100


def expandRange(start: int, end: int) -> list[int]:
    # clipped to the valid port window; empty when start > end
    lo = max(MIN_PORT, int(start))
    hi = min(MAX_PORT, int(end))
    if lo > hi:
        return []
    return list(range(lo, hi + 1))


def parseRangeSpec(spec: str) -> list[int]:
    parts = spec.split("-")
    if len(parts) != 2:
        return []

    startStr, endStr = parts[0].strip(), parts[1].strip()
    if not isDigits(startStr) or not isDigits(endStr):
        return []

    start, end = int(startStr), int(endStr)
    if start > end or not isValidPort(start) or not isValidPort(end):
        return []
    return list(range(start, end + 1))


def resolve(portSpec: Any) -> list[int]:
    if isinstance(portSpec, bool):
        return []
    if isInteger(portSpec):
        return [portSpec] if isValidPort(portSpec) else []
    if isinstance(portSpec, float):
        if portSpec.is_integer() and isValidPort(int(portSpec)):
            return [int(portSpec)]
        return []
    if not isinstance(portSpec, str):
        return []

    spec = portSpec.strip()

    servicePortNum = lookupServicePort(spec)
    if servicePortNum is not None:
        return [servicePortNum]

    if "-" in spec:
        return parseRangeSpec(spec)

    if isDigits(spec):
        port = int(spec)
        return [port] if isValidPort(port) else []

    return []


def resolveMultiple(
    portSpecs: list[Any],
    maxPorts: int = DEFAULT_MAX_PORTS,
    *,
    writeLog: WriteLogFn | None = None,
) -> list[int]:
    allPorts: list[int] = []
    seenPorts: set[int] = set()

    for spec in portSpecs:
        for port in resolve(spec):
            if port in seenPorts:
                continue
            seenPorts.add(port)
            allPorts.append(port)

            if len(allPorts) >= maxPorts:
                if writeLog is not None:
                    writeLog(f"port limit reached ({maxPorts}); some ports ignored")
                return sorted(allPorts)

    return sorted(allPorts)
