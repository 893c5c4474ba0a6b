"""
Advisory checks over raw and canonical host configurations.

Checks never raise and never modify their input; each detected mistake is
returned as one human-readable string. An empty list means the configuration
looks sane. Callers decide whether a non-empty result blocks monitoring.
"""
from __future__ import annotations

from typing import Any

from .nodeKinds import Reserved, isReservedKey, parseRange
from .utils import isDigits, isInteger, isValidPort, looksLikePort, parseInt, parsePortKey, safeStr

MIN_INTERVAL_MS = 1000

# flat top-level port maps are checked as one implicit group under this name
IMPLICIT_HOST = "localhost"

MSG_NO_PORTS = "No ports configured. Add ports to monitor in settings."
MSG_NOT_OBJECT = "hosts must be an object"
MSG_EMPTY_HOST = 'Empty host name detected. Use "localhost" instead of ""'
MSG_INTERVAL = f"intervalMs must be at least {MIN_INTERVAL_MS}ms"
MSG_PROCESSED_INVALID = "Processed hosts configuration is invalid"


def isScalar(val: Any) -> bool:
    return isinstance(val, (str, int, float)) and not isinstance(val, bool)


def valueLooksLikePort(val: Any) -> bool:
    # labels such as "2fa" are not ports; range strings get their own warning
    if isInteger(val):
        return isValidPort(val)
    if isinstance(val, str) and isDigits(val.strip()):
        return looksLikePort(val)
    return False


def checkGroupEntries(hostKey: str, body: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    entries = [(k, v) for k, v in body.items() if not isReservedKey(k)]
    hasPortAsKey = False
    hasPortAsValue = False
    hasInvalidStructure = False
    reversedEntry: tuple[str, Any] | None = None

    for key, value in entries:
        if looksLikePort(key):
            hasPortAsKey = True

        if valueLooksLikePort(value):
            hasPortAsValue = True
            if reversedEntry is None:
                reversedEntry = (key, value)

        if not isinstance(value, (dict, list)) and not isScalar(value):
            hasInvalidStructure = True

    if hasPortAsValue and not hasPortAsKey and reversedEntry is not None:
        key, value = reversedEntry
        errors.append(
            f'Host "{hostKey}": Port numbers should be keys, not values.\n'
            f'Current: {{"{key}": {safeStr(value)}}}\n'
            f'Correct: {{"{safeStr(value)}": "{key}"}}'
        )

    if hasPortAsKey and hasPortAsValue:
        errors.append(
            f'Host "{hostKey}": Mixed configuration detected. '
            'Use consistent format: {"3000": "label", "3001": "label"}'
        )

    if hasInvalidStructure:
        errors.append(
            f'Host "{hostKey}": Invalid port configuration. '
            'Use {"port": "label"} or {"group": [3000, 3001]} format'
        )

    for key, value in entries:
        if isinstance(value, str) and parseRange(value.strip()) is not None:
            rangeStr = value.strip()
            errors.append(
                f'Host "{hostKey}": Port range "{rangeStr}" detected as a value. '
                f'Use array format: {{"{key}": ["{rangeStr}"]}} or {{"{rangeStr}": "{key}"}}'
            )

    return errors


def validateStructure(hosts: Any) -> list[str]:
    if hosts is None:
        return [MSG_NO_PORTS]
    if isinstance(hosts, list):
        return [] if hosts else [MSG_NO_PORTS]
    if not isinstance(hosts, dict):
        return [MSG_NOT_OBJECT]
    if not hosts:
        return [MSG_NO_PORTS]

    errors: list[str] = []
    implicitGroup: dict[str, Any] = {}

    for hostKey, hostValue in hosts.items():
        hostKey = safeStr(hostKey)
        if isReservedKey(hostKey) and hostKey != Reserved.NOTITLE.value:
            continue

        if isScalar(hostValue):
            implicitGroup[hostKey] = hostValue
            continue

        if isinstance(hostValue, list):
            pass
        elif isinstance(hostValue, dict):
            errors.extend(checkGroupEntries(hostKey, hostValue))
        else:
            errors.append(f'Host "{hostKey}" must have port configuration')
            continue

        if hostKey == "":
            errors.append(MSG_EMPTY_HOST)

        if isDigits(hostKey):
            errors.append(
                f'Host "{hostKey}": Host name looks like a port number. '
                'Use "localhost" or proper hostname'
            )

    if implicitGroup:
        errors.extend(checkGroupEntries(IMPLICIT_HOST, implicitGroup))

    return errors


validateHostsStructure = validateStructure


def checkInterval(intervalMs: Any) -> list[str]:
    if intervalMs is None:
        return []
    if parseInt(intervalMs, MIN_INTERVAL_MS) < MIN_INTERVAL_MS:
        return [MSG_INTERVAL]
    return []


def validateRaw(settings: Any) -> list[str]:
    if not isinstance(settings, dict):
        return [MSG_NOT_OBJECT]

    errors = checkInterval(settings.get("intervalMs"))

    hosts = settings.get("hosts")
    if isinstance(hosts, (dict, list)):
        errors.extend(validateStructure(hosts))

    return errors


def checkCanonicalGroup(groupName: str, body: Any, allowNested: bool) -> list[str]:
    if not isinstance(body, dict):
        return [f'Group "{groupName}" must be a port map']

    errors: list[str] = []
    for key, value in body.items():
        if isReservedKey(key):
            continue
        if allowNested and isinstance(value, dict):
            errors.extend(checkCanonicalGroup(key, value, False))
            continue
        if parsePortKey(key) is None:
            errors.append(f'Group "{groupName}": "{key}" is not a valid port')
        elif not isinstance(value, str):
            errors.append(f'Group "{groupName}": label for port {key} must be a string')
    return errors


def validateProcessed(canonical: Any, *, intervalMs: Any = None) -> list[str]:
    errors = checkInterval(intervalMs)

    if not isinstance(canonical, dict):
        errors.append(MSG_PROCESSED_INVALID)
        return errors

    for groupName, body in canonical.items():
        if isReservedKey(groupName) and groupName != Reserved.NOTITLE.value:
            continue
        errors.extend(checkCanonicalGroup(groupName, body, groupName == Reserved.NOTITLE.value))

    return errors
