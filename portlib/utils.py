from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import tomli

MIN_PORT = 1
MAX_PORT = 65535

_digitsRe = re.compile(r"^[0-9]+$")
_leadingIntRe = re.compile(r"^\s*([+-]?[0-9]+)")


def safeStr(val: Any) -> str:
    try:
        return str(val)
    except Exception:
        return ""


def parseStr(val: Any) -> str | None:
    if val is None:
        return None
    s = safeStr(val).strip()
    return s if s else None


def parseStrLower(val: Any) -> str | None:
    s = parseStr(val)
    return s.lower() if s else None


def parseInt(val: Any, defaultVal: int) -> int:
    if val is None or isinstance(val, bool):
        return int(defaultVal)
    try:
        s = safeStr(val).strip()
        if not s:
            return int(defaultVal)
        return int(float(s)) if any(ch in s for ch in ".eE") else int(s)
    except Exception:
        return int(defaultVal)


def parseBool(val: Any, defaultVal: bool) -> bool:
    if isinstance(val, bool):
        return bool(val)
    if isinstance(val, (int, float)):
        return bool(val)

    s = parseStrLower(val)
    if not s:
        return bool(defaultVal)

    if s in ("1", "true", "yes", "y", "on", "enabled"):
        return True
    if s in ("0", "false", "no", "n", "off", "disabled"):
        return False
    return bool(defaultVal)


def isInteger(val: Any) -> bool:
    return isinstance(val, int) and not isinstance(val, bool)


def isDigits(val: Any) -> bool:
    return isinstance(val, str) and bool(_digitsRe.match(val))


def isValidPort(port: Any) -> bool:
    return isInteger(port) and MIN_PORT <= port <= MAX_PORT


def parsePortKey(key: Any) -> int | None:
    # canonical keys: plain decimal digits only
    if isInteger(key):
        return key if isValidPort(key) else None
    if not isDigits(key):
        return None
    port = int(key)
    return port if isValidPort(port) else None


def leadingInt(val: Any) -> int | None:
    # lenient "does this look like a number" probe used for diagnostics
    if isInteger(val):
        return val
    if isinstance(val, float):
        return int(val) if val == val and abs(val) != float("inf") else None
    if not isinstance(val, str):
        return None
    m = _leadingIntRe.match(val)
    return int(m.group(1)) if m else None


def looksLikePort(val: Any) -> bool:
    num = leadingInt(val)
    return num is not None and MIN_PORT <= num <= MAX_PORT


def loadToml(pathObj: Path) -> dict[str, Any]:
    dataObj = tomli.loads(pathObj.read_text(encoding="utf-8"))
    if isinstance(dataObj, dict):
        return dataObj
    raise RuntimeError(f"{pathObj.name}: invalid toml root")


def loadJson(pathObj: Path) -> dict[str, Any]:
    try:
        dataObj = json.loads(pathObj.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"{pathObj.name}: invalid json: {exc}") from exc
    if isinstance(dataObj, dict):
        return dataObj
    raise RuntimeError(f"{pathObj.name}: invalid json root")


def deepMerge(baseObj: dict[str, Any], overrideObj: dict[str, Any]) -> dict[str, Any]:
    outObj = dict(baseObj)
    for k, v in overrideObj.items():
        a = outObj.get(k)
        outObj[k] = deepMerge(dict(a), v) if isinstance(a, dict) and isinstance(v, dict) else v
    return outObj
