from __future__ import annotations

import re

_wildcardRe = re.compile(r"[*?]")


def hasWildcard(pattern: str) -> bool:
    return bool(_wildcardRe.search(pattern))


def globToRegex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


def getSpecificity(pattern: str) -> int:
    # lower is more specific
    score = len(_wildcardRe.findall(pattern)) * 10
    if pattern == "*":
        score += 1000
    score += 10 - len(pattern)
    return score


def match(pattern: str, port: int) -> bool:
    portStr = str(port)
    if pattern == portStr:
        return True
    return bool(globToRegex(pattern).match(portStr))


def findBestMatch(patterns: list[str], port: int) -> str | None:
    portStr = str(port)
    if portStr in patterns:
        return portStr

    candidates = sorted((p for p in patterns if p != portStr), key=getSpecificity)
    for pattern in candidates:
        if match(pattern, port):
            return pattern
    return None
