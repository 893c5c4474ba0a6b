"""
Static service-name <-> port-number lookup.

WELL_KNOWN_PORTS is the set the config normalizer substitutes (exact, case
sensitive). The port range expander also accepts EXTRA_SERVICE_PORTS and
matches names case-insensitively.
"""
from __future__ import annotations

WELL_KNOWN_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
    "ssh": 22,
    "postgresql": 5432,
    "mysql": 3306,
    "redis": 6379,
    "mongodb": 27017,
    "elasticsearch": 9200,
    "ftp": 21,
    "smtp": 25,
    "pop3": 110,
    "imap": 143,
    "dns": 53,
    "telnet": 23,
    "ldap": 389,
    "ldaps": 636,
    "smtps": 465,
    "imaps": 993,
    "pop3s": 995,
}

EXTRA_SERVICE_PORTS: dict[str, int] = {
    "dhcp": 67,
    "tftp": 69,
    "snmp": 161,
}


def servicePort(name: object) -> int | None:
    if not isinstance(name, str):
        return None
    return WELL_KNOWN_PORTS.get(name)


def lookupServicePort(name: object) -> int | None:
    if not isinstance(name, str):
        return None
    key = name.strip().lower()
    port = WELL_KNOWN_PORTS.get(key)
    if port is None:
        port = EXTRA_SERVICE_PORTS.get(key)
    return port


def portName(port: int) -> str | None:
    for name, portNum in WELL_KNOWN_PORTS.items():
        if portNum == port:
            return name
    for name, portNum in EXTRA_SERVICE_PORTS.items():
        if portNum == port:
            return name
    return None
