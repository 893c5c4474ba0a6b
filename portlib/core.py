from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from .config import MonitorSettings
from .configLoader import parseSettings, unwrapSettings
from .flattener import flatten
from .normalizer import normalize
from .portApi import *
from .renderer import PortObjects, createPortObjects, render
from .template import buildTemplate
from .validator import MSG_NO_PORTS, validateProcessed, validateRaw


@dataclass(frozen=True)
class MonitorState:
    # rebuilt in full on every settings change, never patched
    settings: MonitorSettings
    canonical: dict[str, Any]
    targets: tuple[MonitorTarget, ...]
    template: str
    portObjects: PortObjects = field(compare=False)
    displayConfig: DisplayConfig
    diagnostics: tuple[str, ...] = ()


def buildMonitorState(settings: MonitorSettings) -> MonitorState:
    canonical = normalize(settings.hosts)
    targets = flatten(canonical, settings.portLabels)

    return MonitorState(
        settings=settings,
        canonical=canonical,
        targets=tuple(targets),
        template=buildTemplate(targets),
        portObjects=createPortObjects(
            targets,
            portEmojis=settings.portEmojis,
            globalEmojiMode=settings.emojiMode,
            portColors=settings.portColors,
        ),
        displayConfig=settings.displayConfig(),
        diagnostics=tuple(validateProcessed(canonical, intervalMs=settings.intervalMs)),
    )


class MonitorCore:
    def __init__(self) -> None:
        self.state: MonitorState | None = None
        self.lastRender: RenderResult | None = None
        self.lastResults: list[ProbeResult] = []
        self.configErrors: list[str] = []
        self.commandLog: list[str] = []
        self.maxLogLines: int = 512
        self.statusMsg: str = "no configuration"
        self.logLock = threading.Lock()

    def writeLog(self, msg: str) -> None:
        tsStr = time.strftime("%H:%M:%S")
        line = f"[{tsStr}] {msg}"

        with self.logLock:
            self.commandLog.append(line)
            if len(self.commandLog) > self.maxLogLines:
                self.commandLog = self.commandLog[-self.maxLogLines :]

    def getLogLines(self) -> list[str]:
        with self.logLock:
            return list(self.commandLog)

    @property
    def targets(self) -> list[MonitorTarget]:
        return list(self.state.targets) if self.state else []

    def blockMonitoring(self, errors: list[str]) -> list[str]:
        self.state = None
        self.lastRender = None
        self.configErrors = list(errors)
        self.statusMsg = "configuration issues"
        for err in errors:
            self.writeLog(f"config: {err}")
        return list(errors)

    def applySettings(self, rawSettings: dict[str, Any]) -> list[str]:
        """
        Validate and install a new settings snapshot.

        Returns the blocking diagnostics; on any the previous state is dropped
        and no monitoring happens until a clean snapshot arrives.
        """
        raw = unwrapSettings(rawSettings) if isinstance(rawSettings, dict) else {}
        errors = validateRaw(raw)
        if errors:
            return self.blockMonitoring(errors)

        newState = buildMonitorState(parseSettings(raw))
        for warn in newState.diagnostics:
            self.writeLog(f"config warn: {warn}")

        if not newState.targets:
            return self.blockMonitoring([MSG_NO_PORTS])

        self.state = newState
        self.lastRender = None
        self.lastResults = []
        self.configErrors = []
        self.statusMsg = f"monitoring {len(newState.targets)} ports"
        self.writeLog(f"config: {len(newState.targets)} ports, template {newState.template!r}")
        return []

    def onProbeResults(self, results: list[ProbeResult]) -> RenderResult | None:
        st = self.state
        if st is None:
            self.writeLog("display configuration not initialized")
            return None

        self.lastResults = list(results)
        self.lastRender = render(st.template, st.portObjects, self.lastResults, st.displayConfig)
        return self.lastRender
