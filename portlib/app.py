from __future__ import annotations

import time
from typing import Any, Callable, Protocol

import tomli

from .core import *
from .ui import *

CheckPortsFn = Callable[[list[MonitorTarget]], list[ProbeResult]]


class SettingsSource(Protocol):
    name: str

    def hasChanged(self) -> bool: ...

    def load(self) -> dict[str, Any]: ...


class MonitorApp:
    def __init__(
        self,
        settingsSource: SettingsSource,
        checkPorts: CheckPortsFn,
        *,
        refreshRateSec: float = 0.25,
        console: Console | None = None,
    ) -> None:
        self.settingsSource = settingsSource
        self.checkPorts = checkPorts
        self.core = MonitorCore()
        self.ui = RichUi(self.core, refreshRateSec=refreshRateSec, console=console)
        self.nextTs = 0.0

    def reload(self) -> list[str]:
        sourceName = getattr(self.settingsSource, "name", "settings")
        try:
            rawSettings = self.settingsSource.load()
        except (OSError, RuntimeError, tomli.TOMLDecodeError) as exc:
            # previous state keeps running
            self.core.writeLog(f"{sourceName}: LOAD EXC {type(exc).__name__}: {exc}")
            self.core.statusMsg = "settings load failed"
            return [str(exc)]

        errors = self.core.applySettings(rawSettings)
        self.nextTs = 0.0
        if not errors:
            self.core.writeLog(f"{sourceName}: settings applied")
        return errors

    def probeOnce(self) -> RenderResult | None:
        st = self.core.state
        if st is None:
            return None

        try:
            results = list(self.checkPorts(list(st.targets)) or [])
        except Exception as exc:
            self.core.writeLog(f"PROBE LOOP EXC {type(exc).__name__}: {exc}")
            return None

        return self.core.onProbeResults(results)

    def tick(self) -> None:
        if self.settingsSource.hasChanged():
            self.reload()

        st = self.core.state
        if st is None:
            return

        nowTs = time.time()
        if nowTs >= self.nextTs:
            self.nextTs = nowTs + max(1.0, st.settings.intervalSec)
            self.probeOnce()

    def run(self) -> None:
        self.reload()
        try:
            self.ui.runLoop(self.tick)
        except KeyboardInterrupt:
            pass
