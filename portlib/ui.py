from __future__ import annotations

import textwrap
import time
from typing import Callable

from rich import box
from rich.color import Color, ColorParseError
from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core import *
from .flattener import describePort
from .renderer import THEME_COLORS

# theme tokens back to terminal colors
THEME_TO_RICH: dict[str, str] = {token: name for name, token in THEME_COLORS.items()}


def backgroundStyle(color: str | None) -> str:
    if not color:
        return ""
    name = THEME_TO_RICH.get(color, color).strip()
    try:
        Color.parse(name)
    except ColorParseError:
        return ""
    return f"bold on {name}"


class RichUi:
    def __init__(
        self,
        core: MonitorCore,
        *,
        refreshRateSec: float = 0.25,
        console: Console | None = None,
    ) -> None:
        self.core = core
        self.refreshRateSec = float(refreshRateSec)
        self.console = console or Console()

        self.styleHeader = "bold black on magenta"
        self.styleTableHeader = "bold magenta"
        self.styleLog = "dim"
        self.styleError = "bold red"

        self.statusStyle = {
            STATUS_IN_USE: "green",
            STATUS_FREE: "dim",
        }

    def wrapLine(self, text: str, width: int) -> list[str]:
        clean = " ".join(str(text).replace("\r", "").splitlines()).strip()
        if not clean:
            return [""]
        return textwrap.wrap(clean, width=width, break_long_words=True, break_on_hyphens=False) or [""]

    def renderHeader(self) -> Text:
        width = self.console.size.width
        nowStr = time.strftime("%H:%M:%S")

        left = f"  PORTWATCH  {self.core.statusMsg}"
        right = f"{nowStr}  "

        fill = max(1, width - len(left) - len(right))
        return Text(left + (" " * fill) + right, style=self.styleHeader)

    def renderStatus(self) -> Panel:
        st = self.core.state
        if st is None:
            lines = self.core.configErrors or ["waiting for configuration"]
            return Panel(Text("\n".join(lines), style=self.styleError), title="configuration", box=box.SQUARE)

        rendered = self.core.lastRender
        if rendered is None:
            return Panel(Text("..."), box=box.SQUARE)

        justify = "left" if st.settings.statusBarPosition == "left" else "right"
        statusText = Text(rendered.text, style=backgroundStyle(rendered.backgroundColor), justify=justify)
        return Panel(statusText, box=box.SQUARE)

    def renderTable(self) -> Table:
        tableObj = Table(
            expand=True,
            show_header=True,
            header_style=self.styleTableHeader,
            show_lines=False,
            pad_edge=False,
            box=box.SQUARE,
        )

        tableObj.add_column("GROUP", ratio=2, no_wrap=True, overflow="ellipsis")
        tableObj.add_column("PORT", ratio=2, no_wrap=True)
        tableObj.add_column("STATUS", ratio=1, no_wrap=True)
        tableObj.add_column("PROCESS", ratio=2, overflow="ellipsis")

        st = self.core.state
        if st is None or not st.portObjects:
            tableObj.add_row("-", "-", "-", "-")
            return tableObj

        resultsByPort = {r.port: r for r in self.core.lastResults}

        for obj in st.portObjects.values():
            result = resultsByPort.get(obj.port)
            processStr = "-"
            if result is not None and result.isOpen and result.processName:
                processStr = result.processName if not result.pid else f"{result.processName} ({result.pid})"

            statusStr = "IN USE" if obj.inUse else "FREE"
            tableObj.add_row(
                obj.group if not obj.group.startswith("__") else "-",
                describePort(obj.port, obj.label),
                Text(statusStr, style=self.statusStyle.get(obj.statusIcon, "white")),
                processStr,
            )

        return tableObj

    def renderCmdLog(self) -> Panel:
        windowHeight = max(1, self.console.size.height - 6)
        logWrapWidth = max(10, (self.console.size.width * 2 // 5) - 4)

        displayLines: list[str] = []
        for ln in self.core.getLogLines():
            displayLines.extend(self.wrapLine(ln, logWrapWidth))

        visible = displayLines[-windowHeight:]
        return Panel(Text("\n".join(visible)), expand=True, box=box.SQUARE, style=self.styleLog)

    def buildLayout(self) -> Layout:
        layoutObj = Layout(name="root")
        content = Layout(name="content")

        content.split_row(
            Layout(Panel(self.renderTable(), expand=True, box=box.SQUARE), name="table", ratio=3),
            Layout(self.renderCmdLog(), name="cmdLog", ratio=2),
        )

        layoutObj.split_column(
            Layout(self.renderHeader(), name="header", size=1),
            Layout(self.renderStatus(), name="status", size=3),
            content,
        )
        return layoutObj

    def runLoop(self, tickFn: Callable[[], None]) -> None:
        with Live(console=self.console, auto_refresh=False, screen=True) as live:
            while True:
                tickFn()
                live.update(self.buildLayout(), refresh=True)
                time.sleep(self.refreshRateSec)
