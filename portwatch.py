from __future__ import annotations

import argparse
from typing import Any

import tomli
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portlib.app import MonitorApp
from portlib.configLoader import SettingsFile, loadSettingsFile, parseSettings
from portlib.core import MonitorCore
from portlib.normalizer import iterStages
from portlib.portApi import MonitorTarget, ProbeResult
from portlib.portRange import DEFAULT_MAX_PORTS, resolveMultiple

STAGE_CHOICES = ("stages", "normalized", "targets", "template", "status")

console = Console()


def jsonDefault(obj: Any) -> Any:
    toDict = getattr(obj, "toDict", None)
    if callable(toDict):
        return toDict()
    return str(obj)


def loadOrReport(path: str) -> dict[str, Any] | None:
    try:
        return loadSettingsFile(path)
    except (OSError, RuntimeError, tomli.TOMLDecodeError) as exc:
        console.print(f"[bold red]{escape(path)}: {type(exc).__name__}: {escape(str(exc))}[/]")
        return None


def staticProber(openTokens: list[str]) -> Any:
    openPorts = set(resolveMultiple(openTokens, DEFAULT_MAX_PORTS, writeLog=lambda msg: console.print(f"[yellow]{msg}[/]")))

    def checkPorts(targets: list[MonitorTarget]) -> list[ProbeResult]:
        return [ProbeResult.forTarget(t, t.port in openPorts) for t in targets]

    return checkPorts


def printTargets(targets: list[MonitorTarget]) -> None:
    tableObj = Table(show_header=True, header_style="bold magenta")
    tableObj.add_column("HOST")
    tableObj.add_column("GROUP")
    tableObj.add_column("PORT", justify="right")
    tableObj.add_column("LABEL")
    tableObj.add_column("SETTINGS")

    for t in targets:
        tableObj.add_row(t.host, t.group, str(t.port), t.label or "-", str(t.groupSettings.toConfigBlock()))
    console.print(tableObj)


def cmdCheck(args: argparse.Namespace) -> int:
    rawSettings = loadOrReport(args.settings)
    if rawSettings is None:
        return 2

    core = MonitorCore()
    errors = core.applySettings(rawSettings)
    if errors:
        for err in errors:
            console.print(f"[bold red]-[/] {escape(err)}")
        return 1

    console.print(f"[green]ok[/]: {len(core.targets)} ports")
    return 0


def cmdShow(args: argparse.Namespace) -> int:
    rawSettings = loadOrReport(args.settings)
    if rawSettings is None:
        return 2

    if args.stage == "stages":
        for stageName, stageOut in iterStages(parseSettings(rawSettings).hosts):
            console.rule(stageName)
            console.print_json(data=stageOut, default=jsonDefault)
        return 0

    core = MonitorCore()
    errors = core.applySettings(rawSettings)
    if errors or core.state is None:
        for err in errors:
            console.print(f"[bold red]-[/] {escape(err)}")
        return 1

    st = core.state
    if args.stage == "normalized":
        console.print_json(data=st.canonical, default=jsonDefault)
    elif args.stage == "targets":
        printTargets(list(st.targets))
    elif args.stage == "template":
        console.print(st.template, markup=False)
    else:
        rendered = core.onProbeResults(staticProber(args.open)(list(st.targets)))
        if rendered is not None:
            console.print(rendered.text, markup=False)
            console.print(rendered.tooltip, style="dim", markup=False)
            if rendered.backgroundColor:
                console.print(f"background: {rendered.backgroundColor}", style="dim")
    return 0


def cmdWatch(args: argparse.Namespace) -> int:
    app = MonitorApp(SettingsFile(args.settings), staticProber(args.open), console=console)
    app.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="portwatch")
    sub = parser.add_subparsers(dest="command", required=True)

    checkParser = sub.add_parser("check", help="validate a settings file")
    checkParser.add_argument("settings")
    checkParser.set_defaults(func=cmdCheck)

    showParser = sub.add_parser("show", help="print a pipeline stage for a settings file")
    showParser.add_argument("settings")
    showParser.add_argument("--stage", choices=STAGE_CHOICES, default="status")
    showParser.add_argument("--open", nargs="*", default=[], metavar="TOKEN", help="ports to report as in use")
    showParser.set_defaults(func=cmdShow)

    watchParser = sub.add_parser("watch", help="live view; reloads the settings file on change")
    watchParser.add_argument("settings")
    watchParser.add_argument("--open", nargs="*", default=[], metavar="TOKEN", help="ports to report as in use")
    watchParser.set_defaults(func=cmdWatch)

    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
