from .app import MonitorApp
from .config import MonitorSettings
from .core import MonitorCore, MonitorState, buildMonitorState
from .flattener import flatten
from .normalizer import normalize
from .portApi import GroupSettings, MonitorTarget, PortObject, ProbeResult, RenderResult
from .renderer import render
from .template import buildTemplate
from .validator import validateHostsStructure, validateProcessed, validateRaw, validateStructure

__all__ = [
    "MonitorApp",
    "MonitorSettings",
    "MonitorCore",
    "MonitorState",
    "buildMonitorState",
    "flatten",
    "normalize",
    "GroupSettings",
    "MonitorTarget",
    "PortObject",
    "ProbeResult",
    "RenderResult",
    "render",
    "buildTemplate",
    "validateHostsStructure",
    "validateProcessed",
    "validateRaw",
    "validateStructure",
]
