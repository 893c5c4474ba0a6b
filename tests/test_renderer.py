import pytest

from portlib.portApi import DisplayConfig, GroupSettings, MonitorTarget, PortObject, ProbeResult, StatusIcons
from portlib.renderer import (
    applyPortColors,
    applyPortEmojis,
    createPortObjects,
    generateTooltip,
    processCompactDisplays,
    render,
    renderPortDisplay,
    resolveBackgroundColor,
    themeColor,
)

DISPLAY = DisplayConfig(statusIcons=StatusIcons(inUse="🟢", free="⚪️"), globalEmojiMode="replace")


def target(port: int, label: str = "", group: str = "G", settings: GroupSettings | None = None) -> MonitorTarget:
    return MonitorTarget(host="localhost", port=port, label=label, group=group, groupSettings=settings or GroupSettings())


def result(port: int, isOpen: bool, **kwargs) -> ProbeResult:
    return ProbeResult(host="localhost", port=port, isOpen=isOpen, **kwargs)


@pytest.fixture()
def portObjects():
    return {
        3000: PortObject(port=3000, label="app", group="TestGroup", statusIcon="inUse"),
        3001: PortObject(port=3001, label="api", group="TestGroup", statusIcon="free"),
    }


def test_render_port_display_basic():
    obj = PortObject(port=3000, label="app", statusIcon="inUse")
    assert renderPortDisplay(obj, DISPLAY) == "🟢app:3000"
    assert renderPortDisplay(obj, DISPLAY, "0") == "🟢app:0"


def test_render_port_display_without_label():
    obj = PortObject(port=3000, statusIcon="free")
    assert renderPortDisplay(obj, DISPLAY) == "⚪️3000"
    assert renderPortDisplay(obj, DISPLAY, "") == "⚪️"


def test_emoji_replace_only_when_in_use():
    obj = PortObject(port=3000, label="app", statusIcon="inUse", emoji="🚀", emojiMode="replace")
    assert renderPortDisplay(obj, DISPLAY) == "🚀app:3000"

    obj.statusIcon = "free"
    assert renderPortDisplay(obj, DISPLAY) == "⚪️app:3000"


def test_emoji_prefix_and_suffix():
    obj = PortObject(port=3000, label="app", statusIcon="inUse", emoji="🚀", emojiMode="prefix")
    assert renderPortDisplay(obj, DISPLAY) == "🚀🟢app:3000"

    obj = PortObject(port=3000, label="app", statusIcon="free", emoji="🚀", emojiMode="suffix")
    assert renderPortDisplay(obj, DISPLAY) == "⚪️app🚀:3000"


def test_emoji_detailed_mode_overrides_global():
    obj = PortObject(port=3000, label="app", statusIcon="free", emoji={"prefix": "🚀"})
    assert renderPortDisplay(obj, DISPLAY) == "🚀⚪️app:3000"


def test_emoji_falls_back_to_global_mode():
    display = DisplayConfig(globalEmojiMode="suffix")
    obj = PortObject(port=3000, label="app", statusIcon="inUse", emoji="🚀")
    assert renderPortDisplay(obj, display) == "🟢app🚀:3000"


def test_process_compact_displays(portObjects):
    assert processCompactDisplays("300[__PORT_3000|__PORT_3001]", portObjects, DISPLAY) == "300[🟢app:0|⚪️api:1]"


def test_process_compact_displays_custom_separator(portObjects):
    out = processCompactDisplays("300[__PORT_3000 | __PORT_3001]", portObjects, DISPLAY)
    assert out == "300[🟢app:0 | ⚪️api:1]"


def test_process_compact_displays_ignores_non_compact(portObjects):
    template = "TestGroup: __PORT_3000 __PORT_3001"
    assert processCompactDisplays(template, portObjects, DISPLAY) == template


def test_render_updates_status_and_keeps_stale_state(portObjects):
    out = render("TestGroup: __PORT_3000 __PORT_3001", portObjects, [result(3000, False)], DISPLAY)
    assert out.text == "TestGroup: ⚪️app:3000 ⚪️api:3001"
    assert portObjects[3000].statusIcon == "free"

    out = render("TestGroup: __PORT_3000 __PORT_3001", portObjects, [result(3001, True), result(9999, True)], DISPLAY)
    assert out.text == "TestGroup: ⚪️app:3000 🟢api:3001"
    assert 9999 not in portObjects


def test_render_bracket_without_prefix_uses_full_ports():
    objs = createPortObjects([target(3000, "app"), target(8080, "web")])
    out = render("[__PORT_3000|__PORT_8080]", objs, [result(3000, True), result(8080, False)], DISPLAY)
    assert out.text == "[🟢app:3000|⚪️web:8080]"


def test_render_single_port_compact():
    objs = createPortObjects([target(3000, "app")])
    out = render("3000[__PORT_3000]", objs, [result(3000, True)], DISPLAY)
    assert out.text == "3000[🟢app]"


def test_apply_port_emojis():
    objs = createPortObjects([target(3000, "app"), target(3001, "api"), target(3002, "db")])
    applyPortEmojis(objs, {"app": "🚀", "api": {"prefix": "🔧", "bogus": "x"}, "3002": "💾"}, "suffix")

    assert (objs[3000].emoji, objs[3000].emojiMode) == ("🚀", "suffix")
    assert (objs[3001].emoji, objs[3001].emojiMode) == ({"prefix": "🔧"}, None)
    assert objs[3002].emoji == "💾"


def test_apply_port_emojis_ignores_unknown_labels():
    objs = createPortObjects([target(3000, "app")])
    applyPortEmojis(objs, {"nonexistent": "🚀"}, "replace")
    assert objs[3000].emoji is None


def test_apply_port_colors_priority():
    objs = createPortObjects([target(3000, "app", "Frontend"), target(3001, "api", "Backend")])
    applyPortColors(objs, {"Frontend": "#blue", "app": "#green", "3000": "#red", "Backend": "#yellow"})
    assert objs[3000].color == "#red"
    assert objs[3001].color == "#yellow"

    objs = createPortObjects([target(3000, "app", "Frontend")])
    applyPortColors(objs, {"Frontend": "#blue", "app": "#green"})
    assert objs[3000].color == "#green"

    applyPortColors(objs, None)
    assert objs[3000].color == "#green"


def test_duplicate_port_last_group_wins():
    objs = createPortObjects([target(3000, "first", "A"), target(3000, "second", "B")])
    assert objs[3000].label == "second"
    assert objs[3000].group == "B"


def test_theme_color():
    assert themeColor("red") == "statusBarItem.errorBackground"
    assert themeColor("Yellow") == "statusBarItem.warningBackground"
    assert themeColor("blue") == "statusBarItem.prominentBackground"
    assert themeColor("GREEN") == "statusBarItem.remoteBackground"
    assert themeColor("#ff0000") == "#ff0000"
    assert themeColor(None) is None


def test_background_group_color_first():
    results = [
        result(3000, True, groupSettings=GroupSettings()),
        result(3001, False, groupSettings=GroupSettings(bgcolor="red")),
        result(3002, False, groupSettings=GroupSettings(bgcolor="blue")),
    ]
    display = DisplayConfig(backgroundColor="#123456")
    assert resolveBackgroundColor(results, display) == "statusBarItem.errorBackground"


def test_background_global_then_port_colors():
    objs = createPortObjects([target(3000), target(3001)], portColors={"3000": "#free", "3001": "#busy"})
    results = [result(3000, False), result(3001, True)]

    assert resolveBackgroundColor(results, DisplayConfig(backgroundColor="green"), objs) == "statusBarItem.remoteBackground"
    assert resolveBackgroundColor(results, DisplayConfig(), objs) == "#busy"
    assert resolveBackgroundColor([result(3000, False), result(3001, False)], DisplayConfig(), objs) == "#free"
    assert resolveBackgroundColor(results, DisplayConfig()) is None


def test_generate_tooltip():
    objs = createPortObjects([target(3000, "app"), target(3001)])
    results = [result(3000, True, processName="node", pid=123), result(3001, False)]
    assert generateTooltip(results, objs) == (
        "localhost:3000 (app) - IN USE - node (PID: 123)\n"
        "localhost:3001 () - FREE"
    )


def test_render_result_fields():
    settings = GroupSettings(compact=True, bgcolor="yellow")
    objs = createPortObjects([target(3000, "app", "Dev", settings), target(3001, "api", "Dev", settings)])
    results = [
        ProbeResult.forTarget(target(3000, "app", "Dev", settings), True, processName="node"),
        ProbeResult.forTarget(target(3001, "api", "Dev", settings), False),
    ]
    out = render("300[__PORT_3000|__PORT_3001]", objs, results, DISPLAY)
    assert out.text == "300[🟢app:0|⚪️api:1]"
    assert out.backgroundColor == "statusBarItem.warningBackground"
    assert out.tooltip.splitlines()[0] == "localhost:3000 (app) - IN USE - node"
