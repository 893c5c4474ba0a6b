from portlib.flattener import describePort, flatten, resolveLabelForPort
from portlib.normalizer import normalize
from portlib.portApi import GroupSettings, MonitorTarget


def test_flatten_direct_port_map():
    targets = flatten({"__NOTITLE": {"3000": "user", "3001": "car"}})
    assert targets == [
        MonitorTarget(host="localhost", port=3000, label="user", group="__NOTITLE"),
        MonitorTarget(host="localhost", port=3001, label="car", group="__NOTITLE"),
    ]


def test_flatten_nested_groups_under_no_title():
    targets = flatten(normalize({"Web": ["http", "https"], "Dev": ["3000-3001"]}))
    assert [(t.group, t.port, t.label) for t in targets] == [
        ("Web", 80, "http"),
        ("Web", 443, "https"),
        ("Dev", 3000, ""),
        ("Dev", 3001, ""),
    ]


def test_flatten_merges_group_config_over_defaults():
    canonical = {"Frontend": {"3000": "react", "__CONFIG": {"compact": "true", "bgcolor": "red"}}}
    (target,) = flatten(canonical)
    assert target.groupSettings == GroupSettings(compact=True, bgcolor="red", separator="|", showTitle=True)


def test_flatten_defaults_without_config():
    (target,) = flatten({"Dev": {"3000": ""}})
    assert target.groupSettings == GroupSettings()


def test_flatten_drops_out_of_range_and_junk():
    targets = flatten({"Dev": {"0": "a", "65536": "b", "65535": "c", "1": "d", "web": "e", "__x": "f"}})
    assert sorted(t.port for t in targets) == [1, 65535]


def test_flatten_never_emits_invalid_ports():
    body = {str(p): "" for p in (0, 1, 80, 65535, 65536, 99999)}
    for target in flatten({"G": body}):
        assert 1 <= target.port <= 65535


def test_flatten_skips_non_dict_bodies():
    assert flatten({"Dev": "3000", "__CONFIG": {"compact": True}}) == []
    assert flatten([]) == []


def test_label_resolution_order():
    portLabels = {"3001": "exact", "30*": "glob", "300?": "closer"}
    targets = flatten({"Dev": {"3000": "inline", "3001": "", "3002": "", "4000": ""}}, portLabels)
    labels = {t.port: t.label for t in targets}
    assert labels == {3000: "inline", 3001: "exact", 3002: "closer", 4000: ""}


def test_resolve_label_for_port():
    assert resolveLabelForPort(8080, {"8080": "proxy"}) == "proxy"
    assert resolveLabelForPort(8081, {"80*": "web", "*": "any"}) == "web"
    assert resolveLabelForPort(9000, {"80*": "web", "*": "any"}) == "any"
    assert resolveLabelForPort(9000, None) == ""


def test_describe_port():
    assert describePort(3000, "app") == "app:3000"
    assert describePort(22) == "ssh:22"
    assert describePort(8081, "", {"80*": "web"}) == "web:8081"
    assert describePort(4321) == "4321"


def test_separator_with_brackets_falls_back_to_default():
    assert GroupSettings.fromConfigBlock({"separator": "]["}).separator == "|"
    assert GroupSettings.fromConfigBlock({"separator": "[x"}).separator == "|"
    assert GroupSettings.fromConfigBlock({"separator": " / "}).separator == " / "
