from portlib.portRange import expandRange, resolve, resolveMultiple


def test_resolve_single_tokens():
    assert resolve(3000) == [3000]
    assert resolve("3000") == [3000]
    assert resolve(" 8080 ") == [8080]
    assert resolve("HTTP") == [80]
    assert resolve("dhcp") == [67]


def test_resolve_ranges():
    assert resolve("3000-3003") == [3000, 3001, 3002, 3003]
    assert resolve("3003-3000") == []
    assert resolve("0-3") == []
    assert resolve("65535-65536") == []


def test_resolve_rejects_garbage():
    assert resolve("abc") == []
    assert resolve(0) == []
    assert resolve(70000) == []
    assert resolve(True) == []
    assert resolve(None) == []
    assert resolve("30a0") == []


def test_resolve_multiple_dedupes_and_sorts():
    assert resolveMultiple(["3002", 3000, "3000-3001", "http"]) == [80, 3000, 3001, 3002]


def test_resolve_multiple_caps_and_warns():
    logLines = []
    ports = resolveMultiple(["1-500"], maxPorts=10, writeLog=logLines.append)

    assert ports == list(range(1, 11))
    assert len(logLines) == 1
    assert "10" in logLines[0]


def test_expand_range_clips():
    assert expandRange(65534, 65537) == [65534, 65535]
    assert expandRange(0, 2) == [1, 2]
    assert expandRange(5, 1) == []
