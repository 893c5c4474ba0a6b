from portlib.wellKnown import WELL_KNOWN_PORTS, lookupServicePort, portName, servicePort


def test_service_port_is_exact_and_case_sensitive():
    assert servicePort("http") == 80
    assert servicePort("postgresql") == 5432
    assert servicePort("HTTP") is None
    assert servicePort(" http") is None
    assert servicePort(80) is None


def test_substitution_table_has_nineteen_names():
    assert len(WELL_KNOWN_PORTS) == 19
    assert WELL_KNOWN_PORTS["pop3s"] == 995


def test_lookup_service_port_ignores_case_and_knows_extras():
    assert lookupServicePort(" HTTPS ") == 443
    assert lookupServicePort("snmp") == 161
    assert lookupServicePort("nope") is None


def test_port_name():
    assert portName(22) == "ssh"
    assert portName(69) == "tftp"
    assert portName(3000) is None
