from circuitry.config import ValidatorOptions
from circuitry.elements import GroundElement, Point, ThreeTerminalElement, TwoTerminalElement, WireElement
from circuitry.validation import build_connection_graph, get_validation_summary, severity_icon, severity_label, validate_circuit


def _part(eid, kind, label, start, end, **kwargs):
    return TwoTerminalElement(eid, kind, label, Point(*start), Point(*end), **kwargs)


def _wire(eid, *points):
    return WireElement(eid, tuple(Point(*p) for p in points))


def _series_loop(ground=True):
    elements = [
        _part("bat1", "battery", "10V", (0, 0), (0, 2)),
        _part("r1", "resistor", "5Ω", (2, 2), (2, 0)),
        _wire("wTop", (0, 2), (2, 2)),
        _wire("wBot", (2, 0), (0, 0)),
    ]
    if ground:
        elements.append(GroundElement("gnd", Point(0, 0)))
    return elements


def _three_load_loop():
    return [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _part("r1", "resistor", "100", (0, 2), (2, 2)),
        _part("r2", "resistor", "100", (2, 2), (4, 2)),
        _part("r3", "lamp", "", (4, 2), (4, 0)),
        _wire("w1", (4, 0), (0, 0)),
        GroundElement("gnd", Point(0, 0)),
    ]


def _types(result):
    return [issue.type for issue in result.issues]


def test_empty_layout_is_valid_but_incomplete():
    result = validate_circuit([])
    assert result.is_valid
    assert result.circuit_status == "incomplete"
    assert result.issues == []
    assert result.stats.node_count == 0
    assert get_validation_summary(result) == "Empty circuit - place components to begin"


def test_closed_loop_is_complete():
    result = validate_circuit(_series_loop())
    assert result.is_valid
    assert result.circuit_status == "complete"
    assert result.issues == []
    stats = result.stats
    assert (stats.component_count, stats.wire_count, stats.ground_count, stats.battery_count) == (2, 2, 1, 1)
    assert stats.node_count == 4
    assert stats.connected_components == 1
    assert get_validation_summary(result) == "Circuit is complete and ready for simulation"


def test_missing_ground_is_only_a_suggestion():
    result = validate_circuit(_series_loop(ground=False))
    assert _types(result) == ["missing_ground"]
    assert result.infos[0].affected_elements == ("bat1",)
    assert result.circuit_status == "complete"


def test_wire_across_battery_is_short_circuit():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _wire("short", (0, 0), (0, 2)),
        GroundElement("gnd", Point(0, 0)),
    ]
    result = validate_circuit(elements)
    assert _types(result) == ["short_circuit"]
    assert result.errors[0].affected_elements == ("bat1", "short")
    assert not result.is_valid
    assert result.circuit_status == "invalid"
    assert get_validation_summary(result) == "1 error"


def test_disconnected_load_is_open_and_floating():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _part("r1", "resistor", "100Ω", (5, 5), (6, 5)),
        GroundElement("gnd", Point(0, 0)),
    ]
    result = validate_circuit(elements)
    types = _types(result)
    assert "open_circuit" in types
    assert "floating_component" in types
    open_issue = result.issues_of_type("open_circuit")[0]
    assert open_issue.affected_elements == ("bat1", "r1")
    assert result.issues_of_type("floating_component")[0].message == "Floating Component: 100Ω"
    assert result.stats.connected_components == 2
    assert result.circuit_status == "invalid"


def test_one_connected_terminal_is_partial():
    elements = _series_loop()
    elements[3] = _wire("wBot", (1, -3), (0, 0))
    result = validate_circuit(elements)
    partial = result.issues_of_type("unconnected_terminal")
    assert [issue.affected_elements for issue in partial] == [("r1",)]
    assert partial[0].message == "Partially Connected: 5Ω"
    assert result.circuit_status == "incomplete"


def test_stray_wire_is_floating_node():
    result = validate_circuit(_series_loop() + [_wire("stray", (10, 10), (12, 10))])
    (issue,) = result.issues_of_type("floating_node")
    assert issue.affected_elements == ("stray",)
    assert issue.severity == "warning"
    assert result.circuit_status == "incomplete"


def test_loads_without_battery():
    elements = [
        _part("r1", "resistor", "10", (0, 0), (2, 0)),
        _part("r2", "resistor", "10", (2, 0), (4, 0)),
    ]
    result = validate_circuit(elements)
    (issue,) = result.issues_of_type("missing_power_source")
    assert issue.affected_elements == ("r1", "r2")
    assert result.circuit_status == "incomplete"
    assert result.is_valid


def test_load_count_is_opt_in():
    assert validate_circuit(_series_loop()).issues_of_type("insufficient_components") == []
    result = validate_circuit(_series_loop(), ValidatorOptions.classroom())
    (issue,) = result.issues_of_type("insufficient_components")
    assert issue.severity == "warning"
    assert "found 1" in issue.description
    assert result.circuit_status == "incomplete"


def test_three_load_layout_satisfies_classroom_rule():
    result = validate_circuit(_three_load_loop(), ValidatorOptions.classroom())
    assert result.issues == []
    assert result.circuit_status == "complete"


def test_transistor_is_reported_and_excluded():
    bjt = ThreeTerminalElement("q1", "Q1", Point(10, 10), Point(11, 11), Point(12, 10))
    result = validate_circuit(_series_loop() + [bjt])
    assert _types(result) == ["unsupported_component"]
    assert result.stats.component_count == 2
    assert result.stats.connected_components == 1
    assert result.stats.node_count == validate_circuit(_series_loop()).stats.node_count == 4
    assert result.circuit_status == "complete"


def test_single_component_is_incomplete():
    result = validate_circuit([_part("bat1", "battery", "9V", (0, 0), (0, 2))])
    assert result.circuit_status == "incomplete"


def test_connection_graph_uses_wire_endpoints_only():
    elements = [
        _wire("w1", (0, 0), (2, 0), (4, 0)),
        _part("r1", "resistor", "10", (2, 0), (2, 2)),
    ]
    graph = build_connection_graph(elements, 0.6)
    assert not graph.has_edge("w1", "r1")


def test_tolerance_option():
    elements = _series_loop()
    elements[2] = _wire("wTop", (0, 2.4), (2, 2.4))
    assert validate_circuit(elements).circuit_status == "complete"
    strict = validate_circuit(elements, ValidatorOptions(connection_tolerance=0.2))
    assert strict.circuit_status != "complete"


def test_summary_counts_by_severity():
    elements = [
        _part("r1", "resistor", "10", (0, 0), (2, 0)),
        _part("r2", "resistor", "10", (8, 8), (9, 8)),
    ]
    result = validate_circuit(elements)
    assert get_validation_summary(result) == "3 warnings"


def test_severity_helpers():
    assert severity_label("error") == "Error"
    assert severity_label("info") == "Info"
    assert severity_icon("warning") == "⚠"


def test_result_json_payload():
    payload = validate_circuit(_series_loop(ground=False)).to_json_dict()
    assert payload["circuit_status"] == "complete"
    assert payload["issues"][0]["type"] == "missing_ground"
    assert payload["issues"][0]["affected_positions"][0] == {"x": 0.0, "z": 0.0}
    assert payload["stats"]["wire_count"] == 2
