import logging

import pytest

from circuitry.config import SolverOptions
from circuitry.dc import solve_dc_circuit
from circuitry.dc.solver import IDEAL_SHORT_REASON, NO_BATTERY_REASON, SINGULAR_REASON
from circuitry.elements import GroundElement, Point, ThreeTerminalElement, TwoTerminalElement, WireElement
from circuitry.errors import CircuitValidationError


def _part(eid, kind, label, start, end, **kwargs):
    return TwoTerminalElement(eid, kind, label, Point(*start), Point(*end), **kwargs)


def _wire(eid, *points):
    return WireElement(eid, tuple(Point(*p) for p in points))


def _ground(eid, x, z):
    return GroundElement(eid, Point(x, z))


def _series_loop(resistor_label="5Ω", battery_label="10V"):
    return [
        _part("bat1", "battery", battery_label, (0, 0), (0, 2), orientation="vertical"),
        _part("r1", "resistor", resistor_label, (2, 2), (2, 0), orientation="vertical"),
        _wire("wTop", (0, 2), (2, 2)),
        _wire("wBot", (2, 0), (0, 0)),
        _ground("gnd", 0, 0),
    ]


def test_series_loop_obeys_ohms_law():
    solution = solve_dc_circuit(_series_loop())
    assert solution.status == "solved"
    assert solution.reason is None

    r1 = solution.element_currents["r1"]
    assert r1.amps == pytest.approx(2.0, abs=1e-9)
    assert r1.direction == "start->end"

    battery = solution.element_currents["bat1"]
    assert battery.amps == pytest.approx(2.0, abs=1e-9)
    assert battery.direction == "start->end"


def test_series_loop_wire_segments_carry_loop_current():
    solution = solve_dc_circuit(_series_loop())
    top = solution.segment_current("wTop", 0)
    bottom = solution.segment_current("wBot", 0)
    assert top is not None and bottom is not None
    assert top.amps == pytest.approx(2.0, abs=1e-9)
    assert bottom.amps == pytest.approx(2.0, abs=1e-9)
    assert top.direction == "path-forward"
    assert [(c.wire_id, c.segment_index) for c in solution.wire_segment_currents] == [("wTop", 0), ("wBot", 0)]


def test_series_loop_voltages_reference_ground():
    solution = solve_dc_circuit(_series_loop())
    assert solution.reference_node_id == solution.node_for("gnd", "gnd")
    assert solution.node_voltages[solution.reference_node_id] == 0.0
    assert solution.voltage_at("bat1", "end") == pytest.approx(10.0)
    assert solution.voltage_at("r1", "start") == pytest.approx(10.0)
    assert solution.max_current_amps() == pytest.approx(2.0)


def test_open_circuit_solves_to_zero_current():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _part("r1", "resistor", "100Ω", (5, 5), (6, 5)),
        _ground("gnd", 0, 0),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "solved"
    assert solution.element_currents["bat1"].amps == pytest.approx(0.0, abs=1e-12)
    assert solution.element_currents["r1"].amps == 0.0
    assert solution.element_currents["r1"].direction == "unknown"


def test_parallel_resistors_split_current():
    elements = [
        _part("bat1", "battery", "10V", (0, 0), (0, 2)),
        _ground("gnd", 0, 0),
        _wire("wTop1", (0, 2), (2, 2)),
        _wire("wTop2", (2, 2), (4, 2)),
        _wire("wBot1", (0, 0), (2, 0)),
        _wire("wBot2", (2, 0), (4, 0)),
        _part("r1", "resistor", "10Ω", (2, 2), (2, 0)),
        _part("r2", "resistor", "10Ω", (4, 2), (4, 0)),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "solved"
    assert solution.element_currents["r1"].amps == pytest.approx(1.0)
    assert solution.element_currents["r2"].amps == pytest.approx(1.0)
    assert solution.element_currents["bat1"].amps == pytest.approx(2.0)
    assert solution.segment_current("wTop1", 0).amps == pytest.approx(2.0)
    assert solution.segment_current("wTop2", 0).amps == pytest.approx(1.0)


def test_reversed_resistor_reports_end_to_start():
    elements = _series_loop()
    elements[1] = _part("r1", "resistor", "5Ω", (2, 0), (2, 2))
    current = solve_dc_circuit(elements).element_currents["r1"]
    assert current.amps == pytest.approx(-2.0)
    assert current.direction == "end->start"


def test_wire_across_battery_is_ideal_short():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _wire("short", (0, 0), (0, 2)),
        _ground("gnd", 0, 0),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "invalid_ideal_short"
    assert solution.reason == IDEAL_SHORT_REASON
    assert "short" in solution.reason.lower()
    assert solution.element_currents == {}
    assert solution.node_voltages == {solution.reference_node_id: 0.0}


def test_inductor_across_battery_is_ideal_short():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 2)),
        _part("L1", "inductor", "1mH", (0, 2), (0, 0)),
    ]
    assert solve_dc_circuit(elements).status == "invalid_ideal_short"


def test_duplicate_wire_makes_system_singular():
    elements = _series_loop() + [_wire("wTopCopy", (0, 2), (2, 2))]
    solution = solve_dc_circuit(elements)
    assert solution.status == "singular"
    assert solution.reason == SINGULAR_REASON


def test_empty_layout_has_no_reference():
    solution = solve_dc_circuit([])
    assert solution.status == "no_reference"
    assert solution.node_voltages == {}


def test_missing_battery_is_unsolved():
    elements = [
        _part("r1", "resistor", "10Ω", (0, 0), (2, 0)),
        _wire("w1", (2, 0), (2, 2)),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "unsolved"
    assert solution.reason == NO_BATTERY_REASON
    assert solution.element_currents["r1"].amps == 0.0
    assert set(solution.node_voltages.values()) == {0.0}


def test_capacitor_and_switch_block_dc():
    elements = _series_loop()
    elements[1] = _part("c1", "capacitor", "10uF", (2, 2), (2, 0))
    solution = solve_dc_circuit(elements)
    assert solution.status == "solved"
    assert solution.element_currents["c1"].amps == 0.0
    assert solution.element_currents["bat1"].amps == pytest.approx(0.0, abs=1e-12)
    assert solution.voltage_at("c1", "start") == pytest.approx(10.0)


def test_forward_diode_drops_forward_voltage():
    elements = _series_loop(resistor_label="100Ω")
    elements.append(_part("d1", "diode", "", (2, 0), (4, 0)))
    elements[3] = _wire("wBot", (4, 0), (0, 0))
    solution = solve_dc_circuit(elements)
    expected = (10.0 - 0.7) / 110.0
    assert solution.element_currents["d1"].amps == pytest.approx(expected)
    assert solution.element_currents["r1"].amps == pytest.approx(expected)


def test_transistor_is_reported_as_skipped():
    bjt = ThreeTerminalElement("q1", "Q1", Point(10, 10), Point(11, 11), Point(12, 10))
    solution = solve_dc_circuit(_series_loop() + [bjt])
    assert solution.status == "solved"
    assert solution.skipped_elements == ("q1",)
    assert "q1" not in solution.element_currents
    assert solution.element_currents["r1"].amps == pytest.approx(2.0)


def test_tolerance_controls_merging():
    elements = _series_loop()
    elements[2] = _wire("wTop", (0, 2.4), (2, 2.4))
    assert solve_dc_circuit(elements, tolerance=0.6).element_currents["r1"].amps == pytest.approx(2.0)
    assert solve_dc_circuit(elements, tolerance=0.2).element_currents["r1"].amps == pytest.approx(0.0, abs=1e-9)


def test_custom_default_battery_voltage():
    elements = _series_loop(battery_label="")
    solution = solve_dc_circuit(elements, options=SolverOptions(default_battery_volts=5.0))
    assert solution.element_currents["r1"].amps == pytest.approx(1.0)


def test_duplicate_ids_rejected():
    elements = _series_loop() + [_wire("r1", (9, 9), (9, 10))]
    with pytest.raises(CircuitValidationError):
        solve_dc_circuit(elements)


def test_json_payload_is_plain_data():
    payload = solve_dc_circuit(_series_loop()).to_json_dict()
    assert payload["status"] == "solved"
    assert payload["element_currents"]["r1"]["direction"] == "start->end"
    assert payload["wire_segment_currents"][0]["wire_id"] == "wTop"
    assert payload["terminal_to_node"]["gnd:gnd"] == payload["reference_node_id"]


def test_battery_with_merged_terminals_is_ideal_short():
    elements = [
        _part("bat1", "battery", "9V", (0, 0), (0, 0.3)),
        _part("r1", "resistor", "10Ω", (0, 0), (5, 0)),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "invalid_ideal_short"
    assert solution.reason == IDEAL_SHORT_REASON
    assert solution.element_currents == {}


def test_merged_battery_aborts_solve_beside_working_loop():
    elements = _series_loop() + [_part("bat2", "battery", "9V", (20, 0), (20, 0.3))]
    assert solve_dc_circuit(elements).status == "invalid_ideal_short"


def test_detached_led_loop_carries_no_current():
    elements = _series_loop() + [
        _part("led1", "led", "LED", (10, 0), (12, 0)),
        _part("r2", "resistor", "150", (12, 0), (10, 0)),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "solved"
    assert solution.element_currents["r1"].amps == pytest.approx(2.0, abs=1e-9)
    assert solution.element_currents["r2"].amps == 0.0
    assert solution.element_currents["r2"].direction == "unknown"
    assert solution.element_currents["led1"].amps == 0.0


def test_detached_wire_loop_reports_zero_segment_currents():
    elements = _series_loop() + [
        _part("r2", "resistor", "100Ω", (10, 0), (12, 0)),
        _wire("wLoop", (12, 0), (12, 2), (10, 2), (10, 0)),
    ]
    solution = solve_dc_circuit(elements)
    assert solution.status == "solved"
    loop_segments = [c for c in solution.wire_segment_currents if c.wire_id == "wLoop"]
    assert [c.segment_index for c in loop_segments] == [0, 1, 2]
    assert all(c.amps == 0.0 for c in loop_segments)
    assert solution.element_currents["r2"].amps == 0.0


def test_mna_debug_record_reports_system_size(caplog):
    with caplog.at_level(logging.DEBUG, logger="circuitry.dc.mna"):
        solve_dc_circuit(_series_loop())
    assert "MNA system: 3 nodes, 3 sources" in caplog.text
