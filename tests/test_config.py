import pytest

from circuitry.config import (
    DEFAULT_TOLERANCE,
    TOLERANCE_ENV,
    FlowGateOptions,
    SolverOptions,
    ValidatorOptions,
    get_default_tolerance,
)


def test_default_tolerance(monkeypatch):
    monkeypatch.delenv(TOLERANCE_ENV, raising=False)
    assert get_default_tolerance() == DEFAULT_TOLERANCE
    assert SolverOptions().tolerance == DEFAULT_TOLERANCE
    assert ValidatorOptions().connection_tolerance == DEFAULT_TOLERANCE


def test_environment_override(monkeypatch):
    monkeypatch.setenv(TOLERANCE_ENV, "1.25")
    assert SolverOptions().tolerance == 1.25
    assert ValidatorOptions().connection_tolerance == 1.25


def test_gate_solver_and_validator_share_environment_tolerance(monkeypatch):
    monkeypatch.setenv(TOLERANCE_ENV, "0.9")
    options = FlowGateOptions()
    assert options.solver.tolerance == options.validator.connection_tolerance == 0.9


@pytest.mark.parametrize("raw", ["abc", "0", "-1"])
def test_bad_environment_value(monkeypatch, raw):
    monkeypatch.setenv(TOLERANCE_ENV, raw)
    with pytest.raises(ValueError):
        get_default_tolerance()


def test_option_validation():
    with pytest.raises(ValueError):
        SolverOptions(tolerance=0.0)
    with pytest.raises(ValueError):
        SolverOptions(default_resistor_ohms=0.0)
    with pytest.raises(ValueError):
        ValidatorOptions(reverse_bias_threshold=0.1)
    with pytest.raises(ValueError):
        ValidatorOptions(required_load_count=-1)
    with pytest.raises(ValueError):
        FlowGateOptions(min_current_amps=-1.0)


def test_classroom_preset():
    assert ValidatorOptions().required_load_count is None
    assert ValidatorOptions.classroom().required_load_count == 3
