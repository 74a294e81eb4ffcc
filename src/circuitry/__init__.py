"""DC circuit solving and topology validation for freehand layouts."""

from circuitry.config import FlowGateOptions, SolverOptions, ValidatorOptions
from circuitry.dc import DcSolution, ElementCurrent, WireSegmentCurrent, solve_dc_circuit
from circuitry.elements import GroundElement, Point, ThreeTerminalElement, TwoTerminalElement, WireElement
from circuitry.elements_json import elements_from_json, elements_to_json
from circuitry.errors import CircuitValidationError, ElementSchemaError, SingularCircuitError
from circuitry.flow import FlowGateResult, should_enable_current_flow
from circuitry.validation import ValidationIssue, ValidationResult, get_validation_summary, validate_circuit

__version__ = "0.1.0"

__all__ = [
    "CircuitValidationError",
    "DcSolution",
    "ElementCurrent",
    "ElementSchemaError",
    "FlowGateOptions",
    "FlowGateResult",
    "GroundElement",
    "Point",
    "SingularCircuitError",
    "SolverOptions",
    "ThreeTerminalElement",
    "TwoTerminalElement",
    "ValidationIssue",
    "ValidationResult",
    "ValidatorOptions",
    "WireElement",
    "WireSegmentCurrent",
    "__version__",
    "elements_from_json",
    "elements_to_json",
    "get_validation_summary",
    "should_enable_current_flow",
    "solve_dc_circuit",
    "validate_circuit",
]
