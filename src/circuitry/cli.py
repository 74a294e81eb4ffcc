"""Command line entry point for solving and checking element layouts."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Dict

from circuitry.config import FlowGateOptions, SolverOptions, ValidatorOptions
from circuitry.dc.solver import solve_dc_circuit
from circuitry.elements_json import elements_from_json
from circuitry.errors import ElementSchemaError
from circuitry.flow import should_enable_current_flow
from circuitry.validation.validator import validate_circuit


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SCHEMA_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="circuitry", description="DC solve and validate circuit layouts.")
    parser.add_argument(
        "command",
        choices=("solve", "validate", "gate"),
        help="solve: node voltages and currents; validate: topology issues; gate: animation decision.",
    )
    parser.add_argument("path", help="Path to a JSON element list ('-' reads stdin).")
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Terminal merge tolerance in board units (default: $CIRCUITRY_TOLERANCE or 0.6).",
    )
    parser.add_argument(
        "--classroom",
        action="store_true",
        help="Require exactly three load components when validating.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")
    return parser


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def run(command: str, text: str, tolerance: float | None, classroom: bool = False) -> Dict[str, Any]:
    """Execute one command on serialized elements and return a JSON-ready payload."""
    elements = elements_from_json(text)
    solver = SolverOptions() if tolerance is None else SolverOptions(tolerance=tolerance)
    validator = ValidatorOptions.classroom() if classroom else ValidatorOptions()
    if tolerance is not None:
        validator = ValidatorOptions(
            connection_tolerance=tolerance,
            required_load_count=validator.required_load_count,
        )

    if command == "solve":
        return solve_dc_circuit(elements, options=solver).to_json_dict()
    if command == "validate":
        return validate_circuit(elements, options=validator).to_json_dict()
    return should_enable_current_flow(
        elements, options=FlowGateOptions(solver=solver, validator=validator)
    ).to_json_dict()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        payload = run(args.command, _read_source(args.path), args.tolerance, args.classroom)
    except ElementSchemaError as exc:
        location = "" if exc.index is None else f" (element {exc.index})"
        logger.error("Invalid element data%s: %s", location, exc)
        return EXIT_SCHEMA_ERROR

    print(json.dumps(payload, indent=2, sort_keys=True))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
