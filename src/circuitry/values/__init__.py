"""Value-label parsing."""

from circuitry.values.parser import (
    ParsedValue,
    UnrecognizedValue,
    ValueParse,
    format_quantity,
    parse_value,
    resolve_resistance,
    resolve_voltage,
)

__all__ = [
    "ParsedValue",
    "UnrecognizedValue",
    "ValueParse",
    "format_quantity",
    "parse_value",
    "resolve_resistance",
    "resolve_voltage",
]
