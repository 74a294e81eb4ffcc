"""Parser for free-text component value labels."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Optional, Union

from lark import Lark, Token, Transformer, UnexpectedInput


_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

PREFIX_MULTIPLIERS = {
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "m": 1e-3,
}

# Same number/prefix shape as the grammar, unanchored.
_LEADING_NUMBER = re.compile(r"[-+]?\d+(?:\.\d+)?(?:\s*[kKmM])?")

_DISPLAY_PREFIXES = (
    (1e6, "M"),
    (1e3, "k"),
    (1.0, ""),
    (1e-3, "m"),
    (1e-6, "µ"),
)
_DISPLAY_UNITS = {"ohm": "Ω", "V": "V", "A": "A", "W": "W"}


def _load_parser() -> Lark:
    return Lark(_GRAMMAR_PATH.read_text(encoding="utf-8"), parser="lalr")


_PARSER = _load_parser()


@dataclass(frozen=True)
class ParsedValue:
    """Numeric value read from a label."""

    magnitude: float
    unit: Optional[str] = None
    exact: bool = True


@dataclass(frozen=True)
class UnrecognizedValue:
    """Label with no usable number; callers substitute a default."""

    text: str


ValueParse = Union[ParsedValue, UnrecognizedValue]


class _ValueTransformer(Transformer):
    def start(self, items):
        sign = 1.0
        number = 0.0
        multiplier = 1.0
        unit: Optional[str] = None
        for token in items:
            if not isinstance(token, Token):
                continue
            if token.type == "SIGN":
                sign = -1.0 if str(token) == "-" else 1.0
            elif token.type == "DECIMAL":
                number = float(token)
            elif token.type == "PREFIX":
                multiplier = PREFIX_MULTIPLIERS[str(token)]
            elif token.type == "UNIT":
                unit = _canonical_unit(str(token))
        return ParsedValue(magnitude=sign * number * multiplier, unit=unit)


def _canonical_unit(text: str) -> str:
    lowered = text.lower()
    if lowered.startswith("v"):
        return "V"
    return "ohm"


def _parse_exact(text: str) -> Optional[ParsedValue]:
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput:
        return None
    return _ValueTransformer().transform(tree)


def parse_value(label: Optional[str]) -> ValueParse:
    """Parse a label such as ``"4.7kΩ"`` or ``"R1 = 220"``.

    A label matching the full grammar yields an exact value with its unit.
    Otherwise the first number in the label (with an optional metric prefix)
    is used and the unit is dropped.
    """
    text = " ".join((label or "").split())
    if not text:
        return UnrecognizedValue(text="")

    parsed = _parse_exact(text)
    if parsed is not None:
        return parsed

    match = _LEADING_NUMBER.search(text)
    if match is None:
        return UnrecognizedValue(text=text)
    fallback = _parse_exact(match.group(0))
    if fallback is None:  # pragma: no cover - regex and grammar accept the same shape
        return UnrecognizedValue(text=text)
    return ParsedValue(magnitude=fallback.magnitude, unit=None, exact=False)


def resolve_resistance(label: Optional[str], default_ohms: float) -> float:
    """Resistance in ohms; unrecognized or non-positive values use the default."""
    parsed = parse_value(label)
    if isinstance(parsed, ParsedValue) and parsed.magnitude > 0.0:
        return parsed.magnitude
    return default_ohms


def resolve_voltage(label: Optional[str], default_volts: float) -> float:
    """Voltage in volts; only unrecognized labels use the default."""
    parsed = parse_value(label)
    if isinstance(parsed, ParsedValue):
        return parsed.magnitude
    return default_volts


def format_quantity(value: float, unit: str, digits: int = 3) -> str:
    """Format a value with an engineering prefix, e.g. ``4.7 kΩ``."""
    symbol = _DISPLAY_UNITS.get(unit, unit)
    if value == 0.0:
        return f"0 {symbol}"
    magnitude = abs(value)
    for scale, prefix in _DISPLAY_PREFIXES:
        if magnitude >= scale:
            return f"{value / scale:.{digits}g} {prefix}{symbol}"
    scale, prefix = _DISPLAY_PREFIXES[-1]
    return f"{value / scale:.{digits}g} {prefix}{symbol}"
