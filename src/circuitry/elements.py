"""Element data model for freehand circuit layouts."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Literal, Sequence, Tuple, Union

from circuitry.errors import CircuitValidationError


ElementId = str
Orientation = Literal["horizontal", "vertical"]

TWO_TERMINAL_KINDS = frozenset(
    {"resistor", "battery", "capacitor", "inductor", "lamp", "switch", "diode", "led"}
)
THREE_TERMINAL_KINDS = frozenset({"bjt"})
LOAD_EXCLUDED_KINDS = frozenset({"wire", "ground", "battery"}) | THREE_TERMINAL_KINDS
VALID_ORIENTATIONS = ("horizontal", "vertical")


@dataclass(frozen=True)
class Point:
    """Board coordinate on the x/z plane."""

    x: float
    z: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.z)):
            raise CircuitValidationError("Point coordinates must be finite.")

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.z - other.z)


def _check_id(element_id: str) -> None:
    if not element_id:
        raise CircuitValidationError("Element id must be non-empty.")


def _check_orientation(orientation: str) -> None:
    if orientation not in VALID_ORIENTATIONS:
        raise CircuitValidationError(f"Unknown orientation: {orientation}")


@dataclass(frozen=True)
class TwoTerminalElement:
    """Two-terminal part; batteries use `start` as the negative terminal."""

    id: ElementId
    kind: str
    label: str
    start: Point
    end: Point
    orientation: Orientation = "horizontal"
    polarized: bool = False

    def __post_init__(self) -> None:
        _check_id(self.id)
        if self.kind not in TWO_TERMINAL_KINDS:
            raise CircuitValidationError(f"Unsupported two-terminal kind: {self.kind}")
        _check_orientation(self.orientation)

    def terminals(self) -> Tuple[Tuple[str, Point], ...]:
        return (("start", self.start), ("end", self.end))


@dataclass(frozen=True)
class WireElement:
    """Polyline wire; each consecutive pair of points is an ideal segment."""

    id: ElementId
    path: Tuple[Point, ...]
    kind: Literal["wire"] = "wire"

    def __post_init__(self) -> None:
        _check_id(self.id)
        object.__setattr__(self, "path", tuple(self.path))
        if len(self.path) < 2:
            raise CircuitValidationError("Wire path needs at least two points.")

    def terminals(self) -> Tuple[Tuple[str, Point], ...]:
        return tuple((f"p{idx}", point) for idx, point in enumerate(self.path))

    def segments(self) -> Iterable[Tuple[int, Point, Point]]:
        for idx in range(len(self.path) - 1):
            yield idx, self.path[idx], self.path[idx + 1]

    @property
    def endpoints(self) -> Tuple[Point, Point]:
        return self.path[0], self.path[-1]


@dataclass(frozen=True)
class GroundElement:
    """Single-point 0 V reference marker."""

    id: ElementId
    position: Point
    orientation: Orientation = "horizontal"
    kind: Literal["ground"] = "ground"

    def __post_init__(self) -> None:
        _check_id(self.id)
        _check_orientation(self.orientation)

    def terminals(self) -> Tuple[Tuple[str, Point], ...]:
        return (("gnd", self.position),)


@dataclass(frozen=True)
class ThreeTerminalElement:
    """Transistor placeholder; enumerated but never solved or validated."""

    id: ElementId
    label: str
    collector: Point
    base: Point
    emitter: Point
    orientation: Orientation = "horizontal"
    transistor_type: Literal["npn", "pnp"] = "npn"
    kind: str = "bjt"

    def __post_init__(self) -> None:
        _check_id(self.id)
        if self.kind not in THREE_TERMINAL_KINDS:
            raise CircuitValidationError(f"Unsupported three-terminal kind: {self.kind}")
        if self.transistor_type not in ("npn", "pnp"):
            raise CircuitValidationError(f"Unknown transistor type: {self.transistor_type}")
        _check_orientation(self.orientation)

    def terminals(self) -> Tuple[Tuple[str, Point], ...]:
        return (("collector", self.collector), ("base", self.base), ("emitter", self.emitter))


Element = Union[TwoTerminalElement, WireElement, GroundElement, ThreeTerminalElement]


def check_unique_ids(elements: Sequence[Element]) -> None:
    """Raise if two elements share an id."""
    seen: set[str] = set()
    for element in elements:
        if element.id in seen:
            raise CircuitValidationError(f"Duplicate element id: {element.id}")
        seen.add(element.id)


def is_load(element: Element) -> bool:
    """True for parts that consume power in the layout (not wires, grounds, batteries)."""
    return element.kind not in LOAD_EXCLUDED_KINDS


def element_label(element: Element) -> str:
    label = getattr(element, "label", "")
    return label or element.kind
