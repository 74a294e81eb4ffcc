"""JSON exchange format for element lists."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Sequence

from circuitry.elements import (
    Element,
    GroundElement,
    Point,
    ThreeTerminalElement,
    TWO_TERMINAL_KINDS,
    TwoTerminalElement,
    WireElement,
    check_unique_ids,
)
from circuitry.errors import CircuitValidationError, ElementSchemaError


def elements_to_json(elements: Sequence[Element]) -> str:
    """Serialize elements to deterministic JSON."""
    payload = [element_to_dict(element) for element in elements]
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def elements_from_json(text: str) -> List[Element]:
    """Deserialize a JSON array of elements."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ElementSchemaError(f"Invalid JSON: {exc.msg}") from exc
    if isinstance(data, Mapping) and "elements" in data:
        data = data["elements"]
    if not isinstance(data, list):
        raise ElementSchemaError("Expected a JSON array of elements.")
    elements = [element_from_dict(item, index=idx) for idx, item in enumerate(data)]
    try:
        check_unique_ids(elements)
    except CircuitValidationError as exc:
        raise ElementSchemaError(str(exc), field="id") from exc
    return elements


def point_to_dict(point: Point) -> Dict[str, float]:
    return {"x": float(point.x), "z": float(point.z)}


def element_to_dict(element: Element) -> Dict[str, Any]:
    if isinstance(element, WireElement):
        return {"id": element.id, "kind": "wire", "path": [point_to_dict(p) for p in element.path]}
    if isinstance(element, GroundElement):
        return {
            "id": element.id,
            "kind": "ground",
            "position": point_to_dict(element.position),
            "orientation": element.orientation,
        }
    if isinstance(element, ThreeTerminalElement):
        return {
            "id": element.id,
            "kind": element.kind,
            "label": element.label,
            "collector": point_to_dict(element.collector),
            "base": point_to_dict(element.base),
            "emitter": point_to_dict(element.emitter),
            "orientation": element.orientation,
            "transistorType": element.transistor_type,
        }
    payload: Dict[str, Any] = {
        "id": element.id,
        "kind": element.kind,
        "label": element.label,
        "start": point_to_dict(element.start),
        "end": point_to_dict(element.end),
        "orientation": element.orientation,
    }
    if element.polarized:
        payload["polarized"] = True
    return payload


def element_from_dict(data: Any, index: int | None = None) -> Element:
    if not isinstance(data, Mapping):
        raise ElementSchemaError("Element entry must be an object.", index=index)
    kind = data.get("kind")
    element_id = data.get("id")
    if not isinstance(element_id, str):
        raise ElementSchemaError("Element id must be a string.", index=index, field="id")
    try:
        if kind == "wire":
            path = data.get("path")
            if not isinstance(path, list):
                raise ElementSchemaError("Wire path must be a list.", index=index, field="path")
            return WireElement(id=element_id, path=tuple(_point(p, index, "path") for p in path))
        if kind == "ground":
            return GroundElement(
                id=element_id,
                position=_point(data.get("position"), index, "position"),
                orientation=data.get("orientation", "horizontal"),
            )
        if kind in ("bjt", "transistor"):
            return ThreeTerminalElement(
                id=element_id,
                label=str(data.get("label", "")),
                collector=_point(data.get("collector"), index, "collector"),
                base=_point(data.get("base"), index, "base"),
                emitter=_point(data.get("emitter"), index, "emitter"),
                orientation=data.get("orientation", "horizontal"),
                transistor_type=data.get("transistorType", "npn"),
            )
        if kind in TWO_TERMINAL_KINDS:
            return TwoTerminalElement(
                id=element_id,
                kind=kind,
                label=str(data.get("label", "")),
                start=_point(data.get("start"), index, "start"),
                end=_point(data.get("end"), index, "end"),
                orientation=data.get("orientation", "horizontal"),
                polarized=bool(data.get("polarized", False)),
            )
    except ElementSchemaError:
        raise
    except CircuitValidationError as exc:
        raise ElementSchemaError(str(exc), index=index) from exc
    raise ElementSchemaError(f"Unknown element kind: {kind}", index=index, field="kind")


def _point(data: Any, index: int | None, field: str) -> Point:
    if not isinstance(data, Mapping):
        raise ElementSchemaError(f"{field} must be an object with x and z.", index=index, field=field)
    try:
        return Point(x=float(data["x"]), z=float(data["z"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ElementSchemaError(f"{field} must have numeric x and z.", index=index, field=field) from exc
