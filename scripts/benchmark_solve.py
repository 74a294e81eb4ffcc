#!/usr/bin/env python3
"""Quick micro-benchmark for the DC solver and validator on resistor ladders."""

from __future__ import annotations

import argparse
import time
from typing import List

from circuitry.dc import solve_dc_circuit
from circuitry.elements import Element, GroundElement, Point, TwoTerminalElement, WireElement
from circuitry.validation import validate_circuit


def resistor_ladder(stages: int, spacing: float = 2.0) -> List[Element]:
    """Battery feeding ``stages`` rungs between a top and bottom rail."""
    elements: List[Element] = [
        TwoTerminalElement("bat", "battery", "12V", Point(0.0, 0.0), Point(0.0, spacing)),
        GroundElement("gnd", Point(0.0, 0.0)),
    ]
    for idx in range(stages):
        x0 = idx * spacing
        x1 = x0 + spacing
        elements.append(
            TwoTerminalElement(f"rs{idx}", "resistor", "50Ω", Point(x0, spacing), Point(x1, spacing))
        )
        elements.append(WireElement(f"wb{idx}", (Point(x0, 0.0), Point(x1, 0.0))))
        elements.append(
            TwoTerminalElement(f"rp{idx}", "resistor", "1kΩ", Point(x1, spacing), Point(x1, 0.0))
        )
    return elements


def _bench(fn, elements: List[Element]) -> float:
    start = time.perf_counter()
    fn(elements)
    return time.perf_counter() - start


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark DC solve and validation.")
    parser.add_argument("--stages", type=int, nargs="+", default=[8, 32, 128])
    parser.add_argument("--validate", action="store_true", help="Include validator benchmark.")
    args = parser.parse_args()

    print("DC solve benchmark:")
    for stages in args.stages:
        elapsed = _bench(solve_dc_circuit, resistor_ladder(stages))
        print(f"  stages={stages} -> {elapsed:.4f}s")

    if args.validate:
        print("Validation benchmark:")
        for stages in args.stages:
            elapsed = _bench(validate_circuit, resistor_ladder(stages))
            print(f"  stages={stages} -> {elapsed:.4f}s")


if __name__ == "__main__":
    main()
