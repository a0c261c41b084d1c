# ocv_curve_compare/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence

from .errors import InvalidArgument

POLY_ORDER = 5
N_COEFFS = POLY_ORDER + 1


def check_coefficients(coefficients: Sequence[float]) -> tuple[float, ...]:
    """Return the coefficients as a float tuple; exactly six, ascending degree."""
    if isinstance(coefficients, (str, bytes)):
        raise InvalidArgument(f"coefficients must be a sequence of numbers, got {coefficients!r}")
    try:
        coeffs = tuple(float(c) for c in coefficients)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"coefficients must be a sequence of numbers: {e}") from e
    if len(coeffs) != N_COEFFS:
        raise InvalidArgument(f"expected {N_COEFFS} coefficients (c0..c{POLY_ORDER}), got {len(coeffs)}")
    return coeffs


@dataclass(frozen=True)
class BatteryStateRecord:
    state_label: str                  # e.g. "new", "eol" (exact match)
    coefficients: tuple[float, ...]   # [c0, c1, c2, c3, c4, c5], ascending degree
    soh: float                        # display only
    source_row: int | None = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "coefficients", check_coefficients(self.coefficients))


@dataclass(frozen=True)
class CurveSample:
    soc: float
    voltage: float


@dataclass(frozen=True)
class ComparisonResult:
    record_a: BatteryStateRecord
    record_b: BatteryStateRecord
    curve_a: list[CurveSample]
    curve_b: list[CurveSample]
