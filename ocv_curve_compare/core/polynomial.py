# ocv_curve_compare/core/polynomial.py
from __future__ import annotations
import logging
import numbers
from typing import Iterable, Sequence
import numpy as np

from .errors import InvalidArgument, NotFound
from .model import BatteryStateRecord, CurveSample, check_coefficients

_LOG = logging.getLogger(__name__)


def evaluate(coefficients: Sequence[float], soc: float) -> float:
    """
    V(z) = sum_{i=0..5} c_i * z^i with coefficients in ascending order.
    Evaluated highest degree first (Horner), so no explicit powers of soc.
    """
    coeffs = check_coefficients(coefficients)
    acc = coeffs[-1]
    for c in reversed(coeffs[:-1]):
        acc = acc * soc + c
    return float(acc)


def check_sample_count(sample_count) -> int:
    if isinstance(sample_count, bool) or not isinstance(sample_count, numbers.Integral):
        raise InvalidArgument(f"sample_count must be an integer, got {sample_count!r}")
    if sample_count < 2:
        raise InvalidArgument(f"sample_count must be >= 2, got {sample_count}")
    return int(sample_count)


def soc_grid(sample_count: int) -> list[float]:
    """Equally spaced SOC values on [0, 1], both endpoints included."""
    sample_count = check_sample_count(sample_count)
    grid = np.linspace(0.0, 1.0, sample_count)
    return [float(z) for z in grid]


def _sample_on(coeffs: tuple[float, ...], grid: list[float]) -> list[CurveSample]:
    return [CurveSample(soc=z, voltage=evaluate(coeffs, z)) for z in grid]


def sample_curve(coefficients: Sequence[float], sample_count: int) -> list[CurveSample]:
    coeffs = check_coefficients(coefficients)
    return _sample_on(coeffs, soc_grid(sample_count))


def find_record_by_label(records: Iterable[BatteryStateRecord], label: str) -> BatteryStateRecord:
    """First record (input order) whose state_label equals label exactly."""
    seen: list[str] = []
    for rec in records:
        if rec.state_label == label:
            return rec
        seen.append(rec.state_label)
    raise NotFound(label, seen)


def compare(record_a: BatteryStateRecord,
            record_b: BatteryStateRecord,
            sample_count: int) -> tuple[list[CurveSample], list[CurveSample]]:
    grid = soc_grid(sample_count)
    curve_a = _sample_on(record_a.coefficients, grid)
    curve_b = _sample_on(record_b.coefficients, grid)
    _LOG.debug("compared %r vs %r on %d SOC points", record_a.state_label, record_b.state_label, len(grid))
    return curve_a, curve_b
