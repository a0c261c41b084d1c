# ocv_curve_compare/core/errors.py
from __future__ import annotations


class CurveModelError(Exception):
    pass


class InvalidArgument(CurveModelError, ValueError):
    """Malformed coefficients or sample count; raised before any computation."""


class NotFound(CurveModelError, LookupError):
    """No record carries the requested state label."""

    def __init__(self, label: str, available: list[str] | None = None):
        self.label = label
        self.available = list(available or [])
        msg = f"no record with state label {label!r}"
        if self.available:
            msg += f" (available: {', '.join(sorted(set(self.available)))})"
        super().__init__(msg)
