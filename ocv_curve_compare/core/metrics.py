# ocv_curve_compare/core/metrics.py
from __future__ import annotations
import math
import numpy as np
import pandas as pd

from .errors import InvalidArgument
from .model import CurveSample


def _aligned(curve_a: list[CurveSample], curve_b: list[CurveSample]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    if len(curve_a) != len(curve_b):
        raise InvalidArgument(f"curves differ in length ({len(curve_a)} vs {len(curve_b)})")
    soc_a = np.array([s.soc for s in curve_a], dtype=float)
    soc_b = np.array([s.soc for s in curve_b], dtype=float)
    if not np.array_equal(soc_a, soc_b):
        raise InvalidArgument("curves are not sampled on the same SOC grid")
    v_a = np.array([s.voltage for s in curve_a], dtype=float)
    v_b = np.array([s.voltage for s in curve_b], dtype=float)
    return soc_a, v_a, v_b


def voltage_delta(curve_a: list[CurveSample], curve_b: list[CurveSample]) -> list[float]:
    """Point-wise V_b - V_a at equal SOC."""
    _, v_a, v_b = _aligned(curve_a, curve_b)
    return (v_b - v_a).tolist()


def comparison_metrics(curve_a: list[CurveSample], curve_b: list[CurveSample],
                       label_a: str, label_b: str) -> dict:
    soc, v_a, v_b = _aligned(curve_a, curve_b)
    delta = v_b - v_a
    abs_delta = np.abs(delta)
    i_max = int(np.argmax(abs_delta))
    return {
        "label_a": label_a,
        "label_b": label_b,
        "n_points": int(soc.size),
        "mean_abs_delta_V": round(float(np.mean(abs_delta)), 6),
        "max_abs_delta_V":  round(float(abs_delta[i_max]), 6),
        "soc_at_max_delta": round(float(soc[i_max]), 6),
        "delta_at_soc0_V":  round(float(delta[0]), 6),
        "delta_at_soc1_V":  round(float(delta[-1]), 6),
        "v_min_a_V": round(float(np.min(v_a)), 6),
        "v_max_a_V": round(float(np.max(v_a)), 6),
        "v_min_b_V": round(float(np.min(v_b)), 6),
        "v_max_b_V": round(float(np.max(v_b)), 6),
    }


def _column_tag(label: str) -> str:
    tag = "".join(ch if ch.isalnum() else "_" for ch in str(label)).strip("_")
    return tag or "curve"


def curves_to_frame(curve_a: list[CurveSample], curve_b: list[CurveSample],
                    label_a: str, label_b: str) -> pd.DataFrame:
    soc, v_a, v_b = _aligned(curve_a, curve_b)
    tag_a, tag_b = _column_tag(label_a), _column_tag(label_b)
    if tag_a == tag_b:
        tag_a, tag_b = f"{tag_a}_a", f"{tag_b}_b"
    col_a, col_b = f"voltage_{tag_a}_V", f"voltage_{tag_b}_V"
    return pd.DataFrame({
        "soc": soc,
        "soc_pct": soc * 100.0,
        col_a: v_a,
        col_b: v_b,
        "delta_V": v_b - v_a,
    })


def is_finite_curve(curve: list[CurveSample]) -> bool:
    return all(math.isfinite(s.voltage) for s in curve)
