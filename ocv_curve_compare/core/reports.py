# ocv_curve_compare/core/reports.py
from __future__ import annotations
from pathlib import Path
from typing import Literal
import numpy as np
import pandas as pd
from scipy.io import savemat

from .metrics import comparison_metrics, curves_to_frame
from .model import ComparisonResult

ReportFormat = Literal["csv", "mat", "both"]

SUMMARY_COLUMNS = [
    "label_a", "label_b", "soh_a", "soh_b", "n_points",
    "mean_abs_delta_V", "max_abs_delta_V", "soc_at_max_delta",
    "delta_at_soc0_V", "delta_at_soc1_V",
    "v_min_a_V", "v_max_a_V", "v_min_b_V", "v_max_b_V",
]


def _build_summary(result: ComparisonResult) -> pd.DataFrame:
    row = comparison_metrics(result.curve_a, result.curve_b,
                             result.record_a.state_label, result.record_b.state_label)
    row["soh_a"] = result.record_a.soh
    row["soh_b"] = result.record_b.soh
    return pd.DataFrame([row], columns=SUMMARY_COLUMNS)


def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} -> {out_csv}")


def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr


def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with one field per column.
    Numeric columns become double (Nx1), everything else a cell array (Nx1).
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct = {}
    for col in df_out.columns:
        values = pd.to_numeric(df_out[col], errors="coerce")
        if pd.api.types.is_numeric_dtype(df_out[col]) or values.notna().all():
            mat_struct[str(col)] = values.to_numpy(dtype=float).reshape(-1, 1)
        else:
            mat_struct[str(col)] = _to_mat_cellstr(df_out[col].astype(str).replace("nan", "", regex=False).tolist())
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} -> {out_mat}")


def _write(df_out: pd.DataFrame, out_base: Path, title: str, fmt: ReportFormat, mat_variable: str) -> list[Path]:
    written: list[Path] = []
    if fmt not in ("csv", "mat", "both"):
        raise ValueError(f"unknown report format {fmt!r} (expected csv, mat or both)")
    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_suffix(".csv"), title)
        written.append(out_base.with_suffix(".csv"))
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_suffix(".mat"), mat_variable, title)
        written.append(out_base.with_suffix(".mat"))
    return written


def write_comparison_report(result: ComparisonResult,
                            out_base: Path,
                            title: str,
                            fmt: ReportFormat = "csv",
                            mat_variable: str = "ocv_curves") -> list[Path]:
    """
    Point-wise curve table (soc, soc_pct, both voltages, delta).
    - out_base is a *base path without extension* (e.g., .../ocv_curves)
    - fmt: "csv" | "mat" | "both"
    """
    df_out = curves_to_frame(result.curve_a, result.curve_b,
                             result.record_a.state_label, result.record_b.state_label)
    return _write(df_out, Path(out_base), title, fmt, mat_variable)


def write_summary_report(result: ComparisonResult,
                         out_base: Path,
                         title: str,
                         fmt: ReportFormat = "csv",
                         mat_variable: str = "ocv_summary") -> list[Path]:
    return _write(_build_summary(result), Path(out_base), title, fmt, mat_variable)
