# ocv_curve_compare/core/normalize.py
from __future__ import annotations
import pandas as pd

from .model import N_COEFFS

DEFAULT_COLUMNS = {
    "label": "battery_state_label",
    "soh": "SOH",
    "coefficient_prefix": "ocv_c",
}


def column_names(cfg: dict | None) -> dict:
    cols = dict(DEFAULT_COLUMNS)
    cols.update({k: str(v) for k, v in ((cfg or {}).get("columns") or {}).items() if v is not None})
    return cols


def parse_columns(df: pd.DataFrame, names: dict):
    """
    Case-insensitive lookup of the state-table columns; source headers are kept.
    Returns (label_col, soh_col, [c0_col..c5_col], missing) with None for absent ones.
    """
    cmap = {str(c).strip().lower(): c for c in df.columns}
    label = cmap.get(names["label"].strip().lower())
    soh = cmap.get(names["soh"].strip().lower())
    prefix = names["coefficient_prefix"].strip().lower()
    coeffs = [cmap.get(f"{prefix}{i}") for i in range(N_COEFFS)]

    missing = []
    if label is None:
        missing.append(names["label"])
    if soh is None:
        missing.append(names["soh"])
    missing.extend(f"{names['coefficient_prefix']}{i}" for i, c in enumerate(coeffs) if c is None)
    return label, soh, coeffs, missing


def to_float(s) -> pd.Series:
    if pd.api.types.is_numeric_dtype(s):
        return s.astype(float)
    return pd.to_numeric(s.astype(str).str.strip().str.replace(",", ".", regex=False), errors="coerce")


def to_label(s) -> pd.Series:
    out = s.astype("string").str.strip()
    return out.replace("", pd.NA)
