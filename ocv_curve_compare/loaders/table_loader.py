# ocv_curve_compare/loaders/table_loader.py
from __future__ import annotations
from pathlib import Path
import io, re, logging
import pandas as pd

from ..core.normalize import column_names, parse_columns, to_float, to_label
from ..core.model import BatteryStateRecord

_LOG = logging.getLogger(__name__)


def infer_table_name(path: Path) -> str:
    """Output folder name for a state table (sanitized file stem)."""
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", Path(path).stem).strip("_")
    return s or "table"


# ---------- CSV normalization ----------
def _records_from_df(df: pd.DataFrame, cfg: dict | None, source: str) -> list[BatteryStateRecord]:
    names = column_names(cfg)
    label_col, soh_col, coeff_cols, missing = parse_columns(df, names)
    if missing:
        raise ValueError(f"{source}: state table missing required columns: {', '.join(missing)}")

    labels = to_label(df[label_col])
    soh = to_float(df[soh_col])
    coeffs = pd.DataFrame({i: to_float(df[c]) for i, c in enumerate(coeff_cols)})

    valid = labels.notna() & coeffs.notna().all(axis=1)
    n_bad = int((~valid).sum())
    if n_bad:
        bad_rows = df.index[~valid.to_numpy()].tolist()
        _LOG.warning("%s: rejected %d row(s) with missing label or coefficients (rows %s)",
                     source, n_bad, bad_rows[:10])

    records: list[BatteryStateRecord] = []
    for idx in df.index[valid.to_numpy()]:
        records.append(BatteryStateRecord(
            state_label=str(labels.loc[idx]),
            coefficients=tuple(coeffs.loc[idx].tolist()),
            soh=float(soh.loc[idx]),
            source_row=int(idx),
        ))
    _LOG.debug("%s: %d record(s) loaded", source, len(records))
    return records


def read_records(buff: bytes | str, cfg: dict | None = None, source: str = "<memory>") -> list[BatteryStateRecord]:
    """Parse state-table CSV content (bytes or text) into records."""
    if isinstance(buff, str):
        buff = buff.encode("utf-8")
    df = pd.read_csv(io.BytesIO(buff), sep=",", skipinitialspace=True)
    return _records_from_df(df, cfg, source)


# ---------- public loader ----------
def load(path: Path, cfg: dict | None = None) -> list[BatteryStateRecord]:
    """
    Accepts: a .csv battery state table (one row per cell state).
    Returns: list[BatteryStateRecord] in file order.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"state table not found: {path}")
    return read_records(path.read_bytes(), cfg, source=path.name)
