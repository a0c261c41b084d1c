# ocv_curve_compare/utils/detect.py
from __future__ import annotations
from pathlib import Path

TABLE_SUFFIXES: tuple[str, ...] = (".csv",)


def is_state_table(p: Path) -> bool:
    return p.is_file() and p.suffix.lower() in TABLE_SUFFIXES


def discover_tables(root: Path, recurse: bool = True) -> list[Path]:
    """
    If 'root' is a file -> return that one table (if it is a CSV).
    If 'root' is a folder -> walk (optionally recursively) and collect CSV tables.
    """
    root = Path(root)
    if root.is_file():
        return [root.resolve()] if is_state_table(root) else []
    if not root.is_dir():
        return []

    it = root.rglob("*") if recurse else root.glob("*")
    tables = [p.resolve() for p in it if is_state_table(p)]
    # deterministic ordering
    tables.sort(key=str)
    return tables
