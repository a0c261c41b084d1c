# ocv_curve_compare/main.py
from __future__ import annotations
from pathlib import Path
import argparse
import logging
import sys
import yaml

from ocv_curve_compare.core.errors import NotFound
from ocv_curve_compare.core.pipeline import prepare_comparison, run_pipeline
from ocv_curve_compare.loaders import table_loader
from ocv_curve_compare.utils.detect import discover_tables

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config.yaml"


def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _log_level(name) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"logging.level must be a logging level name, got {name!r}")
    return level


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare OCV-SOC curves of two battery states.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="YAML config file.")
    parser.add_argument("--input", type=Path, default=None, help="State table CSV or folder (overrides config).")
    parser.add_argument("--output", type=Path, default=None, help="Output root folder (overrides config).")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    # ---------- config ----------
    cfg = load_config(args.config)
    in_cfg = cfg.get("input", {}) or {}
    out_cfg = cfg.get("output", {}) or {}
    log_cfg = cfg.get("logging", {}) or {}

    in_path = (args.input or Path(in_cfg.get("path", "."))).resolve()
    recurse = bool(in_cfg.get("recurse", True))
    out_root = (args.output or Path(out_cfg.get("root", "out"))).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    verbose = bool(log_cfg.get("verbose", True))
    try:
        level = _log_level(log_cfg.get("level", "INFO"))
        prep = prepare_comparison(cfg)
    except ValueError as e:
        print(f"[ERROR] config: {e}")
        return 2
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")
        print(f"[cfg] output={out_root}")
        print(f"[cfg] compare {prep.label_a!r} vs {prep.label_b!r} on {prep.sample_count} SOC points")

    # ---------- discover ----------
    tables = discover_tables(in_path, recurse=recurse)
    if not tables:
        print(f"[INFO] No CSV state tables found under: {in_path}")
        return 0
    if verbose:
        print(f"[detector] found {len(tables)} state table(s)")

    for table in tables:
        name = table_loader.infer_table_name(table)
        if verbose:
            print(f"  [load] {table.name}")
        try:
            records = table_loader.load(table, cfg)
        except (OSError, ValueError) as e:
            print(f"[WARN] loader failed for {table.name}: {e}")
            continue
        if not records:
            print(f"[WARN] {table.name}: no valid records; skipping.")
            continue

        try:
            run_pipeline(records, cfg, out_root / name, title=name)
        except NotFound as e:
            print(f"[ERROR] {table.name}: could not find both {prep.label_a!r} and {prep.label_b!r} states: {e}")
            return 1

        if verbose:
            print(f"[summary] finished {name} with {len(records)} record(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
