# ocv_curve_compare/core/pipeline.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging

from .model import BatteryStateRecord, ComparisonResult
from .polynomial import check_sample_count, compare, find_record_by_label
from .metrics import comparison_metrics, is_finite_curve
from .plotting import save_comparison_plot
from .reports import write_comparison_report, write_summary_report

_LOG = logging.getLogger(__name__)


@dataclass
class ComparisonCfg:
    label_a: str = "new"
    label_b: str = "eol"
    sample_count: int = 100
    plot_enabled: bool = True
    plot_file_name: str = "ocv_vs_soc.png"
    plot_dpi: int = 160
    display_names: dict = field(default_factory=dict)
    report_format: str = "csv"
    mat_variable: str = "ocv_curves"


def prepare_comparison(cfg: dict | None) -> ComparisonCfg:
    """Read the comparison/plot/reports sections of the config; missing keys keep defaults.
    Raises ValueError (InvalidArgument for sample_count) on unusable values.
    """
    cfg = cfg or {}
    cmp_cfg = cfg.get("comparison", {}) or {}
    plot_cfg = cfg.get("plot", {}) or {}
    rep_cfg = cfg.get("reports", {}) or {}
    d = ComparisonCfg()
    fmt = str(rep_cfg.get("format", d.report_format)).lower()
    if fmt not in ("csv", "mat", "both"):
        raise ValueError(f"reports.format must be csv, mat or both, got {fmt!r}")
    return ComparisonCfg(
        label_a=str(cmp_cfg.get("label_a", d.label_a)),
        label_b=str(cmp_cfg.get("label_b", d.label_b)),
        sample_count=check_sample_count(cmp_cfg.get("sample_count", d.sample_count)),
        plot_enabled=bool(plot_cfg.get("enabled", d.plot_enabled)),
        plot_file_name=str(plot_cfg.get("file_name", d.plot_file_name)),
        plot_dpi=int(plot_cfg.get("dpi", d.plot_dpi)),
        display_names={str(k): str(v) for k, v in (cfg.get("display_names", {}) or {}).items()},
        report_format=fmt,
        mat_variable=str(rep_cfg.get("mat_variable", d.mat_variable)),
    )


def run_pipeline(records: list[BatteryStateRecord], cfg: dict, out_dir: Path,
                 title: str = "state table") -> ComparisonResult:
    """
    Select the two configured states (first match per label), sample both
    OCV curves on one SOC grid, then write plot + reports into out_dir.
    NotFound propagates; nothing is written when a state is missing.
    """
    prep = prepare_comparison(cfg)

    record_a = find_record_by_label(records, prep.label_a)
    record_b = find_record_by_label(records, prep.label_b)
    _LOG.info("%s: comparing %r (row %s) vs %r (row %s)", title,
              record_a.state_label, record_a.source_row, record_b.state_label, record_b.source_row)

    curve_a, curve_b = compare(record_a, record_b, prep.sample_count)
    result = ComparisonResult(record_a=record_a, record_b=record_b, curve_a=curve_a, curve_b=curve_b)
    for rec, curve in ((record_a, curve_a), (record_b, curve_b)):
        if not is_finite_curve(curve):
            _LOG.warning("%s: curve for %r contains non-finite voltages", title, rec.state_label)

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if prep.plot_enabled:
        save_comparison_plot(result, out_dir / prep.plot_file_name,
                             display_names=prep.display_names, dpi=prep.plot_dpi)

    write_comparison_report(result, out_dir / "ocv_curves", f"{title} OCV curves",
                            fmt=prep.report_format, mat_variable=prep.mat_variable)
    write_summary_report(result, out_dir / "ocv_summary", f"{title} OCV summary",
                         fmt=prep.report_format, mat_variable=f"{prep.mat_variable}_summary")

    summary = comparison_metrics(curve_a, curve_b, record_a.state_label, record_b.state_label)
    print(f"[summary] {title}: max |dV| = {summary['max_abs_delta_V']:.4f} V "
          f"at SOC {summary['soc_at_max_delta']}, mean |dV| = {summary['mean_abs_delta_V']:.4f} V")
    return result
