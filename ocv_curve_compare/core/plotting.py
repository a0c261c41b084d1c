# ocv_curve_compare/core/plotting.py
from __future__ import annotations
from pathlib import Path
import matplotlib.pyplot as plt

from .model import ComparisonResult, N_COEFFS

DEFAULT_DISPLAY_NAMES = {"new": "New Cell", "eol": "EOL Cell"}

MODEL_ANNOTATION = (
    f"Model: {N_COEFFS - 1}th-Order Polynomial\n"
    r"$V(z) = \sum_{i=0}^{5} c_i z^i$"
)


def display_name(label: str, names: dict | None = None) -> str:
    mapping = dict(DEFAULT_DISPLAY_NAMES)
    mapping.update(names or {})
    return str(mapping.get(label, f"{label} Cell"))


def legend_label(label: str, soh: float, names: dict | None = None) -> str:
    return f"{display_name(label, names)} (SOH = {soh:.2f})"


def save_comparison_plot(result: ComparisonResult,
                         out_path: Path,
                         display_names: dict | None = None,
                         dpi: int = 160) -> Path:
    """
    OCV vs SOC chart for the two compared states.
    Curve A solid blue, curve B dashed red; SOC on the x axis in percent.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    soc_pct = [s.soc * 100.0 for s in result.curve_a]
    fig, ax = plt.subplots(figsize=(8, 5), facecolor="white")
    ax.plot(soc_pct, [s.voltage for s in result.curve_a], "b-", linewidth=2,
            label=legend_label(result.record_a.state_label, result.record_a.soh, display_names))
    ax.plot(soc_pct, [s.voltage for s in result.curve_b], "r--", linewidth=2,
            label=legend_label(result.record_b.state_label, result.record_b.soh, display_names))

    ax.grid(True)
    ax.tick_params(labelsize=12)
    ax.set_xlabel("State of Charge (SOC) [%]", fontweight="bold")
    ax.set_ylabel("Open Circuit Voltage (V)", fontweight="bold")
    ax.set_title("OCV vs. SOC Relationship (Model Parameters)", fontsize=14)
    ax.legend(loc="lower right")
    ax.text(0.05, 0.75, MODEL_ANNOTATION, transform=ax.transAxes, va="top",
            bbox=dict(boxstyle="square", facecolor="white", edgecolor="black"))

    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    print(f"[OK] OCV comparison plot -> {out_path}")
    return out_path
