from pathlib import Path
import tempfile
import unittest

import numpy as np
import pandas as pd
from scipy.io import loadmat

from ocv_curve_compare.core.errors import InvalidArgument
from ocv_curve_compare.core.metrics import comparison_metrics, curves_to_frame, voltage_delta
from ocv_curve_compare.core.model import BatteryStateRecord, ComparisonResult, CurveSample
from ocv_curve_compare.core.polynomial import compare
from ocv_curve_compare.core.reports import write_comparison_report, write_summary_report
from ocv_curve_compare.loaders import table_loader
from ocv_curve_compare.utils.detect import discover_tables

HEADER = "cell_id,battery_state_label,SOH,ocv_c0,ocv_c1,ocv_c2,ocv_c3,ocv_c4,ocv_c5\n"


def _result(sample_count=3):
    new = BatteryStateRecord("new", (3.0, 0.5, 0, 0, 0, 0), 1.0)
    eol = BatteryStateRecord("eol", (2.5, 0.3, 0, 0, 0, 0), 0.8)
    curve_a, curve_b = compare(new, eol, sample_count)
    return ComparisonResult(record_a=new, record_b=eol, curve_a=curve_a, curve_b=curve_b)


class TableLoaderTests(unittest.TestCase):
    def test_rows_become_records_in_file_order(self):
        text = HEADER + (
            "A1,new,1.00,3.0,0.5,0,0,0,0\n"
            "A2,mid,0.90,2.8,0.4,0,0,0,0\n"
            "A3,eol,0.80,2.5,0.3,0,0,0,0\n"
        )
        records = table_loader.read_records(text)
        self.assertEqual(["new", "mid", "eol"], [r.state_label for r in records])
        self.assertEqual((2.5, 0.3, 0.0, 0.0, 0.0, 0.0), records[2].coefficients)
        self.assertAlmostEqual(0.8, records[2].soh)
        self.assertEqual(2, records[2].source_row)

    def test_column_lookup_is_case_insensitive(self):
        text = "Battery_State_Label,soh,OCV_C0,OCV_C1,OCV_C2,OCV_C3,OCV_C4,OCV_C5\nnew,1.0,3,0.5,0,0,0,0\n"
        records = table_loader.read_records(text)
        self.assertEqual(1, len(records))
        self.assertEqual(3.0, records[0].coefficients[0])

    def test_missing_coefficient_column_is_an_error(self):
        text = "battery_state_label,SOH,ocv_c0,ocv_c1,ocv_c2,ocv_c3,ocv_c4\nnew,1.0,3,0.5,0,0,0\n"
        with self.assertRaises(ValueError) as ctx:
            table_loader.read_records(text)
        self.assertIn("ocv_c5", str(ctx.exception))

    def test_rows_with_missing_coefficients_are_rejected(self):
        text = HEADER + (
            "A1,new,1.00,3.0,0.5,0,0,0,\n"
            "A2,new,0.99,3.1,0.5,0,0,0,0\n"
            "A3,,0.80,2.5,0.3,0,0,0,0\n"
        )
        with self.assertLogs("ocv_curve_compare.loaders.table_loader", level="WARNING"):
            records = table_loader.read_records(text)
        self.assertEqual(1, len(records))
        self.assertEqual(3.1, records[0].coefficients[0])

    def test_labels_are_stripped_but_not_case_folded(self):
        text = HEADER + "A1, EOL ,0.8,2.5,0.3,0,0,0,0\n"
        records = table_loader.read_records(text)
        self.assertEqual("EOL", records[0].state_label)

    def test_custom_column_names_from_config(self):
        cfg = {"columns": {"label": "state", "soh": "health", "coefficient_prefix": "k"}}
        text = "state,health,k0,k1,k2,k3,k4,k5\neol,0.75,2.5,0.3,0,0,0,0\n"
        records = table_loader.read_records(text, cfg)
        self.assertEqual("eol", records[0].state_label)
        self.assertAlmostEqual(0.75, records[0].soh)

    def test_load_from_disk_and_discovery(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "sub").mkdir()
            (root / "sub" / "table b.csv").write_text(HEADER + "A1,new,1.0,3,0.5,0,0,0,0\n", encoding="utf-8")
            (root / "a.csv").write_text(HEADER + "A1,eol,0.8,2.5,0.3,0,0,0,0\n", encoding="utf-8")
            (root / "notes.txt").write_text("ignore me", encoding="utf-8")

            found = discover_tables(root)
            self.assertEqual(["a.csv", "table b.csv"], [p.name for p in found])
            self.assertEqual(["a.csv"], [p.name for p in discover_tables(root, recurse=False)])
            self.assertEqual("table_b", table_loader.infer_table_name(found[1]))

            records = table_loader.load(found[1])
            self.assertEqual("new", records[0].state_label)

    def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            table_loader.load(Path("does/not/exist.csv"))


class MetricsTests(unittest.TestCase):
    def test_voltage_delta_is_pointwise(self):
        res = _result()
        delta = voltage_delta(res.curve_a, res.curve_b)
        np.testing.assert_allclose(delta, [-0.5, -0.6, -0.7])

    def test_mismatched_grids_rejected(self):
        a = [CurveSample(0.0, 1.0), CurveSample(1.0, 2.0)]
        b = [CurveSample(0.0, 1.0), CurveSample(0.5, 2.0)]
        with self.assertRaises(InvalidArgument):
            voltage_delta(a, b)
        with self.assertRaises(InvalidArgument):
            voltage_delta(a, a[:1])

    def test_summary_metrics(self):
        res = _result()
        m = comparison_metrics(res.curve_a, res.curve_b, "new", "eol")
        self.assertEqual(3, m["n_points"])
        self.assertAlmostEqual(0.7, m["max_abs_delta_V"])
        self.assertEqual(1.0, m["soc_at_max_delta"])
        self.assertAlmostEqual(0.6, m["mean_abs_delta_V"])
        self.assertAlmostEqual(-0.5, m["delta_at_soc0_V"])
        self.assertAlmostEqual(3.5, m["v_max_a_V"])

    def test_frame_columns(self):
        res = _result()
        df = curves_to_frame(res.curve_a, res.curve_b, "new", "eol")
        self.assertEqual(["soc", "soc_pct", "voltage_new_V", "voltage_eol_V", "delta_V"], list(df.columns))
        self.assertEqual([0.0, 50.0, 100.0], df["soc_pct"].tolist())

    def test_frame_columns_for_identical_labels(self):
        res = _result()
        df = curves_to_frame(res.curve_a, res.curve_b, "eol", "eol")
        self.assertIn("voltage_eol_a_V", df.columns)
        self.assertIn("voltage_eol_b_V", df.columns)


class ReportTests(unittest.TestCase):
    def test_csv_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out_base = Path(tmpdir) / "report" / "ocv_curves"
            written = write_comparison_report(_result(), out_base, "demo", fmt="csv")
            self.assertEqual([out_base.with_suffix(".csv")], written)
            df = pd.read_csv(out_base.with_suffix(".csv"))
            self.assertEqual(3, len(df))
            np.testing.assert_allclose(df["voltage_eol_V"].to_numpy(), [2.5, 2.65, 2.8])

    def test_mat_and_csv_summary(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out_base = Path(tmpdir) / "ocv_summary"
            written = write_summary_report(_result(), out_base, "demo", fmt="both", mat_variable="summary")
            self.assertEqual({".csv", ".mat"}, {p.suffix for p in written})

            df = pd.read_csv(out_base.with_suffix(".csv"))
            self.assertEqual(["new"], df["label_a"].tolist())
            self.assertAlmostEqual(0.8, float(df["soh_b"].iloc[0]))

            mat = loadmat(out_base.with_suffix(".mat"))
            self.assertIn("summary", mat)

    def test_unknown_format_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ValueError):
                write_comparison_report(_result(), Path(tmpdir) / "x", "demo", fmt="xlsx")


if __name__ == "__main__":
    unittest.main()
