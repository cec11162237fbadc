"""
Tests for the gpworks command line.
"""

import json

import pytest

from gpworks.__main__ import build_parser, main


@pytest.fixture
def estimate_file(tmp_path, estimate_payload):
    path = tmp_path / "drain.json"
    path.write_text(json.dumps(estimate_payload))
    return path


class TestCli:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "estimate" in capsys.readouterr().out

    def test_parser_commands(self):
        args = build_parser().parse_args(["mb", "--input", "x.json", "--booklet"])
        assert args.command == "mb"
        assert args.booklet is True

    def test_estimate_totals(self, estimate_file, capsys):
        assert main(["estimate", "--input", str(estimate_file)]) == 0
        out = capsys.readouterr().out
        assert "1360.98" in out
        assert "One Thousand Three Hundred Sixty One" in out

    def test_estimate_with_dimensions(self, estimate_file, capsys):
        assert main(["estimate", "--input", str(estimate_file), "--dims", "10", "2", "0.5"]) == 0
        # Plastering (sqm, entered quantity 5) becomes 10 × 2 = 20 sqm @ 20
        assert "1400.00" in capsys.readouterr().out

    def test_deduction_from_flags(self, capsys):
        code = main([
            "deduction", "--gross", "100000",
            "--income-tax", "1", "--gst-tds", "2", "--labour-cess", "1", "--security-deposit", "10",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "86000.00" in out
        assert "14000" in out

    def test_deduction_from_bill_file(self, tmp_path, capsys):
        path = tmp_path / "bill.json"
        path.write_text(json.dumps({
            "actual_value": 100000,
            "bill_number": "RA-2",
            "rates": {"income_tax": 0, "gst_tds": 0, "labour_cess": 0, "security_deposit": 0},
        }))
        assert main(["deduction", "--input", str(path)]) == 0
        out = capsys.readouterr().out
        assert "119180.00" in out

    def test_invalid_input_exit_code(self):
        assert main(["deduction", "--gross", "-5"]) == 1
        assert main(["deduction"]) == 1

    def test_missing_file_exit_code(self, tmp_path):
        assert main(["estimate", "--input", str(tmp_path / "nope.json")]) == 1

    def test_infinite_rate_exit_code(self, tmp_path, estimate_payload):
        estimate_payload["items"][0]["rate"] = float("inf")
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(estimate_payload))
        assert "Infinity" in path.read_text()
        assert main(["estimate", "--input", str(path)]) == 1

    def test_infinite_gross_exit_code(self):
        assert main(["deduction", "--gross", "inf"]) == 1

    def test_estimate_outputs(self, estimate_file, tmp_path):
        pytest.importorskip("reportlab")
        pytest.importorskip("openpyxl")
        out_dir = tmp_path / "out"
        code = main([
            "estimate", "--input", str(estimate_file), "--output", str(out_dir),
            "--pdf", "--mode", "abstract", "--xlsx",
        ])
        assert code == 0
        assert (out_dir / "drain_abstract.pdf").exists()
        assert (out_dir / "drain_abstract.xlsx").exists()

    def test_mb_booklet(self, estimate_file, tmp_path):
        pytest.importorskip("reportlab")
        pytest.importorskip("fitz")
        out_dir = tmp_path / "out"
        assert main(["mb", "--input", str(estimate_file), "--output", str(out_dir), "--booklet"]) == 0
        assert (out_dir / "drain_mb_booklet.pdf").exists()
