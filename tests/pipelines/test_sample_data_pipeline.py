from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from leave_reconcile import build_correction_file as bcf
from leave_reconcile.core.generate_sample_data import generate_sample_data
from leave_reconcile.load_data import load_allow_list, load_grid
from leave_reconcile.session import ReconciliationSession


def _patch_report_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    outputs_dir = tmp_path / "reports" / "outputs"
    monkeypatch.setattr(bcf, "REPORTS_OUTPUTS_DIR", outputs_dir)
    return outputs_dir


def test_generated_samples_reconcile(tmp_path: Path) -> None:
    outputs = generate_sample_data(output_dir=tmp_path, seed=7)

    allow_list = load_allow_list(outputs["allow_list"])
    assert allow_list == frozenset({"1110", "1120", "1130", "1150", "1160"})

    session = ReconciliationSession(
        drmis_grid=load_grid(outputs["drmis"], label="DRMIS"),
        oracle_grid=load_grid(outputs["oracle"], label="Oracle"),
        allow_list=allow_list,
    )
    result = session.run()

    assert result.mismatch_count > 0
    assert result.message == f"Found {result.mismatch_count} mismatches"
    assert len(result.groups) == result.mismatch_count
    assert set(result.mismatches["employee_id"]) == {result.groups[0].data_row.employee_id}


def test_generate_sample_data_is_deterministic(tmp_path: Path) -> None:
    first = generate_sample_data(output_dir=tmp_path / "a", seed=11)
    second = generate_sample_data(output_dir=tmp_path / "b", seed=11)

    left = pd.read_excel(first["drmis"], header=None)
    right = pd.read_excel(second["drmis"], header=None)
    pd.testing.assert_frame_equal(left, right)


def test_write_correction_file_routes_to_outputs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    outputs_dir = _patch_report_dirs(monkeypatch, tmp_path)

    path = bcf.write_correction_file(bcf.build_correction_dataframe([]), output_path=None)

    assert path.parent == outputs_dir
    assert path.name.startswith("CATs_Edits_")
    assert path.exists() is True


def test_main_writes_both_workbooks(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    samples = generate_sample_data(output_dir=tmp_path / "sample", seed=3)
    out_dir = tmp_path / "out"

    bcf.main(
        [
            "--drmis", str(samples["drmis"]),
            "--oracle", str(samples["oracle"]),
            "--allow-list", str(samples["allow_list"]),
            "--output-dir", str(out_dir),
        ]
    )

    printed = capsys.readouterr().out
    assert "mismatches" in printed
    names = sorted(p.name for p in out_dir.iterdir())
    assert len(names) == 2
    assert names[0].startswith("CATs_Edits_")
    assert names[1].startswith("Reconciliation_")
