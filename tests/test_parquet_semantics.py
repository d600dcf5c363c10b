import json
from pathlib import Path

import pytest

from tictactoe_vm.timeline import ExportArgs, export_timeline
from tictactoe_vm.viewmodel import SQUARE, replay_events


def _hide_parquet_deps(monkeypatch: pytest.MonkeyPatch) -> None:
    # Simulate missing pandas/pyarrow by making importlib.find_spec return None
    import importlib.util

    real_find_spec = importlib.util.find_spec

    def fake_find_spec(name: str, package=None):  # type: ignore[override]
        if name in {"pandas", "pyarrow"}:
            return None
        return real_find_spec(name, package)

    monkeypatch.setattr(importlib.util, "find_spec", fake_find_spec)


def test_format_both_graceful_without_parquet_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _hide_parquet_deps(monkeypatch)
    out = tmp_path / "exp_both"
    res = export_timeline(replay_events([(SQUARE, 4)]), ExportArgs(out=out, format="both"))

    assert (res / "timeline.csv").exists()
    manifest = json.loads((res / "manifest.json").read_text())
    assert manifest["parquet_written"] is False
    assert not (res / "timeline.parquet").exists()


def test_format_parquet_raises_without_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _hide_parquet_deps(monkeypatch)
    out = tmp_path / "exp_parquet"
    with pytest.raises(RuntimeError):
        export_timeline(replay_events([(SQUARE, 4)]), ExportArgs(out=out, format="parquet"))

    # No partial outputs should exist
    assert not out.exists() or not any(out.iterdir())


def test_unknown_format_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        export_timeline(replay_events([]), ExportArgs(out=tmp_path, format="xlsx"))


def test_parquet_roundtrip(tmp_path: Path):
    pd = pytest.importorskip("pandas")
    pytest.importorskip("pyarrow")
    res = export_timeline(
        replay_events([(SQUARE, s) for s in [0, 3, 1, 4, 2]]),
        ExportArgs(out=tmp_path / "pq", format="parquet"),
    )
    df = pd.read_parquet(res / "timeline.parquet")
    assert len(df) == 6
    assert df["winner"].iloc[-1] == "X"
    assert bool(df["is_draw"].any()) is False
    assert not (res / "timeline.csv").exists()
