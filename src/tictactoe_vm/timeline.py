"""
Timeline export: one row per GameState emitted by a view-model session.

CSV is always available; Parquet needs pandas + pyarrow
(``pip install .[parquet]``). A manifest.json records row counts, schema
hash and checksums so two exports of the same session can be compared.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .board import is_draw, serialize_board
from .paths import get_git_commit
from .render import status_line
from .viewmodel import GameState

TIMELINE_VERSION = "1.0.0"

FIELDS = [
    "step",
    "board",
    "history_length",
    "move_index",
    "winner",
    "next_player",
    "status",
    "is_draw",
]


@dataclass
class ExportArgs:
    out: Path
    format: str = "csv"  # one of: "csv", "parquet", "both"
    cli_argv: List[str] | None = None


def state_rows(states: Iterable[GameState]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for step, state in enumerate(states):
        rows.append({
            "step": step,
            "board": serialize_board(state.current_board),
            "history_length": len(state.history),
            "move_index": len(state.history) - 1,
            "winner": state.winner,
            "next_player": state.next_player,
            "status": status_line(state),
            "is_draw": is_draw(state.current_board),
        })
    return rows


def _schema_hash(fields: List[str]) -> str:
    return hashlib.sha256("\n".join(sorted(fields)).encode("utf-8")).hexdigest()


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _have_parquet_deps() -> bool:
    return (importlib.util.find_spec("pandas") is not None
            and importlib.util.find_spec("pyarrow") is not None)


def export_timeline(states: Iterable[GameState], args: ExportArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in {"csv", "parquet", "both"}:
        raise ValueError(f"Unknown export format: {args.format}")
    if fmt == "parquet" and not _have_parquet_deps():
        # Strict: nothing is written when only parquet was requested
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )

    rows = state_rows(states)
    args.out.mkdir(parents=True, exist_ok=True)
    csv_path = args.out / "timeline.csv"
    parquet_path = args.out / "timeline.parquet"
    wrote_csv = False
    wrote_parquet = False

    if fmt in {"csv", "both"}:
        with csv_path.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=FIELDS)
            w.writeheader()
            for r in rows:
                w.writerow(r)
        wrote_csv = True
        logging.info("Wrote CSV: %s (%d rows)", csv_path, len(rows))

    if fmt in {"parquet", "both"}:
        if _have_parquet_deps():
            import pandas as pd  # type: ignore

            pd.DataFrame(rows, columns=FIELDS).to_parquet(parquet_path)
            wrote_parquet = True
            logging.info("Wrote Parquet: %s", parquet_path)
        else:
            logging.warning(
                "Parquet dependencies not available; proceeding with CSV only, "
                "manifest will record parquet_written=false."
            )

    files: Dict[str, Any] = {
        "timeline_csv": str(csv_path) if wrote_csv else None,
        "timeline_parquet": str(parquet_path) if wrote_parquet else None,
    }
    manifest = {
        "timeline_version": TIMELINE_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "format": fmt,
        "git_commit": get_git_commit(),
        "cli_argv": args.cli_argv,
        "row_count": len(rows),
        "final_status": rows[-1]["status"] if rows else None,
        "schema_hash": _schema_hash(FIELDS),
        "files": files,
        "checksums": {label: _sha256_file(Path(p)) for label, p in files.items() if p is not None},
        "parquet_written": wrote_parquet,
    }
    (args.out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json to %s", args.out)
    return args.out
