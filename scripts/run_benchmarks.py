#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import random
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from tictactoe_vm.history import append_move, initial_history, truncate_to_move
from tictactoe_vm.timeline import ExportArgs, export_timeline
from tictactoe_vm.viewmodel import MOVE, SQUARE, replay_events


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    events: int = 2000
    out: Path = Path("exports") / "bench"


def random_session(rng: random.Random, n: int) -> List[Tuple[str, int]]:
    """Random in-range clicks; move clicks rewind to a random earlier move."""
    events: List[Tuple[str, int]] = []
    history = initial_history()
    for _ in range(n):
        if rng.random() < 0.2:
            move = rng.randrange(len(history))
            events.append((MOVE, move))
            history = truncate_to_move(history, move)
        else:
            square = rng.randrange(9)
            events.append((SQUARE, square))
            history = append_move(history, square)
    return events


def main() -> int:
    p = argparse.ArgumentParser(description="Time view-model replays and timeline exports")
    p.add_argument("--seeds", type=int, default=Config.seeds)
    p.add_argument("--events", type=int, default=Config.events)
    p.add_argument("--out", type=Path, default=Config.out)
    ns = p.parse_args()
    cfg = Config(seeds=ns.seeds, events=ns.events, out=ns.out)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    replay_times: List[float] = []
    export_times: List[float] = []
    for s in range(cfg.seeds):
        session = random_session(random.Random(s), cfg.events)
        t0 = time.perf_counter()
        states = replay_events(session)
        t1 = time.perf_counter()
        replay_times.append(t1 - t0)
        t2 = time.perf_counter()
        export_timeline(states, ExportArgs(out=cfg.out / f"seed_{s:03d}"))
        t3 = time.perf_counter()
        export_times.append(t3 - t2)
    m_replay, h_replay = ci95(replay_times)
    m_export, h_export = ci95(export_times)
    logging.info("replay(%d events): mean=%.4fs ± %.4fs (95%% CI)", cfg.events, m_replay, h_replay)
    logging.info("export(csv): mean=%.4fs ± %.4fs (95%% CI)", m_export, h_export)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
