from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, TextIO, Tuple

from .board import calculate_winner, check_square, deserialize_board, is_draw, serialize_board
from .paths import exports_dir
from .render import move_labels, render_state, status_line
from .timeline import ExportArgs, export_timeline
from .viewmodel import MOVE, SQUARE, GameState, GameViewModel, replay_events

_TOKEN = re.compile(r"(s|square|m|move)?\s*(\d+)")
_QUIT = {"q", "quit", "exit"}


def parse_event_token(token: str) -> Tuple[str, int]:
    """``"5"``/``"s5"`` -> square click, ``"m2"``/``"move 2"`` -> move click."""
    m = _TOKEN.fullmatch(token.strip().lower())
    if m is None:
        raise ValueError(f"Invalid event token: {token!r} (use s<i> for squares, m<i> for moves)")
    kind = MOVE if m.group(1) in ("m", "move") else SQUARE
    return kind, int(m.group(2))


def parse_events(text: str) -> List[Tuple[str, int]]:
    return [parse_event_token(t) for t in re.split(r"[,\s]+", text.strip()) if t]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Reactive tic-tac-toe CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_rep = sub.add_parser("replay", help="Replay click events through the view-model")
    p_rep.add_argument(
        "--events",
        required=True,
        help='Events in order, e.g. "s0 s3 s1 m0" (s<i>=square click, m<i>=move click)',
    )
    p_rep.add_argument(
        "--timeline",
        type=Path,
        nargs="?",
        const="",
        default=None,
        help="Export every emitted state to DIR (default: $TTT_EXPORT_DIR or ./exports)",
    )
    p_rep.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Timeline format: csv (default), parquet, both",
    )

    sub.add_parser(
        "play",
        help="Interactive game on stdin: <i> clicks a square, m<i> rewinds, q quits",
    )

    p_win = sub.add_parser("winner", help="Show the winner of a board (9 chars of X/O/.)")
    p_win.add_argument("--board", required=True, help="Board string, e.g., XXXOO....")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["pandas", "pyarrow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _log_state(state: GameState) -> None:
    logging.info(
        "board=%s status=%s moves=%s",
        serialize_board(state.current_board),
        status_line(state),
        move_labels(state),
    )


def play(stdin: TextIO, stdout: TextIO) -> int:
    """Text driver: renders every emission and forwards typed clicks."""
    vm = GameViewModel()
    current: List[GameState] = []
    errors: List[BaseException] = []

    def show(state: GameState) -> None:
        current[:] = [state]
        print(render_state(state), file=stdout)
        print(file=stdout)

    vm.state.subscribe(show, errors.append)
    for line in stdin:
        raw = line.strip().lower()
        if not raw:
            continue
        if raw in _QUIT:
            break
        try:
            kind, index = parse_event_token(raw)
            if kind == SQUARE:
                check_square(index)
                vm.click_square.on_next(index)
            else:
                last_move = len(current[0].history) - 1
                if index > last_move:
                    raise ValueError(f"Move index out of range [0, {last_move}]: {index}")
                vm.click_move.on_next(index)
        except ValueError as e:
            logging.error("%s", e)
    vm.close()
    if errors:
        logging.error("Game session failed: %s", errors[0])
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tictactoe-vm"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "replay":
        try:
            events = parse_events(ns.events)
            states = replay_events(events)
        except ValueError as e:
            logging.error("%s", e)
            return 2
        if ns.verbose:
            logging.info("parsed_events=%s emissions=%d", events, len(states))
        _log_state(states[-1])
        if ns.timeline is not None:
            try:
                out = export_timeline(states, ExportArgs(
                    out=ns.timeline or exports_dir(),
                    format=ns.format,
                    cli_argv=list(argv) if argv is not None else None,
                ))
            except RuntimeError as e:
                logging.error("%s", e)
                return 2
            logging.info("Exported timeline to: %s", out)
        return 0

    if ns.cmd == "play":
        return play(sys.stdin, sys.stdout)

    if ns.cmd == "winner":
        try:
            board = deserialize_board(ns.board.strip())
        except ValueError as e:
            logging.error("%s", e)
            return 2
        winner = calculate_winner(board)
        logging.info(
            "winner=%s draw=%s",
            winner if winner is not None else "none",
            is_draw(board),
        )
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
