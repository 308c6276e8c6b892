from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from .config import GameSettings
from .game_basics import Board, Cell, PlayerId, game_outcome, is_valid_state, side_to_move
from .selfplay import STRATEGY_NAMES, run_arena
from .solver import MinimaxStrategy, negamax, score_moves
from .symmetry import symmetry_info


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-ai", description="Tic-tac-toe against a minimax opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the random strategies (default: TTT_SEED)")

    p_play = sub.add_parser("play", help="Play a game in the terminal (you are O, the computer is X)")
    p_play.add_argument(
        "--difficulty",
        choices=["random", "optimal"],
        default=None,
        help="Computer strength (default: TTT_DIFFICULTY or optimal)",
    )
    p_play.add_argument(
        "--ai-first", action="store_true", default=None, help="Let the computer move first"
    )
    p_play.add_argument(
        "--delay", type=float, default=None, help="Computer thinking delay in seconds (default: TTT_THINK_DELAY or 0.5)"
    )

    p_sol = sub.add_parser("solve", help="Score every move for the side to move via negamax")
    p_sol.add_argument("--board", help="Board string, e.g., 100020000 (0=empty, 1=X, 2=O; omit with --stdin)")
    p_sol.add_argument(
        "--player",
        choices=["x", "o"],
        default=None,
        help="Side to move (default: inferred from mark counts, X on ties)",
    )
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_sym = sub.add_parser("symmetry", help="Show symmetry info for a board")
    p_sym.add_argument("--board", help="Board string, e.g., 100020000 (omit with --stdin)")
    p_sym.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )

    p_self = sub.add_parser("selfplay", help="Play strategies against each other and tally results")
    p_self.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    p_self.add_argument("--cross", choices=STRATEGY_NAMES, default="optimal", help="Strategy playing X")
    p_self.add_argument("--circle", choices=STRATEGY_NAMES, default="optimal", help="Strategy playing O")
    p_self.add_argument(
        "--alternate-first", action="store_true", help="Alternate which side opens (X opens by default)"
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _parse_board(raw: Optional[str]) -> Optional[Board]:
    try:
        board = Board.from_string(raw or "")
    except ValueError:
        logging.error("Invalid board string. Must be 9 chars of 0/1/2.")
        return None
    if not is_valid_state(board):
        logging.error("Board is not a valid reachable state.")
        return None
    return board


def _mover(board: Board, player: Optional[str]) -> PlayerId:
    if player == "x":
        return PlayerId.AUTOMATED
    if player == "o":
        return PlayerId.HUMAN
    return side_to_move(board, first=Cell.CROSS)


def _cmd_solve(ns: argparse.Namespace) -> int:
    if ns.stdin:
        import csv as _csv
        import sys as _sys

        w = _csv.writer(_sys.stdout)
        w.writerow(["board", "to_move", "value", "best_move"])
        for line in _sys.stdin:
            raw = line.strip()
            if not raw:
                continue
            try:
                board = Board.from_string(raw)
            except ValueError:
                continue
            if not is_valid_state(board) or game_outcome(board).is_terminal:
                continue
            p = _mover(board, ns.player)
            best = MinimaxStrategy().select_move(board, p)
            w.writerow([raw, p.cell.symbol, negamax(board, p), f"{best[0]} {best[1]}"])
        return 0

    board = _parse_board(ns.board)
    if board is None:
        return 2
    p = _mover(board, ns.player)
    if game_outcome(board).is_terminal:
        logging.info("to_move=%s value=%s (game is over)", p.cell.symbol, negamax(board, p))
        return 0
    scores = score_moves(board, p)
    best = MinimaxStrategy().select_move(board, p)
    logging.info(
        "to_move=%s value=%s best=%s scores=%s",
        p.cell.symbol,
        negamax(board, p),
        best,
        {f"{r},{c}": s for (r, c), s in scores},
    )
    return 0


def _cmd_symmetry(ns: argparse.Namespace) -> int:
    if ns.stdin:
        import csv as _csv
        import sys as _sys

        w = _csv.writer(_sys.stdout)
        w.writerow(["board", "canonical_form", "orbit_size", "canonical_op"])
        for line in _sys.stdin:
            raw = line.strip()
            if not raw:
                continue
            try:
                board = Board.from_string(raw)
            except ValueError:
                continue
            if not is_valid_state(board):
                continue
            info = symmetry_info(board)
            w.writerow([raw, info['canonical_form'], info['orbit_size'], info['canonical_op']])
        return 0

    board = _parse_board(ns.board)
    if board is None:
        return 2
    info = symmetry_info(board)
    logging.info(
        "canonical_form=%s orbit_size=%d op=%s",
        info['canonical_form'],
        info['orbit_size'],
        info['canonical_op'],
    )
    return 0


def _cmd_selfplay(ns: argparse.Namespace, seed: Optional[int]) -> int:
    if ns.games < 1:
        logging.error("--games must be at least 1")
        return 2
    stats = run_arena(ns.cross, ns.circle, ns.games, seed=seed, alternate_first=ns.alternate_first)
    s = stats.summary()
    logging.info(
        "games=%d x_wins=%d o_wins=%d ties=%d mean_length=%.2f",
        s['games'], s['x_wins'], s['o_wins'], s['ties'], s['mean_length'],
    )
    return 0


def _cmd_play(ns: argparse.Namespace, settings: GameSettings) -> int:
    from .console import play_console

    difficulty = ns.difficulty if ns.difficulty is not None else settings.difficulty
    automated_first = ns.ai_first if ns.ai_first is not None else settings.automated_first
    delay = ns.delay if ns.delay is not None else settings.think_delay
    if delay < 0:
        logging.error("--delay must not be negative")
        return 2
    try:
        asyncio.run(play_console(difficulty, automated_first, delay, settings.seed))
    except (KeyboardInterrupt, EOFError):
        print()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        from importlib.metadata import PackageNotFoundError, version as _ver

        try:
            print(_ver("tictactoe-ai"))
        except PackageNotFoundError:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        settings = GameSettings.from_env()
    except ValueError as exc:
        logging.error("%s", exc)
        return 2
    if ns.seed is not None:
        settings.seed = ns.seed

    if ns.cmd == "play":
        return _cmd_play(ns, settings)
    if ns.cmd == "solve":
        return _cmd_solve(ns)
    if ns.cmd == "symmetry":
        return _cmd_symmetry(ns)
    if ns.cmd == "selfplay":
        return _cmd_selfplay(ns, settings.seed)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
