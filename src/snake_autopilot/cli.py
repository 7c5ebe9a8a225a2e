"""Command-line tools for headless autopilot runs."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-autopilot",
        description="Run and benchmark the snake autopilot without a UI.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser("play", help="Let the autopilot play games.")
    play_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override it).",
    )
    play_p.add_argument("--games", type=int, default=1)
    play_p.add_argument("--width", type=int, default=None)
    play_p.add_argument("--height", type=int, default=None)
    play_p.add_argument("--seed", type=int, default=0)
    play_p.add_argument("--max-ticks", type=int, default=10_000)

    # --- benchmark ---
    bench_p = sub.add_parser(
        "benchmark", help="Measure autopilot decision throughput.",
    )
    bench_p.add_argument("--games", type=int, default=10)
    bench_p.add_argument("--width", type=int, default=25)
    bench_p.add_argument("--height", type=int, default=25)
    bench_p.add_argument("--max-ticks", type=int, default=2_000)
    bench_p.add_argument("--seed", type=int, default=42)

    return parser


def _run_play(args: argparse.Namespace) -> int:
    from snake_autopilot.benchmark import play_game
    from snake_autopilot.config import GameConfig

    config = GameConfig.load(args.config) if args.config else GameConfig()
    overrides = {
        name: value
        for name, value in (
            ("board_width", args.width), ("board_height", args.height),
        )
        if value is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)

    for i in range(args.games):
        result = play_game(config, seed=args.seed + i, max_ticks=args.max_ticks)
        print(result.summary())  # noqa: T201
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from snake_autopilot.benchmark import benchmark_throughput

    result = benchmark_throughput(
        num_games=args.games,
        board_width=args.width,
        board_height=args.height,
        max_ticks=args.max_ticks,
        seed=args.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-autopilot`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "benchmark": _run_benchmark,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
