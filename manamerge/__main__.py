"""Entry point: ``python -m manamerge``.

Supports two modes:
  - ``python -m manamerge``          → Launch the FastAPI control plane
  - ``python -m manamerge cli``      → Headless run over simulated time
"""

from __future__ import annotations

import argparse
import logging
import time

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mana Merge simulation core")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--save", type=str, default="savegame.json")
    srv.add_argument("--combo-delay", type=float, default=0.3)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless auto-played game")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--seconds", type=int, default=600, help="Simulated seconds to run")
    cli.add_argument("--mana", type=float, default=100.0, help="Starting balance")
    cli.add_argument("--save", type=str, default=None, help="Write the final state to this file")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from manamerge.api.app import create_app
    from manamerge.config import GameConfig

    config = GameConfig(
        seed=args.seed,
        save_path=args.save,
        combo_step_delay=args.combo_delay,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _find_merge_move(loop):
    """First (src, dst) move that would complete a match, or None."""
    from manamerge.systems.match import find_match, move_entity

    board = loop.state.board
    min_match = loop.config.min_match
    for src, entity in board.occupied():
        if entity.is_hostile or board.is_locked(src):
            continue
        for dst in board.empty_cells():
            moved = move_entity(board, src, dst)
            if moved is not board and len(find_match(moved, dst)) >= min_match:
                return src, dst
    return None


def _run_cli(args: argparse.Namespace) -> None:
    from manamerge.actions.base import ActionIntent
    from manamerge.config import GameConfig
    from manamerge.core.enums import ActionType
    from manamerge.core.game_state import GameState
    from manamerge.engine.game_loop import GameLoop
    from manamerge.engine.scheduler import TickScheduler
    from manamerge.persistence.save import save
    from manamerge.persistence.store import JsonFileStore
    from manamerge.systems.rng import DeterministicRNG
    from manamerge.utils.logging import setup_logging

    config = GameConfig(seed=args.seed, log_level=args.log_level)
    setup_logging(config.log_level)

    now = time.time()
    state = GameState(config, initial_mana=args.mana)
    loop = GameLoop(config, state, DeterministicRNG(config.seed), sleep=lambda _s: None)
    scheduler = TickScheduler()
    scheduler.add("hostile", config.hostile_tick_seconds, now)
    scheduler.add("accrual", config.accrual_seconds, now)

    logger.info("=== Headless game started (seed=%d, %ds) ===", config.seed, args.seconds)
    start = now
    end = now + args.seconds
    step = 0
    while now < end:
        now += config.accrual_seconds
        step += 1
        fired = scheduler.poll(now)
        for _ in range(fired["hostile"]):
            loop.hostile_tick(now)
        loop.accrue(now, fired["accrual"])

        move = _find_merge_move(loop)
        if move is not None:
            loop.submit(ActionIntent(ActionType.MOVE, move[0], move[1]), now)
        else:
            loop.submit(ActionIntent(ActionType.SUMMON), now)

        if step % 60 == 0:
            logger.info(
                "t+%4ds mana=%10.1f rate=%8.1f/s pieces=%d defeats=%d",
                int(now - start), state.economy.mana,
                state.economy.production_rate, state.board.occupied_count, state.defeats,
            )

    logger.info("=== Finished: mana=%.1f rate=%.1f/s defeats=%d ===",
                state.economy.mana, state.economy.production_rate, state.defeats)
    for entry in reversed(state.log.latest(10)):
        logger.info("  [%s] %s", entry.severity.value, entry.text)

    if args.save:
        save(state, JsonFileStore(args.save), now)
        logger.info("State written to %s", args.save)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
