"""Main entry point for the Janggi server and headless self-play."""

import argparse
import asyncio
import logging
import os
import uvicorn


def run_selfplay(games: int, strategy: str, seed=None):
    """Play AI-vs-AI games in-process and print the tally."""
    from janggi_engine.board import Side
    from janggi_engine.config import RuleConfig, SessionConfig
    from janggi_engine.session import GameSession, PlayerType, SessionStats
    from janggi_engine.strategy import get_strategy

    stats = SessionStats()
    rules = RuleConfig.from_env()
    config = SessionConfig.from_env()
    for i in range(games):
        game_seed = None if seed is None else seed + 2 * i
        session = GameSession(
            players={Side.HAN: PlayerType.AI, Side.CHO: PlayerType.AI},
            strategies={
                Side.HAN: get_strategy(strategy, game_seed),
                Side.CHO: get_strategy(strategy, None if game_seed is None else game_seed + 1),
            },
            rules=rules,
            config=config,
            stats=stats,
        )
        asyncio.run(session.autoplay(delay=0))
        print(f"Game {i + 1}: {session.result.value} ({session.finish_reason}, {len(session.history)} plies)")

    print(f"HAN {stats.han_wins} / CHO {stats.cho_wins} / draws {stats.draws} of {stats.total_games}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Janggi Rules Engine Server")
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--enforce-general-safety",
        action="store_true",
        help="Reject moves that leave the mover's General capturable",
    )
    parser.add_argument(
        "--palace-diagonals",
        action="store_true",
        help="Enable movement along the palace diagonal lines",
    )
    parser.add_argument(
        "--strategy",
        "-s",
        type=str,
        default=None,
        help="AI move strategy: random or greedy (default: random)",
    )
    parser.add_argument(
        "--max-plies",
        type=int,
        default=None,
        help="Declare a draw after this many plies (0 = unlimited)",
    )
    parser.add_argument(
        "--selfplay",
        type=int,
        default=0,
        metavar="N",
        help="Play N AI-vs-AI games without starting the server",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for self-play",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    # Pass options to api.py / janggi_engine.config through the environment
    if args.enforce_general_safety:
        os.environ["JANGGI_ENFORCE_GENERAL_SAFETY"] = "1"
    if args.palace_diagonals:
        os.environ["JANGGI_PALACE_DIAGONALS"] = "1"
    if args.strategy:
        os.environ["JANGGI_STRATEGY"] = args.strategy
        print(f"Using strategy: {args.strategy}")
    if args.max_plies is not None:
        os.environ["JANGGI_MAX_PLIES"] = str(args.max_plies)

    if args.selfplay:
        run_selfplay(args.selfplay, args.strategy or os.environ.get("JANGGI_STRATEGY", "random"), args.seed)
    else:
        uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
