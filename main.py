"""
Cross-and-circle race game - batch simulation.
Plays seeded games between move-choice strategies and prints a win tally.
"""

import argparse
import sys
from collections import Counter

from loguru import logger

from ludo_cross import Game, default_config
from ludo_cross.board_view import render_text
from ludo_cross.config import sim_config
from ludo_cross.strategy import available, create


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate cross-and-circle games")
    parser.add_argument(
        "--games", type=int, default=sim_config.NUM_GAMES, help="Number of games"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=sim_config.SEED,
        help="Base dice seed; game i uses seed + i",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=sim_config.MAX_TURNS,
        help="Applied token movements before a game is abandoned",
    )
    parser.add_argument(
        "--strategy",
        type=str,
        default=sim_config.STRATEGY,
        choices=sorted(available()),
        help="Move-choice strategy used by every color",
    )
    parser.add_argument(
        "--show-board", action="store_true", help="Print the final board of each game"
    )
    parser.add_argument("--log-level", type=str, default=sim_config.LOG_LEVEL)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    cfg = default_config()
    tally: Counter = Counter()
    for i in range(args.games):
        seed = None if args.seed is None else args.seed + i
        strategies = {color: create(args.strategy, seed=seed) for color in cfg.PLAYERS}
        game = Game(config=cfg, strategies=strategies, seed=seed)
        result = game.play_until_win(args.max_turns)
        winner = result.winner.name if result.winner is not None else "none"
        tally[winner] += 1
        print(f"Game {i + 1}: winner={winner} moves={result.turns}")
        if args.show_board:
            print(render_text(game.board))

    print("--- Summary ---")
    for name, wins in tally.most_common():
        print(f"{name}: {wins}")


if __name__ == "__main__":
    main()
