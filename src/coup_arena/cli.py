"""Command line interface for running Coup bot matches."""

import argparse
import logging
import sys
from typing import List, Optional

from .bot import BotRegistry
from .bots import BUILTIN_BOTS
from .config import GameConfig, load_config
from .errors import CoupError
from .game import CoupGame
from .tournament import Tournament, plot_standings

DEFAULT_BOTS = ["random", "honest", "static"]


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Setup logging configuration."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def build_registry(entries: List[str]) -> BotRegistry:
    """Register built-in bot names or ``module:Class`` paths."""
    registry = BotRegistry()
    for entry in entries:
        if entry in BUILTIN_BOTS:
            registry.register(entry, BUILTIN_BOTS[entry]())
        else:
            registry.register_path(entry)
    return registry


def build_config(args: argparse.Namespace) -> GameConfig:
    config = load_config(args.config) if args.config else GameConfig()
    overrides = config.to_dict()
    if args.seed is not None:
        overrides['seed'] = args.seed
    if args.round_cap is not None:
        overrides['round_cap'] = args.round_cap
    return GameConfig.from_dict(overrides)


def run_play(args: argparse.Namespace) -> int:
    registry = build_registry(args.bots)
    registry.require_players()
    config = build_config(args)

    game = CoupGame(registry.as_dict(), config)
    winners = game.play()

    print(f"\nWinner{'s' if len(winners) > 1 else ''}: {', '.join(winners)}")
    for player in game.get_game_state()['players']:
        status = "ELIMINATED" if player['eliminated'] else f"{player['cards']} cards"
        print(f"  {player['name']}: {player['coins']} coins, {status}")
    return 0


def run_loop(args: argparse.Namespace) -> int:
    registry = build_registry(args.bots)
    config = build_config(args)

    tournament = Tournament(registry, config, stop_on_fault=args.debug)
    result = tournament.run(args.rounds)
    standings = result.standings()

    print(f"\n{result.rounds_played} games played")
    print(standings.to_string(index=False, float_format=lambda value: f"{value:.3f}"))
    if not standings.empty:
        print(f"\nThe winner is: {standings.iloc[0]['bot']}")

    if args.plot:
        plot_standings(standings, args.plot)
    return 1 if result.stopped_early else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Run Coup matches between bots')
    parser.add_argument('--bots', type=lambda value: value.split(','), default=DEFAULT_BOTS,
                        help='Comma-separated built-in bot names (static, random, honest) or module:Class paths')
    parser.add_argument('--config', type=str, default=None, help='JSON config file')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--round-cap', type=int, default=None, help='Maximum turns per game')
    parser.add_argument('--log-level', type=str, default=None, help='Logging level')
    parser.add_argument('--log-file', type=str, default=None, help='Also log to this file')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('play', help='Play a single game with narration')

    loop = subparsers.add_parser('loop', help='Play many games and show the standings')
    loop.add_argument('-r', '--rounds', type=int, default=1000, help='Number of games')
    loop.add_argument('-d', '--debug', action='store_true', help='Stop at the first bot fault')
    loop.add_argument('--plot', type=str, default=None, help='Save a win-rate chart to this file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or 'play'

    level = args.log_level or ('DEBUG' if command == 'play' else 'WARNING')
    setup_logging(level, args.log_file)

    try:
        if command == 'loop':
            if args.rounds < 1:
                parser.error('--rounds must be positive')
            return run_loop(args)
        return run_play(args)
    except (CoupError, ImportError, ValueError) as error:
        logging.getLogger(__name__).error(str(error))
        return 2


if __name__ == "__main__":
    sys.exit(main())
