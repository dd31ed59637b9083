"""Repeated games between registered bots, with score keeping."""

import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .bot import BotRegistry
from .config import GameConfig
from .game import CoupGame

logger = logging.getLogger(__name__)


def score_game(winners: Sequence[str], players: Sequence[str]) -> Dict[str, float]:
    """Zero-sum score for one game.

    Each loser gives up ``1/(n-1)``; the winners split what the losers gave
    up. A lone winner in a game of ``n`` therefore scores exactly 1.
    """
    loser_score = -1.0 / (len(players) - 1)
    loser_count = len(players) - len(winners)
    winner_score = -(loser_score * loser_count) / len(winners) if winners else 0.0
    return {name: winner_score if name in winners else loser_score for name in players}


@dataclass
class TournamentResult:
    """Tallies from a tournament run."""
    games: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    wins: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    scores: Dict[str, float] = field(default_factory=lambda: defaultdict(float))
    rounds_played: int = 0
    stopped_early: bool = False

    def record(self, players: Sequence[str], winners: Sequence[str]) -> None:
        """Add one finished game to the tallies."""
        self.rounds_played += 1
        for name, score in score_game(winners, players).items():
            self.games[name] += 1
            self.scores[name] += score
        for name in winners:
            self.wins[name] += 1

    def merge(self, other: "TournamentResult") -> "TournamentResult":
        """Combine tallies from independently run batches."""
        merged = TournamentResult()
        for result in (self, other):
            for name, count in result.games.items():
                merged.games[name] += count
            for name, count in result.wins.items():
                merged.wins[name] += count
            for name, score in result.scores.items():
                merged.scores[name] += score
            merged.rounds_played += result.rounds_played
            merged.stopped_early = merged.stopped_early or result.stopped_early
        return merged

    def standings(self) -> pd.DataFrame:
        """One row per bot, best score first."""
        rows = []
        for name in self.games:
            games = self.games[name]
            rows.append({
                'bot': name,
                'games': games,
                'wins': self.wins.get(name, 0),
                'win_rate': self.wins.get(name, 0) / games if games else 0.0,
                'score': self.scores.get(name, 0.0),
            })
        df = pd.DataFrame(rows, columns=['bot', 'games', 'wins', 'win_rate', 'score'])
        return df.sort_values('score', ascending=False).reset_index(drop=True)


class Tournament:
    """Plays many independent games and keeps score."""

    def __init__(self, registry: BotRegistry, config: Optional[GameConfig] = None,
                 stop_on_fault: bool = False) -> None:
        registry.require_players()
        self.registry = registry
        self.config = config or GameConfig()
        self.stop_on_fault = stop_on_fault

    def pick_players(self, rng: np.random.Generator) -> List[str]:
        """Random subset of at most ``max_players`` registered bots."""
        names = self.registry.names()
        rng.shuffle(names)
        return names[:self.config.max_players]

    def play_game(self, seed: np.random.SeedSequence) -> CoupGame:
        """Play one game with its own generator and return it."""
        rng = np.random.default_rng(seed)
        players = self.pick_players(rng)
        game = CoupGame({name: self.registry[name] for name in players}, self.config, rng)
        game.play()
        return game

    def run(self, rounds: int) -> TournamentResult:
        """Play ``rounds`` games and return the tallies."""
        result = TournamentResult()
        seeds = np.random.SeedSequence(self.config.seed).spawn(rounds)
        logger.info(f"Starting {rounds} rounds with {len(self.registry)} bots")

        for index, seed in enumerate(seeds, start=1):
            game = self.play_game(seed)
            state = game.state
            result.record(list(state.players), state.alive_names())

            if index % 100 == 0 or index == rounds:
                logger.info(f"{index}/{rounds} games played")

            if self.stop_on_fault and state.faults:
                logger.warning(f"Stopping after game {index}: {state.faults} bot fault(s)")
                result.stopped_early = True
                break

        return result


def plot_standings(df: pd.DataFrame, path: str) -> str:
    """Save a win-rate bar chart of the standings and return the path."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    plt.style.use('seaborn-v0_8')
    sns.set_palette("husl")

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=df, x='bot', y='win_rate', ax=ax)
    ax.set_title('Win Rate per Bot')
    ax.set_xlabel('Bot')
    ax.set_ylabel('Win Rate')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Standings plot saved to {path}")
    return path
