from typing import Dict, Iterable, List, Mapping

from .records import SCORE_SYMBOLS, GameRecord


class PlayerStats:
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name
        self.total_games = 0
        self.distribution = {symbol: 0 for symbol in SCORE_SYMBOLS}
        self.other = 0  # scores outside the seven known symbols

    def add(self, name: str, score: str) -> None:
        self.name = name
        self.total_games += 1
        if score in self.distribution:
            self.distribution[score] += 1
        else:
            self.other += 1

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'total_games': self.total_games,
            'distribution': dict(self.distribution),
            'other': self.other,
        }


def summarize_scores(games: Iterable) -> Dict[str, PlayerStats]:
    """Aggregate per-player stats over a history of day records.

    Accepts GameRecord objects or raw game documents. Records without a
    score list and entries missing id/name/score are skipped. The latest
    name seen for a player wins, in iteration order.
    """
    stats: Dict[str, PlayerStats] = {}
    for game in games:
        if isinstance(game, GameRecord):
            game = game.to_dict()
        if not isinstance(game, Mapping):
            continue
        players = game.get('playerScores')
        if not isinstance(players, list):
            continue
        for player in players:
            if not isinstance(player, Mapping):
                continue
            pid, name, score = player.get('id'), player.get('name'), player.get('score')
            if not (isinstance(pid, str) and isinstance(name, str) and isinstance(score, str)):
                continue
            entry = stats.get(pid)
            if entry is None:
                entry = stats[pid] = PlayerStats(pid, name)
            entry.add(name, score)
    return stats


def ordered_stats(stats: Mapping[str, PlayerStats]) -> List[PlayerStats]:
    return sorted(stats.values(), key=lambda s: (s.name.lower(), s.id))
