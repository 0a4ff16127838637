"""Per-day game records and their update rules.

The store is schemaless, so this module alone decides what a valid game
document looks like: it validates and coerces shapes on read and builds
the exact shape written back.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from flask import current_app

from wordlers.errors import MalformedRecord, NotFound, ValidationError, VersionConflict
from .identity import DateLike, date_key

SCORE_SYMBOLS = ('1', '2', '3', '4', '5', '6', 'X')
STARTING_WORD_LENGTH = 5


class PlayerScore:
    def __init__(self, id: str, name: str, score: str):
        self.id = id
        self.name = name
        self.score = score

    def __eq__(self, other):
        if not isinstance(other, PlayerScore):
            return NotImplemented
        return (self.id, self.name, self.score) == (other.id, other.name, other.score)

    def __repr__(self):
        return f"<PlayerScore {self.id} {self.name!r} {self.score}>"

    @classmethod
    def from_dict(cls, data) -> Optional['PlayerScore']:
        """Build from a stored entry, or None if a required string field is missing."""
        if not isinstance(data, Mapping):
            return None
        values = [data.get(k) for k in ('id', 'name', 'score')]
        if not all(isinstance(v, str) for v in values):
            return None
        return cls(*values)

    def to_dict(self) -> Dict[str, str]:
        return {'id': self.id, 'name': self.name, 'score': self.score}


class GameRecord:
    def __init__(self, starting_word: str, player_scores: Optional[List[PlayerScore]] = None, version: Optional[int] = None):
        self.starting_word = starting_word
        self.player_scores = list(player_scores or [])
        self.version = version

    def __repr__(self):
        return f"<GameRecord {self.starting_word} players={len(self.player_scores)}>"

    def find(self, player_id: str) -> Optional[PlayerScore]:
        for entry in self.player_scores:
            if entry.id == player_id:
                return entry
        return None

    def upsert(self, player_id: str, name: str, score: str) -> PlayerScore:
        """Replace an existing entry in place, or append a new one."""
        entry = self.find(player_id)
        if entry is not None:
            entry.name = name
            entry.score = score
            return entry
        entry = PlayerScore(player_id, name, score)
        self.player_scores.append(entry)
        return entry

    @classmethod
    def from_dict(cls, data, version=None, path=None) -> 'GameRecord':
        if not isinstance(data, Mapping):
            raise MalformedRecord(f"Game document at {path} is not an object", path=path)
        word = data.get('startingWord')
        scores = data.get('playerScores')
        if not isinstance(word, str):
            raise MalformedRecord(f"Game document at {path} is missing startingWord", path=path)
        if not isinstance(scores, list):
            raise MalformedRecord(f"Game document at {path} is missing playerScores", path=path)
        # Entries with missing fields are dropped; the rest of the day survives
        entries = [e for e in (PlayerScore.from_dict(s) for s in scores) if e is not None]
        return cls(word, entries, version=version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'startingWord': self.starting_word,
            'playerScores': [e.to_dict() for e in self.player_scores],
        }


def game_path(thread_key: str, day: DateLike) -> str:
    return f"threads/{thread_key}/games/{date_key(day)}"


def games_collection(thread_key: str) -> str:
    return f"threads/{thread_key}/games"


def normalize_starting_word(word, length: int = STARTING_WORD_LENGTH) -> str:
    """Upper-case a starting word and check it is exactly ``length`` letters."""
    if not isinstance(word, str):
        raise ValidationError('Starting word is required')
    cleaned = word.strip().upper()
    if len(cleaned) != length or not cleaned.isalpha():
        raise ValidationError(f'Starting word must be exactly {length} letters')
    return cleaned


def validate_score(score) -> str:
    if isinstance(score, int) and not isinstance(score, bool):
        score = str(score)
    if not isinstance(score, str) or score.strip().upper() not in SCORE_SYMBOLS:
        raise ValidationError(f"Score must be one of {', '.join(SCORE_SYMBOLS)}")
    return score.strip().upper()


def load_game(store, thread_key: str, day: DateLike) -> Optional[GameRecord]:
    """Read a day record. None when absent; MalformedRecord when the shape is wrong."""
    path = game_path(thread_key, day)
    found = store.get(path)
    if found is None:
        return None
    data, version = found
    return GameRecord.from_dict(data, version=version, path=path)


def fetch_game(store, thread_key: str, day: DateLike) -> Optional[GameRecord]:
    """Read a day record, treating malformed documents as not started."""
    try:
        return load_game(store, thread_key, day)
    except MalformedRecord as exc:
        current_app.logger.warning(f"[game-malformed] path={exc.path} {exc.message}")
        return None


def start_game(store, thread_key: str, day: DateLike, starting_word: str) -> GameRecord:
    """Create or overwrite the day record with an empty score list.

    The caller upper-cases and length-checks ``starting_word`` beforehand.
    """
    record = GameRecord(starting_word, [])
    record.version = store.set(game_path(thread_key, day), record.to_dict())
    current_app.logger.info(f"[game-start] thread={thread_key[:12]} date={date_key(day)} word_len={len(starting_word)}")
    return record


def submit_score(store, thread_key: str, day: DateLike, player_id: str, name: str, score: str,
                 max_attempts: Optional[int] = None) -> GameRecord:
    """Record one player's score for the day, replacing any earlier entry of theirs.

    The whole playerScores list is written back in one update guarded by the
    version that was read; on a conflict the read-modify-write is retried.
    """
    score = validate_score(score)
    if not player_id:
        raise ValidationError('Player id is required')
    if max_attempts is None:
        max_attempts = int(current_app.config.get('SCORE_SUBMIT_MAX_ATTEMPTS', 3))
    path = game_path(thread_key, day)
    attempt = 0
    while True:
        attempt += 1
        record = fetch_game(store, thread_key, day)
        if record is None:
            raise NotFound(f"No game started for {date_key(day)}")
        record.upsert(player_id, name, score)
        try:
            record.version = store.update(
                path,
                {'playerScores': [e.to_dict() for e in record.player_scores]},
                expected_version=record.version,
            )
        except VersionConflict:
            current_app.logger.info(f"[score-conflict] path={path} attempt={attempt}/{max_attempts}")
            if attempt >= max_attempts:
                raise
            continue
        current_app.logger.info(f"[score-submit] thread={thread_key[:12]} date={date_key(day)} player={player_id} score={score}")
        return record


def list_games(store, thread_key: str) -> List[Tuple[str, GameRecord]]:
    """Every well-formed day record of a thread, ordered by date."""
    games = []
    for doc_id, data in store.list(games_collection(thread_key)):
        try:
            games.append((doc_id, GameRecord.from_dict(data, path=f"{games_collection(thread_key)}/{doc_id}")))
        except MalformedRecord as exc:
            current_app.logger.warning(f"[game-malformed] path={exc.path} {exc.message}")
    return games
