from flask import Blueprint, jsonify, request, current_app
from wordlers.errors import ScoreboardError, ValidationError
from wordlers.store import get_store
from wordlers.services.scoreboard.identity import (
    date_key,
    format_display_date,
    is_thread_key,
    shift_date,
    thread_key as derive_thread_key,
)
from wordlers.services.scoreboard.messaging import announce_game
from wordlers.services.scoreboard.profile import UserProfile
from wordlers.services.scoreboard.records import (
    SCORE_SYMBOLS,
    fetch_game,
    games_collection,
    list_games,
    normalize_starting_word,
    start_game as svc_start_game,
    submit_score as svc_submit_score,
)
from wordlers.services.scoreboard.stats import ordered_stats, summarize_scores


scoreboard = Blueprint('scoreboard', __name__)


@scoreboard.errorhandler(ScoreboardError)
def _handle_scoreboard_error(exc: ScoreboardError):
    return jsonify(exc.to_dict()), exc.status


def _check_thread_key(key: str) -> str:
    if not is_thread_key(key):
        raise ValidationError('Thread key must be a 64-character hex digest')
    return key


def game_payload(key: str, day, record) -> dict:
    fmt = current_app.config.get('DISPLAY_DATE_FORMAT', '%b %d, %Y')
    previous_day, next_day = shift_date(day, -1), shift_date(day, 1)
    return {
        'thread_key': key,
        'date': date_key(day),
        'display_date': format_display_date(day, fmt),
        'previous_date': previous_day.isoformat() if previous_day else None,
        'next_date': next_day.isoformat() if next_day else None,
        'started': record is not None,
        'game': record.to_dict() if record is not None else None,
    }


@scoreboard.route('/scores', methods=['GET'])
def score_symbols():
    return jsonify({'scores': list(SCORE_SYMBOLS)})


@scoreboard.route('/threads/key', methods=['POST'])
def compute_thread_key():
    data = request.get_json(silent=True) or {}
    local_id = data.get('local_id')
    remote_ids = data.get('remote_ids') or []
    if not local_id:
        return jsonify({'error': 'local_id is required'}), 400
    if not isinstance(remote_ids, list):
        return jsonify({'error': 'remote_ids must be a list'}), 400
    return jsonify({'thread_key': derive_thread_key(local_id, remote_ids)})


@scoreboard.route('/threads/<string:key>/games/<string:day>', methods=['GET'])
def get_game(key, day):
    _check_thread_key(key)
    day = date_key(day)
    record = fetch_game(get_store(), key, day)
    return jsonify(game_payload(key, day, record))


@scoreboard.route('/threads/<string:key>/games/<string:day>/start', methods=['POST'])
def start_game(key, day):
    _check_thread_key(key)
    day = date_key(day)
    data = request.get_json(silent=True) or {}
    profile = UserProfile.from_payload(data)
    length = int(current_app.config.get('STARTING_WORD_LENGTH', 5))
    word = normalize_starting_word(data.get('starting_word'), length)

    record = svc_start_game(get_store(), key, day, word)
    announce_game(key, day, word, profile.display_name)
    return jsonify(game_payload(key, day, record)), 201


@scoreboard.route('/threads/<string:key>/games/<string:day>/scores', methods=['POST'])
def submit_score(key, day):
    _check_thread_key(key)
    day = date_key(day)
    data = request.get_json(silent=True) or {}
    profile = UserProfile.from_payload(data)
    record = svc_submit_score(
        get_store(), key, day,
        player_id=profile.user_id,
        name=profile.display_name,
        score=data.get('score'),
    )
    return jsonify(game_payload(key, day, record))


@scoreboard.route('/threads/<string:key>/games', methods=['GET'])
def game_history(key):
    _check_thread_key(key)
    games = list_games(get_store(), key)
    return jsonify([{'date': d, 'game': g.to_dict()} for d, g in games])


@scoreboard.route('/threads/<string:key>/stats', methods=['GET'])
def thread_stats(key):
    _check_thread_key(key)
    # Raw documents: aggregation skips malformed entries itself
    docs = [data for _, data in get_store().list(games_collection(key))]
    stats = summarize_scores(docs)
    return jsonify({
        'thread_key': key,
        'games': len(docs),
        'players': [s.to_dict() for s in ordered_stats(stats)],
    })
