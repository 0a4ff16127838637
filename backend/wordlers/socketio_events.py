from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from wordlers import socketio
from wordlers.errors import MalformedRecord, ScoreboardError
from wordlers.store import Subscription, get_store
from wordlers.services.scoreboard.identity import date_key, format_display_date, is_thread_key
from wordlers.services.scoreboard.messaging import thread_room
from wordlers.services.scoreboard.records import GameRecord, fetch_game, game_path
from typing import Dict, Any

# One live subscription per connected socket: {sid: {'thread_key', 'date', 'subscription'}}
_sid_to_watch: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _update_payload(thread_key: str, day: str, record) -> dict:
    fmt = current_app.config.get('DISPLAY_DATE_FORMAT', '%b %d, %Y')
    return {
        'thread_key': thread_key,
        'date': day,
        'display_date': format_display_date(day, fmt),
        'started': record is not None,
        'game': record.to_dict() if record is not None else None,
    }


def _make_listener(sid: str, thread_key: str, day: str, namespace: str):
    def _on_change(fields):
        record = None
        if fields is not None:
            try:
                record = GameRecord.from_dict(fields, path=game_path(thread_key, day))
            except MalformedRecord as exc:
                current_app.logger.warning(f"[watch-malformed] sid={sid} {exc.message}")
        socketio.emit('game_update', _update_payload(thread_key, day, record), to=sid, namespace=namespace)
    return _on_change


def _cancel_watch(sid: str) -> Dict[str, Any]:
    ctx = _sid_to_watch.pop(sid, None)
    if ctx:
        sub: Subscription = ctx['subscription']
        sub.cancel()
    return ctx or {}


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    _cancel_watch(_get_sid())


def handle_watch_game(data):
    """Switch this socket's live view to (thread_key, date).

    The previous subscription is cancelled before the new one is registered,
    so a client never receives updates for a date it no longer displays.
    """
    data = data or {}
    key = data.get('thread_key')
    if not is_thread_key(key):
        emit('error', {'message': 'thread_key is required'})
        return
    try:
        day = date_key(data.get('date'))
    except ScoreboardError as exc:
        emit('error', {'message': exc.message})
        return

    sid = _get_sid()
    previous = _cancel_watch(sid)
    if previous.get('thread_key') and previous['thread_key'] != key:
        leave_room(thread_room(previous['thread_key']))
    join_room(thread_room(key))

    store = get_store()
    sub = store.subscribe(game_path(key, day), _make_listener(sid, key, day, request.namespace))
    _sid_to_watch[sid] = {'thread_key': key, 'date': day, 'subscription': sub}
    emit('watching', {'thread_key': key, 'date': day})

    try:
        record = fetch_game(store, key, day)
    except ScoreboardError as exc:
        emit('error', {'message': f"Failed to fetch game: {exc.message}"})
        return
    emit('game_update', _update_payload(key, day, record))


def handle_unwatch_game(data=None):
    ctx = _cancel_watch(_get_sid())
    if ctx.get('thread_key'):
        leave_room(thread_room(ctx['thread_key']))
    emit('unwatched', {'thread_key': ctx.get('thread_key'), 'date': ctx.get('date')})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('disconnect', handle_disconnect, namespace=ns)
        socketio.on_event('watch_game', handle_watch_game, namespace=ns)
        socketio.on_event('unwatch_game', handle_unwatch_game, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
