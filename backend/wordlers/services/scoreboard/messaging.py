from flask import current_app

from wordlers import socketio
from .identity import format_display_date


def thread_room(thread_key: str) -> str:
    return f"thread:{thread_key}"


def build_announcement(day, starting_word: str, starter: str, date_format: str = '%b %d, %Y'):
    """Caption/subcaption of the message dropped into the conversation when a game starts."""
    return {
        'caption': f"Wordlers Game – {format_display_date(day, date_format)}",
        'subcaption': f"Starting Word: {starting_word} (by {starter})",
    }


def announce_game(thread_key: str, day, starting_word: str, starter: str) -> dict:
    """Ask connected clients of the thread to insert the announcement. Fire-and-forget."""
    fmt = current_app.config.get('DISPLAY_DATE_FORMAT', '%b %d, %Y')
    payload = build_announcement(day, starting_word, starter, fmt)
    payload['thread_key'] = thread_key
    socketio.emit('insert_message', payload, to=thread_room(thread_key), namespace='/ws')
    return payload
