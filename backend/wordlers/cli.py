import click
from flask.cli import AppGroup

from wordlers.errors import ScoreboardError
from wordlers.store import get_store
from wordlers.services.scoreboard.identity import is_thread_key, thread_key
from wordlers.services.scoreboard.records import SCORE_SYMBOLS, fetch_game, games_collection
from wordlers.services.scoreboard.stats import ordered_stats, summarize_scores

scoreboard_cli = AppGroup('scoreboard', help='Inspect thread scoreboards.')


@scoreboard_cli.command('thread-key')
@click.argument('local_id')
@click.argument('remote_ids', nargs=-1)
def thread_key_command(local_id, remote_ids):
    """Print the thread key for a set of participant ids."""
    click.echo(thread_key(local_id, remote_ids))


@scoreboard_cli.command('show')
@click.argument('key')
@click.argument('day')
def show_command(key, day):
    """Print one day's scores."""
    if not is_thread_key(key):
        raise click.ClickException('Thread key must be a 64-character hex digest')
    try:
        record = fetch_game(get_store(), key, day)
    except ScoreboardError as exc:
        raise click.ClickException(exc.message)
    if record is None:
        click.echo(f'No game for {day}')
        return
    click.echo(f'Starting word: {record.starting_word}')
    for entry in record.player_scores:
        click.echo(f'{entry.name:<20} {entry.score}')


@scoreboard_cli.command('stats')
@click.argument('key')
def stats_command(key):
    """Print per-player score distributions for a thread."""
    docs = [data for _, data in get_store().list(games_collection(key))]
    stats = ordered_stats(summarize_scores(docs))
    if not stats:
        click.echo('No scores recorded')
        return
    click.echo(f"{'Player':<20} {'Games':>5}  " + ' '.join(f'{sym:>3}' for sym in SCORE_SYMBOLS))
    for s in stats:
        row = ' '.join(f'{s.distribution[sym]:>3}' for sym in SCORE_SYMBOLS)
        click.echo(f'{s.name:<20} {s.total_games:>5}  {row}')
