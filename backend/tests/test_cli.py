from wordlers.services.scoreboard.identity import thread_key


def test_thread_key_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['scoreboard', 'thread-key', 'p2', 'p1'])
    assert result.exit_code == 0
    assert result.output.strip() == thread_key('p1', ['p2'])


def test_show_and_stats_commands(flask_app, client, key):
    client.post(f'/api/threads/{key}/games/2026-10-16/start',
                json={'starting_word': 'crane', 'user_id': 'u1', 'display_name': 'Ryan'})
    client.post(f'/api/threads/{key}/games/2026-10-16/scores',
                json={'score': '3', 'user_id': 'u1', 'display_name': 'Ryan'})
    runner = flask_app.test_cli_runner()

    shown = runner.invoke(args=['scoreboard', 'show', key, '2026-10-16'])
    assert 'Starting word: CRANE' in shown.output
    assert 'Ryan' in shown.output

    stats = runner.invoke(args=['scoreboard', 'stats', key])
    assert stats.exit_code == 0
    assert 'Ryan' in stats.output


def test_stats_command_without_scores(flask_app, key):
    result = flask_app.test_cli_runner().invoke(args=['scoreboard', 'stats', key])
    assert 'No scores recorded' in result.output


def test_show_command_reports_bad_input(flask_app, key):
    runner = flask_app.test_cli_runner()

    bad_date = runner.invoke(args=['scoreboard', 'show', key, 'yesterday'])
    assert bad_date.exit_code == 1
    assert 'Invalid game date' in bad_date.output
    assert 'Traceback' not in bad_date.output

    bad_key = runner.invoke(args=['scoreboard', 'show', 'not-a-key', '2026-10-16'])
    assert bad_key.exit_code == 1
    assert 'Thread key must be' in bad_key.output
