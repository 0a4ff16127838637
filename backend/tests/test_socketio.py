DAY = '2026-10-16'
OTHER_DAY = '2026-10-15'


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def _watch(sio_client, key, day):
    sio_client.emit('watch_game', {'thread_key': key, 'date': day}, namespace='/ws')


def test_socket_connect_and_ping(sio_client):
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)

    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    assert _events(sio_client, 'pong') == [{'n': 1}]


def test_watch_sends_initial_snapshot(sio_client, key):
    sio_client.get_received('/ws')  # flush
    _watch(sio_client, key, DAY)
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'watching' in names
    snapshot = [pkt['args'][0] for pkt in received if pkt['name'] == 'game_update'][0]
    assert snapshot['started'] is False
    assert snapshot['date'] == DAY


def test_watch_rejects_bad_input(sio_client, key):
    sio_client.get_received('/ws')
    sio_client.emit('watch_game', {'date': DAY}, namespace='/ws')
    assert _events(sio_client, 'error')
    sio_client.emit('watch_game', {'thread_key': key, 'date': 'yesterday'}, namespace='/ws')
    assert _events(sio_client, 'error')


def test_watcher_receives_start_announcement_and_scores(sio_client, client, key):
    _watch(sio_client, key, DAY)
    sio_client.get_received('/ws')

    res = client.post(f'/api/threads/{key}/games/{DAY}/start',
                      json={'starting_word': 'crane', 'user_id': 'u1', 'display_name': 'Ryan'})
    assert res.status_code == 201
    received = sio_client.get_received('/ws')
    updates = [pkt['args'][0] for pkt in received if pkt['name'] == 'game_update']
    assert updates[-1]['game'] == {'startingWord': 'CRANE', 'playerScores': []}
    message = [pkt['args'][0] for pkt in received if pkt['name'] == 'insert_message'][0]
    assert message['caption'] == 'Wordlers Game – Oct 16, 2026'
    assert message['subcaption'] == 'Starting Word: CRANE (by Ryan)'

    client.post(f'/api/threads/{key}/games/{DAY}/scores',
                json={'score': '3', 'user_id': 'u1', 'display_name': 'Ryan'})
    updates = _events(sio_client, 'game_update')
    assert updates[-1]['game']['playerScores'] == [{'id': 'u1', 'name': 'Ryan', 'score': '3'}]


def test_switching_dates_cancels_previous_subscription(sio_client, client, store, key):
    for day in (DAY, OTHER_DAY):
        client.post(f'/api/threads/{key}/games/{day}/start',
                    json={'starting_word': 'crane', 'user_id': 'u1', 'display_name': 'Ryan'})

    _watch(sio_client, key, DAY)
    _watch(sio_client, key, OTHER_DAY)
    sio_client.get_received('/ws')
    assert store.listener_count() == 1

    client.post(f'/api/threads/{key}/games/{DAY}/scores',
                json={'score': '5', 'user_id': 'u1', 'display_name': 'Ryan'})
    assert _events(sio_client, 'game_update') == []

    client.post(f'/api/threads/{key}/games/{OTHER_DAY}/scores',
                json={'score': '2', 'user_id': 'u1', 'display_name': 'Ryan'})
    updates = _events(sio_client, 'game_update')
    assert [u['date'] for u in updates] == [OTHER_DAY]


def test_unwatch_and_disconnect_release_subscription(flask_app, store, key):
    from wordlers import socketio as _sio
    watcher = _sio.test_client(flask_app, namespace='/ws')
    _watch(watcher, key, DAY)
    assert store.listener_count() == 1

    watcher.emit('unwatch_game', {}, namespace='/ws')
    assert store.listener_count() == 0

    _watch(watcher, key, DAY)
    assert store.listener_count() == 1
    watcher.disconnect(namespace='/ws')
    assert store.listener_count() == 0
