from mindlink import socketio


def test_index_and_health(client, app_registry):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()

    app_registry.create_room('ABCD', 'sid-a', 'A', 3)
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok', 'rooms': 1}


def test_list_rooms(client, app_registry):
    assert client.get('/api/rooms').get_json() == []

    app_registry.create_room('ABCD', 'sid-a', 'A', 3)
    app_registry.create_room('WXYZ', 'sid-c', 'C', 2)
    app_registry.join_room('WXYZ', 'sid-d', 'D')

    res = client.get('/api/rooms')
    assert res.status_code == 200
    rooms = {r['code']: r for r in res.get_json()}
    assert rooms['ABCD'] == {'code': 'ABCD', 'state': 'waiting', 'players': 1, 'current_round': 1, 'total_rounds': 3}
    assert rooms['WXYZ']['state'] == 'playing'
    assert rooms['WXYZ']['players'] == 2


def test_room_state(client, app_registry, timers):
    app_registry.create_room('ABCD', 'sid-a', 'Alice', 2)
    app_registry.join_room('ABCD', 'sid-b', 'Bob')
    app_registry.submit_word('ABCD', 'sid-a', 'cat')
    app_registry.submit_word('ABCD', 'sid-b', 'cat')
    timers.advance(3)
    app_registry.submit_word('ABCD', 'sid-b', 'dog')

    res = client.get('/api/rooms/abcd')
    assert res.status_code == 200
    state = res.get_json()
    assert state['code'] == 'ABCD'
    assert state['state'] == 'playing'
    assert state['current_round'] == 2
    assert state['round_open'] is True
    assert state['prompt'] == 'https://images.test/2.jpg'
    players = {p['name']: p for p in state['players']}
    assert players['Alice']['score'] == 1
    assert players['Alice']['has_submitted'] is False
    assert players['Bob']['has_submitted'] is True
    assert state['round_history'] == [
        {'round': 1, 'match': True, 'player1Word': 'cat', 'player2Word': 'cat'},
    ]


def test_room_state_not_found(client):
    res = client.get('/api/rooms/NOPE')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Game not found'}


def test_rooms_cli_command(flask_app, app_registry):
    runner = flask_app.test_cli_runner()

    result = runner.invoke(args=['rooms'])
    assert 'No active rooms.' in result.output

    app_registry.create_room('ABCD', 'sid-a', 'Alice', 3)
    result = runner.invoke(args=['rooms'])
    assert result.exit_code == 0
    assert 'ABCD' in result.output
    assert 'waiting' in result.output
    assert 'Alice' in result.output


def test_socketio_runs_on_threads(flask_app):
    assert socketio.server.async_mode == 'threading'
