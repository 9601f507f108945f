def _names(packets):
    return [pkt['name'] for pkt in packets]


def _ensure_connected(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')


def test_socket_connect(sio_client):
    _ensure_connected(sio_client)
    received = sio_client.get_received('/ws')
    assert 'connected' in _names(received)


def test_subscribe_sends_current_state(sio_client, client):
    client.put('/api/scores/days/1', json={'outcome': 2})
    _ensure_connected(sio_client)
    sio_client.get_received('/ws')  # flush

    sio_client.emit('subscribe', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    names = _names(received)
    assert {'state_update', 'sync_status', 'restore_update'} <= set(names)

    state = next(pkt for pkt in received if pkt['name'] == 'state_update')['args'][0]
    assert state['record'] == {'1': 2}


def test_record_change_is_broadcast(sio_client, client):
    _ensure_connected(sio_client)
    sio_client.get_received('/ws')  # flush

    client.put('/api/scores/days/4', json={'outcome': 'X'})
    received = sio_client.get_received('/ws')
    updates = [pkt['args'][0] for pkt in received if pkt['name'] == 'state_update']
    assert updates
    assert updates[-1]['record'] == {'4': 'X'}
    assert updates[-1]['score']['uncounted_fails'] == 1


def test_restore_steps_are_broadcast(sio_client, client):
    _ensure_connected(sio_client)
    sio_client.get_received('/ws')  # flush

    client.post('/api/restore/clipboard', json={'text': 'garbage'})
    received = sio_client.get_received('/ws')
    snapshots = [pkt['args'][0] for pkt in received if pkt['name'] == 'restore_update']
    assert snapshots[-1]['status'] == 'failed'
    assert snapshots[-1]['message'] == 'Invalid backup in clipboard'


def test_ping_pong(sio_client):
    _ensure_connected(sio_client)
    sio_client.get_received('/ws')  # flush

    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    pong = [pkt for pkt in received if pkt['name'] == 'pong']
    assert pong and pong[0]['args'][0] == {'n': 1}
