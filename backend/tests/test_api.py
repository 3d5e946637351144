import pytest


def _add(client, name):
    res = client.post('/api/timers', json={'name': name})
    assert res.status_code == 201
    return res.get_json()


def test_index_and_help(client):
    assert client.get('/').status_code == 200
    data = client.get('/help').get_json()
    assert data['thresholds_minutes'] == {'orange': 5, 'red': 10}


def test_add_and_list(client):
    alice = _add(client, 'Alice')
    assert alice['name'] == 'Alice'
    assert alice['running'] is False
    assert alice['display'] == '0s.0'
    board = client.get('/api/timers').get_json()
    assert [t['name'] for t in board['timers']] == ['Alice']
    assert board['separator_index'] == 0


def test_add_blank_name_rejected(client):
    _add(client, 'Alice')
    res = client.post('/api/timers', json={'name': '   '})
    assert res.status_code == 400
    assert 'error' in res.get_json()
    res = client.post('/api/timers', json={})
    assert res.status_code == 400
    assert len(client.get('/api/timers').get_json()['timers']) == 1


def test_toggle_tick_and_reset(client, ticks):
    alice = _add(client, 'Alice')
    started = client.post(f"/api/timers/{alice['id']}/toggle").get_json()
    assert started['running'] is True

    ticks.fire_all(times=15)
    board = client.get('/api/timers').get_json()
    assert board['timers'][0]['display'] == '1s.5'
    assert board['separator_index'] == 1

    reset = client.post(f"/api/timers/{alice['id']}/reset").get_json()
    assert reset['elapsed'] == 0
    assert reset['running'] is True

    stopped = client.post(f"/api/timers/{alice['id']}/toggle").get_json()
    assert stopped['running'] is False


def test_reset_all(client, ticks):
    ids = [_add(client, n)['id'] for n in ('A', 'B')]
    for timer_id in ids:
        client.post(f'/api/timers/{timer_id}/toggle')
    ticks.fire_all(times=3)
    board = client.post('/api/timers/reset').get_json()
    assert all(not t['running'] and t['elapsed'] == 0 for t in board['timers'])
    assert ticks.active_handles == []


def test_delete(client, ticks):
    alice = _add(client, 'Alice')
    client.post(f"/api/timers/{alice['id']}/toggle")
    res = client.delete(f"/api/timers/{alice['id']}")
    assert res.status_code == 200
    assert ticks.active_handles == []
    assert client.get('/api/timers').get_json()['timers'] == []


@pytest.mark.parametrize('method, path', [
    ('post', '/api/timers/nope/toggle'),
    ('post', '/api/timers/nope/reset'),
    ('delete', '/api/timers/nope'),
])
def test_unknown_timer_404(client, method, path):
    res = getattr(client, method)(path)
    assert res.status_code == 404
    assert 'error' in res.get_json()


def test_lifecycle_endpoint(client, flask_app):
    alice = _add(client, 'Alice')
    client.post(f"/api/timers/{alice['id']}/toggle")
    res = client.post('/api/timers/lifecycle', json={'state': 'background'})
    assert res.get_json() == {'state': 'background', 'suspended': True}
    res = client.post('/api/timers/lifecycle', json={'state': 'active'})
    assert res.get_json() == {'state': 'active', 'suspended': False}
    assert client.post('/api/timers/lifecycle', json={'state': 'sleepy'}).status_code == 400


def test_roster_is_persisted(client, flask_app):
    from benchclock.models import TimerRecord
    _add(client, 'Alice')
    _add(client, 'Bob')
    records = TimerRecord.query.order_by(TimerRecord.position).all()
    assert [r.name for r in records] == ['Alice', 'Bob']
    assert [r.position for r in records] == [0, 1]


def test_registry_loads_persisted_roster(flask_app):
    from benchclock import db
    from benchclock.models import TimerRecord
    from benchclock.services.timers import ManualTickSource, TimerRegistry
    from benchclock.services.timers.persistence import SqlAlchemyTimerStore

    db.session.add(TimerRecord(id='b1', name='Bob', elapsed=12.0, running=False, position=1))
    db.session.add(TimerRecord(id='a1', name='Ann', elapsed=30.0, running=True, position=0))
    db.session.commit()

    ticks = ManualTickSource()
    with TimerRegistry(ticks, store=SqlAlchemyTimerStore(flask_app)) as registry:
        registry.ensure_loaded()
        assert [t.name for t in registry.timers()] == ['Ann', 'Bob']
        assert registry.get('a1').running is True
        assert len(ticks.active_handles) == 1
