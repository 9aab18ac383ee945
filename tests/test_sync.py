from flexterm.sync import SyncUpdate


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_inactive_by_default():
    assert SyncUpdate(_Clock()).in_sync(1000) is False


def test_active_until_timeout():
    clock = _Clock()
    sync = SyncUpdate(clock)
    sync.begin()
    clock.now = 0.5
    assert sync.in_sync(1000) is True
    clock.now = 1.0
    assert sync.in_sync(1000) is False
    clock.now = 1.1
    assert sync.in_sync(1000) is False


def test_end_stops_sync():
    clock = _Clock()
    sync = SyncUpdate(clock)
    sync.begin()
    sync.end()
    assert sync.in_sync(1000) is False


def test_begin_restarts_timer():
    clock = _Clock()
    sync = SyncUpdate(clock)
    sync.begin()
    clock.now = 0.9
    sync.begin()
    clock.now = 1.5
    assert sync.in_sync(1000) is True