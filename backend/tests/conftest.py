import heapq
import itertools
import os
import sys
import pytest

# Ensure the backend root (containing the `mindlink` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from mindlink import create_app, socketio
from mindlink.errors import PromptUnavailable
from mindlink.services.games import RoundScheduler, SessionRegistry


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    ROUND_DURATION_SEC = 30
    RESULTS_DURATION_SEC = 3
    FINAL_RESULT_DELAY_SEC = 3
    DEFAULT_TOTAL_ROUNDS = 5
    MAX_TOTAL_ROUNDS = 20


class ManualTimers:
    """Timer service driven by a virtual clock; nothing fires until ``advance``."""

    def __init__(self):
        self.now = 0.0
        self._pending = []
        self._seq = itertools.count()

    def call_later(self, delay, fn, *args):
        heapq.heappush(self._pending, (self.now + delay, next(self._seq), fn, args))

    def advance(self, seconds):
        target = self.now + seconds
        while self._pending and self._pending[0][0] <= target:
            due, _, fn, args = heapq.heappop(self._pending)
            self.now = due
            fn(*args)
        self.now = target

    @property
    def pending(self):
        return len(self._pending)


class StaticPrompts:
    def __init__(self):
        self.calls = 0
        self.fail = False

    def fetch(self):
        self.calls += 1
        if self.fail:
            raise PromptUnavailable('image service down')
        return f'https://images.test/{self.calls}.jpg'


class RecordingEvents:
    """Stands in for the EventRouter's outbound side."""

    def __init__(self):
        self.sent = []
        self.closed = []

    def broadcast(self, code, event, payload):
        self.sent.append((code, event, payload))

    def close_room(self, code):
        self.closed.append(code)

    def named(self, event, code=None):
        return [p for c, e, p in self.sent if e == event and (code is None or c == code)]


class SequenceCodes:
    def __init__(self, codes):
        self._codes = iter(codes)

    def generate(self):
        return next(self._codes)


@pytest.fixture()
def timers():
    return ManualTimers()


@pytest.fixture()
def prompts():
    return StaticPrompts()


@pytest.fixture()
def events():
    return RecordingEvents()


@pytest.fixture()
def registry(timers, prompts, events):
    """A registry wired to a real scheduler, without Flask or Socket.IO."""
    reg = SessionRegistry(code_attempts=5)
    scheduler = RoundScheduler(reg, timers, prompts, events, round_duration=30, results_duration=3, final_delay=3)
    reg.attach(scheduler)
    return reg


@pytest.fixture()
def flask_app(timers, prompts):
    application = create_app(TestConfig, timers=timers, prompt_source=prompts)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def app_registry(flask_app):
    return flask_app.extensions['mindlink'].registry


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except RuntimeError:
            pass
