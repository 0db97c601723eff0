from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

# Room state is guarded by threading.RLock, so handlers and timers run on OS threads
socketio = SocketIO(async_mode='threading')


class MindLink:
    """Per-app handles on the room lifecycle services."""

    def __init__(self, registry, scheduler, router, timers):
        self.registry = registry
        self.scheduler = scheduler
        self.router = router
        self.timers = timers


def _cors_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, timers=None, prompt_source=None):
    """Build the Flask app and wire the room services onto ``socketio``.

    ``timers`` and ``prompt_source`` default to Socket.IO background tasks
    and Lorem Picsum; tests pass deterministic stand-ins.
    """
    from mindlink.services.games import (
        PicsumPromptSource,
        RoomCodeGenerator,
        RoundScheduler,
        SessionRegistry,
        SocketIOTimers,
    )
    from mindlink.socketio_events import EventRouter, register_socketio_handlers

    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    cfg = flask_app.config
    logger = flask_app.logger

    origins = _cors_origins(cfg.get('CORS_ALLOWED_ORIGINS', '*'))
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    registry = SessionRegistry(
        code_generator=RoomCodeGenerator(length=cfg.get('ROOM_CODE_LENGTH', 4)),
        code_attempts=cfg.get('ROOM_CODE_ATTEMPTS', 10),
        logger=logger,
    )
    router = EventRouter(
        socketio,
        registry,
        namespace=cfg.get('SOCKETIO_NAMESPACE', '/'),
        logger=logger,
        default_total_rounds=cfg.get('DEFAULT_TOTAL_ROUNDS', 5),
        max_total_rounds=cfg.get('MAX_TOTAL_ROUNDS', 20),
        max_name_length=cfg.get('MAX_NAME_LENGTH', 32),
        max_word_length=cfg.get('MAX_WORD_LENGTH', 40),
        code_length=cfg.get('ROOM_CODE_LENGTH', 4),
    )
    if timers is None:
        timers = SocketIOTimers(socketio, logger=logger)
    if prompt_source is None:
        prompt_source = PicsumPromptSource(cfg.get('PROMPT_URL_TEMPLATE', 'https://picsum.photos/400/300?random={token}'))
    scheduler = RoundScheduler(
        registry,
        timers,
        prompt_source,
        router,
        logger=logger,
        round_duration=cfg.get('ROUND_DURATION_SEC', 30),
        results_duration=cfg.get('RESULTS_DURATION_SEC', 3),
        final_delay=cfg.get('FINAL_RESULT_DELAY_SEC', 3),
    )
    registry.attach(scheduler)
    flask_app.extensions['mindlink'] = MindLink(registry, scheduler, router, timers)

    register_socketio_handlers(socketio, router)

    from mindlink.routes import main
    flask_app.register_blueprint(main)

    from mindlink.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    @click.command('rooms')
    def rooms_command():
        """Lists the rooms that are currently active."""
        active = registry.rooms()
        if not active:
            click.echo('No active rooms.')
            return
        for room in active:
            names = ', '.join(p.name for p in room.players)
            click.echo(f'{room.code}  {room.state.value:<8}  round {room.current_round}/{room.total_rounds}  {names}')

    flask_app.cli.add_command(rooms_command)

    return flask_app
