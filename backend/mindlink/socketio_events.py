import logging
from typing import Any, Dict

from flask import request
from flask_socketio import emit, join_room

from mindlink.errors import InvalidPayload, MindLinkError


class EventRouter:
    """Translate Socket.IO events into registry calls and back.

    Inbound handlers validate payloads and report failures to the sender
    only; outbound helpers are used by the round scheduler to reach a whole
    room.
    """

    def __init__(self, socketio, registry, namespace='/', logger=None,
                 default_total_rounds=5, max_total_rounds=20,
                 max_name_length=32, max_word_length=40, code_length=4):
        self.socketio = socketio
        self.registry = registry
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self.default_total_rounds = default_total_rounds
        self.max_total_rounds = max_total_rounds
        self.max_name_length = max_name_length
        self.max_word_length = max_word_length
        self.code_length = code_length

    # ---- outbound ----

    def broadcast(self, code: str, event: str, payload: Dict[str, Any]) -> None:
        # socketio.emit works from background tasks, outside a request context
        self.socketio.emit(event, payload, to=code, namespace=self.namespace)

    def close_room(self, code: str) -> None:
        self.socketio.close_room(code, namespace=self.namespace)

    # ---- inbound ----

    def handle_connect(self, auth=None):
        self.logger.info(f"[connect] sid={request.sid}")

    def handle_disconnect(self, reason=None):
        sid = request.sid
        self.logger.info(f"[disconnect] sid={sid} reason={reason}")
        self.registry.remove_player(
            sid, on_leave=lambda room: self.broadcast(room.code, 'player_disconnected', {})
        )

    def handle_create_game(self, data):
        def on_create(room):
            join_room(room.code)
            emit('game_created', {'gameCode': room.code})

        try:
            name = self._text(data, 'playerName', self.max_name_length)
            total_rounds = self._total_rounds(data)
            self.registry.open_room(request.sid, name, total_rounds, on_create=on_create)
        except MindLinkError as exc:
            self.logger.info(f"[create-error] sid={request.sid} error={exc.message}")
            emit('create_game_error', {'message': exc.message})

    def handle_join_game(self, data):
        def on_join(room):
            join_room(room.code)
            player1, player2 = room.player_slots()
            self.broadcast(room.code, 'game_started', {
                'player1': player1.name,
                'player2': player2.name,
            })

        try:
            code = self._code(data)
            name = self._text(data, 'playerName', self.max_name_length)
            self.registry.join_room(code, request.sid, name, on_join=on_join)
        except MindLinkError as exc:
            self.logger.info(f"[join-error] sid={request.sid} error={exc.message}")
            emit('join_game_error', {'message': exc.message})

    def handle_submit_word(self, data):
        try:
            code = self._code(data)
            word = self._text(data, 'word', self.max_word_length)
            self.registry.submit_word(code, request.sid, word)
        except MindLinkError as exc:
            self.logger.info(f"[submit-error] sid={request.sid} error={exc.message}")
            emit('submit_word_error', {'message': exc.message})

    # ---- payload validation ----

    @staticmethod
    def _field(data, field):
        if not isinstance(data, dict):
            raise InvalidPayload('Payload must be an object')
        return data.get(field)

    def _text(self, data, field, max_length):
        value = self._field(data, field)
        if not isinstance(value, str) or not value.strip():
            raise InvalidPayload(f'{field} is required')
        value = value.strip()
        if len(value) > max_length:
            raise InvalidPayload(f'{field} must be at most {max_length} characters')
        return value

    def _code(self, data):
        return self._text(data, 'gameCode', self.code_length).upper()

    def _total_rounds(self, data):
        value = self._field(data, 'totalRounds')
        if value is None:
            return self.default_total_rounds
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise InvalidPayload('totalRounds must be a whole number')
        try:
            rounds = int(value)
        except (TypeError, ValueError):
            raise InvalidPayload('totalRounds must be a whole number')
        if not 1 <= rounds <= self.max_total_rounds:
            raise InvalidPayload(f'totalRounds must be between 1 and {self.max_total_rounds}')
        return rounds


def register_socketio_handlers(socketio, router: EventRouter) -> None:
    """Bind the router's handlers on its namespace."""
    namespace = router.namespace
    socketio.on_event('connect', router.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', router.handle_disconnect, namespace=namespace)
    socketio.on_event('create_game', router.handle_create_game, namespace=namespace)
    socketio.on_event('join_game', router.handle_join_game, namespace=namespace)
    socketio.on_event('submit_word', router.handle_submit_word, namespace=namespace)
