import enum
import itertools
import logging
import threading
from typing import Dict, List, Optional, Tuple

from mindlink.errors import RoomAlreadyExists, RoomNotFound
from mindlink.models import GameRoom, Player
from .codes import RoomCodeGenerator


class SubmitOutcome(str, enum.Enum):
    ACCEPTED = 'accepted'
    RESOLVED = 'resolved'
    IGNORED = 'ignored'


class SessionRegistry:
    """Active rooms keyed by code.

    ``_lock`` guards the map only; everything that touches a room's state
    runs under that room's own lock. Lock order is always room, then map.
    """

    def __init__(self, code_generator=None, code_attempts=10, logger=None):
        self.code_generator = code_generator or RoomCodeGenerator()
        self.code_attempts = max(1, code_attempts)
        self.logger = logger or logging.getLogger(__name__)
        self.scheduler = None
        self._rooms: Dict[str, GameRoom] = {}
        self._lock = threading.Lock()
        self._epochs = itertools.count(1)

    def attach(self, scheduler) -> None:
        self.scheduler = scheduler

    def __contains__(self, code) -> bool:
        return self.get(code) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def get(self, code) -> Optional[GameRoom]:
        if not code:
            return None
        with self._lock:
            return self._rooms.get(code.upper())

    def rooms(self) -> List[GameRoom]:
        with self._lock:
            return list(self._rooms.values())

    def discard(self, room: GameRoom) -> bool:
        """Forget ``room``; a newer room that reused its code is left alone."""
        with self._lock:
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]
                return True
        return False

    def create_room(self, code, creator_id, creator_name, total_rounds, on_create=None) -> GameRoom:
        """Register a waiting room holding its creator.

        The new room's lock is held until ``on_create(room)`` returns, so
        nobody can join before the creator has been told the code.
        """
        code = code.upper()
        room = GameRoom(code, total_rounds, epoch=next(self._epochs))
        room.add_player(Player(creator_id, creator_name))
        with room.lock:
            with self._lock:
                if code in self._rooms:
                    raise RoomAlreadyExists(code)
                self._rooms[code] = room
            self.logger.info(f"[room-created] room={code} by={creator_name!r} total_rounds={total_rounds}")
            if on_create is not None:
                on_create(room)
        return room

    def open_room(self, creator_id, creator_name, total_rounds, on_create=None) -> GameRoom:
        """Create a room under a fresh random code, redrawing on collision."""
        for attempt in range(1, self.code_attempts + 1):
            code = self.code_generator.generate()
            try:
                return self.create_room(code, creator_id, creator_name, total_rounds, on_create=on_create)
            except RoomAlreadyExists:
                self.logger.info(f"[code-collision] room={code} attempt={attempt}/{self.code_attempts}")
                if attempt == self.code_attempts:
                    raise

    def join_room(self, code, joiner_id, joiner_name, on_join=None) -> Tuple[str, str]:
        """Seat the second player and start round 1.

        ``on_join(room)`` runs inside the room's critical section, after the
        room has switched to playing and before the first round is opened.
        """
        room = self.get(code)
        if room is None:
            raise RoomNotFound(code)
        with room.lock:
            if self.get(room.code) is not room:
                raise RoomNotFound(code)
            room.add_player(Player(joiner_id, joiner_name))
            player1, player2 = room.player_slots()
            if on_join is not None:
                on_join(room)
            stamp = self.scheduler.stamp(room)
        self.logger.info(f"[room-joined] room={room.code} player1={player1.name!r} player2={player2.name!r}")
        self.scheduler.start_round(stamp)
        return player1.name, player2.name

    def submit_word(self, code, player_id, word) -> SubmitOutcome:
        room = self.get(code)
        if room is None:
            raise RoomNotFound(code)
        with room.lock:
            if not room.record_response(player_id, word):
                self.logger.debug(f"[submit-ignored] room={room.code} round={room.current_round} sid={player_id}")
                return SubmitOutcome.IGNORED
            if not room.has_all_responses():
                return SubmitOutcome.ACCEPTED
            stamp = self.scheduler.stamp(room)
            self.scheduler.resolve_round(stamp, trigger='all-submitted')
            return SubmitOutcome.RESOLVED

    def remove_player(self, player_id, on_leave=None) -> List[str]:
        """Take a disconnected player out of every room they sit in.

        Empty rooms are deleted. Rooms that still hold a player keep their
        state and timers; ``on_leave(room)`` is called for each of them under
        the room lock.
        """
        affected = []
        for room in self.rooms():
            with room.lock:
                if not room.remove_player(player_id):
                    continue
                affected.append(room.code)
                if room.is_empty:
                    self.discard(room)
                    self.logger.info(f"[room-deleted] room={room.code}")
                    continue
                self.logger.info(
                    f"[player-left] room={room.code} state={room.state.value} remaining={len(room.players)}"
                )
                if on_leave is not None:
                    on_leave(room)
        return affected
