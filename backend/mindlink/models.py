import enum
import threading

from mindlink.errors import GameInProgress, RoomFull

NO_RESPONSE = 'No response'


class RoomState(str, enum.Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


class Player:
    def __init__(self, id, name):
        self.id = id
        self.name = name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }


class RoundResult:
    def __init__(self, round_no, match, player1_word=None, player2_word=None):
        self.round_no = round_no
        self.match = match
        self.player1_word = player1_word
        self.player2_word = player2_word

    def to_payload(self):
        """The ``round_over`` event body."""
        return {
            'match': self.match,
            'player1Word': self.player1_word or NO_RESPONSE,
            'player2Word': self.player2_word or NO_RESPONSE,
        }

    def to_dict(self):
        return {'round': self.round_no, **self.to_payload()}


class GameRoom:
    """State of one two-player session.

    Callers hold ``lock`` around every read-modify-write; the room itself
    does no locking so that a whole transition (record, resolve, advance)
    can run as one critical section.
    """

    MAX_PLAYERS = 2

    def __init__(self, code, total_rounds, epoch=0):
        self.code = code
        self.epoch = epoch
        self.total_rounds = total_rounds
        self.players = []
        self.state = RoomState.WAITING
        self.current_round = 1
        self.prompt = None
        self.responses = {}
        self.scores = {}
        self.round_open = False
        self.round_history = []
        self.lock = threading.RLock()

    @property
    def is_full(self):
        return len(self.players) >= self.MAX_PLAYERS

    @property
    def is_empty(self):
        return not self.players

    @property
    def is_finished(self):
        return self.state == RoomState.FINISHED

    def has_player(self, player_id):
        return any(p.id == player_id for p in self.players)

    def player_slots(self):
        """Return (player1, player2), either of which may be None."""
        slots = list(self.players) + [None] * self.MAX_PLAYERS
        return slots[0], slots[1]

    def add_player(self, player):
        if self.has_player(player.id):
            raise RoomFull(self.code, 'You are already in this game')
        if self.is_full:
            raise RoomFull(self.code)
        if self.state != RoomState.WAITING:
            raise GameInProgress(self.code)
        self.players.append(player)
        self.scores[player.id] = 0
        if self.is_full:
            self.state = RoomState.PLAYING

    def remove_player(self, player_id):
        """Drop a player with their score and pending response. Returns False if absent."""
        before = len(self.players)
        self.players = [p for p in self.players if p.id != player_id]
        self.scores.pop(player_id, None)
        self.responses.pop(player_id, None)
        return len(self.players) != before

    def open_round(self, prompt=None):
        self.responses = {}
        self.prompt = prompt
        self.round_open = True

    def record_response(self, player_id, word):
        """Insert-if-absent. Returns True only when the word was stored."""
        if self.state != RoomState.PLAYING or not self.round_open:
            return False
        if not self.has_player(player_id) or player_id in self.responses:
            return False
        self.responses[player_id] = word
        return True

    def has_all_responses(self):
        return len(self.responses) == self.MAX_PLAYERS

    def advance_round(self):
        """Close the current round and move the round counter on."""
        self.round_open = False
        self.current_round += 1
        if self.current_round > self.total_rounds:
            self.state = RoomState.FINISHED

    def to_dict(self):
        return {
            'code': self.code,
            'state': self.state.value,
            'players': [
                {**p.to_dict(), 'score': self.scores.get(p.id, 0), 'has_submitted': p.id in self.responses}
                for p in self.players
            ],
            'current_round': self.current_round,
            'total_rounds': self.total_rounds,
            'round_open': self.round_open,
            'prompt': self.prompt,
            'round_history': [r.to_dict() for r in self.round_history],
        }
