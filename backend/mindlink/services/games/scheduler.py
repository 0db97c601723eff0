import logging
from typing import NamedTuple, Optional

from mindlink.errors import PromptUnavailable
from mindlink.models import GameRoom, RoomState, RoundResult
from .scoring import room_similarity, score_current_round


class RoundStamp(NamedTuple):
    """Identifies the round a deferred task was armed for."""
    code: str
    epoch: int
    round_no: int


class RoundScheduler:
    """Drives each room through its rounds: start, time out or complete, advance.

    Every transition re-checks its ``RoundStamp`` against the live room under
    the room lock, so whichever trigger arrives second (timeout after both
    players submitted, or a timer armed for a room that has since been torn
    down) finds the round already moved on and does nothing.
    """

    def __init__(self, registry, timers, prompt_source, events, logger=None,
                 round_duration=30, results_duration=3, final_delay=3):
        self.registry = registry
        self.timers = timers
        self.prompt_source = prompt_source
        self.events = events
        self.logger = logger or logging.getLogger(__name__)
        self.round_duration = round_duration
        self.results_duration = results_duration
        self.final_delay = final_delay

    @staticmethod
    def stamp(room: GameRoom) -> RoundStamp:
        return RoundStamp(room.code, room.epoch, room.current_round)

    def _live_room(self, stamp: RoundStamp) -> Optional[GameRoom]:
        room = self.registry.get(stamp.code)
        if room is None or room.epoch != stamp.epoch:
            return None
        return room

    def _awaiting_start(self, room: GameRoom, stamp: RoundStamp) -> bool:
        return (
            self.registry.get(room.code) is room
            and room.state == RoomState.PLAYING
            and room.current_round == stamp.round_no
            and not room.round_open
        )

    def _abort(self, stage, stamp, reason):
        self.logger.info(f"[timer-abort] room={stamp.code} stage={stage} round={stamp.round_no} reason={reason}")

    def _arm(self, stage, delay, fn, stamp):
        self.logger.info(f"[timer-set] room={stamp.code} stage={stage} round={stamp.round_no} duration={delay}s")
        self.timers.call_later(delay, fn, stamp)

    def start_round(self, stamp: RoundStamp) -> bool:
        """Open ``stamp.round_no``: new prompt, ``new_round`` broadcast, round timer."""
        room = self._live_room(stamp)
        if room is None:
            self._abort('start', stamp, 'room gone')
            return False
        with room.lock:
            if not self._awaiting_start(room, stamp):
                self._abort('start', stamp, 'stale')
                return False
            room.responses = {}

        # Fetch outside the lock so submits and disconnects are not held up
        try:
            prompt = self.prompt_source.fetch()
        except PromptUnavailable as exc:
            self.logger.warning(f"[prompt-unavailable] room={stamp.code} round={stamp.round_no} error={exc.message}")
            prompt = None

        with room.lock:
            if not self._awaiting_start(room, stamp):
                self._abort('start', stamp, 'stale after prompt fetch')
                return False
            room.open_round(prompt)
            self.events.broadcast(room.code, 'new_round', {
                'prompt': prompt,
                'currentRound': room.current_round,
            })
            self.logger.info(f"[round-start] room={room.code} round={room.current_round}/{room.total_rounds}")
            self._arm('round', self.round_duration, self.resolve_round, stamp)
        return True

    def resolve_round(self, stamp: RoundStamp, trigger='timeout') -> Optional[RoundResult]:
        """Score and close the round once; later triggers for it are no-ops."""
        room = self._live_room(stamp)
        if room is None:
            self._abort('round', stamp, 'room gone')
            return None
        with room.lock:
            if room.state != RoomState.PLAYING or room.current_round != stamp.round_no or not room.round_open:
                self._abort('round', stamp, 'already resolved')
                return None
            result = score_current_round(room)
            room.advance_round()
            self.events.broadcast(room.code, 'round_over', result.to_payload())
            self.logger.info(
                f"[round-over] room={room.code} round={result.round_no} trigger={trigger} "
                f"match={result.match} responses={len(room.responses)}"
            )
            following = self.stamp(room)
            if room.is_finished:
                self._arm('final', self.final_delay, self.finish_game, following)
            else:
                self._arm('results', self.results_duration, self.start_round, following)
        return result

    def finish_game(self, stamp: RoundStamp) -> Optional[int]:
        """Emit the final similarity and tear the room down."""
        room = self._live_room(stamp)
        if room is None:
            self._abort('final', stamp, 'room gone')
            return None
        with room.lock:
            if room.state != RoomState.FINISHED or room.current_round != stamp.round_no:
                self._abort('final', stamp, 'stale')
                return None
            score = room_similarity(room)
            self.events.broadcast(room.code, 'game_over', {'similarity': score})
            self.events.close_room(room.code)
            self.registry.discard(room)
            self.logger.info(f"[game-over] room={room.code} similarity={score} scores={room.scores}")
        return score
