import math
from typing import Optional

from mindlink.models import GameRoom, RoundResult


def normalize_word(word: Optional[str]) -> Optional[str]:
    if word is None:
        return None
    word = word.strip()
    return word or None


def words_match(first: Optional[str], second: Optional[str]) -> bool:
    """Case-insensitive equality; a missing word never matches."""
    first, second = normalize_word(first), normalize_word(second)
    if not first or not second:
        return False
    return first.casefold() == second.casefold()


def score_current_round(room: GameRoom) -> RoundResult:
    """Apply scoring for the room's current round.

    +1 to each player when both words match. Appends the round summary to
    ``room.round_history``. The caller holds the room lock and advances the
    round afterwards.
    """
    player1, player2 = room.player_slots()
    word1 = room.responses.get(player1.id) if player1 else None
    word2 = room.responses.get(player2.id) if player2 else None
    match = words_match(word1, word2)
    if match:
        for player in (player1, player2):
            if player is not None:
                room.scores[player.id] = room.scores.get(player.id, 0) + 1
    result = RoundResult(room.current_round, match, word1, word2)
    room.round_history.append(result)
    return result


def similarity(total_score: int, total_rounds: int) -> int:
    """Share of the maximum achievable score, as a whole percentage (half rounds up)."""
    if total_rounds <= 0:
        return 0
    percent = math.floor(total_score * 100 / (total_rounds * 2) + 0.5)
    return max(0, min(100, percent))


def room_similarity(room: GameRoom) -> int:
    return similarity(sum(room.scores.values()), room.total_rounds)
