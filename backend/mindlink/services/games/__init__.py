"""Game domain services: room codes, scoring, prompts, timers and the room registry.

This package holds the room lifecycle so that socket handlers and HTTP
routes stay thin and transport concerns remain separate from game rules.
"""

from .codes import RoomCodeGenerator
from .prompts import PicsumPromptSource, PromptSource
from .registry import SessionRegistry, SubmitOutcome
from .scheduler import RoundScheduler, RoundStamp
from .timers import SocketIOTimers

__all__ = [
    'PicsumPromptSource',
    'PromptSource',
    'RoomCodeGenerator',
    'RoundScheduler',
    'RoundStamp',
    'SessionRegistry',
    'SocketIOTimers',
    'SubmitOutcome',
]
