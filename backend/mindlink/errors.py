"""Error taxonomy for the room lifecycle.

Every error carries a human-readable message that is safe to send back to
the client in the matching ``*_error`` event.
"""


class MindLinkError(Exception):
    """Base class for errors surfaced to a single client."""

    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomAlreadyExists(MindLinkError):
    default_message = 'Game code already exists'

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message)


class RoomNotFound(MindLinkError):
    default_message = 'Invalid game code or game is full'

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message)


class RoomFull(MindLinkError):
    default_message = 'Invalid game code or game is full'

    def __init__(self, code, message=None):
        self.code = code
        super().__init__(message)


class GameInProgress(RoomFull):
    default_message = 'This game has already started'


class PromptUnavailable(MindLinkError):
    default_message = 'Image prompt unavailable'


class InvalidPayload(MindLinkError):
    default_message = 'Invalid request'
