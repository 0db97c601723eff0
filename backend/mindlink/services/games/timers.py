import logging


class SocketIOTimers:
    """Deferred callbacks on Socket.IO background tasks.

    Each timer sleeps on its own background thread, so a pending timer never
    holds up other rooms.
    """

    def __init__(self, socketio, logger=None):
        self.socketio = socketio
        self.logger = logger or logging.getLogger(__name__)

    def call_later(self, delay, fn, *args):
        return self.socketio.start_background_task(self._worker, delay, fn, args)

    def _worker(self, delay, fn, args):
        if delay > 0:
            self.socketio.sleep(delay)
        self.logger.debug(f"[timer-fire] callback={getattr(fn, '__name__', fn)} args={args}")
        try:
            fn(*args)
        except Exception:
            self.logger.exception(f"[timer-error] callback={getattr(fn, '__name__', fn)} args={args}")
