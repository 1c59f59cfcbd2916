import asyncio
import inspect
from timekeeper.utils import setup_logger

logger = setup_logger(__name__)


class Event:
    """Listener list used by the time tools to publish render updates."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._listeners = []
        self.loop = loop

    def add_listener(self, listener):
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, *args, **kwargs):
        for listener in list(self._listeners):
            try:
                result = listener(*args, **kwargs)

                if inspect.iscoroutine(result):
                    loop = self.loop or _running_loop()
                    if loop is None:
                        result.close()
                        raise RuntimeError("Async listener requires event loop")
                    loop.call_soon_threadsafe(loop.create_task, self._safe_task(result))

            except Exception:
                logger.exception("Error in event listener")

    async def _safe_task(self, coro):
        try:
            await coro
        except Exception:
            logger.exception("Unhandled exception in async event listener")


def _running_loop():
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
