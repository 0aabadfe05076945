import asyncio
import logging

from tmplink.errors import UploadCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation signal shared by every step of a run.

    ``cancel()`` must be called from the thread running the event loop; use
    ``loop.call_soon_threadsafe(token.cancel)`` from anywhere else.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if not self._event.is_set():
            logger.debug("Cancellation requested")
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise UploadCancelled()

    async def wait(self) -> None:
        await self._event.wait()
