"""Subscriber adapters for transports that are not WebSockets."""
import asyncio
from typing import Any


class QueueSubscriber:
    """Buffers published messages for a single streaming response (SSE).

    The queue is bounded. When a slow reader lets it fill up the subscriber
    is marked closed and send_json raises, so the notifier drops it and the
    stream ends; the client reconnects and starts again from a fresh snapshot.
    """

    def __init__(self, maxsize: int = 100) -> None:
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    async def send_json(self, data: Any) -> None:
        if self.closed:
            raise RuntimeError("Subscriber is closed")
        try:
            self.queue.put_nowait(data)
        except asyncio.QueueFull:
            self.closed = True
            raise

    async def get(self, timeout: float = None) -> Any:
        """Wait for the next message; raises asyncio.TimeoutError on timeout."""
        if timeout is None:
            return await self.queue.get()
        return await asyncio.wait_for(self.queue.get(), timeout=timeout)


class WebSocketSubscriber:
    """Wraps a WebSocket so channel membership is tracked by connection identity."""

    def __init__(self, websocket) -> None:
        self.websocket = websocket
        self.session_id = None  # Session currently shown by this connection

    async def send_json(self, data: Any) -> None:
        await self.websocket.send_json(data)
