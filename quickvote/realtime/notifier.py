"""
Per-session publish/subscribe.

A channel is the set of subscribers currently viewing one session. Publishing
is best effort: a subscriber that fails to receive an update is dropped and
the rest of the channel still gets it. Nothing is queued for subscribers that
are not connected; clients resynchronize by re-fetching the session.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Protocol, Set

from quickvote.core.constants import EVENT_SESSION_UPDATE
from quickvote.core.logging_config import get_logger

logger = get_logger(__name__)


class Subscriber(Protocol):
    """Anything that can receive a JSON message (a WebSocket, an SSE queue)."""

    async def send_json(self, data: Any) -> None:
        ...


class Notifier(ABC):
    """Capability interface for session channels."""

    @abstractmethod
    def subscribe(self, subscriber: Subscriber, session_id: str) -> None:
        ...

    @abstractmethod
    def unsubscribe(self, subscriber: Subscriber, session_id: str) -> None:
        ...

    @abstractmethod
    def disconnect(self, subscriber: Subscriber) -> None:
        """Remove the subscriber from every channel it joined."""
        ...

    @abstractmethod
    async def publish(self, session_id: str, session: Dict[str, Any]) -> int:
        """Send a sessionUpdate to every member of the channel.

        Returns:
            Number of subscribers the update was delivered to.
        """
        ...

    @abstractmethod
    def subscriber_count(self, session_id: str = None) -> int:
        ...


class InProcessNotifier(Notifier):
    """Channel membership kept in this process's memory."""

    def __init__(self) -> None:
        self._channels: Dict[str, Set[Subscriber]] = {}

    def subscribe(self, subscriber: Subscriber, session_id: str) -> None:
        self._channels.setdefault(session_id, set()).add(subscriber)
        logger.debug("subscriber_joined", session_id=session_id,
                     members=len(self._channels[session_id]))

    def unsubscribe(self, subscriber: Subscriber, session_id: str) -> None:
        members = self._channels.get(session_id)
        if not members:
            return
        members.discard(subscriber)
        if not members:
            del self._channels[session_id]

    def disconnect(self, subscriber: Subscriber) -> None:
        for session_id in [sid for sid, members in self._channels.items() if subscriber in members]:
            self.unsubscribe(subscriber, session_id)

    def channels_of(self, subscriber: Subscriber) -> Set[str]:
        return {sid for sid, members in self._channels.items() if subscriber in members}

    async def publish(self, session_id: str, session: Dict[str, Any]) -> int:
        members = list(self._channels.get(session_id, ()))
        message = {"event": EVENT_SESSION_UPDATE, "session": session}

        delivered = 0
        for subscriber in members:
            try:
                await subscriber.send_json(message)
                delivered += 1
            except Exception as e:
                # Connection went away between join and publish
                logger.warning("session_update_delivery_failed", session_id=session_id, error=str(e))
                self.unsubscribe(subscriber, session_id)

        logger.info("session_update_published", session_id=session_id,
                    delivered=delivered, members=len(members))
        return delivered

    def subscriber_count(self, session_id: str = None) -> int:
        if session_id is not None:
            return len(self._channels.get(session_id, ()))
        return sum(len(members) for members in self._channels.values())


# Process-wide notifier shared by the WebSocket and SSE transports
notifier = InProcessNotifier()
