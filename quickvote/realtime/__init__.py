"""Realtime fan-out of session updates."""
from quickvote.realtime.notifier import InProcessNotifier, Notifier, Subscriber
from quickvote.realtime.subscribers import QueueSubscriber, WebSocketSubscriber

__all__ = ["InProcessNotifier", "Notifier", "Subscriber", "QueueSubscriber", "WebSocketSubscriber"]
