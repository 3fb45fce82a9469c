"""Realtime endpoints: WebSocket channel and Server-Sent Events stream."""
import asyncio
import json
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect, status
from fastapi.responses import StreamingResponse

from quickvote.api.deps import get_notifier, get_session_service
from quickvote.core.config import settings
from quickvote.core.constants import EVENT_ERROR, EVENT_JOIN_SESSION, EVENT_SESSION_UPDATE
from quickvote.core.logging_config import get_logger
from quickvote.core.sanitization import is_valid_session_id
from quickvote.realtime.notifier import Notifier
from quickvote.realtime.subscribers import QueueSubscriber, WebSocketSubscriber
from quickvote.services.sessions import SessionService

logger = get_logger(__name__)
router = APIRouter()


def format_event(message: Dict[str, Any]) -> str:
    return f"data: {json.dumps(message)}\n\n"


async def event_generator(
    request: Request,
    notifier: Notifier,
    session_id: str,
    snapshot: Dict[str, Any],
    keepalive_interval: float = 15,
):
    """
    SSE event generator for one session.

    Sends the current snapshot first so a reconnecting client is back in sync,
    then relays every published sessionUpdate. A comment line goes out when no
    update arrives within keepalive_interval so proxies keep the connection.

    Args:
        request: FastAPI request object to check for client disconnect
        notifier: Channel registry the stream subscribes to
        session_id: Session whose channel to join
        snapshot: Current session payload
        keepalive_interval: Seconds of silence before a keep-alive comment
    """
    subscriber = QueueSubscriber()
    notifier.subscribe(subscriber, session_id)

    try:
        yield format_event({"event": EVENT_SESSION_UPDATE, "session": snapshot})

        while True:
            if await request.is_disconnected():
                break

            # Dropped by the notifier after falling behind; the client
            # reconnects and gets a fresh snapshot
            if subscriber.closed:
                logger.info("sse_stream_closed_lagging", session_id=session_id)
                break

            try:
                message = await subscriber.get(timeout=keepalive_interval)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue

            yield format_event(message)

    except asyncio.CancelledError:
        # Client disconnected
        pass
    finally:
        notifier.disconnect(subscriber)


@router.get("/sessions/{session_id}/events")
async def session_events(
    request: Request,
    session_id: str,
    service: SessionService = Depends(get_session_service),
    notifier: Notifier = Depends(get_notifier),
):
    """
    SSE stream of sessionUpdate events for one session.

    Alternative to the WebSocket channel for clients behind proxies that
    block upgrades. Returns 404 before streaming if the session is unknown.
    """
    session = service.get_session(session_id)

    return StreamingResponse(
        event_generator(
            request,
            notifier,
            session_id,
            session.to_payload(),
            keepalive_interval=settings.SSE_KEEPALIVE_INTERVAL,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering in nginx
        }
    )


def origin_allowed(origin: Optional[str], allowed: List[str]) -> bool:
    """
    Check a WebSocket Origin header against the allowed frontend origins.

    Browsers always send Origin on WebSocket handshakes; clients that send
    none are not browsers and are let through.
    """
    if origin is None:
        return True
    return "*" in allowed or origin.rstrip("/") in {o.rstrip("/") for o in allowed}


async def handle_message(subscriber: WebSocketSubscriber, notifier: Notifier, raw: str) -> None:
    """Apply one client message; protocol errors are reported back on the socket."""
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        await subscriber.send_json({"event": EVENT_ERROR, "error": "Messages must be JSON"})
        return

    event = message.get("event") if isinstance(message, dict) else None
    if event != EVENT_JOIN_SESSION:
        await subscriber.send_json({"event": EVENT_ERROR, "error": f"Unknown event: {event}"})
        return

    session_id = message.get("sessionId")
    if not is_valid_session_id(session_id):
        await subscriber.send_json({"event": EVENT_ERROR, "error": "Invalid session id"})
        return

    # The client shows one session at a time
    if subscriber.session_id and subscriber.session_id != session_id:
        notifier.unsubscribe(subscriber, subscriber.session_id)

    notifier.subscribe(subscriber, session_id)
    subscriber.session_id = session_id
    logger.info("client_joined_session", session_id=session_id)


@router.websocket("/ws")
async def session_socket(websocket: WebSocket, notifier: Notifier = Depends(get_notifier)):
    """
    WebSocket channel for live session updates.

    Client -> server:  {"event": "joinSession", "sessionId": "k3x9q2a"}
    Server -> client:  {"event": "sessionUpdate", "session": {...}}

    Handshakes from origins other than the frontend are refused with 1008.
    Membership is dropped when the connection closes.
    """
    origin = websocket.headers.get("origin")
    if not origin_allowed(origin, settings.CORS_ORIGINS):
        logger.warning("websocket_origin_rejected", origin=origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscriber = WebSocketSubscriber(websocket)
    logger.info("client_connected")

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", status.WS_1000_NORMAL_CLOSURE))

            raw = frame.get("text")
            if raw is None:
                await subscriber.send_json({"event": EVENT_ERROR, "error": "Messages must be text"})
                continue
            await handle_message(subscriber, notifier, raw)
    except WebSocketDisconnect:
        logger.info("client_disconnected", session_id=subscriber.session_id)
    finally:
        notifier.disconnect(subscriber)
