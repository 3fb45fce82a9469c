"""Integration tests for the realtime channels."""
import pytest
from starlette.websockets import WebSocketDisconnect

from quickvote.api.endpoints.realtime import origin_allowed
from quickvote.core.config import settings
from tests.utils import wait_for


def _vote(client, session_id, voter_id, choices):
    return client.post(
        f"/api/sessions/{session_id}/vote",
        json={"voterName": voter_id.title(), "voterId": voter_id, "choices": choices},
    )


@pytest.mark.integration
class TestWebSocket:
    """/api/ws"""

    def test_viewer_receives_update(self, client, create_session, notifier):
        session_id = create_session()["id"]

        with client.websocket_connect("/api/ws") as websocket:
            websocket.send_json({"event": "joinSession", "sessionId": session_id})
            assert wait_for(lambda: notifier.subscriber_count(session_id) == 1)

            response = _vote(client, session_id, "voter1", ["A", "B"])
            assert response.status_code == 200

            message = websocket.receive_json()
            assert message["event"] == "sessionUpdate"
            assert message["session"] == response.json()

        assert wait_for(lambda: notifier.subscriber_count() == 0)

    def test_every_viewer_receives_update(self, client, create_session, notifier):
        session_id = create_session()["id"]

        with client.websocket_connect("/api/ws") as first, client.websocket_connect("/api/ws") as second:
            first.send_json({"event": "joinSession", "sessionId": session_id})
            second.send_json({"event": "joinSession", "sessionId": session_id})
            assert wait_for(lambda: notifier.subscriber_count(session_id) == 2)

            _vote(client, session_id, "voter1", ["A", "B"])

            assert first.receive_json()["session"]["votes"]["voter1"]["choices"] == ["A", "B"]
            assert second.receive_json()["session"]["votes"]["voter1"]["choices"] == ["A", "B"]

    def test_rejected_vote_not_broadcast(self, client, create_session, notifier):
        session_id = create_session()["id"]

        with client.websocket_connect("/api/ws") as websocket:
            websocket.send_json({"event": "joinSession", "sessionId": session_id})
            assert wait_for(lambda: notifier.subscriber_count(session_id) == 1)

            assert _vote(client, session_id, "voter1", ["A"]).status_code == 400
            assert _vote(client, session_id, "voter2", ["A", "C"]).status_code == 200

            # The first message seen is the accepted vote, not the rejected one
            message = websocket.receive_json()
            assert list(message["session"]["votes"]) == ["voter2"]

    def test_joining_another_session_leaves_the_first(self, client, create_session, notifier):
        first_id = create_session()["id"]
        second_id = create_session()["id"]

        with client.websocket_connect("/api/ws") as websocket:
            websocket.send_json({"event": "joinSession", "sessionId": first_id})
            assert wait_for(lambda: notifier.subscriber_count(first_id) == 1)

            websocket.send_json({"event": "joinSession", "sessionId": second_id})
            assert wait_for(lambda: notifier.subscriber_count(second_id) == 1)
            assert notifier.subscriber_count(first_id) == 0

            _vote(client, first_id, "voter1", ["A", "B"])
            _vote(client, second_id, "voter1", ["B", "C"])

            message = websocket.receive_json()
            assert message["session"]["id"] == second_id

    @pytest.mark.parametrize("raw,error", [
        ("not json", "Messages must be JSON"),
        ('{"event": "leaveSession"}', "Unknown event: leaveSession"),
        ('{"event": "joinSession", "sessionId": "../x"}', "Invalid session id"),
    ])
    def test_protocol_errors_reported(self, client, notifier, raw, error):
        with client.websocket_connect("/api/ws") as websocket:
            websocket.send_text(raw)

            assert websocket.receive_json() == {"event": "error", "error": error}
            assert notifier.subscriber_count() == 0


    def test_binary_frame_reported(self, client, notifier):
        with client.websocket_connect("/api/ws") as websocket:
            websocket.send_bytes(b"\x00\x01")

            assert websocket.receive_json() == {"event": "error", "error": "Messages must be text"}

            # The connection stays usable after the bad frame
            websocket.send_text("not json")
            assert websocket.receive_json() == {"event": "error", "error": "Messages must be JSON"}


@pytest.mark.integration
class TestWebSocketOrigin:
    """Handshake origin checks on /api/ws"""

    def test_foreign_origin_refused(self, client, notifier):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/api/ws", headers={"origin": "http://evil.example"}):
                pass

        assert exc_info.value.code == 1008
        assert notifier.subscriber_count() == 0

    def test_frontend_origin_accepted(self, client, create_session, notifier):
        session_id = create_session()["id"]
        origin = settings.CORS_ORIGINS[0]

        with client.websocket_connect("/api/ws", headers={"origin": origin}) as websocket:
            websocket.send_json({"event": "joinSession", "sessionId": session_id})
            assert wait_for(lambda: notifier.subscriber_count(session_id) == 1)


@pytest.mark.unit
@pytest.mark.parametrize("origin,allowed,expected", [
    (None, ["http://localhost:5173"], True),
    ("http://localhost:5173", ["http://localhost:5173"], True),
    ("http://localhost:5173/", ["http://localhost:5173"], True),
    ("http://evil.example", ["http://localhost:5173"], False),
    ("http://localhost:5174", ["http://localhost:5173"], False),
    ("http://anything.example", ["*"], True),
])
def test_origin_allowed(origin, allowed, expected):
    assert origin_allowed(origin, allowed) is expected


@pytest.mark.integration
class TestServerSentEvents:
    """/api/sessions/{id}/events"""

    def test_unknown_session(self, client):
        response = client.get("/api/sessions/nope123/events")

        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}
