import dataclasses

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from mentormate.main import create_app
from mentormate.services.oracle_service import OracleError
from mentormate.services.tavus_service import TavusClient
from mentormate.utils.rate_limit_utils import limiter


def open_session(client):
    mentors = {m["slug"]: m["id"] for m in client.get("/mentors").json()}
    profile = client.post("/profiles", json={"email": "ari@example.com", "full_name": "Ari"}).json()
    session = client.post("/chat/sessions", json={"user_id": profile["id"], "mentor_id": mentors["zenkai"]})
    assert session.status_code == 201
    return {"user_id": profile["id"], "session": session.json()}


@pytest.fixture
def chat_setup(client):
    return open_session(client)


def test_send_message_stores_both_sides(client, oracle, chat_setup):
    session_id = chat_setup["session"]["id"]
    oracle.replies.append("Breathe in for four counts.")

    response = client.post(f"/chat/sessions/{session_id}/messages", json={"content": "I feel stressed"})

    assert response.status_code == 200
    body = response.json()
    assert body["user_message"]["sender_type"] == "user"
    assert body["mentor_message"]["content"] == "Breathe in for four counts."
    assert body["mentor_message"]["metadata"]["ai_generated"] is True
    assert oracle.calls[0]["max_tokens"] == 200

    history = client.get(f"/chat/sessions/{session_id}/messages").json()["messages"]
    assert [m["sender_type"] for m in history] == ["user", "mentor"]


def test_history_is_sent_to_the_oracle(client, oracle, chat_setup):
    session_id = chat_setup["session"]["id"]
    for i in range(7):
        client.post(f"/chat/sessions/{session_id}/messages", json={"content": f"note {i}"})

    last_call = oracle.calls[-1]["messages"]
    # system prompt + last 10 stored messages + the new user message
    assert len(last_call) == 12
    assert last_call[-1] == {"role": "user", "content": "note 6"}


def test_oracle_failure_uses_fallback(client, oracle, chat_setup):
    oracle.error = OracleError("timeout")

    body = client.post(
        f"/chat/sessions/{chat_setup['session']['id']}/messages", json={"content": "Hello?"}
    ).json()

    assert body["is_fallback"] is True
    assert body["mentor_message"]["metadata"]["model"] == "fallback"


def test_ended_session_rejects_messages(client, chat_setup):
    session_id = chat_setup["session"]["id"]

    ended = client.post(f"/chat/sessions/{session_id}/end")
    assert ended.json()["status"] == "ended"
    assert ended.json()["ended_at"] is not None

    response = client.post(f"/chat/sessions/{session_id}/messages", json={"content": "Still there?"})
    assert response.status_code == 409


def test_unknown_session_is_404(client):
    assert client.post("/chat/sessions/missing/messages", json={"content": "hi"}).status_code == 404
    assert client.get("/chat/sessions/missing/messages").status_code == 404


def test_list_sessions_for_user(client, chat_setup):
    sessions = client.get("/chat/sessions", params={"user_id": chat_setup["user_id"]}).json()

    assert [s["id"] for s in sessions] == [chat_setup["session"]["id"]]


def test_websocket_streams_new_messages(client, oracle, chat_setup):
    session_id = chat_setup["session"]["id"]
    oracle.replies.append("I'm listening.")

    with client.websocket_connect(f"/ws/chat/{session_id}") as websocket:
        assert websocket.receive_json() == {"type": "subscribed", "session_id": session_id}

        client.post(f"/chat/sessions/{session_id}/messages", json={"content": "Are you there?"})

        first = websocket.receive_json()["message"]
        second = websocket.receive_json()["message"]

        websocket.send_json({"type": "unsubscribe"})
        with pytest.raises(WebSocketDisconnect):
            websocket.receive_json()

    assert (first["sender_type"], first["content"]) == ("user", "Are you there?")
    assert (second["sender_type"], second["content"]) == ("mentor", "I'm listening.")


def test_websocket_ignores_unknown_frames(client, chat_setup):
    session_id = chat_setup["session"]["id"]

    with client.websocket_connect(f"/ws/chat/{session_id}") as websocket:
        websocket.receive_json()
        websocket.send_text("not json")
        websocket.send_json({"type": "ping"})

        client.post(f"/chat/sessions/{session_id}/messages", json={"content": "still here"})
        assert websocket.receive_json()["message"]["content"] == "still here"
        assert websocket.receive_json()["message"]["sender_type"] == "mentor"

        websocket.send_json({"type": "unsubscribe"})
        with pytest.raises(WebSocketDisconnect):
            websocket.receive_json()


def test_blank_completion_uses_fallback(client, oracle, chat_setup):
    oracle.replies.append("   ")

    body = client.post(
        f"/chat/sessions/{chat_setup['session']['id']}/messages", json={"content": "Hello?"}
    ).json()

    assert body["is_fallback"] is True
    assert body["mentor_message"]["content"].strip() != ""
    assert body["mentor_message"]["metadata"]["ai_generated"] is False


def test_chat_rate_limit_comes_from_settings(settings, engine, oracle, hub):
    limiter.reset()
    app = create_app(
        dataclasses.replace(settings, chat_rate_limit="2/minute"),
        engine=engine, oracle=oracle, tavus=TavusClient(api_key=None), hub=hub,
    )

    with TestClient(app) as client:
        session_id = open_session(client)["session"]["id"]
        codes = [
            client.post(f"/chat/sessions/{session_id}/messages", json={"content": "ping"}).status_code
            for _ in range(3)
        ]

    assert codes == [200, 200, 429]
