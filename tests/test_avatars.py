import pytest

from mentormate.models.avatar import AvatarStatus, CustomAvatar
from mentormate.services.tavus_service import TavusClient, TavusError

VIDEO = ("me.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")


class StubResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        return self.response


class DownTavus(TavusClient):
    def __init__(self):
        super().__init__(api_key="tv-key")

    def create_avatar(self, name, video, filename="training.mp4", content_type="video/mp4"):
        raise TavusError("Tavus avatar request failed: 503")


@pytest.fixture
def profile(client):
    return client.post("/profiles", json={"email": "av@example.com", "full_name": "Ava"}).json()


def upload(client, user_id, name="Morning Me", video=VIDEO):
    return client.post("/avatars", data={"user_id": user_id, "name": name}, files={"video": video})


def test_upload_starts_training_and_webhook_settles_it(client, session_factory, profile):
    created = upload(client, profile["id"])

    assert created.status_code == 201
    avatar = created.json()
    assert avatar["status"] == "training"
    assert avatar["tavus_avatar_id"].startswith("mock_avatar_")

    client.post("/webhooks/tavus", json={"event_type": "avatar.ready", "data": {"id": avatar["tavus_avatar_id"]}})

    db = session_factory()
    try:
        assert db.query(CustomAvatar).one().status == AvatarStatus.ready
    finally:
        db.close()
    listed = client.get("/avatars", params={"user_id": profile["id"]}).json()
    assert [(a["name"], a["status"]) for a in listed] == [("Morning Me", "ready")]


def test_upload_rejects_non_video(client, profile):
    response = upload(client, profile["id"], video=("notes.txt", b"hello", "text/plain"))

    assert response.status_code == 400


def test_upload_for_unknown_user_is_404(client):
    assert upload(client, "missing").status_code == 404


def test_tavus_outage_is_502_and_stores_nothing(client, session_factory, profile):
    client.app.state.tavus = DownTavus()

    response = upload(client, profile["id"])

    assert response.status_code == 502
    db = session_factory()
    try:
        assert db.query(CustomAvatar).count() == 0
    finally:
        db.close()


def test_live_client_posts_multipart_with_callback():
    session = RecordingSession(StubResponse({"avatar_id": "av-9", "avatar_name": "Me", "status": "training"}))
    tavus = TavusClient("tv-key", webhook_url="https://hooks.example/tavus/", session=session)

    result = tavus.create_avatar("Me", b"bytes", filename="me.mp4")

    assert result["avatar_id"] == "av-9"
    call = session.calls[0]
    assert call["url"] == "https://tavusapi.com/v2/avatars"
    assert call["headers"] == {"x-api-key": "tv-key"}
    assert call["data"] == {"avatar_name": "Me", "callback_url": "https://hooks.example/tavus/avatar"}
    assert call["files"]["video"] == ("me.mp4", b"bytes", "video/mp4")


def test_live_client_rejects_response_without_id():
    tavus = TavusClient("tv-key", session=RecordingSession(StubResponse({"status": "queued"})))

    with pytest.raises(TavusError):
        tavus.create_avatar("Me", b"bytes")
