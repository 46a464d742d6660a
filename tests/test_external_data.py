import dataclasses
import random

import pytest
import requests
from fastapi.testclient import TestClient

from mentormate.main import create_app
from mentormate.services.external_data_service import (
    DEFAULT_WEATHER_ADVICE, HEALTH_TIPS, QUOTES, ExternalDataService,
)
from mentormate.services.tavus_service import TavusClient
from mentormate.utils.rate_limit_utils import limiter


class StubResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class StubSession:
    def __init__(self, outcome):
        self.outcome = outcome
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


OPENWEATHER_BODY = {
    "name": "Lisbon",
    "main": {"temp": 24.6, "humidity": 55},
    "weather": [{"main": "Clear", "description": "clear sky"}],
}


def test_mock_weather_without_key():
    weather = ExternalDataService(rng=random.Random(7)).get_weather("Oslo")

    assert weather["location"] == "Oslo"
    assert 10 <= weather["temperature"] <= 39
    assert 40 <= weather["humidity"] <= 79
    assert weather["condition"] in ("sunny", "cloudy", "rainy", "partly cloudy")


def test_live_weather_uses_openweather():
    session = StubSession(StubResponse(payload=OPENWEATHER_BODY))

    weather = ExternalDataService(weather_api_key="ow-key", session=session).get_weather("Lisbon")

    assert weather == {
        "location": "Lisbon",
        "temperature": 25,
        "condition": "clear sky",
        "humidity": 55,
        "advice": "Perfect weather for outdoor activities! Consider a walk or run.",
    }
    assert session.requests[0]["params"] == {"q": "Lisbon", "appid": "ow-key", "units": "metric"}


@pytest.mark.parametrize("outcome", [
    requests.exceptions.ConnectionError("offline"),
    StubResponse(status_code=401, payload={"message": "bad key"}),
    StubResponse(payload={"unexpected": True}),
])
def test_weather_failures_fall_back_to_static_data(outcome):
    weather = ExternalDataService(weather_api_key="ow-key", session=StubSession(outcome)).get_weather("Rome")

    assert weather["location"] == "Rome"
    assert weather["condition"] == "pleasant"
    assert weather["temperature"] == 22


def test_unknown_categories_use_default_tables():
    service = ExternalDataService(rng=random.Random(1))

    quote = service.get_motivation_quote("astronomy")
    tip = service.get_health_tip(None)

    assert quote["quote"] in QUOTES["general"]
    assert quote["category"] == "astronomy"
    assert tip["tip"] in HEALTH_TIPS["mental"]
    assert tip["category"] == "general"


def test_unmapped_weather_condition_gets_default_advice():
    body = dict(OPENWEATHER_BODY, weather=[{"main": "Haze", "description": "haze"}])
    service = ExternalDataService(weather_api_key="ow-key", session=StubSession(StubResponse(payload=body)))

    assert service.get_weather("Delhi")["advice"] == DEFAULT_WEATHER_ADVICE


@pytest.mark.parametrize("category, heading", [
    ("fitness", "Current Context:"),
    ("wellness", "Inspiration for today:"),
    ("career", "Professional Context:"),
    ("study", "Learning Support:"),
])
def test_prompt_enrichment_by_category(category, heading):
    enhanced = ExternalDataService(rng=random.Random(3)).enhance_mentor_prompt("BASE", category)

    assert enhanced.startswith("BASE\n\n")
    assert heading in enhanced


def test_custom_mentors_keep_the_base_prompt():
    assert ExternalDataService().enhance_mentor_prompt("BASE", "custom") == "BASE"


def test_nudge_context_per_pattern():
    service = ExternalDataService(rng=random.Random(5))

    assert service.nudge_context("missed_checkins").startswith("Current weather is ")
    assert service.nudge_context("low_mood").startswith("Here's some inspiration: ")
    assert service.nudge_context("goal_struggle").startswith("Helpful tip: ")
    assert service.nudge_context("celebration").startswith("Celebrating with: ")
    assert service.nudge_context("something_else") == ""


def test_external_data_endpoint(client):
    response = client.post("/functions/external-data", json={"data_type": "health_tip", "category": "sleep"})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["source"] == "health_tip"
    assert body["data"]["tip"] in HEALTH_TIPS["sleep"]
    assert body["timestamp"]


def test_external_data_endpoint_rejects_unknown_type(client):
    assert client.post("/functions/external-data", json={"data_type": "horoscope"}).status_code == 422


def test_enabled_context_reaches_the_mentor_prompt(settings, engine, oracle, hub):
    limiter.reset()
    app = create_app(
        dataclasses.replace(settings, external_context_enabled=True),
        engine=engine, oracle=oracle, tavus=TavusClient(api_key=None), hub=hub,
    )

    with TestClient(app) as client:
        mentors = {m["slug"]: m["id"] for m in client.get("/mentors").json()}
        profile = client.post("/profiles", json={"email": "zo@example.com"}).json()
        session = client.post("/chat/sessions", json={"user_id": profile["id"], "mentor_id": mentors["zenkai"]})
        client.post(f"/chat/sessions/{session.json()['id']}/messages", json={"content": "Rough day"})

    system_prompt = oracle.calls[-1]["messages"][0]["content"]
    assert "Inspiration for today:" in system_prompt


def test_context_is_off_by_default(client, oracle):
    mentors = {m["slug"]: m["id"] for m in client.get("/mentors").json()}
    profile = client.post("/profiles", json={"email": "mo@example.com"}).json()
    session = client.post("/chat/sessions", json={"user_id": profile["id"], "mentor_id": mentors["zenkai"]})
    client.post(f"/chat/sessions/{session.json()['id']}/messages", json={"content": "Rough day"})

    assert "Inspiration for today:" not in oracle.calls[-1]["messages"][0]["content"]
