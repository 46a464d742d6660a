def test_mentors_are_seeded(client):
    mentors = client.get("/mentors").json()

    assert {m["slug"] for m in mentors} == {"coach_lex", "zenkai", "prof_ada", "no_bs_tony"}
    wellness = client.get("/mentors", params={"category": "wellness"}).json()
    assert [m["name"] for m in wellness] == ["ZenKai"]


def test_unknown_mentor_is_404(client):
    assert client.get("/mentors/missing").status_code == 404


def test_mentor_lookup_by_slug(client):
    mentor = client.get("/mentors/slug/no_bs_tony")

    assert mentor.status_code == 200
    assert mentor.json()["name"] == "No-BS Tony"
    assert client.get("/mentors/slug/nobody").status_code == 404


def test_profile_lifecycle(client):
    created = client.post("/profiles", json={"email": "kai@example.com", "full_name": "Kai"})
    assert created.status_code == 201
    profile = created.json()
    assert profile["onboarding_completed"] is False
    assert profile["preferred_mode"] == "classic"

    duplicate = client.post("/profiles", json={"email": "kai@example.com"})
    assert duplicate.status_code == 409

    patched = client.patch(f"/profiles/{profile['id']}", json={"full_name": "Kai L.", "preferred_mode": "realtime"})
    assert patched.json()["full_name"] == "Kai L."
    assert patched.json()["preferred_mode"] == "realtime"

    assert client.get("/profiles/missing").status_code == 404


def test_onboarding_requires_existing_mentor(client):
    profile = client.post("/profiles", json={"email": "lee@example.com"}).json()

    response = client.post(f"/profiles/{profile['id']}/onboarding", json={"mentor_id": "nope"})

    assert response.status_code == 404


def test_goal_crud(client):
    profile = client.post("/profiles", json={"email": "max@example.com"}).json()

    one = client.post("/goals", json={"user_id": profile["id"], "text": "Stretch daily"})
    many = client.post("/goals/bulk", json={"user_id": profile["id"], "texts": ["Drink water", "  "]})
    assert one.status_code == 201
    assert [g["text"] for g in many.json()] == ["Drink water"]

    deleted = client.delete(f"/goals/{one.json()['id']}")
    assert deleted.json()["is_active"] is False

    active = client.get("/goals", params={"user_id": profile["id"]}).json()
    assert [g["text"] for g in active] == ["Drink water"]


def test_custom_mentor_creation(client):
    profile = client.post("/profiles", json={"email": "rae@example.com"}).json()

    created = client.post("/mentors/custom", json={
        "user_id": profile["id"],
        "name": "Captain Calm",
        "personality": "Steady",
        "response_style": {"tone": "gentle"},
        "expertise": ["sleep"],
    })

    assert created.status_code == 201
    mentor = created.json()
    assert mentor["category"] == "custom"
    assert mentor["is_custom"] is True
    assert mentor["tone"] == "gentle"
    listed = client.get("/mentors/custom", params={"user_id": profile["id"]}).json()
    assert [m["name"] for m in listed] == ["Captain Calm"]


def test_health_endpoints(client):
    assert client.get("/health").json() == {"status": "ok"}

    healthz = client.get("/healthz").json()
    assert healthz["details"]["db_connection"] is True
    assert healthz["details"]["tavus_configured"] is False
    assert healthz["status"] == "partial"
