from sqlalchemy.exc import SQLAlchemyError

from core.models import Profile, User
from core.repositories import UserRepository

PROFILE_PAYLOAD = {
    "status": "Developer",
    "skills": "node, react , redux",
    "company": "Acme",
    "website": "https://tester.dev",
    "githubUsername": "tester",
    "twitter": "https://twitter.com/tester",
}

EXPERIENCE_PAYLOAD = {
    "title": "Engineer",
    "company": "Acme",
    "location": "Berlin",
    "from": "2019-03-01",
    "current": True,
    "description": "Built things",
}

EDUCATION_PAYLOAD = {
    "school": "MIT",
    "degree": "BSc",
    "fieldOfStudy": "Computer Science",
    "from": "2012-09-01",
    "to": "2016-06-30",
}


def _create_profile(client):
    resp = client.post("/api/profile", json=PROFILE_PAYLOAD)
    assert resp.status_code == 200
    return resp.json()


def test_get_my_profile_missing(authorized_client):
    client, _, _ = authorized_client

    resp = client.get("/api/profile/me")

    assert resp.status_code == 400
    assert resp.json() == {"msg": "There is no profile for this user"}


def test_upsert_requires_status_and_skills(authorized_client):
    client, _, _ = authorized_client

    resp = client.post("/api/profile", json={"status": "", "company": "Acme"})

    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert [e["msg"] for e in errors] == ["Status is required", "Skills is required"]
    assert [e["param"] for e in errors] == ["status", "skills"]
    assert all(e["location"] == "body" for e in errors)


def test_upsert_creates_profile(authorized_client):
    client, current_user, session_factory = authorized_client

    data = _create_profile(client)

    assert data["user"] == current_user().id
    assert data["skills"] == ["node", "react", "redux"]
    assert data["githubUsername"] == "tester"
    assert data["social"]["twitter"] == "https://twitter.com/tester"
    assert data["social"]["youtube"] is None
    assert data["experience"] == []
    assert "date" in data

    session = session_factory()
    profile = session.query(Profile).filter(Profile.user_id == current_user().id).one()
    assert profile.company == "Acme"
    session.close()


def test_upsert_updates_existing_profile(authorized_client):
    client, _, session_factory = authorized_client
    created = _create_profile(client)

    resp = client.post("/api/profile", json={"status": "Lead", "skills": "python"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == created["id"]
    assert data["status"] == "Lead"
    assert data["skills"] == ["python"]
    assert data["company"] == "Acme"

    session = session_factory()
    assert session.query(Profile).count() == 1
    session.close()


def test_get_my_profile_includes_user(authorized_client):
    client, current_user, _ = authorized_client
    _create_profile(client)

    resp = client.get("/api/profile/me")

    assert resp.status_code == 200
    assert resp.json()["user"] == {
        "id": current_user().id,
        "name": "Tester",
        "avatar": "http://example.com/avatar.png",
    }


def test_list_profiles_is_public(test_app_client, registered_user):
    client, session_factory = test_app_client
    session = session_factory()
    session.add(Profile(user_id=registered_user.id, status="Student", skills=["go"]))
    session.commit()
    session.close()

    resp = client.get("/api/profile")

    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    assert data[0]["user"]["name"] == "Tester"
    assert data[0]["skills"] == ["go"]


def test_get_profile_by_user(test_app_client, registered_user):
    client, session_factory = test_app_client
    session = session_factory()
    session.add(Profile(user_id=registered_user.id, status="Student", skills=["go"]))
    session.commit()
    session.close()

    resp = client.get(f"/api/profile/user/{registered_user.id}")

    assert resp.status_code == 200
    assert resp.json()["status"] == "Student"


def test_get_profile_by_user_not_found(test_app_client):
    client, _ = test_app_client

    for user_id in ("999", "not-an-id"):
        resp = client.get(f"/api/profile/user/{user_id}")
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Profile not found"}


def test_delete_profile_and_user(authorized_client):
    client, current_user, session_factory = authorized_client
    user_id = current_user().id
    _create_profile(client)

    resp = client.delete("/api/profile")

    assert resp.status_code == 200
    assert resp.json() == {"msg": "User deleted"}
    session = session_factory()
    assert session.query(Profile).count() == 0
    assert session.get(User, user_id) is None
    session.close()


def test_delete_reports_server_error_when_user_delete_fails(authorized_client, monkeypatch):
    client, current_user, session_factory = authorized_client
    user_id = current_user().id
    _create_profile(client)

    def failing_delete(self, id):
        raise SQLAlchemyError("users table is locked")

    monkeypatch.setattr(UserRepository, "delete", failing_delete)

    resp = client.delete("/api/profile")

    assert resp.status_code == 500
    assert resp.text == "Server Error"
    session = session_factory()
    assert session.query(Profile).count() == 0
    assert session.get(User, user_id) is not None
    session.close()


def test_add_experience_validation(authorized_client):
    client, _, _ = authorized_client
    _create_profile(client)

    resp = client.put("/api/profile/experience", json={"title": "Engineer"})

    assert resp.status_code == 400
    assert [e["msg"] for e in resp.json()["errors"]] == [
        "From date is required",
        "Company is required",
    ]
    assert [e["param"] for e in resp.json()["errors"]] == ["from", "company"]


def test_empty_wire_field_reported_by_wire_name(authorized_client):
    client, _, _ = authorized_client

    resp = client.put(
        "/api/profile/education",
        json={**EDUCATION_PAYLOAD, "from": "", "fieldOfStudy": ""},
    )

    assert resp.status_code == 400
    assert [e["param"] for e in resp.json()["errors"]] == ["from", "fieldOfStudy"]


def test_add_experience_without_profile(authorized_client):
    client, _, _ = authorized_client

    resp = client.put("/api/profile/experience", json=EXPERIENCE_PAYLOAD)

    assert resp.status_code == 400
    assert resp.json() == {"msg": "There is no profile for this user"}


def test_add_and_remove_experience(authorized_client):
    client, _, _ = authorized_client
    _create_profile(client)

    client.put("/api/profile/experience", json={**EXPERIENCE_PAYLOAD, "title": "Junior"})
    resp = client.put("/api/profile/experience", json=EXPERIENCE_PAYLOAD)

    assert resp.status_code == 200
    experience = resp.json()["experience"]
    assert [e["title"] for e in experience] == ["Engineer", "Junior"]
    assert experience[0]["from"] == "2019-03-01"
    assert experience[0]["current"] is True
    assert experience[0]["to"] is None

    resp = client.delete(f"/api/profile/experience/{experience[1]['id']}")

    assert resp.status_code == 200
    assert [e["title"] for e in resp.json()["experience"]] == ["Engineer"]


def test_remove_unknown_experience_keeps_list(authorized_client):
    client, _, _ = authorized_client
    _create_profile(client)
    client.put("/api/profile/experience", json=EXPERIENCE_PAYLOAD)

    resp = client.delete("/api/profile/experience/unknown")

    assert resp.status_code == 200
    assert len(resp.json()["experience"]) == 1


def test_add_and_remove_education(authorized_client):
    client, _, _ = authorized_client
    _create_profile(client)

    resp = client.put("/api/profile/education", json=EDUCATION_PAYLOAD)

    assert resp.status_code == 200
    education = resp.json()["education"]
    assert education[0]["fieldOfStudy"] == "Computer Science"
    assert education[0]["current"] is False

    resp = client.delete(f"/api/profile/education/{education[0]['id']}")

    assert resp.status_code == 200
    assert resp.json()["education"] == []


def test_add_education_validation(authorized_client):
    client, _, _ = authorized_client

    resp = client.put("/api/profile/education", json={"school": "MIT"})

    assert resp.status_code == 400
    params = [e["param"] for e in resp.json()["errors"]]
    assert params == ["from", "degree", "fieldOfStudy"]
