"""Integration tests for mountains router."""

from tests.conftest import auth_headers, create_user, login

EVEREST = {
    "key": "everest",
    "altitude": "8849 m",
    "has_death_zone": True,
    "first_climbed_date": "1953-05-29",
    "mountain_img": "https://img.example.com/everest.jpg",
    "translations": [
        {
            "language": "en",
            "name": "Everest",
            "description": "Highest mountain on Earth",
            "location": "Nepal/China",
            "first_climber": "Tenzing Norgay, Edmund Hillary",
        },
        {"language": "ne", "name": "Sagarmatha"},
    ],
}


def create_everest(test_client, headers) -> dict:
    response = test_client.post("/api/mountains", json=EVEREST, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestMountainWrites:
    def test_create_mountain(self, auth_client, admin_headers):
        test_client, _ = auth_client

        body = create_everest(test_client, admin_headers)

        assert body["key"] == "everest"
        assert body["first_climbed_date"] == "1953-05-29"
        assert len(body["translations"]) == 2

    def test_create_requires_admin(self, auth_client, user_headers):
        test_client, _ = auth_client

        response = test_client.post("/api/mountains", json=EVEREST, headers=user_headers)

        assert response.status_code == 403

    def test_create_requires_auth(self, auth_client):
        test_client, _ = auth_client

        response = test_client.post("/api/mountains", json=EVEREST)

        assert response.status_code == 401

    def test_create_duplicate_key(self, auth_client, admin_headers):
        test_client, _ = auth_client
        create_everest(test_client, admin_headers)

        response = test_client.post("/api/mountains", json=EVEREST, headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"

    def test_create_invalid_payload(self, auth_client, admin_headers):
        test_client, _ = auth_client

        response = test_client.post(
            "/api/mountains",
            json={"key": "", "translations": []},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_update_mountain(self, auth_client, admin_headers):
        test_client, _ = auth_client
        created = create_everest(test_client, admin_headers)

        response = test_client.patch(
            f"/api/mountains/{created['id']}?lang=ne",
            json={
                "altitude": "8848.86 m",
                "translations": [{"language": "ne", "name": "सगरमाथा"}],
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["altitude"] == "8848.86 m"
        assert [t["name"] for t in body["translations"]] == ["सगरमाथा"]

    def test_update_ignores_null_death_zone(self, auth_client, admin_headers):
        test_client, _ = auth_client
        created = create_everest(test_client, admin_headers)

        response = test_client.patch(
            f"/api/mountains/{created['id']}",
            json={"has_death_zone": None, "altitude": None},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["has_death_zone"] is True
        assert body["altitude"] is None

    def test_update_missing(self, auth_client, admin_headers):
        test_client, _ = auth_client

        response = test_client.patch(
            "/api/mountains/999", json={"altitude": "1 m"}, headers=admin_headers
        )

        assert response.status_code == 404

    def test_delete_mountain(self, auth_client, admin_headers):
        test_client, _ = auth_client
        created = create_everest(test_client, admin_headers)

        response = test_client.delete(f"/api/mountains/{created['id']}", headers=admin_headers)
        assert response.status_code == 204

        response = test_client.get(f"/api/mountains/{created['id']}", headers=admin_headers)
        assert response.status_code == 404

    def test_delete_requires_admin(self, auth_client, admin_headers, user_headers):
        test_client, _ = auth_client
        created = create_everest(test_client, admin_headers)

        response = test_client.delete(f"/api/mountains/{created['id']}", headers=user_headers)

        assert response.status_code == 403


class TestMountainReads:
    def test_list_mountains_default_language(self, auth_client, admin_headers, user_headers):
        test_client, _ = auth_client
        create_everest(test_client, admin_headers)

        response = test_client.get("/api/mountains", headers=user_headers)

        assert response.status_code == 200
        mountains = response.json()
        assert len(mountains) == 1
        assert [t["language"] for t in mountains[0]["translations"]] == ["en"]

    def test_list_mountains_requested_language(self, auth_client, admin_headers, user_headers):
        test_client, _ = auth_client
        create_everest(test_client, admin_headers)

        response = test_client.get("/api/mountains?lang=ne", headers=user_headers)

        assert [t["name"] for t in response.json()[0]["translations"]] == ["Sagarmatha"]

    def test_list_requires_auth(self, auth_client):
        test_client, _ = auth_client

        response = test_client.get("/api/mountains")

        assert response.status_code == 401

    def test_get_mountain(self, auth_client, admin_headers, user_headers):
        test_client, _ = auth_client
        created = create_everest(test_client, admin_headers)

        response = test_client.get(f"/api/mountains/{created['id']}", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["translations"][0]["name"] == "Everest"

    def test_get_missing_mountain(self, auth_client, user_headers):
        test_client, _ = auth_client

        response = test_client.get("/api/mountains/999", headers=user_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Mountain with id 999 not found"


def test_unverified_user_cannot_obtain_token(auth_client):
    """Catalog access needs a token, and unverified accounts get none."""
    test_client, db_session_maker = auth_client
    create_user(db_session_maker, "new@example.com", "Secure123", is_verified=False)

    response = test_client.post(
        "/api/auth/login", json={"email": "new@example.com", "password": "Secure123"}
    )
    assert response.status_code == 401

    create_user(db_session_maker, "ok@example.com", "Secure123")
    tokens = login(test_client, "ok@example.com", "Secure123")
    response = test_client.get("/api/mountains", headers=auth_headers(tokens["access_token"]))
    assert response.status_code == 200
