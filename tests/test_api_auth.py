API = "/api/v1"


class TestRegister:

    def test_new_account_starts_with_full_lives(self, client, register):
        user = register("ade", email="ade@example.com")

        assert user["username"] == "ade"
        assert user["role"] == "user"
        assert user["lives"] == 5
        assert user["max_lives"] == 5
        assert user["xp"] == 0
        assert user["diamonds"] == 0
        assert "password" not in user

    def test_duplicate_username(self, client, register):
        register("ade")
        response = client.post(f"{API}/auth/register", json={"username": "ade", "password": "another1"})
        assert response.status_code == 409

    def test_short_password(self, client):
        response = client.post(f"{API}/auth/register", json={"username": "ade", "password": "123"})
        assert response.status_code == 422


class TestLogin:

    def test_by_username_or_email(self, client, register):
        register("ade", password="secret1", email="ade@example.com")

        by_name = client.post(f"{API}/auth/login", json={"username": "ade", "password": "secret1"})
        by_email = client.post(f"{API}/auth/login", json={"username": "ade@example.com", "password": "secret1"})

        assert by_name.status_code == 200
        assert by_email.status_code == 200
        assert by_name.json()["user"]["id"] == by_email.json()["user"]["id"]

    def test_wrong_password(self, client, register):
        register("ade", password="secret1")
        response = client.post(f"{API}/auth/login", json={"username": "ade", "password": "wrong"})
        assert response.status_code == 401

    def test_seeded_admin(self, client):
        response = client.post(f"{API}/auth/login", json={"username": "admin", "password": "admin123"})
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
