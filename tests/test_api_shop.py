API = "/api/v1"


def _lose_a_life(client, user_id):
    exercise = client.get(f"{API}/exercises", params={"level_id": 1}).json()["exercises"][0]
    body = client.post(
        f"{API}/exercises/progress",
        json={"user_id": user_id, "level_id": 1, "exercise_id": exercise["id"], "correct": False}
    ).json()
    assert body["lives"] == 4


class TestShop:

    def test_purchase_then_refill(self, client, register):
        user = register()

        purchase = client.post(f"{API}/shop/purchase", json={"user_id": user["id"], "amount": 29.9})
        assert purchase.status_code == 200
        assert purchase.json()["diamonds_added"] == 250
        assert purchase.json()["diamonds"] == 250

        _lose_a_life(client, user["id"])
        refill = client.post(f"{API}/shop/buy-lives", json={"user_id": user["id"]})

        assert refill.status_code == 200
        body = refill.json()
        assert body["lives"] == 5
        assert body["next_life_at"] is None
        assert body["diamonds"] == 235
        assert body["diamonds_spent"] == 15

    def test_refill_with_full_lives(self, client, register):
        user = register()
        client.post(f"{API}/shop/purchase", json={"user_id": user["id"], "amount": 9.9})

        response = client.post(f"{API}/shop/buy-lives", json={"user_id": user["id"]})
        assert response.status_code == 409

    def test_refill_without_diamonds(self, client, register):
        user = register()
        _lose_a_life(client, user["id"])

        response = client.post(f"{API}/shop/buy-lives", json={"user_id": user["id"]})
        assert response.status_code == 400
        assert response.json()["type"] == "InsufficientDiamondsError"

    def test_non_positive_amount(self, client, register):
        user = register()
        response = client.post(f"{API}/shop/purchase", json={"user_id": user["id"], "amount": 0})
        assert response.status_code == 422

    def test_unknown_user(self, client):
        response = client.post(f"{API}/shop/purchase", json={"user_id": 999, "amount": 10})
        assert response.status_code == 404
