"""Tests for the settings routes."""

import pytest

pytestmark = pytest.mark.webapp


class TestReadSettings:
    """Tests for GET /settings and GET /settings/<key>."""

    def test_list_settings(self, client):
        response = client.get("/settings")

        assert response.status_code == 200
        assert [s["key"] for s in response.get_json()] == ["threatActors", "assets"]

    def test_get_setting(self, client):
        response = client.get("/settings/threatActors")

        assert response.status_code == 200
        data = response.get_json()
        assert data["key"] == "threatActors"
        assert all("slug" in actor for actor in data["value"])

    def test_unknown_key(self, client):
        response = client.get("/settings/balance")
        assert response.status_code == 404
        assert "balance" in response.get_json()["message"]


class TestUpdateSetting:
    """Tests for PUT /settings/<key>."""

    def test_replace_threat_actors(self, client):
        response = client.put("/settings/threatActors", json=[{"slug": "insider", "probability": 0.4}])

        assert response.status_code == 200
        assert response.get_json()["value"][0]["slug"] == "insider"
        stored = client.get("/settings/threatActors").get_json()["value"]
        assert [actor["slug"] for actor in stored] == ["insider"]
        assert stored[0]["probability"] == 0.4

    def test_invalid_probability(self, client):
        before = client.get("/settings/threatActors").get_json()["value"]

        response = client.put("/settings/threatActors", json=[{"slug": "insider", "probability": 2}])

        assert response.status_code == 400
        assert client.get("/settings/threatActors").get_json()["value"] == before

    def test_non_list_body(self, client):
        response = client.put("/settings/assets", json={"slug": "laptop"})
        assert response.status_code == 400

    def test_unknown_key(self, client):
        response = client.put("/settings/balance", json=[])
        assert response.status_code == 404

    def test_next_turn_uses_new_actors(self, client, new_game):
        game_id = new_game(min_num_of_events=2, max_num_of_events=3)["game"]["id"]
        assert client.put("/settings/threatActors", json=[{"slug": "only-actor"}]).status_code == 200

        response = client.post("/games/simulate-turn", json={"game_id": game_id})

        assert response.status_code == 200
        events = response.get_json()["organisations"][0]["events"]
        assert events
        assert {event["threat_actor"] for event in events} == {"only-actor"}
