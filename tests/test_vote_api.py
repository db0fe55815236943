"""HTTP tests for /vote, /tally and /winner."""

import httpx
import pytest

from core.exceptions import StoreBackendError


async def post_vote(client: httpx.AsyncClient, voter: str, restaurant: str) -> httpx.Response:
    return await client.post("/vote", json={"voter_name": voter, "restaurant_name": restaurant})


class TestVoteEndpoint:
    async def test_accepts_vote_without_body(self, client: httpx.AsyncClient):
        response = await post_vote(client, "alice", "Pizza Place")

        assert response.status_code == 204
        assert response.content == b""

    async def test_accepts_camel_case_fields(self, client: httpx.AsyncClient):
        response = await client.post("/vote", json={"voterName": "alice", "restaurantName": "Pizza Place"})

        assert response.status_code == 204
        tally = (await client.get("/tally")).json()
        assert tally["entries"] == [{"restaurant": "Pizza Place", "voters": ["alice"]}]

    @pytest.mark.parametrize(
        "voter, restaurant, field",
        [("", "Pizza Place", "voter_name"), ("alice", "  ", "restaurant_name")],
    )
    async def test_empty_field_is_invalid_input(self, client: httpx.AsyncClient, voter, restaurant, field):
        response = await post_vote(client, voter, restaurant)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "invalid_input"
        assert detail["field"] == field
        assert (await client.get("/tally")).json()["entries"] == []

    async def test_missing_field_is_rejected(self, client: httpx.AsyncClient):
        response = await client.post("/vote", json={"voter_name": "alice"})

        assert response.status_code == 422

    async def test_storage_failure_is_503(self, app, client: httpx.AsyncClient, monkeypatch):
        async def broken_upsert(voter_name, restaurant_name):
            raise StoreBackendError("database is gone")

        monkeypatch.setattr(app.state.tally_service.store, "upsert", broken_upsert)

        response = await post_vote(client, "alice", "Pizza Place")

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "storage_failure"


class TestTallyEndpoint:
    async def test_empty_tally(self, client: httpx.AsyncClient):
        response = await client.get("/tally")

        assert response.status_code == 200
        assert response.json() == {"entries": [], "total_votes": 0}

    async def test_grouped_tally(self, client: httpx.AsyncClient):
        await post_vote(client, "bob", "Pizza Place")
        await post_vote(client, "alice", "Pizza Place")
        await post_vote(client, "carol", "Taco Spot")

        body = (await client.get("/tally")).json()

        assert body["total_votes"] == 3
        entries = {entry["restaurant"]: entry["voters"] for entry in body["entries"]}
        assert entries == {"Pizza Place": ["alice", "bob"], "Taco Spot": ["carol"]}

    async def test_changed_vote(self, client: httpx.AsyncClient):
        await post_vote(client, "alice", "Pizza Place")
        await post_vote(client, "alice", "Taco Spot")

        body = (await client.get("/tally")).json()

        assert body == {"entries": [{"restaurant": "Taco Spot", "voters": ["alice"]}], "total_votes": 1}

    async def test_storage_failure_is_503(self, app, client: httpx.AsyncClient, monkeypatch):
        async def broken_fetch_all():
            raise StoreBackendError("database is gone")

        monkeypatch.setattr(app.state.tally_service.store, "fetch_all", broken_fetch_all)

        response = await client.get("/tally")

        assert response.status_code == 503


class TestWinnerEndpoint:
    async def test_no_votes(self, client: httpx.AsyncClient):
        body = (await client.get("/winner")).json()

        assert body == {"restaurants": [], "votes": 0, "tie": False}

    async def test_winner(self, client: httpx.AsyncClient):
        await post_vote(client, "alice", "Pizza Place")
        await post_vote(client, "bob", "Pizza Place")
        await post_vote(client, "carol", "Taco Spot")

        body = (await client.get("/winner")).json()

        assert body == {"restaurants": ["Pizza Place"], "votes": 2, "tie": False}

    async def test_tie(self, client: httpx.AsyncClient):
        await post_vote(client, "alice", "Taco Spot")
        await post_vote(client, "bob", "Pizza Place")

        body = (await client.get("/winner")).json()

        assert body == {"restaurants": ["Pizza Place", "Taco Spot"], "votes": 1, "tie": True}


async def test_health(client: httpx.AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
