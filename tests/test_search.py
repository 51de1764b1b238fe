"""
==============================================================================
Search Endpoint Tests
==============================================================================
"""

from fastapi.testclient import TestClient


# Penn Station, Manhattan
ORIGIN = {"latitude": 40.7506, "longitude": -73.9936}


def search(client: TestClient, **params):
    return client.get("/api/v1/search", params={**ORIGIN, **params})


class TestSearch:
    """Tests for GET /search."""

    def test_brand_filter_ordered_by_distance(self, client: TestClient, inventory):
        response = search(client, brand="red bull")
        assert response.status_code == 200
        found = response.json()["data"]["stores"]

        assert [s["name"] for s in found] == ["Penn Station Deli", "Union Square Market"]
        assert found[0]["distance_km"] < found[1]["distance_km"]
        assert [d["brand"] for d in found[0]["available_drinks"]] == ["Red Bull"]
        assert found[0]["available_drinks"][0]["price"] == 2.99

    def test_out_of_stock_is_excluded(self, client: TestClient, inventory):
        found = search(client, brand="monster").json()["data"]["stores"]
        # Bryant has Monster out of stock; Newark is outside the default radius
        assert [s["name"] for s in found] == ["Penn Station Deli"]

    def test_flavor_filter(self, client: TestClient, inventory):
        found = search(client, brand="Monster", flavor="ORIGINAL", radius=25).json()["data"]["stores"]
        assert [s["name"] for s in found] == ["Penn Station Deli", "Newark Fuel Stop"]
        assert all(d["in_stock"] for s in found for d in s["available_drinks"])

    def test_no_filters_lists_all_in_stock(self, client: TestClient, inventory):
        found = search(client).json()["data"]["stores"]
        penn = found[0]
        assert penn["name"] == "Penn Station Deli"
        assert {d["brand"] for d in penn["available_drinks"]} == {"Red Bull", "Monster"}

    def test_radius(self, client: TestClient, inventory):
        found = search(client, brand="red bull", radius=1).json()["data"]["stores"]
        assert [s["name"] for s in found] == ["Penn Station Deli"]

    def test_no_matches(self, client: TestClient, inventory):
        body = search(client, brand="Celsius").json()
        assert body["success"] is True
        assert body["data"]["stores"] == []

    def test_missing_coordinates(self, client: TestClient):
        response = client.get("/api/v1/search", params={"brand": "red bull"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
