"""Tests for the listing query API."""

from estatesearch.client.http_fetcher import HttpListingFetcher
from estatesearch.config.settings import StoreClientSettings
from estatesearch.search.filter_state import FilterState, PropertyType
from tests.conftest import make_listing, make_listings


class TestSystemEndpoints:
    def test_health(self, client):
        test_client, _ = client
        resp = test_client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_stats(self, client):
        test_client, store = client
        store.insert_many(make_listings(3))
        store.insert(make_listing("s1", type="sale"))
        assert test_client.get("/stats").json() == {
            "listing_count": 4,
            "listings_by_type": {"rent": 3, "sale": 1},
        }


class TestGetListings:
    def test_returns_json_array(self, client):
        test_client, store = client
        store.insert(make_listing("abc", name="Sunny loft", image_urls=["a.jpg"]))

        resp = test_client.get("/api/listing/get")

        assert resp.status_code == 200
        data = resp.json()
        assert isinstance(data, list)
        assert data[0]["_id"] == "abc"
        assert data[0]["name"] == "Sunny loft"
        assert data[0]["imageUrls"] == ["a.jpg"]
        assert {"regularPrice", "discountPrice", "userRef", "createdAt", "updatedAt"} <= set(data[0])

    def test_empty_store(self, client):
        test_client, _ = client
        assert test_client.get("/api/listing/get").json() == []

    def test_default_limit_is_page_size(self, client):
        test_client, store = client
        store.insert_many(make_listings(12))
        assert len(test_client.get("/api/listing/get").json()) == 9

    def test_start_index_and_limit(self, client):
        test_client, store = client
        store.insert_many(make_listings(12))

        resp = test_client.get("/api/listing/get", params={"startIndex": 9, "limit": 9})

        assert [item["_id"] for item in resp.json()] == ["l002", "l001", "l000"]

    def test_limit_is_capped(self, small_page_client):
        test_client, store = small_page_client
        store.insert_many(make_listings(12))
        assert len(test_client.get("/api/listing/get", params={"limit": 50}).json()) == 5

    def test_negative_start_index_rejected(self, client):
        test_client, _ = client
        assert test_client.get("/api/listing/get", params={"startIndex": -1}).status_code == 422

    def test_filters(self, client):
        test_client, store = client
        store.insert_many([
            make_listing("a", name="Villa with pool", type="sale", offer=True),
            make_listing("b", name="Villa in town", type="sale"),
            make_listing("c", name="Villa for rent", type="rent", offer=True),
        ])

        resp = test_client.get(
            "/api/listing/get",
            params={"searchTerm": "villa", "type": "sale", "offer": "true", "parking": "false"},
        )

        assert [item["_id"] for item in resp.json()] == ["a"]

    def test_unknown_type_means_all(self, client):
        test_client, store = client
        store.insert_many([make_listing("r", type="rent"), make_listing("s", type="sale")])
        resp = test_client.get("/api/listing/get", params={"type": "lease"})
        assert sorted(item["_id"] for item in resp.json()) == ["r", "s"]

    def test_sort_by_price_ascending(self, client):
        test_client, store = client
        store.insert_many([
            make_listing("high", regular_price=3000),
            make_listing("low", regular_price=100),
        ])
        resp = test_client.get("/api/listing/get", params={"sort": "regularPrice", "order": "asc"})
        assert [item["_id"] for item in resp.json()] == ["low", "high"]


class TestGetListing:
    def test_found(self, client):
        test_client, store = client
        store.insert(make_listing("abc", bedrooms=3))

        resp = test_client.get("/api/listing/get/abc")

        assert resp.status_code == 200
        assert resp.json()["_id"] == "abc"
        assert resp.json()["bedrooms"] == 3

    def test_not_found(self, client):
        test_client, _ = client
        resp = test_client.get("/api/listing/get/missing")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Listing not found"}


def test_http_fetcher_against_app(client):
    """The HTTP client's parameters are understood by the API."""
    test_client, store = client
    store.insert_many(make_listings(12, type="sale"))
    store.insert(make_listing("rental", type="rent"))

    fetcher = HttpListingFetcher(
        StoreClientSettings(base_url="http://testserver"),
        session=test_client,
    )
    page = fetcher.fetch_page_sync(FilterState(property_type=PropertyType.SALE), skip=9, limit=9)

    assert [s.id for s in page] == ["l002", "l001", "l000"]
    assert all(s.type == "sale" for s in page)


def test_http_fetcher_gets_listing_with_reserved_characters_in_id(client):
    test_client, store = client
    store.insert(make_listing("unit 4?b#c"))

    fetcher = HttpListingFetcher(
        StoreClientSettings(base_url="http://testserver"),
        session=test_client,
    )

    assert fetcher.get_listing("unit 4?b#c").id == "unit 4?b#c"
