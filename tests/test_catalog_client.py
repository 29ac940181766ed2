"""CatalogClient against the dev catalog service."""

import pytest
import requests

from storefront.domain.errors import ItemNotFound, UpstreamFailure
from storefront.services.catalog_client import CatalogClient


class _Unreachable:
    def get(self, url, timeout=None):
        raise requests.ConnectionError("connection refused")


class _Response:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = {} if body is None else body

    def json(self):
        return self._body


class _NotJson(_Response):
    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


MARGHERITA = {"id": "m1", "name": "Margherita Pizza", "price": 10.0, "isActive": True}


class _Returns:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return self.response


class TestFetchItem:
    def test_active_item(self, catalog_client):
        item = catalog_client.fetch_item("m1")
        assert item["name"] == "Margherita Pizza"
        assert item["price"] == 10.00

    def test_missing_item(self, catalog_client):
        with pytest.raises(ItemNotFound):
            catalog_client.fetch_item("nope")

    def test_inactive_item_counts_as_missing(self, catalog_client):
        with pytest.raises(ItemNotFound):
            catalog_client.fetch_item("m4")

    def test_unreachable_catalog(self):
        client = CatalogClient(base_url="http://catalog", session=_Unreachable())
        with pytest.raises(UpstreamFailure):
            client.fetch_item("m1")

    def test_server_error(self):
        client = CatalogClient(base_url="http://catalog", session=_Returns(_Response(503)))
        with pytest.raises(UpstreamFailure):
            client.fetch_item("m1")

    def test_url_and_timeout(self):
        session = _Returns(_Response(200, MARGHERITA))
        client = CatalogClient(base_url="http://catalog/", timeout=1.5, session=session)

        client.fetch_item("m1")

        assert session.calls == [("http://catalog/menu/m1", 1.5)]

    @pytest.mark.parametrize("item_id", ["m1?x=1", "../menu", "m1/..", "m1#frag", "", "m 1"])
    def test_id_outside_url_path_segment_never_sent(self, item_id):
        session = _Returns(_Response(200, MARGHERITA))
        client = CatalogClient(base_url="http://catalog", session=session)

        with pytest.raises(ItemNotFound):
            client.fetch_item(item_id)

        assert session.calls == []

    def test_traversal_id_against_catalog_service(self, catalog_client):
        with pytest.raises(ItemNotFound):
            catalog_client.fetch_item("../menu")

    def test_answer_for_other_item_is_rejected(self):
        session = _Returns(_Response(200, MARGHERITA))
        client = CatalogClient(base_url="http://catalog", session=session)

        with pytest.raises(UpstreamFailure):
            client.fetch_item("m2")

    @pytest.mark.parametrize(
        "response",
        [
            _NotJson(200),
            _Response(200, ["m1"]),
            _Response(200, "m1"),
            _Response(200, {"id": "m1", "price": 10.0}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza"}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza", "price": "ten"}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza", "price": -1}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza", "price": True}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza", "price": float("nan")}),
            _Response(200, {"id": "m1", "name": "Margherita Pizza", "price": float("inf")}),
        ],
    )
    def test_malformed_body_is_upstream_failure(self, response):
        client = CatalogClient(base_url="http://catalog", session=_Returns(response))

        with pytest.raises(UpstreamFailure):
            client.fetch_item("m1")


class TestFindItem:
    def test_missing_is_none(self, catalog_client):
        assert catalog_client.find_item("nope") is None

    def test_upstream_failure_propagates(self):
        client = CatalogClient(base_url="http://catalog", session=_Unreachable())
        with pytest.raises(UpstreamFailure):
            client.find_item("m1")


def test_menu_lists_only_active_items(catalog_client):
    resp = catalog_client.session.get("http://testserver/menu")
    ids = {item["id"] for item in resp.json()}
    assert ids == {"m1", "m2", "m3"}
