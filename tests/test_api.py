"""
Testes da API Flask do carrinho.
"""
import pytest

AUTH = {"X-Auth-Id": "auth-1"}
CAFE = {"price": "9.99", "name": "Café em grãos", "image": "https://img/cafe.png", "weight": "500", "weight_unit": "g"}


def _add(client, variant_id="V1", quantity=1, headers=AUTH, product=CAFE):
    return client.post(
        "/cart/items",
        json={"variant_id": variant_id, "asin": "B000111", "quantity": quantity, "product": product},
        headers=headers,
    )


class TestCartApi:
    def test_healthz(self, client):
        assert client.get("/healthz").get_json() == {"ok": True}

    def test_anonymous_cart_is_empty(self, client):
        res = client.get("/cart")
        assert res.status_code == 200
        assert res.get_json() == {"items": [], "count": 0, "total": "0", "loading": False}

    def test_add_merges_and_totals(self, client):
        assert _add(client, quantity=2).status_code == 201
        res = _add(client, quantity=3)

        body = res.get_json()
        assert res.status_code == 201
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 5
        assert body["items"][0]["price_at_time"] == "9.99"
        assert body["count"] == 5
        assert body["total"] == "49.95"

    def test_add_requires_identity(self, client):
        res = _add(client, headers={})
        assert res.status_code == 401
        assert res.get_json()["error"] == "unauthenticated"

    def test_add_rejects_zero_quantity(self, client):
        res = _add(client, quantity=0)
        assert res.status_code == 400
        assert res.get_json()["error"] == "invalid_quantity"

    def test_add_rejects_malformed_body(self, client):
        res = client.post("/cart/items", json={"variant_id": "V1"}, headers=AUTH)
        assert res.status_code == 400
        assert res.get_json()["error"] == "invalid_request"

    @pytest.mark.parametrize("price", ["3.333", "9.999"])
    def test_add_rejects_price_beyond_cents(self, client, price):
        res = _add(client, product={**CAFE, "price": price})
        assert res.status_code == 400
        assert res.get_json()["error"] == "invalid_request"
        assert client.get("/cart", headers=AUTH).get_json()["items"] == []

    def test_add_accepts_camel_case_weight_unit(self, client):
        product = {"price": "2.00", "name": "Açúcar", "weight": "1", "weightUnit": "kg"}
        res = _add(client, variant_id="V3", product=product)
        assert res.status_code == 201
        assert res.get_json()["items"][0]["variant_weight_unit"] == "kg"

    def test_update_remove_and_clear(self, client):
        item_id = _add(client, quantity=2).get_json()["items"][0]["id"]
        _add(client, variant_id="V2", product={"price": "1.50", "name": "Filtro"})

        res = client.patch(f"/cart/items/{item_id}", json={"quantity": 4}, headers=AUTH)
        assert res.get_json()["count"] == 5

        res = client.patch(f"/cart/items/{item_id}", json={"quantity": 0}, headers=AUTH)
        assert res.status_code == 400

        res = client.delete(f"/cart/items/{item_id}", headers=AUTH)
        assert [i["variant_id"] for i in res.get_json()["items"]] == ["V2"]

        res = client.delete(f"/cart/items/{item_id}", headers=AUTH)
        assert res.status_code == 200
        assert res.get_json()["count"] == 1

        res = client.delete("/cart", headers=AUTH)
        assert res.get_json()["items"] == []

    def test_carts_are_isolated_per_user(self, client):
        _add(client, quantity=2)
        _add(client, quantity=7, headers={"X-Auth-Id": "auth-2"})

        client.delete("/cart", headers=AUTH)

        assert client.get("/cart", headers=AUTH).get_json()["count"] == 0
        assert client.get("/cart", headers={"X-Auth-Id": "auth-2"}).get_json()["count"] == 7

    @pytest.mark.parametrize("method,path", [("delete", "/cart"), ("delete", "/cart/items/x")])
    def test_unknown_profile_is_noop(self, client, method, path):
        res = getattr(client, method)(path, headers={"X-Auth-Id": "nobody"})
        assert res.status_code == 200
        assert res.get_json()["items"] == []
