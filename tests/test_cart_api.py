"""Cart sync: full overwrite of the server-side cart."""
from hybrid_cart.data.database import SessionLocal
from hybrid_cart.data.models.cart import CartLineModel
from hybrid_cart.data.models.product import ProductModel


def _sync(client, items, user_id=1):
    return client.post("/cart/sync", json={"user_id": user_id, "items": items})


def _rows(user_id=1):
    with SessionLocal() as session:
        rows = session.query(CartLineModel).filter_by(user_id=user_id).order_by(CartLineModel.id).all()
        return [(r.product_id, r.quantity) for r in rows]


class TestCartSync:
    def test_sync_persists_items(self, client, make_product):
        a = make_product(name="Keyboard")
        b = make_product(name="Mouse")

        response = _sync(client, [{"product_id": a, "quantity": 2}, {"product_id": b, "quantity": 1}])

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Cart synced successfully"}
        assert _rows() == [(a, 2), (b, 1)]

    def test_sync_replaces_previous_cart(self, client, make_product):
        a = make_product(name="Keyboard")
        b = make_product(name="Mouse")

        _sync(client, [{"product_id": a, "quantity": 3}])
        _sync(client, [{"product_id": b, "quantity": 1}])

        assert _rows() == [(b, 1)]

    def test_same_snapshot_twice_is_idempotent(self, client, make_product):
        a = make_product()
        snapshot = [{"product_id": a, "quantity": 2}]

        _sync(client, snapshot)
        first = _rows()
        _sync(client, snapshot)

        assert _rows() == first == [(a, 2)]

    def test_empty_items_clear_cart(self, client, make_product):
        a = make_product()
        _sync(client, [{"product_id": a, "quantity": 2}])

        response = _sync(client, [])

        assert response.status_code == 200
        assert _rows() == []

    def test_other_users_cart_untouched(self, client, make_product):
        a = make_product()
        _sync(client, [{"product_id": a, "quantity": 1}], user_id=2)

        _sync(client, [], user_id=1)

        assert _rows(user_id=2) == [(a, 1)]

    def test_sync_does_not_check_stock(self, client, make_product):
        a = make_product(stock=1)

        response = _sync(client, [{"product_id": a, "quantity": 50}])

        assert response.status_code == 200
        assert _rows() == [(a, 50)]

    def test_get_cart(self, client, make_product):
        a = make_product()
        _sync(client, [{"product_id": a, "quantity": 4}], user_id=7)

        response = client.get("/cart/7")

        assert response.json() == {"user_id": 7, "items": [{"product_id": a, "quantity": 4}]}


class TestCartSyncValidation:
    def test_missing_user_id(self, client):
        response = client.post("/cart/sync", json={"items": []})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request data"}

    def test_items_not_a_list(self, client):
        response = client.post("/cart/sync", json={"user_id": 1, "items": "nope"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_non_positive_quantity(self, client, make_product):
        a = make_product()

        response = _sync(client, [{"product_id": a, "quantity": 0}])

        assert response.status_code == 400

    def test_store_failure_reported(self, client, make_product):
        # FK na products.id - nieistniejacy produkt odrzuca baza, nie aplikacja
        response = _sync(client, [{"product_id": 12345, "quantity": 1}])

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to sync cart"}
        assert _rows() == []

    def test_failed_sync_keeps_previous_cart(self, client, make_product):
        a = make_product(name="Keyboard")
        b = make_product(name="Mouse")
        _sync(client, [{"product_id": a, "quantity": 2}, {"product_id": b, "quantity": 1}])

        response = _sync(client, [{"product_id": a, "quantity": 5}, {"product_id": 12345, "quantity": 1}])

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to sync cart"}
        # delete z tej samej transakcji tez cofniety
        assert _rows() == [(a, 2), (b, 1)]


class TestCascade:
    def test_deleting_product_drops_cart_lines(self, client, make_product):
        a = make_product()
        _sync(client, [{"product_id": a, "quantity": 1}])

        with SessionLocal() as session:
            session.delete(session.get(ProductModel, a))
            session.commit()

        assert _rows() == []
