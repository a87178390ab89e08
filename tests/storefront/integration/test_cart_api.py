"""Integration tests for the cart endpoints via TestClient."""


class TestViewCart:
    def test_empty_cart(self, client, user_headers):
        response = client.get("/cart", headers=user_headers)
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"items": [], "summary": {"totalItems": 0, "totalPrice": 0}},
        }

    def test_cart_lines_are_camel_case(self, client, user_headers, add_product):
        product_id = add_product(name="Mug", price=8.25, quantity=5)
        client.post(f"/cart/add/{product_id}", json={"quantity": 2}, headers=user_headers)

        data = client.get("/cart", headers=user_headers).json()["data"]
        line = data["items"][0]
        assert line["productId"] == product_id
        assert line["name"] == "Mug"
        assert line["quantity"] == 2
        assert line["inStock"] is True
        assert line["subtotal"] == 16.5
        assert data["summary"] == {"totalItems": 2, "totalPrice": 16.5}


class TestAddToCart:
    def test_add(self, client, user_headers, add_product):
        product_id = add_product(name="Mug", quantity=5)
        response = client.post(f"/cart/add/{product_id}", json={"quantity": 2}, headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Item added to cart successfully"
        assert body["data"] == {"productId": product_id, "productName": "Mug", "quantity": 2, "totalInCart": 2}

    def test_quantity_defaults_to_one(self, client, user_headers, add_product):
        product_id = add_product(quantity=5)
        response = client.post(f"/cart/add/{product_id}", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"]["quantity"] == 1

    def test_insufficient_stock(self, client, user_headers, add_product):
        product_id = add_product(quantity=1)
        response = client.post(f"/cart/add/{product_id}", json={"quantity": 2}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Cannot add 2 items. Only 1 more available"

    def test_unknown_product(self, client, user_headers):
        response = client.post("/cart/add/missing", json={"quantity": 1}, headers=user_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}

    def test_invalid_quantity(self, client, user_headers, add_product):
        product_id = add_product()
        response = client.post(f"/cart/add/{product_id}", json={"quantity": 0}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "quantity"


class TestUpdateRemoveClear:
    def test_update(self, client, user_headers, add_product):
        product_id = add_product(name="Mug", quantity=5)
        client.post(f"/cart/add/{product_id}", headers=user_headers)

        response = client.put(f"/cart/update/{product_id}", json={"quantity": 4}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"productId": product_id, "productName": "Mug", "newQuantity": 4}

    def test_update_not_in_cart(self, client, user_headers, add_product):
        product_id = add_product()
        response = client.put(f"/cart/update/{product_id}", json={"quantity": 1}, headers=user_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Item not found in cart"

    def test_update_above_stock(self, client, user_headers, add_product):
        product_id = add_product(quantity=2)
        client.post(f"/cart/add/{product_id}", headers=user_headers)
        response = client.put(f"/cart/update/{product_id}", json={"quantity": 3}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Only 2 items available in stock"

    def test_remove(self, client, user_headers, add_product):
        product_id = add_product()
        client.post(f"/cart/add/{product_id}", json={"quantity": 2}, headers=user_headers)

        response = client.delete(f"/cart/remove/{product_id}", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"productId": product_id, "removedQuantity": 2}

    def test_remove_missing(self, client, user_headers):
        response = client.delete("/cart/remove/prod-001", headers=user_headers)
        assert response.status_code == 404

    def test_clear(self, client, user_headers, add_product):
        first = add_product(name="First")
        second = add_product(name="Second")
        client.post(f"/cart/add/{first}", json={"quantity": 2}, headers=user_headers)
        client.post(f"/cart/add/{second}", headers=user_headers)

        response = client.delete("/cart/clear", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"removedItems": 3}
        assert client.get("/cart", headers=user_headers).json()["data"]["items"] == []
