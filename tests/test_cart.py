# tests/test_cart.py


def test_cart_starts_empty(client, user, auth_headers):
    r = client.get("/api/cart", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.get_json() == []


def test_cart_requires_login(client, db_session):
    assert client.get("/api/cart").status_code == 401


def test_add_item_uses_catalog_price(client, user, auth_headers, make_package):
    make_package()
    headers = auth_headers(user)
    r = client.post("/api/cart", headers=headers, json={"slug": "PC-Gaming-Elite", "finalPrice": 0.01})
    assert r.status_code == 200
    items = r.get_json()["items"]
    assert len(items) == 1
    assert items[0]["slug"] == "pc-gaming-elite"
    assert items[0]["finalPrice"] == 25.49
    assert items[0]["basePrice"] == 29.99

    assert client.get("/api/cart", headers=headers).get_json() == items


def test_add_item_errors(client, user, auth_headers, make_package):
    make_package()
    headers = auth_headers(user)
    r = client.post("/api/cart", headers=headers, json={})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Invalid cart item."

    assert client.post("/api/cart", headers=headers, json={"slug": "ghost"}).status_code == 404

    assert client.post("/api/cart", headers=headers, json={"slug": "pc-gaming-elite"}).status_code == 200
    r = client.post("/api/cart", headers=headers, json={"slug": "pc-gaming-elite"})
    assert r.status_code == 409
    assert r.get_json()["message"] == "Item already in cart."


def test_remove_and_clear(client, user, auth_headers, make_package):
    make_package()
    make_package("xbox-game-master", category="Xbox")
    headers = auth_headers(user)
    client.post("/api/cart", headers=headers, json={"slug": "pc-gaming-elite"})
    client.post("/api/cart", headers=headers, json={"slug": "xbox-game-master"})

    r = client.delete("/api/cart/pc-gaming-elite", headers=headers)
    assert [i["slug"] for i in r.get_json()["items"]] == ["xbox-game-master"]

    r = client.delete("/api/cart", headers=headers)
    assert r.get_json()["items"] == []
    assert client.get("/api/cart", headers=headers).get_json() == []


def test_carts_are_per_user(client, user, make_user, auth_headers, make_package):
    make_package()
    client.post("/api/cart", headers=auth_headers(user), json={"slug": "pc-gaming-elite"})
    other = make_user()
    assert client.get("/api/cart", headers=auth_headers(other)).get_json() == []
