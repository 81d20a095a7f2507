import json

from tests.conftest import add_dish


def test_categories_crud(admin, client):
    r = admin.post("/api/categories/", json={"name": "Starters"})
    assert r.status_code == 201
    assert r.json() == {"category_id": "Starters", "category_name": "Starters"}

    assert admin.post("/api/categories/", json={"name": "Starters"}).status_code == 409
    assert client.get("/api/categories/").json() == ["Starters"]


def test_category_create_requires_admin(customer, client):
    assert client.post("/api/categories/", json={"name": "X"}).status_code == 401
    assert customer.post("/api/categories/", json={"name": "X"}).status_code == 403


def test_delete_category_cascades_dishes_and_images(admin, client, store):
    r = admin.post(
        "/api/dishes/",
        data={"dish_data": json.dumps({"category": "Curries", "name": "Korma", "price": 12})},
        files={"image": ("korma.png", b"img", "image/png")},
    )
    assert r.status_code == 201
    assert r.json()["image_url"].startswith("/uploads/Curries/")
    assert len(store.list()) == 1

    d = admin.delete("/api/categories/Curries")
    assert d.status_code == 200
    assert d.json()["updated"] == 1
    assert store.list() == []
    assert client.get("/api/categories/").json() == []
    assert admin.delete("/api/categories/Curries").status_code == 404


def test_add_dish_validates_payload(admin):
    bad_json = admin.post("/api/dishes/", data={"dish_data": "{not json"})
    assert bad_json.status_code == 400

    negative = admin.post(
        "/api/dishes/",
        data={"dish_data": json.dumps({"category": "Biryani", "name": "X", "price": -1})},
    )
    assert negative.status_code == 400
    assert negative.json()["errors"][0]["field"] == "price"


def test_add_dish_rejects_disallowed_image_type(admin):
    r = admin.post(
        "/api/dishes/",
        data={"dish_data": json.dumps({"category": "Biryani", "name": "X", "price": 5})},
        files={"image": ("x.exe", b"MZ", "application/octet-stream")},
    )
    assert r.status_code == 400


def test_list_dishes_by_category_hides_unavailable(admin, client):
    first = add_dish(admin, name="Chicken Biryani")
    add_dish(admin, name="Veg Biryani", price=150)

    r = admin.patch("/api/dishes/availability", json={"category": "Biryani", "id": first})
    assert r.status_code == 200
    assert r.json()["available"] is False

    names = [d["name"] for d in client.get("/api/dishes/category/Biryani").json()]
    assert names == ["Veg Biryani"]
    assert len(admin.get("/api/dishes/admin/Biryani").json()) == 2


def test_gold_price_reprices_dishes(admin, client, gold, customer):
    dish_id = add_dish(admin, price=200)
    assert client.get("/api/gold-price/").status_code == 404

    r = admin.post("/api/gold-price/", json={"gold_price": 50})
    assert r.status_code == 201
    assert r.json()["updated"] == 1
    assert client.get("/api/gold-price/").json() == {"gold_price": 50.0}

    admin_view = admin.get("/api/dishes/admin/Biryani").json()[0]
    assert admin_view["dish_id"] == dish_id
    assert admin_view["price"] == 200.0
    assert admin_view["member_price"] == 100.0

    assert customer.get("/api/dishes/category/Biryani").json()[0]["price"] == 200.0
    assert gold.get("/api/dishes/category/Biryani").json()[0]["price"] == 100.0
    assert client.get("/api/dishes/").json()[0]["price"] == 200.0


def test_gold_price_out_of_range(admin):
    r = admin.post("/api/gold-price/", json={"gold_price": 150})
    assert r.status_code == 400


def test_new_dish_uses_current_gold_percent(admin):
    admin.post("/api/gold-price/", json={"gold_price": 80})
    add_dish(admin, price=10)
    assert admin.get("/api/dishes/admin/Biryani").json()[0]["member_price"] == 8.0


def test_dish_without_gold_percent_has_base_member_price(admin):
    add_dish(admin, price=10)
    assert admin.get("/api/dishes/admin/Biryani").json()[0]["member_price"] == 10.0


def test_apply_all_requires_gold_percent(admin):
    add_dish(admin)
    assert admin.post("/api/gold-price/apply-all").status_code == 404


def test_category_gold_price(admin):
    add_dish(admin, category="Biryani", price=100)
    add_dish(admin, category="Drinks", name="Lassi", price=4)
    admin.post("/api/gold-price/", json={"gold_price": 90})

    r = admin.post("/api/gold-price/category", json={"category": "Drinks", "gold_price": 50})
    assert r.status_code == 200
    assert r.json()["updated"] == 1

    assert admin.get("/api/dishes/admin/Drinks").json()[0]["member_price"] == 2.0
    assert admin.get("/api/dishes/admin/Biryani").json()[0]["member_price"] == 90.0

    admin.post("/api/categories/", json={"name": "Empty"})
    assert admin.post("/api/gold-price/category", json={"category": "Empty", "gold_price": 50}).status_code == 404


def test_update_dish_price_recomputes_member_price(admin):
    admin.post("/api/gold-price/", json={"gold_price": 50})
    dish_id = add_dish(admin, price=20)

    r = admin.patch(f"/api/dishes/admin/Biryani/{dish_id}", json={"price": 30})
    assert r.status_code == 200
    assert r.json()["member_price"] == 15.0

    r = admin.put(
        f"/api/dishes/Biryani/{dish_id}",
        data={"dish_data": json.dumps({"name": "Hyderabadi Biryani", "price": 40})},
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Hyderabadi Biryani"
    assert r.json()["member_price"] == 20.0


def test_special_offers(admin, client):
    dish_id = add_dish(admin, price=200)
    add_dish(admin, name="Plain Rice", price=5)

    r = admin.put(f"/api/dishes/discount/Biryani/{dish_id}", json={"discount": 25})
    assert r.status_code == 200
    assert r.json()["offer_available"] is True

    offers = client.get("/api/dishes/special-offers").json()
    assert len(offers) == 1
    assert offers[0]["price"] == 150.0
    assert offers[0]["discount"] == 25.0


def test_delete_dish(admin):
    dish_id = add_dish(admin)
    assert admin.delete(f"/api/dishes/Biryani/{dish_id}").status_code == 200
    assert admin.delete(f"/api/dishes/Biryani/{dish_id}").status_code == 404


def test_patch_dish_rejects_null_for_required_fields(admin):
    dish_id = add_dish(admin, price=20)

    for field in ("price", "name", "available"):
        r = admin.patch(f"/api/dishes/admin/Biryani/{dish_id}", json={field: None})
        assert r.status_code == 422, field

    dish = admin.get("/api/dishes/admin/Biryani").json()[0]
    assert (dish["name"], dish["price"], dish["available"]) == ("Chicken Biryani", 20.0, True)


def test_patch_dish_can_clear_description(admin):
    dish_id = add_dish(admin)
    admin.patch(f"/api/dishes/admin/Biryani/{dish_id}", json={"description": "Spicy"})
    r = admin.patch(f"/api/dishes/admin/Biryani/{dish_id}", json={"description": None})
    assert r.status_code == 200
    assert r.json()["description"] is None


def test_put_dish_rejects_null_price(admin):
    dish_id = add_dish(admin)
    r = admin.put(f"/api/dishes/Biryani/{dish_id}", data={"dish_data": json.dumps({"price": None})})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "price"


def test_delete_dish_in_cart_removes_cart_rows(admin, customer):
    dish_id = add_dish(admin)
    assert customer.post("/api/cart/", json={"dish_id": dish_id, "quantity": 2}).status_code == 201

    assert admin.delete(f"/api/dishes/Biryani/{dish_id}").status_code == 200
    assert customer.get("/api/cart/").json() == []


def test_delete_category_with_dishes_in_cart(admin, customer):
    kept = add_dish(admin, category="Drinks", name="Lassi", price=4)
    gone = add_dish(admin, category="Biryani")
    customer.post("/api/cart/", json={"dish_id": kept})
    customer.post("/api/cart/", json={"dish_id": gone})

    assert admin.delete("/api/categories/Biryani").status_code == 200
    assert [i["dish_id"] for i in customer.get("/api/cart/").json()] == [kept]
