def test_rewards_missing(client):
    assert client.get("/api/rewards/").status_code == 404


def test_rewards_upsert(admin, client):
    r = admin.put("/api/rewards/", json={"points": 1, "dollars": 2})
    assert r.status_code == 201
    assert r.json() == {"points": 1, "dollars": 2.0, "redemption_points": 10}

    r = admin.put("/api/rewards/", json={"points": 100, "dollars": 5})
    assert r.status_code == 200
    assert client.get("/api/rewards/").json()["points"] == 100


def test_rewards_upsert_admin_only(customer):
    assert customer.put("/api/rewards/", json={"points": 1, "dollars": 2}).status_code == 403


def test_apply_reward(admin, customer, customer_user, db):
    admin.put("/api/rewards/", json={"points": 1, "dollars": 2})
    customer_user.points = 30
    db.commit()

    r = customer.post("/api/rewards/apply", json={"total_price": 50})
    assert r.status_code == 200
    assert r.json() == {"total_price": 30.0, "dollar_value": 20.0, "points": 20}

    assert customer.get("/api/users/me/rewards").json() == {"user_id": customer_user.id, "points": 20}


def test_apply_reward_never_below_zero(admin, customer, customer_user, db):
    admin.put("/api/rewards/", json={"points": 1, "dollars": 2})
    customer_user.points = 10
    db.commit()

    r = customer.post("/api/rewards/apply", json={"total_price": 5})
    assert r.json()["total_price"] == 0.0
    assert r.json()["points"] == 0


def test_apply_reward_needs_ten_points(admin, customer, customer_user, db):
    admin.put("/api/rewards/", json={"points": 1, "dollars": 2})
    customer_user.points = 9
    db.commit()

    r = customer.post("/api/rewards/apply", json={"total_price": 50})
    assert r.status_code == 400
    assert customer.get("/api/users/me/rewards").json()["points"] == 9
