def test_health_is_served_at_the_root(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/health").status_code == 404


def test_zip_lookup_endpoints(client):
    response = client.get("/api/zip-codes/60601")
    assert response.status_code == 200
    assert response.json()["city"] == "Chicago"

    response = client.get("/api/zip-codes/00000")
    assert response.status_code == 404
    assert response.json() == {"error": "ZIP code not found"}

    assert client.get("/api/zip-codes/abc").status_code == 400

    created = client.post(
        "/api/zip-codes", json={"zip_code": "00000", "city": "Nowhere", "state": "ks"}
    )
    assert created.status_code == 201
    assert created.json()["state"] == "KS"
    assert client.get("/api/zip-codes/00000").json()["city"] == "Nowhere"


def test_calculate_mileage(client):
    body = client.post(
        "/api/calculate-mileage", json={"pickup_zip": "10001", "delivery_zip": "07102"}
    ).json()
    assert body["mileage"] == 50
    assert body["method"] == "state_pair"
    assert body["is_fallback"] is False


def test_route_status_endpoints(client):
    statuses = client.get("/api/route-statuses/").json()
    assert statuses[0]["name"] == "Empty"

    loaded = next(s for s in statuses if s["name"] == "Loaded")
    client.post(f"/api/route-statuses/{loaded['id']}/default")
    defaults = [s["name"] for s in client.get("/api/route-statuses/").json() if s["is_default"]]
    assert defaults == ["Loaded"]

    response = client.delete(f"/api/route-statuses/{loaded['id']}")
    assert response.status_code == 400
    assert "default" in response.json()["error"]

    response = client.post("/api/route-statuses/", json={"name": "Breakdown", "color": "red"})
    assert response.status_code == 400


def test_driver_crud(client):
    dispatcher = client.post("/api/dispatchers/", json={"first_name": "Sam", "last_name": "Hill"}).json()
    response = client.post("/api/drivers/", json={
        "first_name": "Jane", "last_name": "Doe", "percentage": 25, "dispatcher_id": dispatcher["id"],
    })
    assert response.status_code == 201
    driver = response.json()
    assert driver["dispatcher_name"] == "Sam Hill"

    updated = client.put(f"/api/drivers/{driver['id']}", json={"count": 3}).json()
    assert updated["count"] == 3

    response = client.post("/api/drivers/", json={"first_name": "No", "last_name": "Boss", "dispatcher_id": 999})
    assert response.status_code == 404
    assert response.json() == {"error": "Dispatcher not found"}


def test_driver_with_routes_cannot_be_deleted(client, driver):
    client.post("/api/routes/", json={
        "driver_id": driver.id, "date": "2024-06-10", "pickup_zip": "60601", "delivery_zip": "90210", "rate": 900,
    })
    response = client.delete(f"/api/drivers/{driver.id}")
    assert response.status_code == 400
    assert "cannot be deleted" in response.json()["error"]


def test_duplicate_truck_number(client):
    assert client.post("/api/trucks/", json={"number": "T-100"}).status_code == 201
    response = client.post("/api/trucks/", json={"number": "T-100"})
    assert response.status_code == 400
    assert response.json() == {"error": "Truck number 'T-100' already exists"}


def test_user_delete_is_a_deactivation(client):
    user = client.post("/api/users/", json={"name": "Ana", "email": "ana@example.com"}).json()
    response = client.delete(f"/api/users/{user['id']}")
    assert response.json() == {"message": "User deactivated successfully"}

    assert client.get("/api/users/").json() == []
    kept = client.get(f"/api/users/{user['id']}").json()
    assert kept["is_active"] is False
    assert kept["deactivated_at"] is not None


def test_user_permissions(client):
    user = client.post("/api/users/", json={"name": "Bo", "email": "bo@example.com"}).json()
    response = client.post("/api/user-permissions/", json={"user_id": user["id"], "section": "routes"})
    assert response.status_code == 201

    duplicate = client.post("/api/user-permissions/", json={"user_id": user["id"], "section": "routes"})
    assert duplicate.status_code == 400

    missing = client.post("/api/user-permissions/", json={"user_id": 999, "section": "routes"})
    assert missing.json() == {"error": "User not found"}

    listed = client.get("/api/user-permissions/", params={"user_id": user["id"]}).json()
    assert [p["section"] for p in listed] == ["routes"]


def test_dispatcher_rankings_endpoint(client, driver):
    client.post("/api/routes/", json={
        "driver_id": driver.id, "date": "2024-06-10", "pickup_zip": "60601", "delivery_zip": "90210",
        "rate": 1000, "sold_for": 700,
    })
    body = client.get(
        "/api/reports/dispatcher-rankings", params={"start_date": "2024-06-10", "end_date": "2024-06-16"}
    ).json()
    assert body["top_by_total_earnings"]["dispatcher_name"] == "Sam Hill"
    assert body["top_by_total_earnings"]["total_earnings"] == 475

    response = client.get(
        "/api/reports/dispatcher-rankings", params={"start_date": "2024-06-16", "end_date": "2024-06-10"}
    )
    assert response.status_code == 400


def test_weekly_route_endpoints(client, driver):
    route_id = client.post("/api/routes/", json={
        "driver_id": driver.id, "date": "2024-06-11", "pickup_zip": "60601", "delivery_zip": "90210", "rate": 800,
    }).json()["id"]
    week = client.post("/api/weekly-routes/", json={"driver_id": driver.id, "week_start_date": "2024-06-10"})
    assert week.status_code == 201
    week_id = week.json()["id"]

    slot = client.post(f"/api/weekly-routes/{week_id}/routes", json={"route_id": route_id, "day_of_week": 1})
    assert slot.status_code == 201

    full = client.get(f"/api/weekly-routes/{week_id}").json()
    assert [s["route_id"] for s in full["routes"]] == [route_id]
    assert full["routes"][0]["catalog_color"] == "#FF9E44"

    grid = client.get("/api/weekly-routes/grid", params={"week_start": "2024-06-12"}).json()
    assert grid["week_start"] == "2024-06-10"
    assert len(grid["drivers"][0]["days"]["2024-06-11"]) == 1

    removed = client.delete(f"/api/weekly-routes/{week_id}/routes/{slot.json()['id']}", params={"user_name": "ana"})
    assert removed.status_code == 200
    assert client.get(f"/api/weekly-routes/{week_id}").json()["routes"] == []
