from datetime import date


def create_payload(driver_id, **overrides):
    payload = {
        "driver_id": driver_id,
        "date": "2024-06-10",
        "pickup_zip": "60601",
        "delivery_zip": "90210",
        "rate": 1500,
    }
    payload.update(overrides)
    return payload


def test_create_route_resolves_locations_and_audits(client, driver):
    response = client.post("/api/routes/", json=create_payload(driver.id, user_name="ana"))
    assert response.status_code == 201
    body = response.json()
    assert (body["pickup_city"], body["pickup_state"]) == ("Chicago", "IL")
    assert (body["delivery_city"], body["delivery_state"]) == ("Beverly Hills", "CA")
    assert body["mileage"] is not None
    assert body["status"] == "Empty"
    assert body["driver_name"] == "Jane Doe"
    assert body["rate"] == 1500
    assert body["last_edited_by"] == "ana"

    history = body["audit_history"]
    assert len(history) == 1
    assert history[0]["status"] == "created"
    assert history[0]["changed_fields"] == ["all"]


def test_get_route_detail(client, driver):
    route_id = client.post("/api/routes/", json=create_payload(driver.id, comment="first")).json()["id"]
    client.post(f"/api/routes/{route_id}/comments", json={"text": "second", "author": "bo"})

    response = client.get(f"/api/routes/{route_id}")
    assert response.status_code == 200
    body = response.json()
    assert [c["text"] for c in body["comments"]] == ["second", "first"]
    assert body["last_comment_by"] == "bo"


def test_missing_route_is_a_404_error_body(client):
    response = client.get("/api/routes/9999")
    assert response.status_code == 404
    assert response.json() == {"error": "Route not found"}


def test_request_validation_is_a_400_error_body(client, driver):
    response = client.post("/api/routes/", json={"driver_id": driver.id})
    assert response.status_code == 400
    assert "error" in response.json()


def test_unknown_zip_without_city_is_rejected(client, driver):
    response = client.post("/api/routes/", json=create_payload(driver.id, pickup_zip="00000"))
    assert response.status_code == 400
    assert "pickup_city" in response.json()["error"]

    response = client.get("/api/routes/")
    assert response.json() == []


def test_update_route_through_the_api(client, driver):
    route_id = client.post("/api/routes/", json=create_payload(driver.id)).json()["id"]

    response = client.put(f"/api/routes/{route_id}", json={"rate": 1600, "user_name": "bo"})
    assert response.status_code == 200
    body = response.json()
    assert body["rate"] == 1600
    latest = body["audit_history"][0]
    assert latest["status"] == "updated"
    assert latest["changed_fields"] == ["rate"]
    assert latest["old_values"] == {"rate": 1500}


def test_route_earnings(client, driver):
    route_id = client.post(
        "/api/routes/", json=create_payload(driver.id, rate=1000, sold_for=700)
    ).json()["id"]

    body = client.get(f"/api/routes/{route_id}/earnings").json()
    assert body["gross_difference"] == 300
    assert body["percentage_income"] == 175
    assert body["total_earnings"] == 475


def test_previous_route_suggestions(client, driver):
    older = client.post("/api/routes/", json=create_payload(driver.id, date="2024-06-03")).json()["id"]
    newer = client.post("/api/routes/", json=create_payload(driver.id, date="2024-06-08")).json()["id"]

    body = client.get(
        "/api/routes/previous", params={"driver_id": driver.id, "before": date(2024, 6, 10).isoformat()}
    ).json()
    assert body["suggested_route_id"] == newer
    assert [r["id"] for r in body["routes"]] == [newer, older]


def test_delete_route(client, driver):
    route_id = client.post("/api/routes/", json=create_payload(driver.id)).json()["id"]

    response = client.request("DELETE", f"/api/routes/{route_id}", json={"user_name": "ana"})
    assert response.status_code == 200
    assert response.json() == {"message": "Route deleted successfully"}
    assert client.get(f"/api/routes/{route_id}").status_code == 404


def test_list_routes_filters_by_status(client, driver):
    client.post("/api/routes/", json=create_payload(driver.id))
    client.post("/api/routes/", json=create_payload(driver.id, status="Loaded"))

    loaded = client.get("/api/routes/", params={"status": "Loaded"}).json()
    assert [r["status"] for r in loaded] == ["Loaded"]
    assert loaded[0]["status_color"] == "#2E8B57"
