from conftest import create_route

from cyclehub.constants import CO2_PER_KM, POINTS
from cyclehub.services.rides import compute_trip_metrics
from cyclehub.timeutils import utcnow


def start(client, headers, route_id):
    return client.post("/api/rides/start", headers=headers, json={"route_id": route_id})


def me(client, headers):
    return client.get("/api/auth/me", headers=headers).json()["data"]["user"]


def test_trip_metrics():
    now = utcnow()
    metrics = compute_trip_metrics(5.5, now, now)
    assert metrics["co2_saved"] == round(5.5 * CO2_PER_KM, 2)
    assert metrics["points_earned"] == POINTS.RIDE_COMPLETED
    assert metrics["duration"] >= 0


def test_only_one_active_ride(client, rider):
    headers, _ = rider
    first = create_route(client, headers, title="First")
    second = create_route(client, headers, title="Second")

    r = start(client, headers, first["id"])
    assert r.status_code == 201
    ride = r.json()["data"]["ride"]
    assert ride["status"] == "active"
    assert ride["route"]["title"] == "First"

    r = start(client, headers, second["id"])
    assert r.status_code == 409
    assert r.json()["success"] is False

    active = client.get("/api/rides/active", headers=headers).json()["data"]["ride"]
    assert active["id"] == ride["id"]

    # После завершения можно начать новую
    client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert start(client, headers, second["id"]).status_code == 201


def test_complete_ride_updates_user(client, rider):
    headers, _ = rider
    route = create_route(client, headers, distance=5.5)
    ride = start(client, headers, route["id"]).json()["data"]["ride"]
    points_before = me(client, headers)["total_points"]

    r = client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert r.status_code == 200
    completed = r.json()["data"]["ride"]
    assert completed["status"] == "completed"
    assert completed["distance"] == 5.5
    assert completed["co2_saved"] == round(5.5 * CO2_PER_KM, 2)
    assert completed["points_earned"] == POINTS.RIDE_COMPLETED
    assert completed["duration"] >= 0
    assert completed["completed_at"] is not None

    user = me(client, headers)
    assert user["total_distance"] == 5.5
    assert user["total_points"] == points_before + POINTS.RIDE_COMPLETED
    assert user["current_streak"] == 1
    assert user["longest_streak"] == 1

    # Вторая поездка в тот же день серию не меняет
    ride = start(client, headers, route["id"]).json()["data"]["ride"]
    client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert me(client, headers)["current_streak"] == 1

    stats = client.get("/api/rides/stats", headers=headers).json()["data"]["stats"]
    assert stats["rides_completed"] == 2
    assert stats["total_distance"] == 11.0


def test_complete_errors(client, rider, other_rider):
    headers, _ = rider
    other_headers, _ = other_rider
    route = create_route(client, headers)
    ride = start(client, headers, route["id"]).json()["data"]["ride"]

    assert client.patch(f"/api/rides/{ride['id']}/complete", headers=other_headers).status_code == 403
    assert client.patch("/api/rides/9999/complete", headers=headers).status_code == 404
    assert client.get(f"/api/rides/{ride['id']}", headers=other_headers).status_code == 403

    assert client.patch(f"/api/rides/{ride['id']}/complete", headers=headers).status_code == 200
    r = client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Ride is not active"


def test_cancel_ride(client, rider):
    headers, _ = rider
    route = create_route(client, headers)
    points_before = me(client, headers)["total_points"]
    ride = start(client, headers, route["id"]).json()["data"]["ride"]

    r = client.patch(f"/api/rides/{ride['id']}/cancel", headers=headers)
    assert r.status_code == 200
    cancelled = r.json()["data"]["ride"]
    assert cancelled["status"] == "cancelled"
    assert cancelled["points_earned"] in (None, 0)

    assert me(client, headers)["total_points"] == points_before
    assert client.get("/api/rides/active", headers=headers).json()["data"]["ride"] is None

    r = client.patch(f"/api/rides/{ride['id']}/cancel", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Only active rides can be cancelled"


def test_start_on_missing_route(client, rider):
    headers, _ = rider
    assert start(client, headers, 9999).status_code == 404


def test_ride_on_deleted_route_still_completes(client, rider):
    headers, _ = rider
    route = create_route(client, headers, distance=8)
    ride = start(client, headers, route["id"]).json()["data"]["ride"]
    client.delete(f"/api/routes/{route['id']}", headers=headers)

    r = client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["ride"]["distance"] == 8


def test_list_rides_filter_by_status(client, rider):
    headers, _ = rider
    route = create_route(client, headers)
    first = start(client, headers, route["id"]).json()["data"]["ride"]
    client.patch(f"/api/rides/{first['id']}/cancel", headers=headers)
    second = start(client, headers, route["id"]).json()["data"]["ride"]
    client.patch(f"/api/rides/{second['id']}/complete", headers=headers)

    data = client.get("/api/rides/", params={"status": "completed"}, headers=headers).json()["data"]
    assert [ride["id"] for ride in data["items"]] == [second["id"]]
    assert client.get("/api/rides/", headers=headers).json()["data"]["pagination"]["total"] == 2


def test_rides_require_auth(client):
    r = client.get("/api/rides/active")
    assert r.status_code == 401
    assert r.json()["message"] == "Access denied. No token provided."
