from conftest import create_route, insert_reward, register_user

from cyclehub.constants import POINTS


def create_reward(client, admin_headers, name, criteria_type, threshold=1, points=20):
    r = client.post("/api/rewards/", headers=admin_headers, json={
        "name": name,
        "description": f"{name} description",
        "icon": "medal",
        "category": "special",
        "criteria": {"type": criteria_type, "threshold": threshold},
        "points_awarded": points,
        "tier": "bronze",
    })
    assert r.status_code == 201, r.text
    return r.json()["data"]["reward"]


def check(client, admin_headers, user_id):
    r = client.post(f"/api/rewards/check/{user_id}", headers=admin_headers)
    assert r.status_code == 200, r.text
    return r.json()["data"]


def test_ride_scenario_grants_reward(client, admin_headers):
    reward = create_reward(client, admin_headers, "First Ride", "ridesCompleted", points=20)
    headers, data = register_user(client, "newbie@example.com")

    route = create_route(client, headers, distance=5)
    ride = client.post("/api/rides/start", headers=headers, json={"route_id": route["id"]}).json()["data"]["ride"]
    r = client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert r.status_code == 200

    user = client.get("/api/auth/me", headers=headers).json()["data"]["user"]
    assert user["total_distance"] == 5
    assert user["total_points"] == POINTS.RIDE_COMPLETED + 20
    assert [a["id"] for a in user["achievements"]] == [reward["id"]]

    earned = client.get(f"/api/rewards/{reward['id']}", headers=headers).json()["data"]["reward"]
    assert earned["earned_by_ids"] == [data["user"]["id"]]


def test_check_and_grant_is_idempotent(client, admin_headers, rider):
    headers, user = rider
    create_route(client, headers)
    create_reward(client, admin_headers, "Trailblazer", "routesCreated", points=10)
    create_reward(client, admin_headers, "Mapper", "routesCreated", threshold=5)

    first = check(client, admin_headers, user["id"])
    assert [r["name"] for r in first["granted"]] == ["Trailblazer"]
    assert first["total_achievements"] == 1

    second = check(client, admin_headers, user["id"])
    assert second["granted"] == []
    assert second["total_achievements"] == 1

    points = client.get("/api/auth/me", headers=headers).json()["data"]["user"]["total_points"]
    assert points == 10


def test_grants_in_catalogue_order(client, admin_headers, rider):
    headers, user = rider
    create_route(client, headers)
    create_route(client, headers)
    create_reward(client, admin_headers, "Two Routes", "routesCreated", threshold=2)
    create_reward(client, admin_headers, "One Route", "routesCreated", threshold=1)

    granted = check(client, admin_headers, user["id"])["granted"]
    assert [r["name"] for r in granted] == ["Two Routes", "One Route"]


def test_deactivated_and_unknown_rewards_are_not_granted(client, admin_headers, rider):
    headers, user = rider
    create_route(client, headers)
    retired = create_reward(client, admin_headers, "Retired", "routesCreated")
    insert_reward(
        name="Future", description="Not evaluated yet", icon="medal", category="special",
        criteria_type="kudosReceived", criteria_threshold=1, points_awarded=5, tier="bronze",
    )

    assert client.delete(f"/api/rewards/{retired['id']}", headers=admin_headers).status_code == 200
    listed = client.get("/api/rewards/", headers=headers).json()["data"]["items"]
    assert [r["name"] for r in listed] == ["Future"]
    assert listed[0]["criteria"] == {"type": "kudosReceived", "threshold": 1}

    result = check(client, admin_headers, user["id"])
    assert result["granted"] == []


def test_check_unknown_user(client, admin_headers):
    r = client.post("/api/rewards/check/9999", headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_reward_admin_only(client, rider, admin_headers):
    headers, user = rider
    assert client.post(f"/api/rewards/check/{user['id']}", headers=headers).status_code == 403
    r = client.post("/api/rewards/", headers=headers, json={})
    assert r.status_code in (400, 403)


def test_duplicate_reward_name(client, admin_headers):
    create_reward(client, admin_headers, "Unique", "ridesCompleted")
    r = client.post("/api/rewards/", headers=admin_headers, json={
        "name": "Unique",
        "description": "again",
        "icon": "medal",
        "category": "special",
        "criteria": {"type": "ridesCompleted", "threshold": 1},
        "tier": "bronze",
    })
    assert r.status_code == 409


def test_failed_grant_does_not_fail_ride(client, rider, monkeypatch):
    from cyclehub.services import rewards

    async def broken(db, user_id):
        raise RuntimeError("stats unavailable")

    monkeypatch.setattr(rewards, "check_and_grant", broken)
    headers, _ = rider
    route = create_route(client, headers)
    ride = client.post("/api/rides/start", headers=headers, json={"route_id": route["id"]}).json()["data"]["ride"]

    r = client.patch(f"/api/rides/{ride['id']}/complete", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["ride"]["status"] == "completed"


def test_unknown_criteria_type_rejected(client, admin_headers):
    r = client.post("/api/rewards/", headers=admin_headers, json={
        "name": "Kudos",
        "description": "Receive kudos",
        "icon": "medal",
        "category": "special",
        "criteria": {"type": "kudosReceived", "threshold": 1},
        "tier": "bronze",
    })
    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"

    reward = create_reward(client, admin_headers, "Kudos", "ridesCompleted")
    r = client.put(f"/api/rewards/{reward['id']}", headers=admin_headers,
                   json={"criteria": {"type": "kudosReceived", "threshold": 1}})
    assert r.status_code == 400

    r = client.put(f"/api/rewards/{reward['id']}", headers=admin_headers,
                   json={"criteria": {"type": "totalDistance", "threshold": 100}})
    assert r.status_code == 200
    assert r.json()["data"]["reward"]["criteria"] == {"type": "totalDistance", "threshold": 100}


def test_review_grants_reward(client, admin_headers, rider, other_rider):
    owner_headers, _ = rider
    headers, _ = other_rider
    reward = create_reward(client, admin_headers, "Critic", "reviewsWritten", points=15)
    route = create_route(client, owner_headers)

    r = client.post("/api/reviews/", headers=headers, json={
        "route_id": route["id"], "rating": 4, "title": "Good", "comment": "Smooth tarmac",
    })
    assert r.status_code == 201

    user = client.get("/api/auth/me", headers=headers).json()["data"]["user"]
    assert [a["id"] for a in user["achievements"]] == [reward["id"]]
    assert user["total_points"] == POINTS.REVIEW_WRITTEN + 15


def test_report_grants_reward(client, admin_headers, rider):
    headers, _ = rider
    reward = create_reward(client, admin_headers, "Watchful", "reportsSubmitted", points=5)

    r = client.post("/api/reports/", headers=headers, json={
        "title": "Broken glass", "description": "Glass on the cycle lane",
        "category": "obstruction", "severity": "medium", "lat": 6.93, "lng": 79.85,
    })
    assert r.status_code == 201, r.text

    user = client.get("/api/auth/me", headers=headers).json()["data"]["user"]
    assert [a["id"] for a in user["achievements"]] == [reward["id"]]
    assert user["total_points"] == POINTS.REPORT_SUBMITTED + 5


def test_deleted_route_does_not_count(client, admin_headers, rider):
    headers, user = rider
    route = create_route(client, headers)
    assert client.delete(f"/api/routes/{route['id']}", headers=headers).status_code == 200
    create_reward(client, admin_headers, "Trailblazer", "routesCreated")

    assert check(client, admin_headers, user["id"])["granted"] == []

    create_route(client, headers, title="Hill climb")
    granted = check(client, admin_headers, user["id"])["granted"]
    assert [r["name"] for r in granted] == ["Trailblazer"]


def test_total_distance_accumulates_over_rides(client, admin_headers, rider):
    headers, _ = rider
    reward = create_reward(client, admin_headers, "Ten km", "totalDistance", threshold=10)
    short = create_route(client, headers, distance=5, title="Short")
    longer = create_route(client, headers, distance=6, title="Longer")

    def ride(route_id):
        started = client.post("/api/rides/start", headers=headers, json={"route_id": route_id})
        r = client.patch(f"/api/rides/{started.json()['data']['ride']['id']}/complete", headers=headers)
        assert r.status_code == 200
        return client.get("/api/auth/me", headers=headers).json()["data"]["user"]

    user = ride(short["id"])
    assert user["total_distance"] == 5
    assert user["achievements"] == []

    user = ride(longer["id"])
    assert user["total_distance"] == 11
    assert [a["id"] for a in user["achievements"]] == [reward["id"]]
