from conftest import create_route, register_user

from cyclehub.constants import AUTO_RESOLVE_NOTE, POINTS


def submit_report(client, headers, route_id=None):
    r = client.post("/api/reports/", headers=headers, json={
        "title": "Pothole near bridge",
        "description": "Deep pothole on the left lane",
        "route_id": route_id,
        "category": "pothole",
        "severity": "high",
        "lat": 6.93,
        "lng": 79.85,
    })
    assert r.status_code == 201, r.text
    return r.json()["data"]["report"]


def confirm(client, headers, report_id, status="resolved"):
    return client.post(f"/api/reports/{report_id}/confirm", headers=headers, json={"status": status})


def points(client, headers):
    return client.get("/api/auth/me", headers=headers).json()["data"]["user"]["total_points"]


def test_submit_awards_points(client, rider):
    headers, user = rider
    report = submit_report(client, headers)
    assert report["status"] == "open"
    assert report["reported_by"] == user["id"]
    assert points(client, headers) == POINTS.REPORT_SUBMITTED


def test_cannot_report_own_route(client, rider):
    headers, _ = rider
    route = create_route(client, headers)
    r = client.post("/api/reports/", headers=headers, json={
        "title": "Hazard", "description": "On my own route", "route_id": route["id"],
        "category": "other", "severity": "low", "lat": 1, "lng": 1,
    })
    assert r.status_code == 400


def test_auto_resolve_after_three_confirmations(client, rider):
    owner_headers, _ = rider
    report = submit_report(client, owner_headers)
    confirmers = [register_user(client, f"c{i}@example.com")[0] for i in range(3)]

    # Повторное подтверждение обновляет существующее
    assert confirm(client, confirmers[0], report["id"], "still_exists").status_code == 200
    r = confirm(client, confirmers[0], report["id"], "resolved")
    data = r.json()["data"]["report"]
    assert len(data["confirmations"]) == 1
    assert data["confirmations"][0]["status"] == "resolved"
    assert points(client, confirmers[0]) == POINTS.REPORT_CONFIRMED

    confirm(client, confirmers[1], report["id"])
    r = confirm(client, confirmers[2], report["id"])
    data = r.json()["data"]["report"]
    assert data["status"] == "resolved"
    assert data["resolved_at"] is not None
    assert AUTO_RESOLVE_NOTE in data["admin_notes"]
    assert len(data["confirmations"]) == 3

    r = confirm(client, confirmers[0], report["id"])
    assert r.status_code == 400


def test_still_exists_does_not_resolve(client, rider):
    owner_headers, _ = rider
    report = submit_report(client, owner_headers)
    for i in range(3):
        headers, _ = register_user(client, f"s{i}@example.com")
        confirm(client, headers, report["id"], "still_exists")
    report = client.get(f"/api/reports/{report['id']}").json()["data"]["report"]
    assert report["status"] == "open"


def test_cannot_confirm_own_report(client, rider):
    headers, _ = rider
    report = submit_report(client, headers)
    r = confirm(client, headers, report["id"])
    assert r.status_code == 403


def test_status_transitions(client, rider, admin_headers):
    headers, _ = rider
    report = submit_report(client, headers)
    url = f"/api/reports/{report['id']}/status"

    assert client.patch(url, headers=headers, json={"status": "under_review"}).status_code == 403

    r = client.patch(url, headers=admin_headers, json={"status": "under_review", "admin_notes": "Checking"})
    assert r.status_code == 200
    assert r.json()["data"]["report"]["admin_notes"] == "Checking"

    assert client.patch(url, headers=admin_headers, json={"status": "open"}).status_code == 400

    r = client.patch(url, headers=admin_headers, json={"status": "resolved"})
    assert r.json()["data"]["report"]["resolved_at"] is not None

    assert client.patch(url, headers=admin_headers, json={"status": "dismissed"}).status_code == 400


def test_edit_only_while_open(client, rider, admin_headers):
    headers, _ = rider
    report = submit_report(client, headers)
    r = client.put(f"/api/reports/{report['id']}", headers=headers, json={"severity": "critical"})
    assert r.json()["data"]["report"]["severity"] == "critical"

    client.patch(f"/api/reports/{report['id']}/status", headers=admin_headers, json={"status": "dismissed"})
    r = client.put(f"/api/reports/{report['id']}", headers=headers, json={"severity": "low"})
    assert r.status_code == 400


def test_delete_report(client, rider, other_rider):
    headers, _ = rider
    other_headers, _ = other_rider
    report = submit_report(client, headers)
    assert client.delete(f"/api/reports/{report['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/reports/{report['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/reports/{report['id']}").status_code == 404
