from conftest import marker_pose


ROBOTS = [{
    "robot_name": "tinyRobot1", "fleet_name": "tinyRobot", "battery_percent": 80.0,
    "location_x": 4.0, "location_y": -2.0, "location_yaw": 1.0,
    "level_name": "L1", "mode": "Idle", "assignments": [],
}]

TRAJECTORIES = {
    "response": "trajectory",
    "values": [
        {"robot_name": "tinyRobot1", "fleet_name": "tinyRobot", "shape": "circle",
         "dimensions": 0.3, "id": 3,
         "segments": [{"t": 0, "v": [0, 0, 0], "x": [0, 0, 0]},
                      {"t": 2000, "v": [0, 0, 0], "x": [2, 0, 0]}]},
    ],
    "conflicts": [],
}


def _localize(client):
    client.post("/api/v1/robots", json=ROBOTS)
    body = {"t": 0.0, "observations": [
        {"name": "tinyRobot1", "matrix": marker_pose(0.2, (0.3, 0.0, -2.0)).tolist()},
    ]}
    return client.post("/api/v1/markers", json=body)


def test_status_starts_unlocalized(client):
    r = client.get("/api/v1/status")
    assert r.status_code == 200
    assert r.json()["localized"] is False
    assert client.get("/api/v1/alignment").status_code == 404
    assert client.get("/api/v1/trajectory/request").status_code == 404


def test_localization_round_trip(client):
    r = _localize(client)
    assert r.status_code == 200
    assert r.json()["event"] == "world_origin_set"

    alignment = client.get("/api/v1/alignment").json()
    assert len(alignment["matrix"]) == 4
    assert alignment["level_name"] == "L1"

    robots = client.get("/api/v1/robots").json()["robots"]
    assert robots[0]["is_tracked"] is True
    assert client.get("/api/v1/trajectory/request").json()["param"]["map_name"] == "L1"
    assert client.get("/api/v1/trajectory/time_request").json() == {"request": "time", "param": []}


def test_overlay_requires_localization(client):
    client.post("/api/v1/trajectory/response", json=TRAJECTORIES)
    r = client.post("/api/v1/trajectory/time", json={"response": "time", "values": [1_000_000_000]})
    assert r.status_code == 409
    assert r.json() == {"error": "not localized"}
    assert client.get("/api/v1/trajectory/overlay").status_code == 409
    # the batch is still paired and stored
    assert client.get("/api/v1/status").json()["query_time_ms"] == 1000

    _localize(client)
    r = client.get("/api/v1/trajectory/overlay", params={"highlight": "tinyRobot1"})
    assert r.status_code == 200
    item = r.json()["items"][0]
    assert item["trajectory_id"] == 3
    assert item["highlighted"] is True
    assert item["pose"]["x"] == 1.0


def test_time_response_returns_overlay_once_localized(client):
    _localize(client)
    client.post("/api/v1/trajectory/response", json=TRAJECTORIES)
    r = client.post("/api/v1/trajectory/time", json={"response": "time", "values": [500_000_000]})
    assert r.status_code == 200
    assert r.json()["t"] == 500
    assert r.json()["items"][0]["trajectory_id"] == 3


def test_time_before_trajectories_conflicts(client):
    r = client.post("/api/v1/trajectory/time", json={"response": "time", "values": [1]})
    assert r.status_code == 409


def test_bad_payloads(client):
    bad_tag = dict(TRAJECTORIES, response="time")
    assert client.post("/api/v1/trajectory/response", json=bad_tag).status_code == 400
    assert client.post("/api/v1/markers", json={"observations": [{"name": "x"}]}).status_code == 400
    assert client.post("/api/v1/trajectory/time", json={"response": "time", "values": []}).status_code == 422


def test_reset(client):
    _localize(client)
    assert client.post("/api/v1/reset").json() == {"ok": True}
    assert client.get("/api/v1/status").json()["localized"] is False
