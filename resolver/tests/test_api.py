import pytest

from app import app as flask_app

LOOP_TRIP = {
    "trip_id": "2-loop",
    "stop_times": [
        {"stop_id": "170545", "stop_sequence": 1},
        {"stop_id": "170524", "stop_sequence": 2},
        {"stop_id": "170474", "stop_sequence": 3},
        {"stop_id": "170464", "stop_sequence": 4},
        {"stop_id": "170545", "stop_sequence": 5},
    ],
}


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client


def test_index(client):
    response = client.get("/splitting")
    assert response.status_code == 200
    assert response.get_json()["endpoints"]["resolve"] == "/splitting/resolve"
    assert response.get_json()["agency"] == {"id": "27", "color": "34B233"}


def test_health(client):
    response = client.get("/splitting/health")
    body = response.get_json()
    assert response.status_code == 200
    assert body["status"] == "healthy"
    assert body["routes"] == [1, 2, 3, 4, 5, 7, 14, 20]


def test_route_details(client):
    body = client.get("/splitting/routes/2").get_json()
    assert [d["headsign"] for d in body["directions"]] == ["Highlands", "Downtown"]
    assert body["route_type"] == 3
    assert client.get("/splitting/routes/50").status_code == 404


def test_resolve_splits_and_merges(client):
    response = client.post("/splitting/resolve", json={"route_id": 2, "trips": [LOOP_TRIP], "merge": True})
    body = response.get_json()

    assert response.status_code == 200
    assert [s["sub_trip_id"] for s in body["sub_trips"]] == ["2-loop:1", "2-loop:2"]
    assert [s["stop_id"] for s in body["sub_trips"][1]["stops"]] == ["170474", "170464", "170545"]
    assert body["failures"] == []
    assert [m["headsign"] for m in body["merged"]] == ["Highlands", "Downtown"]
    assert all(m["split"] for m in body["merged"])


def test_resolve_merges_unsplit_trips_separately(client):
    short = {"trip_id": "short", "headsign": "Highlands Exch", "direction_id": 1,
             "stop_times": ["170545", "999"]}
    response = client.post("/splitting/resolve", json={"route_id": 2, "trips": [LOOP_TRIP, short], "merge": True})
    body = response.get_json()

    assert response.status_code == 200
    assert [(m["direction_id"], m["headsign"], m["split"]) for m in body["merged"]] == [
        (1, "Highlands Exch", False), (1, "Highlands", True), (2, "Downtown", True)]
    assert body["merged"][0]["stop_ids"] == ["170545", "999"]


def test_resolve_reports_failures(client):
    twice = {"trip_id": "twice", "stop_times": ["170545", "170524", "170474", "170464",
                                               "170545", "170524", "170474"]}
    trips = [LOOP_TRIP, {"trip_id": "lonely", "stop_times": ["170545"]}, twice]
    body = client.post("/splitting/resolve", json={"route_id": 2, "trips": trips}).get_json()

    assert [s["sub_trip_id"] for s in body["sub_trips"]] == ["2-loop:1", "2-loop:2", "lonely"]
    assert body["sub_trips"][2]["split"] is False
    assert body["failures"][0]["trip_id"] == "twice"
    assert body["failures"][0]["kind"] == "multi_segment"
    assert "merged" not in body


@pytest.mark.parametrize("payload", [
    {},
    {"route_id": 2},
    {"route_id": 2, "trips": [{"trip_id": "t"}]},
    {"route_id": 2, "trips": [{"stop_times": ["170545"]}]},
    {"route_id": "two", "trips": [LOOP_TRIP]},
])
def test_resolve_bad_requests(client, payload):
    assert client.post("/splitting/resolve", json=payload).status_code == 400


def test_compare(client):
    payload = {
        "route_id": 2,
        "trip": {"trip_id": "t", "stop_times": ["170545", "170524", "170474"]},
        "a": {"stop_id": "170474", "stop_sequence": 3},
        "b": {"stop_id": "170545", "stop_sequence": 1},
    }
    body = client.post("/splitting/compare", json=payload).get_json()
    assert body == {"sub_trip_id": "t:1", "result": 1}


def test_compare_across_sub_trips_is_rejected(client):
    payload = {
        "route_id": 2,
        "trip": LOOP_TRIP,
        "a": {"stop_id": "170524", "stop_sequence": 2},
        "b": {"stop_id": "170464", "stop_sequence": 4},
    }
    assert client.post("/splitting/compare", json=payload).status_code == 400


def test_compare_unresolvable_trip(client):
    payload = {
        "route_id": 2,
        "trip": {"trip_id": "t", "stop_times": ["170545"]},
        "a": {"stop_id": "170545", "stop_sequence": 1},
        "b": {"stop_id": "170545", "stop_sequence": 1},
    }
    response = client.post("/splitting/compare", json=payload)
    assert response.status_code == 422
    assert response.get_json()["failure"]["kind"] == "below_threshold"


def test_compare_with_bare_stop_ids(client):
    payload = {
        "route_id": 2,
        "trip": {"trip_id": "t", "stop_times": ["170545", "170524", "170474"]},
        "a": "170474",
        "b": "170545",
    }
    response = client.post("/splitting/compare", json=payload)
    assert response.status_code == 200
    assert response.get_json() == {"sub_trip_id": "t:1", "result": 1}

    payload["a"] = {"stop_id": "170524"}
    assert client.post("/splitting/compare", json=payload).get_json()["result"] == 1


def test_compare_stop_not_in_trip(client):
    payload = {
        "route_id": 2,
        "trip": {"trip_id": "t", "stop_times": ["170545", "170524", "170474"]},
        "a": "170464",
        "b": "170545",
    }
    response = client.post("/splitting/compare", json=payload)
    assert response.status_code == 400
    assert "170464" in response.get_json()["error"]
