import pytest
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from walktrack.domains.walk.repository.walk_repository import WalkRepository
from walktrack.models.walk import Walk

TRACKING = "/api/walks/tracking"


def point(lat=37.5665, lng=126.9780, ts="2025-01-01T09:00:00Z"):
    return {"lat": lat, "lng": lng, "timestamp": ts}


A = point(37.5665, 126.9780, "2025-01-01T09:00:00Z")
B = point(37.5670, 126.9785, "2025-01-01T09:00:05Z")
C = point(37.5675, 126.9790, "2025-01-01T09:00:10Z")
D = point(37.5680, 126.9795, "2025-01-01T09:00:15Z")


def post(client, walk_id, action, **fields):
    return client.post(TRACKING, json={"walkId": walk_id, "action": action, **fields})


def get(client, walk_id):
    return client.get(TRACKING, params={"walkId": walk_id})


def test_start_sets_start_location_and_activates_tracking(client, walk_id):
    r = post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A], isTrackingActive=True)
    assert r.status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["walkStartLocation"] == A
    assert walk["isTrackingActive"] is True
    assert walk["routeCoordinates"] == [A]


def test_update_appends_in_arrival_order(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    post(client, walk_id, "update", routeCoordinates=[B])
    post(client, walk_id, "update", routeCoordinates=[C, D])

    walk = get(client, walk_id).json()["walk"]
    assert walk["routeCoordinates"] == [A, B, C, D]


def test_update_response_echoes_merged_walk(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    r = post(client, walk_id, "update", routeCoordinates=[B])

    body = r.json()
    assert body["success"] is True
    assert body["walk"]["id"] == walk_id
    assert body["walk"]["routeCoordinates"] == [A, B]


def test_start_resets_route(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    post(client, walk_id, "update", routeCoordinates=[B, C])
    post(client, walk_id, "start", walkStartLocation=D, routeCoordinates=[D])

    assert get(client, walk_id).json()["walk"]["routeCoordinates"] == [D]


def test_start_without_seed_clears_route(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    post(client, walk_id, "start", walkStartLocation=B)

    assert get(client, walk_id).json()["walk"]["routeCoordinates"] == []


def test_end_records_location_and_stops_tracking(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    r = post(client, walk_id, "end", walkEndLocation=B, routeCoordinates=[B], isTrackingActive=False)
    assert r.status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["walkEndLocation"] == B
    assert walk["isTrackingActive"] is False
    assert walk["routeCoordinates"] == [A, B]


def test_pickup_records_pickup_location(client, walk_id):
    posted = {"lat": 51.5, "lng": -0.1, "timestamp": "T0"}
    r = post(client, walk_id, "pickup", pickupLocation=posted)
    assert r.status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["pickupLocation"] == posted
    assert walk["walkStartLocation"] is None


def test_dropoff_records_location_and_stops_tracking(client, walk_id):
    post(client, walk_id, "pickup", pickupLocation=A)
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    r = post(client, walk_id, "dropoff", dropoffLocation=D, isTrackingActive=False)
    assert r.status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["dropoffLocation"] == D
    assert walk["isTrackingActive"] is False


def test_full_lifecycle(client, walk_id):
    assert post(client, walk_id, "pickup", pickupLocation=A).status_code == 200
    assert post(client, walk_id, "start", walkStartLocation=B, routeCoordinates=[B]).status_code == 200
    assert post(client, walk_id, "update", routeCoordinates=[C]).status_code == 200
    assert post(client, walk_id, "end", walkEndLocation=D, routeCoordinates=[D]).status_code == 200
    assert post(client, walk_id, "dropoff", dropoffLocation=A).status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["pickupLocation"] == A
    assert walk["walkStartLocation"] == B
    assert walk["walkEndLocation"] == D
    assert walk["dropoffLocation"] == A
    assert walk["routeCoordinates"] == [B, C, D]
    assert walk["isTrackingActive"] is False


def test_actions_after_dropoff_conflict(client, walk_id):
    post(client, walk_id, "dropoff", dropoffLocation=A)

    r = post(client, walk_id, "update", routeCoordinates=[B])
    assert r.status_code == 409
    assert r.json()["code"] == "WALK_TRACK_409_1"

    # dropoff 재기록은 허용
    assert post(client, walk_id, "dropoff", dropoffLocation=B).status_code == 200
    assert get(client, walk_id).json()["walk"]["dropoffLocation"] == B


def test_is_tracking_active_follows_action_not_body(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, isTrackingActive=False)
    assert get(client, walk_id).json()["walk"]["isTrackingActive"] is True


# ============================================
# 에러
# ============================================
def test_unknown_walk_returns_404_and_creates_nothing(client, db_session, seed):
    r = post(client, "does-not-exist", "start", walkStartLocation=A)
    assert r.status_code == 404
    assert r.json()["code"] == "WALK_TRACK_404_1"
    assert db_session.query(Walk).count() == 0


def test_missing_walk_id_is_bad_request(client, walk_id):
    r = client.post(TRACKING, json={"action": "start", "walkStartLocation": A})
    assert r.status_code == 400
    assert r.json()["code"] == "WALK_TRACK_400_1"


@pytest.mark.parametrize("action", [None, "teleport", ""])
def test_invalid_action_leaves_walk_unchanged(client, walk_id, action):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    before = get(client, walk_id).json()["walk"]

    payload = {"walkId": walk_id, "routeCoordinates": [B]}
    if action is not None:
        payload["action"] = action
    r = client.post(TRACKING, json=payload)

    assert r.status_code == 400
    assert r.json()["code"] == "WALK_TRACK_400_2"
    assert get(client, walk_id).json()["walk"] == before


@pytest.mark.parametrize("action", ["start", "update", "end", "pickup", "dropoff"])
def test_unknown_walk_is_not_found_for_every_action(client, seed, action):
    r = post(client, "nope", action)
    assert r.status_code == 404
    assert r.json()["code"] == "WALK_TRACK_404_1"


def test_update_without_coordinates_is_bad_request(client, walk_id):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])

    r = post(client, walk_id, "update")
    assert r.status_code == 400
    assert r.json()["code"] == "WALK_TRACK_400_3"
    assert get(client, walk_id).json()["walk"]["routeCoordinates"] == [A]


def test_start_with_only_seed_route(client, walk_id):
    r = post(client, walk_id, "start", routeCoordinates=[A])
    assert r.status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["walkStartLocation"] is None
    assert walk["isTrackingActive"] is True
    assert walk["routeCoordinates"] == [A]


def test_actions_without_location_keep_stored_values(client, walk_id):
    post(client, walk_id, "pickup", pickupLocation=A)
    post(client, walk_id, "start", walkStartLocation=B, routeCoordinates=[B])

    assert post(client, walk_id, "pickup").status_code == 200
    assert post(client, walk_id, "end", routeCoordinates=[C]).status_code == 200
    assert post(client, walk_id, "dropoff").status_code == 200

    walk = get(client, walk_id).json()["walk"]
    assert walk["pickupLocation"] == A
    assert walk["walkStartLocation"] == B
    assert walk["walkEndLocation"] is None
    assert walk["dropoffLocation"] is None
    assert walk["routeCoordinates"] == [B, C]
    assert walk["isTrackingActive"] is False


@pytest.mark.parametrize("bad", [point(lat=91.0), point(lat=-90.5), point(lng=180.1), point(lng=-181.0)])
def test_out_of_range_coordinates_rejected(client, walk_id, bad):
    r = post(client, walk_id, "update", routeCoordinates=[A, bad])
    assert r.status_code == 400
    assert r.json()["code"] == "WALK_TRACK_400_4"
    assert get(client, walk_id).json()["walk"]["routeCoordinates"] == []


def test_malformed_location_is_bad_request(client, walk_id):
    r = post(client, walk_id, "pickup", pickupLocation={"lat": "north"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["code"] == "COMMON_400_1"


def test_error_envelope_shape(client, walk_id):
    body = post(client, "missing", "pickup", pickupLocation=A).json()
    assert body["success"] is False
    assert body["status"] == 404
    assert body["error"] == body["reason"]
    assert body["path"] == TRACKING
    assert "timeStamp" in body


# ============================================
# GET
# ============================================
def test_get_includes_dog_display_info(client, walk_id):
    walk = get(client, walk_id).json()["walk"]
    assert walk["dog"] == {"name": "Luna", "imageUrl": "https://img.example.com/luna.png"}


def test_get_without_walk_id(client):
    r = client.get(TRACKING)
    assert r.status_code == 400
    assert r.json()["code"] == "WALK_TRACK_400_1"


def test_get_unknown_walk(client, seed):
    r = get(client, "nope")
    assert r.status_code == 404
    assert r.json()["code"] == "WALK_TRACK_404_1"


# ============================================
# 동시 update (version 충돌)
# ============================================
def test_stale_update_is_retried(client, walk_id, monkeypatch):
    original = WalkRepository.update_fields
    calls = {"n": 0}

    def flaky(self, walk, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StaleDataError("walk row changed")
        return original(self, walk, **kwargs)

    monkeypatch.setattr(WalkRepository, "update_fields", flaky)

    r = post(client, walk_id, "update", routeCoordinates=[A])
    assert r.status_code == 200
    assert calls["n"] == 2
    assert get(client, walk_id).json()["walk"]["routeCoordinates"] == [A]


def test_update_conflict_after_retries(client, walk_id, monkeypatch):
    def always_stale(self, walk, **kwargs):
        raise StaleDataError("walk row changed")

    monkeypatch.setattr(WalkRepository, "update_fields", always_stale)

    r = post(client, walk_id, "update", routeCoordinates=[A])
    assert r.status_code == 409
    assert r.json()["code"] == "WALK_TRACK_409_2"


def test_version_increments_on_each_update(client, db_session, walk_id):
    post(client, walk_id, "pickup", pickupLocation=A)
    post(client, walk_id, "start", walkStartLocation=A)

    walk = db_session.get(Walk, walk_id)
    db_session.refresh(walk)
    assert walk.version_id == 3


# ============================================
# 저장/조회 실패 (500)
# ============================================
def test_persistence_failure_rolls_back_and_hides_detail(client, walk_id, monkeypatch, caplog):
    post(client, walk_id, "start", walkStartLocation=A, routeCoordinates=[A])
    before = get(client, walk_id).json()["walk"]

    def broken(self, walk, **kwargs):
        for k, v in kwargs.items():
            setattr(walk, k, v)
        raise SQLAlchemyError("secret detail")

    monkeypatch.setattr(WalkRepository, "update_fields", broken)

    with caplog.at_level(logging.ERROR):
        r = post(client, walk_id, "update", routeCoordinates=[B])

    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "WALK_TRACK_500_1"
    assert body["reason"] == "산책 트래킹 정보를 저장하는 중 오류가 발생했습니다."
    assert "secret detail" not in r.text
    assert any(rec.exc_info for rec in caplog.records if rec.levelno == logging.ERROR)

    monkeypatch.undo()
    assert get(client, walk_id).json()["walk"] == before


def test_get_failure_returns_generic_error(client, walk_id, monkeypatch):
    def broken(self, walk_id):
        raise SQLAlchemyError("secret detail")

    monkeypatch.setattr(WalkRepository, "get_by_id", broken)

    r = get(client, walk_id)
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "WALK_TRACK_500_2"
    assert body["reason"] == "산책 트래킹 정보를 조회하는 중 오류가 발생했습니다."
    assert "secret detail" not in r.text

    monkeypatch.undo()
    walk = get(client, walk_id).json()["walk"]
    assert walk["routeCoordinates"] == []
    assert walk["isTrackingActive"] is False
