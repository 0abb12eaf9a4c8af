import pytest
from sqlalchemy.exc import SQLAlchemyError

from walktrack.domains.dogs.repository.dog_repository import DogRepository
from walktrack.models.walk import Walk, WalkStatus


def booking(seed, dog="luna_id", **overrides):
    body = {
        "dog_id": seed[dog],
        "walker_id": seed["walker_id"],
        "date": "2025-03-01",
        "start_time": "14:30",
        "duration": 45,
    }
    body.update(overrides)
    return body


def test_book_walk(client, seed):
    r = client.post("/api/walks", json=booking(seed))
    assert r.status_code == 201

    walk = r.json()["walk"]
    assert walk["status"] == "scheduled"
    assert walk["time_slot"] == "PM"
    assert walk["is_tracking_active"] is False

    fetched = client.get(f"/api/walks/{walk['walk_id']}").json()["walk"]
    assert fetched == walk


def test_booking_requires_approved_assessment(client, seed):
    r = client.post("/api/walks", json=booking(seed, dog="coco_id"))
    assert r.status_code == 409
    assert r.json()["code"] == "WALK_409_1"


def test_booking_becomes_possible_after_assessment_approved(client, seed):
    r = client.post(f"/api/dogs/{seed['coco_id']}/assessments", json={"walker_id": seed["walker_id"], "scheduled_date": "2025-02-20"})
    assert r.status_code == 201
    assessment = r.json()["assessment"]
    assert assessment["status"] == "scheduled"

    r = client.patch(f"/api/assessments/{assessment['assessment_id']}", json={"status": "completed", "result": "approved"})
    assert r.status_code == 200
    assert r.json()["assessment"]["result"] == "approved"

    assert client.get(f"/api/dogs/{seed['coco_id']}").json()["dog"]["bookable"] is True
    assert client.post("/api/walks", json=booking(seed, dog="coco_id")).status_code == 201


def test_booking_validation(client, seed):
    assert client.post("/api/walks", json=booking(seed, date="03/01/2025")).json()["code"] == "WALK_400_1"
    assert client.post("/api/walks", json=booking(seed, start_time="2:30pm")).json()["code"] == "WALK_400_2"
    assert client.post("/api/walks", json=booking(seed, time_slot="noon")).json()["code"] == "WALK_400_3"
    assert client.post("/api/walks", json=booking(seed, dog_id=999)).json()["code"] == "WALK_404_2"
    assert client.post("/api/walks", json=booking(seed, walker_id=999)).json()["code"] == "WALK_404_3"


def test_explicit_time_slot_is_kept(client, seed):
    walk = client.post("/api/walks", json=booking(seed, start_time="09:00", time_slot="am")).json()["walk"]
    assert walk["time_slot"] == "AM"


@pytest.mark.parametrize("start_time,time_slot", [("14:00", "AM"), ("11:59", "pm"), ("12:00", "AM")])
def test_time_slot_must_match_start_time(client, db_session, seed, start_time, time_slot):
    r = client.post("/api/walks", json=booking(seed, start_time=start_time, time_slot=time_slot))
    assert r.status_code == 400
    assert r.json()["code"] == "WALK_400_5"
    assert db_session.query(Walk).count() == 0


def test_booking_lookup_failure_returns_generic_error(client, db_session, seed, monkeypatch):
    def broken(self, dog_id):
        raise SQLAlchemyError("secret detail")

    monkeypatch.setattr(DogRepository, "get_by_id", broken)

    r = client.post("/api/walks", json=booking(seed))
    assert r.status_code == 500
    assert r.json()["code"] == "WALK_500_1"
    assert "secret detail" not in r.text
    assert db_session.query(Walk).count() == 0


def test_list_walks_with_filters(client, seed, make_walk):
    make_walk(dog_id=seed["luna_id"], date="2025-01-02", start_time="09:00")
    make_walk(dog_id=seed["bori_id"], date="2025-01-01", start_time="15:00")
    make_walk(dog_id=seed["bori_id"], date="2025-01-01", start_time="08:00", status=WalkStatus.COMPLETED)

    walks = client.get("/api/walks", params={"walkerId": seed["walker_id"]}).json()["walks"]
    assert [(w["date"], w["start_time"]) for w in walks] == [
        ("2025-01-01", "08:00"),
        ("2025-01-01", "15:00"),
        ("2025-01-02", "09:00"),
    ]

    scheduled = client.get("/api/walks", params={"status": "scheduled", "dogId": seed["bori_id"]}).json()["walks"]
    assert len(scheduled) == 1

    assert client.get("/api/walks", params={"status": "lost"}).json()["code"] == "WALK_400_4"
    assert client.get("/api/walks", params={"date": "tomorrow"}).json()["code"] == "WALK_400_1"


def test_complete_walk_stops_tracking(client, walk_id):
    client.post("/api/walks/tracking", json={
        "walkId": walk_id,
        "action": "start",
        "walkStartLocation": {"lat": 37.5, "lng": 127.0, "timestamp": "2025-01-01T09:00:00Z"},
    })

    r = client.patch(f"/api/walks/{walk_id}/status", json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["walk"]["status"] == "completed"
    assert r.json()["walk"]["is_tracking_active"] is False


def test_cancelled_walk_cannot_be_reopened(client, walk_id):
    client.patch(f"/api/walks/{walk_id}/status", json={"status": "cancelled"})

    r = client.patch(f"/api/walks/{walk_id}/status", json={"status": "scheduled"})
    assert r.status_code == 409
    assert r.json()["code"] == "WALK_409_2"


def test_delete_walk(client, walk_id):
    assert client.delete(f"/api/walks/{walk_id}").status_code == 200
    assert client.get(f"/api/walks/{walk_id}").status_code == 404
    assert client.delete(f"/api/walks/{walk_id}").json()["code"] == "WALK_404_1"


# ============================================
# 강아지 / 평가
# ============================================
def test_get_dog(client, seed):
    dog = client.get(f"/api/dogs/{seed['luna_id']}").json()["dog"]
    assert dog["name"] == "Luna"
    assert dog["bookable"] is True
    assert dog["assessments"][0]["result"] == "approved"


def test_get_unknown_dog(client, seed):
    r = client.get("/api/dogs/999")
    assert r.status_code == 404
    assert r.json()["code"] == "DOG_404_1"


def test_completed_assessment_requires_result(client, seed):
    created = client.post(f"/api/dogs/{seed['coco_id']}/assessments", json={}).json()["assessment"]
    assert created["status"] == "pending"

    r = client.patch(f"/api/assessments/{created['assessment_id']}", json={"status": "completed"})
    assert r.status_code == 400
    assert r.json()["code"] == "DOG_400_3"
