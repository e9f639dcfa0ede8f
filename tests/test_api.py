from decimal import Decimal

from conftest import at


def _create(client, movie, hall, start, price="12.50"):
    return client.post(
        "/api/v1/admin/screenings/",
        json={
            "movie_id": str(movie.id),
            "hall_id": str(hall.id),
            "start_time": start.isoformat(),
            "base_price": price,
        },
    )


def test_root(client):
    assert client.get("/").json() == {"Hello": "Cinemax"}


def test_create_screening(client, movie, hall):
    response = _create(client, movie, hall, at(18))
    assert response.status_code == 201
    body = response.json()
    assert body["movie"] == {"id": str(movie.id), "title": "Inception", "duration_minutes": 120}
    assert body["hall"] == {"id": str(hall.id), "name": "Hall 1", "type": "imax"}
    assert body["end_time"].startswith("2030-01-15T20:20:00")
    assert Decimal(str(body["base_price"])) == Decimal("12.50")


def test_conflict_is_409_with_details(client, movie, hall):
    assert _create(client, movie, hall, at(18)).status_code == 201

    response = _create(client, movie, hall, at(19))
    assert response.status_code == 409
    body = response.json()
    assert body["reason_code"] == "schedule_conflict"
    assert body["conflicting_screening"]["title"] == "Inception"
    assert body["conflicting_screening"]["end_time"].startswith("2030-01-15T20:20:00")

    assert _create(client, movie, hall, at(20, 20)).status_code == 201


def test_validation_errors_are_422_by_field(client, upcoming_movie, hall):
    response = client.post(
        "/api/v1/admin/screenings/",
        json={"movie_id": str(upcoming_movie.id), "start_time": at(18).isoformat(), "base_price": "0"},
    )
    assert response.status_code == 422
    body = response.json()
    assert body["reason_code"] == "validation_failed"
    assert set(body["errors"]) == {"movie_id", "hall_id", "base_price"}


def test_update_and_delete(client, movie, hall):
    created = _create(client, movie, hall, at(18)).json()

    response = client.patch(
        f"/api/v1/admin/screenings/{created['id']}",
        json={"start_time": at(21).isoformat(), "base_price": "14"},
    )
    assert response.status_code == 200
    assert response.json()["end_time"].startswith("2030-01-15T23:20:00")

    response = client.delete(f"/api/v1/admin/screenings/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"id": created["id"], "deleted": True}

    assert client.get(f"/api/v1/screenings/{created['id']}").status_code == 404


def test_delete_with_booking_is_blocked(client, movie, hall, add_booking):
    created = _create(client, movie, hall, at(18)).json()
    add_booking(created["id"])

    response = client.delete(f"/api/v1/admin/screenings/{created['id']}")
    assert response.status_code == 409
    assert response.json()["reason_code"] == "active_bookings"
    assert response.json()["active_bookings"] == 1
    assert client.get(f"/api/v1/screenings/{created['id']}").status_code == 200


def test_update_unknown_is_404(client):
    response = client.patch(
        "/api/v1/admin/screenings/6f1c1c0e-3b7a-4d5e-9a51-0a4c8c7e2b11",
        json={"start_time": at(18).isoformat(), "base_price": "10"},
    )
    assert response.status_code == 404
    assert response.json()["reason_code"] == "not_found"


def test_listing_endpoints(client, movie, short_movie, hall, other_hall):
    _create(client, movie, hall, at(18))
    _create(client, short_movie, other_hall, at(15))

    public = client.get("/api/v1/screenings/").json()
    assert [s["movie"]["title"] for s in public] == ["Paprika", "Inception"]

    admin = client.get("/api/v1/admin/screenings/", params={"hall_id": str(hall.id), "upcoming_only": "false"})
    assert [s["hall"]["name"] for s in admin.json()] == ["Hall 1"]


def test_hall_schedule_endpoint(client, movie, hall):
    _create(client, movie, hall, at(18))
    response = client.get(f"/api/v1/admin/halls/{hall.id}/schedule", params={"date": "2030-01-15"})
    assert response.status_code == 200
    body = response.json()
    assert body["hall"]["name"] == "Hall 1"
    assert len(body["screenings"]) == 1
    assert [slot["duration_minutes"] for slot in body["available_slots"]] == [540, 160]


def test_unparseable_create_uses_error_contract(client):
    response = client.post(
        "/api/v1/admin/screenings/",
        json={"movie_id": "not-a-uuid", "hall_id": None, "start_time": at(18).isoformat(), "base_price": "abc"},
    )
    assert response.status_code == 422
    body = response.json()
    assert body["reason_code"] == "validation_failed"
    assert body["message"]
    assert {"movie_id", "base_price"} <= set(body["errors"])


def test_patch_missing_field_uses_error_contract(client, movie, hall):
    created = _create(client, movie, hall, at(18)).json()
    response = client.patch(f"/api/v1/admin/screenings/{created['id']}", json={"base_price": "14"})
    assert response.status_code == 422
    body = response.json()
    assert body["reason_code"] == "validation_failed"
    assert set(body["errors"]) == {"start_time"}


def test_sub_cent_price_is_rejected_over_http(client, movie, hall):
    response = _create(client, movie, hall, at(18), price="0.001")
    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"base_price"}
    assert client.get("/api/v1/admin/screenings/").json() == []
