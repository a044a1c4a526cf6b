"""Integration tests for the bookings API endpoints."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from bookings.models import Booking
from notifications import tasks as notification_tasks

pytestmark = pytest.mark.django_db


def future(days: int):
    return timezone.localdate() + timedelta(days=days)


def booking_payload(car, start, end):
    return {
        "car_id": str(car.pk),
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }


def test_requires_authentication(api_client):
    resp = api_client.get("/api/bookings/")

    assert resp.status_code == 401


def test_create_booking_success(auth_client, renter_user, car):
    client = auth_client(renter_user)
    start = future(2)
    end = start + timedelta(days=2)

    resp = client.post("/api/bookings/", booking_payload(car, start, end), format="json")

    assert resp.status_code == 201, resp.data
    assert resp.data["status"] == "Pending"
    assert resp.data["total_price"] == 150
    assert resp.data["car_id"] == str(car.pk)
    assert resp.data["car_brand"] == "Toyota"
    assert resp.data["car_model"] == "Corolla"
    assert resp.data["renter_id"] == renter_user.pk
    assert resp.data["renter_name"] == "Renter Tester"


def test_create_booking_queues_owner_notification(
    auth_client, renter_user, car, monkeypatch, django_capture_on_commit_callbacks
):
    client = auth_client(renter_user)
    captured = []

    def _capture(owner_id, booking_id):
        captured.append((owner_id, booking_id))

    monkeypatch.setattr(notification_tasks.send_booking_request_email, "delay", _capture)

    with django_capture_on_commit_callbacks(execute=True):
        resp = client.post(
            "/api/bookings/",
            booking_payload(car, future(3), future(5)),
            format="json",
        )

    assert resp.status_code == 201, resp.data
    assert captured == [(car.owner_id, resp.data["id"])]


def test_owner_cannot_create_booking(auth_client, owner_user, car):
    client = auth_client(owner_user)

    resp = client.post(
        "/api/bookings/",
        booking_payload(car, future(2), future(3)),
        format="json",
    )

    assert resp.status_code == 403
    assert resp.data == {"detail": "Only users can make bookings.", "code": "forbidden"}


def test_create_booking_validation_errors(auth_client, renter_user, car):
    client = auth_client(renter_user)

    reversed_resp = client.post(
        "/api/bookings/",
        booking_payload(car, future(5), future(3)),
        format="json",
    )
    past_resp = client.post(
        "/api/bookings/",
        booking_payload(car, future(-3), future(1)),
        format="json",
    )

    assert reversed_resp.status_code == 400
    assert "end_date" in reversed_resp.data
    assert past_resp.status_code == 400
    assert "start_date" in past_resp.data


def test_create_booking_unknown_and_inactive_car(auth_client, renter_user, inactive_car):
    client = auth_client(renter_user)
    missing = client.post(
        "/api/bookings/",
        {
            "car_id": str(uuid.uuid4()),
            "start_date": future(2).isoformat(),
            "end_date": future(3).isoformat(),
        },
        format="json",
    )
    inactive = client.post(
        "/api/bookings/",
        booking_payload(inactive_car, future(2), future(3)),
        format="json",
    )

    assert missing.status_code == 404
    assert missing.data["code"] == "not_found"
    assert inactive.status_code == 409
    assert inactive.data["code"] == "unavailable"


def test_create_overlapping_booking_conflicts(auth_client, other_renter, car, booking_factory):
    booking_factory(start_date=future(10), end_date=future(15))
    client = auth_client(other_renter)

    resp = client.post(
        "/api/bookings/",
        booking_payload(car, future(15), future(20)),
        format="json",
    )

    assert resp.status_code == 409
    assert resp.data == {
        "detail": "This car is already booked in the selected period.",
        "code": "conflict",
    }


def test_list_bookings_is_scoped_to_participants(
    auth_client, renter_user, other_renter, owner_user, other_owner, platform_admin, booking_factory
):
    mine = booking_factory(start_date=future(2), end_date=future(3))
    booking_factory(renter=other_renter, start_date=future(5), end_date=future(6))

    renter_ids = {row["id"] for row in auth_client(renter_user).get("/api/bookings/").data}
    owner_rows = auth_client(owner_user).get("/api/bookings/").data
    stranger_rows = auth_client(other_owner).get("/api/bookings/").data
    admin_rows = auth_client(platform_admin).get("/api/bookings/").data

    assert renter_ids == {str(mine.pk)}
    assert len(owner_rows) == 2
    assert stranger_rows == []
    assert len(admin_rows) == 2


def test_list_bookings_filters_by_status(auth_client, owner_user, other_renter, booking_factory):
    booking_factory(start_date=future(2), end_date=future(3))
    accepted = booking_factory(
        renter=other_renter,
        start_date=future(5),
        end_date=future(6),
        status=Booking.Status.ACCEPTED,
    )

    resp = auth_client(owner_user).get("/api/bookings/", {"status": "Accepted"})

    assert resp.status_code == 200
    assert [row["id"] for row in resp.data] == [str(accepted.pk)]


def test_retrieve_booking_hidden_from_strangers(
    auth_client, renter_user, other_renter, booking_factory
):
    booking = booking_factory(start_date=future(2), end_date=future(3))

    ok = auth_client(renter_user).get(f"/api/bookings/{booking.pk}/")
    hidden = auth_client(other_renter).get(f"/api/bookings/{booking.pk}/")

    assert ok.status_code == 200
    assert ok.data["id"] == str(booking.pk)
    assert hidden.status_code == 404


def test_update_booking_changes_dates(auth_client, renter_user, car, booking_factory):
    booking = booking_factory(start_date=future(2), end_date=future(3))

    resp = auth_client(renter_user).put(
        f"/api/bookings/{booking.pk}/",
        booking_payload(car, future(4), future(8)),
        format="json",
    )

    assert resp.status_code == 200, resp.data
    assert resp.data["start_date"] == future(4).isoformat()
    assert resp.data["total_price"] == 250


def test_cancel_booking_flow(auth_client, renter_user, booking_factory):
    booking = booking_factory(start_date=future(2), end_date=future(3))
    client = auth_client(renter_user)

    first = client.delete(f"/api/bookings/{booking.pk}/")
    second = client.delete(f"/api/bookings/{booking.pk}/")

    assert first.status_code == 200
    assert first.data["status"] == "Cancelled"
    assert second.status_code == 404
    assert client.get(f"/api/bookings/{booking.pk}/").status_code == 404


def test_owner_accepts_booking_and_renter_is_notified(
    auth_client,
    owner_user,
    renter_user,
    booking_factory,
    monkeypatch,
    django_capture_on_commit_callbacks,
):
    booking = booking_factory(start_date=future(2), end_date=future(3))
    captured = []

    def _capture(renter_id, booking_id, new_status):
        captured.append((renter_id, booking_id, new_status))

    monkeypatch.setattr(notification_tasks.send_booking_status_email, "delay", _capture)

    with django_capture_on_commit_callbacks(execute=True):
        resp = auth_client(owner_user).put(
            f"/api/bookings/{booking.pk}/accept-or-reject/",
            {"status": "Accepted"},
            format="json",
        )

    assert resp.status_code == 200, resp.data
    assert resp.data["status"] == "Accepted"
    assert captured == [(renter_user.pk, str(booking.pk), "Accepted")]


def test_accept_or_reject_rules(auth_client, owner_user, renter_user, booking_factory):
    booking = booking_factory(start_date=future(2), end_date=future(3))

    by_renter = auth_client(renter_user).put(
        f"/api/bookings/{booking.pk}/accept-or-reject/",
        {"status": "Accepted"},
        format="json",
    )
    bad_status = auth_client(owner_user).put(
        f"/api/bookings/{booking.pk}/accept-or-reject/",
        {"status": "Completed"},
        format="json",
    )
    rejected = auth_client(owner_user).put(
        f"/api/bookings/{booking.pk}/accept-or-reject/",
        {"status": "Rejected"},
        format="json",
    )
    again = auth_client(owner_user).put(
        f"/api/bookings/{booking.pk}/accept-or-reject/",
        {"status": "Accepted"},
        format="json",
    )

    assert by_renter.status_code == 403
    assert bad_status.status_code == 400
    assert rejected.status_code == 200
    assert again.status_code == 409
    assert again.data["code"] == "invalid_state"


def test_history_endpoints_enforce_roles(
    auth_client, renter_user, owner_user, booking_factory
):
    booking = booking_factory(start_date=future(2), end_date=future(3))

    mine = auth_client(renter_user).get("/api/bookings/history/mine/")
    owned = auth_client(owner_user).get("/api/bookings/history/owned/")
    renter_owned = auth_client(renter_user).get("/api/bookings/history/owned/")
    owner_mine = auth_client(owner_user).get("/api/bookings/history/mine/")

    assert mine.status_code == 200
    assert [row["id"] for row in mine.data] == [str(booking.pk)]
    assert owned.status_code == 200
    assert [row["id"] for row in owned.data] == [str(booking.pk)]
    assert renter_owned.status_code == 403
    assert owner_mine.status_code == 403


def test_check_availability(auth_client, renter_user, car, booking_factory):
    booking_factory(start_date=future(10), end_date=future(15))
    client = auth_client(renter_user)

    busy = client.get(
        "/api/bookings/check-availability/",
        {
            "car": str(car.pk),
            "start_date": future(12).isoformat(),
            "end_date": future(14).isoformat(),
        },
    )
    free = client.get(
        "/api/bookings/check-availability/",
        {
            "car": str(car.pk),
            "start_date": future(16).isoformat(),
            "end_date": future(20).isoformat(),
        },
    )

    assert busy.status_code == 200
    assert busy.data["available"] is False
    assert free.data["available"] is True
    assert free.data["car"] == str(car.pk)
