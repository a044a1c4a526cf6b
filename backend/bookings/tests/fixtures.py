"""Shared user, car and booking fixtures for the test suite."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest
from django.contrib.auth import get_user_model

from bookings.domain import compute_total_price
from bookings.models import Booking
from cars.models import Car
from core.context import AuthContext

User = get_user_model()


def _create_user(*, username: str, role: str) -> User:
    return User.objects.create_user(
        username=username,
        password="testpass",
        email=f"{username}@example.com",
        first_name=username.capitalize(),
        last_name="Tester",
        role=role,
    )


@pytest.fixture
def owner_user():
    return _create_user(username="owner", role=User.Role.OWNER)


@pytest.fixture
def other_owner():
    return _create_user(username="otherowner", role=User.Role.OWNER)


@pytest.fixture
def renter_user():
    return _create_user(username="renter", role=User.Role.USER)


@pytest.fixture
def other_renter():
    return _create_user(username="other", role=User.Role.USER)


@pytest.fixture
def platform_admin():
    return _create_user(username="admin", role=User.Role.ADMIN)


@pytest.fixture
def support_agent():
    return _create_user(username="support", role=User.Role.SUPPORT)


@pytest.fixture
def car(owner_user):
    return Car.objects.create(
        owner=owner_user,
        brand="Toyota",
        model="Corolla",
        year=2021,
        price_per_day=50,
        city="Austin",
        is_active=True,
    )


@pytest.fixture
def inactive_car(owner_user):
    return Car.objects.create(
        owner=owner_user,
        brand="Ford",
        model="Focus",
        year=2015,
        price_per_day=30,
        city="Austin",
        is_active=False,
    )


@pytest.fixture
def ctx_for() -> Callable[..., AuthContext]:
    def _ctx(user) -> AuthContext:
        return AuthContext.from_user(user)

    return _ctx


@pytest.fixture
def booking_factory(car, renter_user) -> Callable[..., Booking]:
    def _create_booking(
        *,
        car_override: Car | None = None,
        renter=None,
        start_date: date,
        end_date: date,
        status=Booking.Status.PENDING,
        **extra_fields,
    ) -> Booking:
        selected_car = car_override or car
        return Booking.objects.create(
            car=selected_car,
            renter=renter or renter_user,
            start_date=start_date,
            end_date=end_date,
            total_price=compute_total_price(start_date, end_date, selected_car.price_per_day),
            status=status,
            **extra_fields,
        )

    return _create_booking
