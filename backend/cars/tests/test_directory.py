"""Tests for car lookups and the demo data seeder."""

import uuid

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import call_command

from cars.directory import get_car, is_owned_by
from cars.models import Car
from core.exceptions import NotFoundError

pytestmark = pytest.mark.django_db

User = get_user_model()


def test_get_car(car):
    assert get_car(car.pk) == car
    assert get_car(str(car.pk)) == car


def test_get_car_unknown_id():
    with pytest.raises(NotFoundError):
        get_car(uuid.uuid4())


def test_is_owned_by(car, owner_user, other_owner):
    assert is_owned_by(car.pk, owner_user.pk)
    assert not is_owned_by(car.pk, other_owner.pk)
    assert not is_owned_by(uuid.uuid4(), owner_user.pk)


def test_populate_cars_seeds_once():
    call_command("populate_cars", password="seed-pass")
    call_command("populate_cars", password="seed-pass")

    assert Car.objects.count() == 4
    assert User.objects.filter(role=User.Role.OWNER).count() == 2
    renter = User.objects.get(username="john.doe")
    assert renter.role == User.Role.USER
    assert renter.check_password("seed-pass")


@pytest.mark.parametrize(
    "overrides",
    [{"brand": "   "}, {"price_per_day": 100001}],
)
def test_car_validation_rejects_blank_brand_and_unreasonable_price(owner_user, overrides):
    fields = {"brand": "Kia", "model": "Rio", "year": 2019, "price_per_day": 35, **overrides}
    car = Car(owner=owner_user, **fields)

    with pytest.raises(ValidationError):
        car.full_clean()
