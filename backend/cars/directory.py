"""Car lookups used by the booking engine."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from core.exceptions import NotFoundError

from .models import Car


def get_car(car_id: UUID | str, *, for_update: bool = False) -> Car:
    """
    Return the car with the given id or raise NotFoundError.

    With for_update the row is locked until the surrounding transaction ends,
    which serializes booking writes for the same car.
    """
    qs = Car.objects.all()
    if for_update:
        qs = qs.select_for_update()
    car: Optional[Car] = qs.filter(pk=car_id).first()
    if car is None:
        raise NotFoundError("Car not found.")
    return car


def is_owned_by(car_id: UUID | str, user_id: int) -> bool:
    return Car.objects.filter(pk=car_id, owner_id=user_id).exists()
