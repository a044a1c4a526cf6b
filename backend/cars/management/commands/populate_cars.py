from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from cars.models import Car

User = get_user_model()
logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "Password123!"

USER_SEEDS = [
    {
        "username": "john.doe",
        "email": "john@example.com",
        "first_name": "John",
        "last_name": "Doe",
        "city": "New York",
        "role": User.Role.USER,
    },
    {
        "username": "sarah.johnson",
        "email": "sarah@example.com",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "city": "Los Angeles",
        "role": User.Role.OWNER,
    },
    {
        "username": "mike.chen",
        "email": "mike@example.com",
        "first_name": "Mike",
        "last_name": "Chen",
        "city": "San Francisco",
        "role": User.Role.OWNER,
    },
]

CAR_SEEDS = [
    {"owner": "sarah.johnson", "brand": "Toyota", "model": "Corolla", "year": 2021,
     "price_per_day": 45, "city": "Los Angeles"},
    {"owner": "sarah.johnson", "brand": "Tesla", "model": "Model 3", "year": 2023,
     "price_per_day": 120, "city": "Los Angeles"},
    {"owner": "mike.chen", "brand": "Honda", "model": "Civic", "year": 2020,
     "price_per_day": 40, "city": "San Francisco"},
    {"owner": "mike.chen", "brand": "BMW", "model": "X5", "year": 2022,
     "price_per_day": 150, "city": "San Francisco"},
]


class Command(BaseCommand):
    help = "Seed demo owners, a renter and a handful of cars."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default=DEFAULT_PASSWORD,
            help="Password assigned to every seeded account.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        if not password:
            raise CommandError("A non-empty --password is required.")

        if User.objects.filter(username=USER_SEEDS[0]["username"]).exists():
            self.stdout.write("Demo data already present; skipping.")
            return

        users = {}
        for seed in USER_SEEDS:
            user = User.objects.create_user(password=password, **seed)
            users[user.username] = user
            logger.info("populate_cars: created user %s (%s)", user.username, user.role)

        created = 0
        for seed in CAR_SEEDS:
            data = dict(seed)
            owner = users[data.pop("owner")]
            car = Car(owner=owner, **data)
            car.full_clean()
            car.save()
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Created {len(users)} users and {created} cars."))
