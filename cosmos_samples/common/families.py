"""Sample family documents, hard-coded and randomly generated.

The four hard-coded families back the sync and passwordless samples and the
``by-last-name`` query. ``FamilyGenerator`` produces random families with
Faker for the async sample.
"""

import random
import time
import uuid
from typing import List, Optional

from faker import Faker

from .models import Address, Child, Family, Parent, Pet

ADDRESS_POOL = [
    Address(city="San Ramon", county="King", state="CA"),
    Address(city="Mountain View", county="Greene", state="CA"),
    Address(city="Austin", county="Union", state="TX"),
    Address(city="Austin", county="Monroe", state="TX"),
    Address(city="Seattle", county="Jefferson", state="WA"),
]

GENDERS = ["male", "female"]

MAX_CHILDREN = 3
MAX_PETS = 3
MAX_GRADE = 11


def _default_suffix() -> str:
    return str(int(time.time() * 1000))


def get_andersen_family(suffix: Optional[str] = None) -> Family:
    suffix = suffix or _default_suffix()
    return Family(
        id=f"Andersen-{suffix}",
        last_name="Andersen",
        district="WA5",
        parents=[
            Parent(first_name="Thomas"),
            Parent(first_name="Mary Kay"),
        ],
        children=[
            Child(
                first_name="Henriette Thaulow",
                family_name="Andersen",
                gender="female",
                grade=5,
                pets=[Pet(given_name="Fluffy")],
            ),
        ],
        address=Address(city="Seattle", county="King", state="WA"),
        is_registered=True,
    )


def get_wakefield_family(suffix: Optional[str] = None) -> Family:
    suffix = suffix or _default_suffix()
    return Family(
        id=f"Wakefield-{suffix}",
        last_name="Wakefield",
        district="NY23",
        parents=[
            Parent(first_name="Robin", family_name="Wakefield"),
            Parent(first_name="Ben", family_name="Miller"),
        ],
        children=[
            Child(
                first_name="Jesse",
                family_name="Merriam",
                gender="female",
                grade=8,
                pets=[Pet(given_name="Goofy"), Pet(given_name="Shadow")],
            ),
            Child(
                first_name="Lisa",
                family_name="Miller",
                gender="female",
                grade=1,
            ),
        ],
        address=Address(city="NY", county="Manhattan", state="NY"),
        is_registered=True,
    )


def get_johnson_family(suffix: Optional[str] = None) -> Family:
    suffix = suffix or _default_suffix()
    return Family(
        id=f"Johnson-{suffix}",
        last_name="Johnson",
        parents=[
            Parent(first_name="John", family_name="Johnson"),
            Parent(first_name="Lili", family_name="Johnson"),
        ],
        children=[
            Child(
                first_name="Mike",
                family_name="Johnson",
                gender="male",
                grade=7,
                pets=[Pet(given_name="Rex")],
            ),
        ],
        address=Address(city="Austin", county="Travis", state="TX"),
        is_registered=False,
    )


def get_smith_family(suffix: Optional[str] = None) -> Family:
    suffix = suffix or _default_suffix()
    return Family(
        id=f"Smith-{suffix}",
        last_name="Smith",
        district="NY13",
        parents=[
            Parent(first_name="James", family_name="Smith"),
            Parent(first_name="Emma", family_name="Smith"),
        ],
        children=[
            Child(
                first_name="Michelle",
                family_name="Smith",
                gender="female",
                grade=1,
            ),
            Child(
                first_name="John",
                family_name="Smith",
                gender="male",
                grade=3,
                pets=[Pet(given_name="Tiger")],
            ),
        ],
        address=Address(city="Queens", county="Queens", state="NY"),
        is_registered=True,
    )


def sample_families(suffix: Optional[str] = None) -> List[Family]:
    """Return the Andersen, Wakefield, Johnson and Smith families in that order.

    All four share the same id suffix so a run's documents are easy to spot.
    """
    suffix = suffix or _default_suffix()
    return [
        get_andersen_family(suffix),
        get_wakefield_family(suffix),
        get_johnson_family(suffix),
        get_smith_family(suffix),
    ]


class FamilyGenerator:
    """Generates random family documents.

    A seeded generator is reproducible, ids included: both Faker and the
    uuid source are driven from the same seed.
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US"):
        self.fake = Faker(locale)
        self._random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def _uuid(self) -> uuid.UUID:
        return uuid.UUID(int=self._random.getrandbits(128), version=4)

    def generate_pet(self) -> Pet:
        return Pet(given_name=self.fake.user_name())

    def generate_child(self, last_name: str) -> Child:
        pets = [self.generate_pet() for _ in range(self._random.randint(0, MAX_PETS))]
        return Child(
            first_name=self.fake.first_name(),
            family_name=last_name,
            gender=self._random.choice(GENDERS),
            grade=self._random.randint(0, MAX_GRADE),
            pets=pets,
        )

    def generate_family(self) -> Family:
        last_name = self.fake.last_name()
        children = [
            self.generate_child(last_name)
            for _ in range(self._random.randint(0, MAX_CHILDREN))
        ]
        return Family(
            id=f"{last_name}{self._uuid()}",
            last_name=last_name,
            parents=[
                Parent(first_name=self.fake.first_name(), family_name=last_name),
                Parent(first_name=self.fake.first_name(), family_name=last_name),
            ],
            children=children,
            address=self._random.choice(ADDRESS_POOL).model_copy(),
        )

    def generate_families(self, count: int) -> List[Family]:
        if count < 0:
            raise ValueError("Family count cannot be negative")
        return [self.generate_family() for _ in range(count)]
