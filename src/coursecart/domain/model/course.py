"""Course snapshots held by the catalog cache and the cart.

A CourseSummary is an immutable copy of what the server reported at fetch
time. The catalog replaces its snapshots wholesale on refresh; nothing in
the client patches one in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from coursecart.domain.model.value_objects import Money


@dataclass(frozen=True)
class Chapter:
    title: str
    lecture_minutes: tuple[float, ...] = ()

    @property
    def total_minutes(self) -> float:
        return sum(self.lecture_minutes)


@dataclass(frozen=True)
class CourseSummary:
    """Snapshot of one course as listed in the catalog.

    ``offer_price`` takes precedence over ``discount`` when it is set
    (greater than zero); otherwise ``discount`` is a percentage off ``price``.
    """

    id: str
    title: str
    price: Money
    offer_price: Money = field(default_factory=Money.zero)
    discount: Decimal = Decimal("0")
    enrollment_count: int = 0
    is_published: bool = True
    created_at: datetime | None = None
    rating_samples: tuple[float, ...] = ()
    chapters: tuple[Chapter, ...] = ()
    category: str = ""
    educator_id: str | None = None
    thumbnail: str = ""

    @property
    def final_price(self) -> Money:
        if not self.offer_price.is_zero:
            return self.offer_price
        return self.price.discounted(self.discount)

    @property
    def has_discount(self) -> bool:
        if not self.offer_price.is_zero:
            return self.offer_price < self.price
        return self.discount > 0


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str = ""
    course_count: int = 0
    courses: tuple[CourseSummary, ...] = ()
