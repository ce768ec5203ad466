"""Cart aggregate — the ordered set of courses a user intends to buy.

The cart keeps full CourseSummary snapshots rather than bare ids so it stays
usable without the catalog (e.g. offline, or before the first refresh).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from coursecart.domain.exceptions import ValidationError
from coursecart.domain.model.course import CourseSummary
from coursecart.domain.model.value_objects import Money


@dataclass(frozen=True)
class CartItem:
    course: CourseSummary

    @property
    def course_id(self) -> str:
        return self.course.id


@dataclass
class Cart:
    """Aggregate root for the shopping cart.

    Invariants:
    - a course id appears at most once
    - items keep insertion order (display only)
    """

    items: list[CartItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def course_ids(self) -> list[str]:
        return [item.course_id for item in self.items]

    def contains(self, course_id: str) -> bool:
        return any(item.course_id == course_id for item in self.items)

    def add(self, course: CourseSummary) -> CartItem:
        """Append a course to the end of the cart.

        Raises ValidationError if the course is already present.
        """
        if self.contains(course.id):
            raise ValidationError(f"'{course.title}' is already in your cart")
        item = CartItem(course=course)
        self.items.append(item)
        return item

    def remove(self, course_id: str) -> CartItem | None:
        """Remove the entry for *course_id*; returns None if it was absent."""
        for i, item in enumerate(self.items):
            if item.course_id == course_id:
                return self.items.pop(i)
        return None

    def clear(self) -> None:
        self.items.clear()

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.course.final_price
        return result.rounded()
