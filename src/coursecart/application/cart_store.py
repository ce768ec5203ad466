"""Application service: the persistent shopping cart.

Every mutation is written through to the durable store before the call
returns, so a crash right after "add to cart" never loses the item. There
is no dirty flag: if the write fails the in-memory change is rolled back
and the caller gets a failed result.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from coursecart.application.dto import ActionResult, ResultCode
from coursecart.application.notifier import Notifier
from coursecart.domain.exceptions import StorageError, ValidationError
from coursecart.domain.model.cart import Cart, CartItem
from coursecart.domain.model.course import CourseSummary
from coursecart.domain.model.value_objects import Money
from coursecart.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)

DEFAULT_PULSE_SECONDS = 0.6


class CartPulse:
    """One-shot "item added" signal for the cart badge.

    Purely cosmetic: it turns on when triggered and reads as off again once
    ``duration`` seconds have passed, with no timer to cancel.
    """

    def __init__(
        self,
        duration: float = DEFAULT_PULSE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._duration = duration
        self._clock = clock
        self._triggered_at: float | None = None

    def trigger(self) -> None:
        self._triggered_at = self._clock()

    @property
    def active(self) -> bool:
        if self._triggered_at is None:
            return False
        return self._clock() - self._triggered_at < self._duration


class PersistentCartStore:

    def __init__(
        self,
        repository: CartRepository,
        notifier: Notifier,
        pulse: CartPulse | None = None,
    ) -> None:
        self._repository = repository
        self._notifier = notifier
        self.pulse = pulse or CartPulse()
        self._cart = Cart(items=self._hydrate())

    # --- Queries --------------------------------------------------------------

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._cart.items)

    @property
    def course_ids(self) -> list[str]:
        return self._cart.course_ids

    def __len__(self) -> int:
        return len(self._cart)

    def contains(self, course_id: str) -> bool:
        return self._cart.contains(course_id)

    def total(self) -> Money:
        return self._cart.total

    # --- Commands -------------------------------------------------------------

    def add(
        self,
        course: CourseSummary,
        enrolled_course_ids: Iterable[str] = (),
    ) -> ActionResult:
        """Append *course* unless it is already in the cart or already owned."""
        if course.id in set(enrolled_course_ids):
            message = f"You are already enrolled in '{course.title}'"
            self._notifier.warning(message)
            return ActionResult.failed(message, ResultCode.ALREADY_ENROLLED)

        snapshot = list(self._cart.items)
        try:
            self._cart.add(course)
        except ValidationError as exc:
            self._notifier.warning(str(exc))
            return ActionResult.failed(str(exc), ResultCode.ALREADY_IN_CART)

        result = self._write_through(snapshot)
        if result.success:
            self.pulse.trigger()
            self._notifier.success(f"'{course.title}' added to cart")
        return result

    def remove(self, course_id: str) -> ActionResult:
        snapshot = list(self._cart.items)
        removed = self._cart.remove(course_id)
        if removed is None:
            self._notifier.info("That course is not in your cart")
            return ActionResult.ok()

        result = self._write_through(snapshot)
        if result.success:
            self._notifier.success(f"'{removed.course.title}' removed from cart")
        return result

    def clear(self, announce: bool = True) -> ActionResult:
        snapshot = list(self._cart.items)
        self._cart.clear()
        result = self._write_through(snapshot)
        if result.success and announce:
            self._notifier.success("Cart cleared")
        return result

    # --- Internal helpers -----------------------------------------------------

    def _write_through(self, snapshot: list[CartItem]) -> ActionResult:
        try:
            self._repository.save(list(self._cart.items))
        except StorageError as exc:
            logger.error("Cart write failed, rolling back: %s", exc)
            self._cart.items[:] = snapshot
            message = "Could not save your cart. Please try again."
            self._notifier.error(message)
            return ActionResult.failed(message, ResultCode.STORAGE_FAILURE)
        return ActionResult.ok()

    def _hydrate(self) -> list[CartItem]:
        try:
            loaded = self._repository.load()
        except StorageError as exc:
            logger.warning("Cart could not be loaded, starting empty: %s", exc)
            return []

        # Keep the first occurrence of each course id.
        seen: set[str] = set()
        items: list[CartItem] = []
        for item in loaded:
            if item.course_id in seen:
                continue
            seen.add(item.course_id)
            items.append(item)
        return items
