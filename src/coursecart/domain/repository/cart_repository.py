"""Abstract durable store for the cart.

Defined in the domain layer so cart logic never depends on a particular
key/value backend. Implementations (JSON file, in-memory) live elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from coursecart.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    def load(self) -> list[CartItem]:
        """Return the persisted cart, or an empty list if nothing usable is stored."""

    @abstractmethod
    def save(self, items: list[CartItem]) -> None:
        """Replace the persisted cart with *items*.

        Raises StorageError if the write fails.
        """
