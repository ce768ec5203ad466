"""JSON-file-backed implementation of CartRepository.

The file is a small key/value document; the cart lives under one
namespaced key and is rewritten in full on every save. Other keys in the
file are preserved.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from coursecart.domain.exceptions import DomainException, StorageError
from coursecart.domain.model.cart import CartItem
from coursecart.domain.model.course import Chapter, CourseSummary
from coursecart.domain.model.value_objects import Money
from coursecart.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)

CART_KEY = "coursecart.cart"


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path, key: str = CART_KEY) -> None:
        self._file_path = file_path
        self._key = key

    # --- CartRepository interface ---------------------------------------------

    def load(self) -> list[CartItem]:
        if not self._file_path.exists():
            return []
        try:
            records = self._load_document().get(self._key, [])
            return [CartItem(course=self._to_domain(raw)) for raw in records]
        except (
            OSError,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
            InvalidOperation,
            DomainException,
        ) as exc:
            logger.warning("Ignoring unreadable cart in %s: %s", self._file_path, exc)
            return []

    def save(self, items: list[CartItem]) -> None:
        try:
            document = self._load_document() if self._file_path.exists() else {}
        except (OSError, ValueError):
            document = {}
        if not isinstance(document, dict):
            document = {}
        document[self._key] = [self._to_raw(item.course) for item in items]
        self._persist_document(document)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(course: CourseSummary) -> dict:
        return {
            "id": course.id,
            "title": course.title,
            "price": str(course.price.amount),
            "offer_price": str(course.offer_price.amount),
            "discount": str(course.discount),
            "currency": course.price.currency,
            "enrollment_count": course.enrollment_count,
            "is_published": course.is_published,
            "created_at": course.created_at.isoformat() if course.created_at else None,
            "rating_samples": list(course.rating_samples),
            "chapters": [
                {"title": c.title, "lecture_minutes": list(c.lecture_minutes)}
                for c in course.chapters
            ],
            "category": course.category,
            "educator_id": course.educator_id,
            "thumbnail": course.thumbnail,
        }

    @staticmethod
    def _to_domain(raw: dict) -> CourseSummary:
        currency = raw.get("currency", "USD")
        created_at = raw.get("created_at")
        return CourseSummary(
            id=raw["id"],
            title=raw["title"],
            price=Money(Decimal(raw["price"]), currency),
            offer_price=Money(Decimal(raw.get("offer_price", "0")), currency),
            discount=Decimal(raw.get("discount", "0")),
            enrollment_count=raw.get("enrollment_count", 0),
            is_published=raw.get("is_published", True),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            rating_samples=tuple(raw.get("rating_samples", ())),
            chapters=tuple(
                Chapter(title=c["title"], lecture_minutes=tuple(c.get("lecture_minutes", ())))
                for c in raw.get("chapters", ())
            ),
            category=raw.get("category", ""),
            educator_id=raw.get("educator_id"),
            thumbnail=raw.get("thumbnail", ""),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_document(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_document(self, document: dict) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
            tmp_path.replace(self._file_path)
        except OSError as exc:
            raise StorageError(f"Could not write cart to {self._file_path}: {exc}") from exc
