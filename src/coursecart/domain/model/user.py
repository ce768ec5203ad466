"""The signed-in user as seen by this client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """What the identity provider tells us about the current user.

    ``role`` is the provider's ``publicMetadata.role`` claim, read opaquely.
    """

    user_id: str
    token: str
    role: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Server-side profile record."""

    id: str
    username: str
    is_educator: bool = False
    enrolled_course_ids: tuple[str, ...] = ()
