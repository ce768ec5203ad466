"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from coursecart.application.cart_store import CartPulse, PersistentCartStore
from coursecart.application.catalog_cache import CatalogCache
from coursecart.application.educator_dashboard import EducatorDashboardCache
from coursecart.application.notifier import Notifier
from coursecart.application.pending_purchases import PendingPurchaseReconciler
from coursecart.application.purchase_orchestrator import PurchaseOrchestrator
from coursecart.application.session import CommerceSession
from coursecart.domain.model.role import RoleResolver
from coursecart.domain.model.user import Identity
from coursecart.infrastructure.config import Settings, get_settings
from coursecart.infrastructure.http.marketplace_client import HttpMarketplaceGateway
from coursecart.infrastructure.notifiers import LoggingNotifier
from coursecart.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)


@dataclass
class Client:
    """Every component of one client session, wired together."""

    settings: Settings
    gateway: HttpMarketplaceGateway
    cart: PersistentCartStore
    catalog: CatalogCache
    session: CommerceSession
    purchases: PurchaseOrchestrator

    @property
    def dashboard(self) -> EducatorDashboardCache:
        return self.session.dashboard

    @property
    def pending(self) -> PendingPurchaseReconciler:
        return self.session.pending

    def configured_identity(self) -> Identity | None:
        """Identity taken from settings, if a token is configured."""
        if not self.settings.token:
            return None
        return Identity(
            user_id=self.settings.user_id or "",
            token=self.settings.token,
            role=self.settings.role,
        )

    async def aclose(self) -> None:
        await self.gateway.aclose()


def cart_repository(settings: Settings | None = None) -> JsonCartRepository:
    settings = settings or get_settings()
    return JsonCartRepository(settings.cart_file)


def build_client(
    settings: Settings | None = None,
    notifier: Notifier | None = None,
) -> Client:
    settings = settings or get_settings()
    notifier = notifier or LoggingNotifier()

    session: CommerceSession | None = None

    def current_token() -> str | None:
        return session.token if session is not None else None

    gateway = HttpMarketplaceGateway(
        settings.api_base_url,
        token_provider=current_token,
        timeout=settings.http_timeout,
    )

    role = RoleResolver()
    session = CommerceSession(
        gateway,
        notifier,
        role=role,
        dashboard=EducatorDashboardCache(gateway, notifier, role),
        pending=PendingPurchaseReconciler(gateway, notifier),
    )

    cart = PersistentCartStore(
        cart_repository(settings),
        notifier,
        pulse=CartPulse(settings.pulse_seconds),
    )
    return Client(
        settings=settings,
        gateway=gateway,
        cart=cart,
        catalog=CatalogCache(gateway, notifier, settings.max_duration_weeks),
        session=session,
        purchases=PurchaseOrchestrator(gateway, notifier, session, cart),
    )
