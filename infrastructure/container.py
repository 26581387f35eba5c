"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies.
Domain services are built lazily and receive the shared store handle at
construction.

Usage:
    from infrastructure.container import container

    store = container.store()
    payment = container.payment()
    offers = container.offer_service()
"""

import logging
from typing import Optional

from .payments import PaymentFactory, PaymentProviderInterface
from .store import Store

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._store: Optional[Store] = None
            self._payment: Optional[PaymentProviderInterface] = None

            # Domain Services
            self._catalog_service = None
            self._offer_service = None
            self._favorite_service = None
            self._review_service = None
            self._auth_service = None
            self._payment_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def store(self) -> Store:
        """Get the persistence handle (cached)."""
        if self._store is None:
            self._store = Store(alias="default")
            logger.debug(f"Created store: {self._store!r}")
        return self._store

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Get payment provider instance.

        Args:
            backend: Payment backend type ('stripe' or 'mock')
                    If None, uses configuration from settings

        Returns:
            PaymentProviderInterface implementation (cached)
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")

        return self._payment

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.services import CatalogService

            self._catalog_service = CatalogService(store=self.store())
            logger.debug("Created CatalogService")
        return self._catalog_service

    def offer_service(self):
        """Get OfferService instance."""
        if self._offer_service is None:
            from marketplace.services import OfferService

            self._offer_service = OfferService(store=self.store())
            logger.debug("Created OfferService")
        return self._offer_service

    def favorite_service(self):
        """Get FavoriteService instance."""
        if self._favorite_service is None:
            from marketplace.services import FavoriteService

            self._favorite_service = FavoriteService(store=self.store())
            logger.debug("Created FavoriteService")
        return self._favorite_service

    def review_service(self):
        """Get ReviewService instance."""
        if self._review_service is None:
            from marketplace.services import ReviewService

            self._review_service = ReviewService(store=self.store())
            logger.debug("Created ReviewService")
        return self._review_service

    def auth_service(self):
        """Get AuthService instance."""
        if self._auth_service is None:
            from authentication.domain.services.auth_service import AuthService

            # Account deletion clears favorites through the favorite primitive
            self._auth_service = AuthService(
                store=self.store(),
                catalog_service=self.catalog_service(),
                favorite_service=self.favorite_service(),
            )
            logger.debug("Created AuthService")
        return self._auth_service

    def payment_service(self):
        """Get PaymentService instance."""
        if self._payment_service is None:
            from payment_system.domain.services import PaymentService

            self._payment_service = PaymentService(store=self.store(), provider=self.payment())
            logger.debug("Created PaymentService")
        return self._payment_service

    def reset(self):
        """
        Reset all cached services.

        Useful for testing or when configuration changes.
        """
        self._store = None
        self._payment = None
        self._catalog_service = None
        self._offer_service = None
        self._favorite_service = None
        self._review_service = None
        self._auth_service = None
        self._payment_service = None
        logger.info("Service container reset")


# Global container instance
container = ServiceContainer()
