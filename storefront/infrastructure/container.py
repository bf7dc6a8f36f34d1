"""
Dependency Injection Container - wires the storefront together.

Creates the shared in-memory repositories, the unit of work factory, the
credential hasher and payment gateway, and the five store services.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar, cast

from storefront.application.config import StoreConfig, get_config
from storefront.application.interfaces import IPasswordHasher, IPaymentGateway, IProductDecoder
from storefront.application.services import (
    Catalog,
    OrderWorkflow,
    PaymentProcessor,
    ReviewAggregator,
    UserDirectory,
)
from storefront.domain.entities import Order, PaymentTransaction, Product, Review, User
from storefront.domain.services import OrderStateMachine, ProductRatingCalculator

from .auth import PasswordHasher
from .monitoring import setup_structured_logging
from .payments import SimulatedPaymentGateway
from .repositories import InMemoryRepository, InMemoryUnitOfWorkFactory
from .serialization import ProductJSONCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreContainer:
    """
    Dependency Injection Container for the storefront.

    Every component is a singleton within one container, so all services
    share the same repositories. Pass ``payment_gateway`` or
    ``password_hasher`` to replace the configured defaults.
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        payment_gateway: IPaymentGateway | None = None,
        password_hasher: IPasswordHasher | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the container with configuration."""
        self.config = config or get_config()
        self.config.validate()
        self._clock = clock
        self._singletons: dict[type[Any], Any] = {}
        self._factories: dict[type[Any], Callable[[], Any]] = {}

        self.users: InMemoryRepository[User] = InMemoryRepository(User, clock)
        self.products: InMemoryRepository[Product] = InMemoryRepository(Product, clock)
        self.orders: InMemoryRepository[Order] = InMemoryRepository(Order, clock)
        self.reviews: InMemoryRepository[Review] = InMemoryRepository(Review, clock)
        self.payments: InMemoryRepository[PaymentTransaction] = InMemoryRepository(
            PaymentTransaction, clock
        )
        self.unit_of_work_factory = InMemoryUnitOfWorkFactory(
            self.products, self.orders, self.reviews, self.payments
        )

        self._register_infrastructure()
        self._register_domain_services()
        self._register_application_services()

        if payment_gateway is not None:
            self.register(IPaymentGateway, payment_gateway)  # type: ignore[type-abstract]
        if password_hasher is not None:
            self.register(IPasswordHasher, password_hasher)  # type: ignore[type-abstract]

        logger.info(
            "Dependency injection container initialized",
            extra={"environment": self.config.environment.value},
        )

    def _register_infrastructure(self) -> None:
        """Register infrastructure components."""
        self._register_singleton(
            IPasswordHasher,  # type: ignore[type-abstract]
            lambda: PasswordHasher(rounds=self.config.security.password_hash_rounds),
        )
        self._register_singleton(
            IPaymentGateway,  # type: ignore[type-abstract]
            lambda: SimulatedPaymentGateway(success_rate=self.config.payment.success_rate),
        )
        self._register_singleton(IProductDecoder, ProductJSONCodec)  # type: ignore[type-abstract]

    def _register_domain_services(self) -> None:
        """Register domain services."""
        self._register_singleton(OrderStateMachine, OrderStateMachine)
        self._register_singleton(ProductRatingCalculator, ProductRatingCalculator)

    def _register_application_services(self) -> None:
        """Register the store services."""
        self._register_singleton(
            UserDirectory,
            lambda: UserDirectory(
                self.users,
                self.get(IPasswordHasher),  # type: ignore[type-abstract]
            ),
        )
        self._register_singleton(
            Catalog,
            lambda: Catalog(
                self.products,
                self.unit_of_work_factory,
                product_decoder=self.get(IProductDecoder),  # type: ignore[type-abstract]
            ),
        )
        self._register_singleton(
            OrderWorkflow,
            lambda: OrderWorkflow(
                self.orders,
                self.products,
                self.users,
                self.unit_of_work_factory,
                state_machine=self.get(OrderStateMachine),
                clock=self._clock,
            ),
        )
        self._register_singleton(
            PaymentProcessor,
            lambda: PaymentProcessor(
                self.payments,
                self.orders,
                self.get(IPaymentGateway),  # type: ignore[type-abstract]
                self.unit_of_work_factory,
                state_machine=self.get(OrderStateMachine),
            ),
        )
        self._register_singleton(
            ReviewAggregator,
            lambda: ReviewAggregator(
                self.reviews,
                self.products,
                self.unit_of_work_factory,
                rating_calculator=self.get(ProductRatingCalculator),
            ),
        )

    def _register_singleton(self, cls: type[T], factory: Callable[[], Any]) -> None:
        """Register a singleton component."""
        self._factories[cls] = factory

    def get(self, cls: type[T]) -> T:
        """
        Get an instance of a registered component.

        Args:
            cls: The class type to retrieve

        Returns:
            Instance of the requested class

        Raises:
            KeyError: If the class is not registered
        """
        if cls in self._singletons:
            return cast(T, self._singletons[cls])

        if cls not in self._factories:
            raise KeyError(f"No registration found for {cls.__name__}")

        instance = self._factories[cls]()
        self._singletons[cls] = instance
        return cast(T, instance)

    def has(self, cls: type[T]) -> bool:
        """Check if a component is registered."""
        return cls in self._factories

    def register(self, cls: type[T], instance: T) -> None:
        """
        Register a pre-created instance.

        Must happen before any service that depends on ``cls`` is resolved.
        """
        self._singletons[cls] = instance
        self._factories[cls] = lambda: instance

    def configure_logging(self) -> None:
        """Apply the logging section of the configuration."""
        setup_structured_logging(
            level=self.config.logging.level,
            format_type=self.config.logging.format_type,
            log_file=self.config.logging.file,
        )

    @property
    def user_directory(self) -> UserDirectory:
        return self.get(UserDirectory)

    @property
    def catalog(self) -> Catalog:
        return self.get(Catalog)

    @property
    def order_workflow(self) -> OrderWorkflow:
        return self.get(OrderWorkflow)

    @property
    def payment_processor(self) -> PaymentProcessor:
        return self.get(PaymentProcessor)

    @property
    def review_aggregator(self) -> ReviewAggregator:
        return self.get(ReviewAggregator)


# Global container instance
_container: StoreContainer | None = None


def get_container(config: StoreConfig | None = None) -> StoreContainer:
    """
    Get the global container instance.

    Args:
        config: Optional configuration for first initialization
    """
    global _container
    if _container is None:
        _container = StoreContainer(config)
    return _container


def reset_container() -> None:
    """Reset the global container instance."""
    global _container
    _container = None
