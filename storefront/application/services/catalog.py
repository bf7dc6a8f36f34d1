"""
Catalog

Product CRUD, category filtering and bulk import of externally supplied
product data.
"""

from dataclasses import replace
from typing import Any
from uuid import UUID

from storefront.application.interfaces import (
    IProductDecoder,
    IRepository,
    IUnitOfWorkFactory,
)
from storefront.domain.entities import SYSTEM_FIELDS, Product, ProductCategory, UserRole
from storefront.domain.value_objects import parse_decimal

from .base import ApplicationService, ErrorCode, ServiceResult, service_operation

# Derived fields are maintained by the review aggregator.
PROTECTED_PRODUCT_FIELDS = SYSTEM_FIELDS | {"rating", "reviews_count"}


class Catalog(ApplicationService):
    """
    Service for the product catalog.

    Updates and deletes are serialized per product id with the same lock the
    order workflow uses for stock reservation.
    """

    def __init__(
        self,
        products: IRepository[Product],
        unit_of_work_factory: IUnitOfWorkFactory,
        product_decoder: IProductDecoder | None = None,
    ) -> None:
        super().__init__("Catalog")
        self._products = products
        self._unit_of_work_factory = unit_of_work_factory
        self._product_decoder = product_decoder

    def _validate_fields(self, values: dict[str, Any]) -> ServiceResult[Any] | None:
        """Check price, stock and category among the given values."""
        if "price" in values:
            price = parse_decimal(values["price"])
            if price is None or price <= 0:
                return self._failure(
                    ErrorCode.INVALID_PRICE,
                    "Price must be greater than zero.",
                    price=values["price"],
                )
        if "stock" in values:
            stock = values["stock"]
            if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
                return self._failure(
                    ErrorCode.INVALID_STOCK, "Stock cannot be negative.", stock=stock
                )
        if "category" in values and not isinstance(values["category"], ProductCategory):
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                f"Unknown product category: {values['category']}.",
            )
        return None

    def _prepare_draft(self, product: Product) -> tuple[Product | None, ServiceResult[Any] | None]:
        if not product.is_draft:
            return None, self._failure(
                ErrorCode.MALFORMED_REQUEST,
                "A new product must not have an id.",
                product_id=product.id,
            )

        error = self._validate_fields(
            {"price": product.price, "stock": product.stock, "category": product.category}
        )
        if error:
            return None, error

        # A new product has no reviews yet.
        return replace(product, rating=None, reviews_count=None), None

    @service_operation("add_product")
    async def add_product(self, product: Product) -> ServiceResult[Product]:
        """
        Add a product to the catalog.

        Args:
            product: Draft product

        Returns:
            Result with the stored product, or INVALID_PRICE / INVALID_STOCK
        """
        draft, error = self._prepare_draft(product)
        if error:
            return error

        created = await self._products.add(draft)
        return ServiceResult.success_response(created)

    @service_operation("get_product")
    async def get_product(self, product_id: UUID) -> ServiceResult[Product]:
        product = await self._products.get(product_id)
        if product is None:
            return self._failure(
                ErrorCode.PRODUCT_NOT_FOUND, "Product not found.", product_id=product_id
            )
        return ServiceResult.success_response(product)

    @service_operation("list_products")
    async def list_products(
        self, category: ProductCategory | None = None
    ) -> ServiceResult[list[Product]]:
        """All products, or only those in the given category."""
        if category is None:
            products = await self._products.get_all()
        else:
            products = await self._products.find_by("category", category)
        return ServiceResult.success_response(products)

    @service_operation("update_product")
    async def update_product(self, product_id: UUID, **changes: Any) -> ServiceResult[Product]:
        """
        Update fields of an existing product.

        Price and stock are validated the same way as on creation. The derived
        rating fields and repository-managed fields cannot be set here.
        """
        rejected = sorted(
            PROTECTED_PRODUCT_FIELDS.intersection(changes).union(
                self._unknown_fields(Product, changes)
            )
        )
        if rejected:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST,
                f"Fields cannot be updated: {', '.join(rejected)}.",
                product_id=product_id,
            )

        error = self._validate_fields(changes)
        if error:
            return error
        if "price" in changes:
            changes["price"] = parse_decimal(changes["price"])

        async with self._products.locked(product_id):
            updated = await self._products.update(product_id, **changes)

        if updated is None:
            return self._failure(
                ErrorCode.PRODUCT_NOT_FOUND, "Product not found.", product_id=product_id
            )
        return ServiceResult.success_response(updated)

    @service_operation("delete_product")
    async def delete_product(
        self, product_id: UUID, requesting_role: UserRole | None = None
    ) -> ServiceResult[bool]:
        """
        Remove a product.

        Intended for Admin and Seller roles; enforcing that is left to the
        caller, the role is only recorded in the log.
        """
        async with self._products.locked(product_id):
            if not await self._products.delete(product_id):
                return self._failure(
                    ErrorCode.PRODUCT_NOT_FOUND, "Product not found.", product_id=product_id
                )

        self.logger.info(
            "Product deleted",
            extra={
                "product_id": str(product_id),
                "requesting_role": requesting_role.value if requesting_role else None,
            },
        )
        return ServiceResult.success_response(True, message="Product deleted successfully.")

    @service_operation("import_products")
    async def import_products(self, payload: str | bytes) -> ServiceResult[list[Product]]:
        """
        Add every product described by an external payload, or none of them.

        The whole payload is decoded and validated before anything is stored.

        Raises:
            MalformedDataError: If the payload cannot be decoded
            RuntimeError: If no product decoder was configured
        """
        if self._product_decoder is None:
            raise RuntimeError("Catalog has no product decoder configured")

        drafts: list[Product] = []
        for product in self._product_decoder.decode(payload):
            draft, error = self._prepare_draft(product)
            if error:
                return error
            drafts.append(draft)

        async with self._unit_of_work_factory.create_unit_of_work() as uow:
            created = [await uow.products.add(draft) for draft in drafts]

        return ServiceResult.success_response(
            created, message=f"Imported {len(created)} products."
        )
