"""
Review Aggregator

Stores reviews and keeps each product's rating and review count equal to
the mean and count of the reviews that reference it.
"""

from uuid import UUID

from storefront.application.interfaces import IRepository, IUnitOfWorkFactory
from storefront.domain.entities import Product, Review
from storefront.domain.services import ProductRatingCalculator

from .base import ApplicationService, ErrorCode, ServiceResult, service_operation


class ReviewAggregator(ApplicationService):
    """Service for product reviews."""

    def __init__(
        self,
        reviews: IRepository[Review],
        products: IRepository[Product],
        unit_of_work_factory: IUnitOfWorkFactory,
        rating_calculator: ProductRatingCalculator | None = None,
    ) -> None:
        super().__init__("ReviewAggregator")
        self._reviews = reviews
        self._products = products
        self._unit_of_work_factory = unit_of_work_factory
        self._rating_calculator = rating_calculator or ProductRatingCalculator()

    @service_operation("submit_review")
    async def submit_review(self, review: Review) -> ServiceResult[Review]:
        """
        Store a review and refresh the product's derived rating.

        The review and the recomputed rating are written together while the
        product is locked, so concurrent reviews cannot overwrite each
        other's aggregate.

        Returns:
            Result with the stored review, or INVALID_RATING / PRODUCT_NOT_FOUND
        """
        if not review.has_valid_rating():
            return self._failure(
                ErrorCode.INVALID_RATING,
                "Rating must be between 1 and 5.",
                product_id=review.product_id,
            )
        if not review.is_draft:
            return self._failure(
                ErrorCode.MALFORMED_REQUEST, "A new review must not have an id."
            )

        async with self._products.locked(review.product_id):
            if not await self._products.exists(review.product_id):
                return self._failure(
                    ErrorCode.PRODUCT_NOT_FOUND,
                    "Product not found for review.",
                    product_id=review.product_id,
                )

            async with self._unit_of_work_factory.create_unit_of_work() as uow:
                created = await uow.reviews.add(review)
                ratings = [
                    existing.rating
                    for existing in await uow.reviews.find_by("product_id", review.product_id)
                ]
                summary = self._rating_calculator.summarize(ratings)
                await uow.products.update(
                    review.product_id, rating=summary.average, reviews_count=summary.count
                )

        self.logger.info(
            "Product rating refreshed",
            extra={
                "product_id": str(review.product_id),
                "rating": str(summary.average),
                "reviews_count": summary.count,
            },
        )
        return ServiceResult.success_response(created)

    @service_operation("get_product_reviews")
    async def get_product_reviews(self, product_id: UUID) -> ServiceResult[list[Review]]:
        return ServiceResult.success_response(await self._reviews.find_by("product_id", product_id))

    @service_operation("get_user_reviews")
    async def get_user_reviews(self, user_id: UUID) -> ServiceResult[list[Review]]:
        return ServiceResult.success_response(await self._reviews.find_by("user_id", user_id))
