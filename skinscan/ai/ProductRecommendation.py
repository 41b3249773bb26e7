import logging
from typing import List

from skinscan.ai.IssueDetector import ACNE, WRINKLES
from skinscan.models.Catalog import ProductCatalog, ProductRecord
from skinscan.models.Response import ProductRecommendation, SkinIssue

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 10

BASE_REASON = "Matches your skin type"
ACNE_REASON = " and helps treat acne"
ANTI_AGING_REASON = " and helps reduce visible signs of aging"

ACNE_CATEGORY_MARKERS = ("acne",)
ANTI_AGING_CATEGORY_MARKERS = ("anti-aging", "anti aging", "antiaging", "wrinkle")


class ProductRecommendationService:
    def __init__(self, catalog: ProductCatalog, limit: int = MAX_RECOMMENDATIONS):
        self.catalog = catalog
        self.limit = limit

    @staticmethod
    def _category_has(product: ProductRecord, markers) -> bool:
        category = product.category.category_name.lower()
        return any(marker in category for marker in markers)

    def build_reason(self, product: ProductRecord, issues: List[SkinIssue]) -> str:
        """
        Human-readable rationale for recommending the product.

        At most one suffix is appended: acne takes priority over anti-aging.
        """
        issue_names = {issue.name for issue in issues}
        reason = BASE_REASON

        if ACNE in issue_names and self._category_has(product, ACNE_CATEGORY_MARKERS):
            reason += ACNE_REASON
        elif WRINKLES in issue_names and self._category_has(product, ANTI_AGING_CATEGORY_MARKERS):
            reason += ANTI_AGING_REASON

        return reason

    @staticmethod
    def thumbnail_url(product: ProductRecord) -> str:
        for image in product.images:
            if image.is_thumbnail:
                return image.image_url
        return ""

    async def recommend(self, skin_type_id: str, issues: List[SkinIssue]) -> List[ProductRecommendation]:
        """
        Products tagged with the skin type, in catalog order, capped at ``limit``.

        No relevance ranking is applied: the catalog's order is the order shown.
        """
        products = await self.catalog.find_by_skin_type(skin_type_id, self.limit)
        if not products:
            logger.info(f"[MATCHER] No products tagged with skin type {skin_type_id}")
            return []

        return [
            ProductRecommendation(
                product_id=product.id,
                name=product.name,
                description=product.description,
                image_url=self.thumbnail_url(product),
                price=product.price,
                reason=self.build_reason(product, issues),
            )
            for product in products[:self.limit]
        ]
