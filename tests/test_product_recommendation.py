import pytest

from conftest import DRY_ID, OILY_ID, InMemoryCatalog, make_product
from skinscan.ai.IssueDetector import ACNE, DARK_SPOTS, WRINKLES
from skinscan.ai.ProductRecommendation import (
    ACNE_REASON, ANTI_AGING_REASON, BASE_REASON, MAX_RECOMMENDATIONS, ProductRecommendationService,
)
from skinscan.models.Response import SkinIssue

pytestmark = pytest.mark.anyio


def issue(name, severity=5):
    return SkinIssue(name=name, description="", severity=severity)


async def test_empty_catalog_returns_empty_list(skin_types):
    service = ProductRecommendationService(InMemoryCatalog(skin_types, []))

    assert await service.recommend(OILY_ID, [issue(ACNE)]) == []


async def test_keeps_catalog_order_and_maps_fields(catalog):
    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [])

    assert [r.product_id for r in recommendations] == ["acne-gel", "water-gel", "retinol"]
    first = recommendations[0]
    assert first.name == "Product acne-gel"
    assert first.description == "Description acne-gel"
    assert first.price == 10.0
    assert first.image_url == "https://cdn.test/thumb.jpg"
    assert all(r.reason == BASE_REASON for r in recommendations)


async def test_missing_thumbnail_is_empty_string(catalog):
    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [])

    assert recommendations[1].image_url == ""


async def test_passes_limit_to_catalog(catalog):
    await ProductRecommendationService(catalog).recommend(DRY_ID, [])

    assert catalog.product_queries == [(DRY_ID, MAX_RECOMMENDATIONS)]


async def test_caps_results_even_if_catalog_over_returns(skin_types):
    products = [make_product(f"p{i}") for i in range(15)]
    catalog = InMemoryCatalog(skin_types, products, respect_limit=False)

    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [])

    assert len(recommendations) == 10
    assert [r.product_id for r in recommendations] == [f"p{i}" for i in range(10)]


async def test_acne_reason_only_for_acne_category(catalog):
    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [issue(ACNE)])
    reasons = {r.product_id: r.reason for r in recommendations}

    assert reasons["acne-gel"] == BASE_REASON + ACNE_REASON
    assert reasons["water-gel"] == BASE_REASON
    assert reasons["retinol"] == BASE_REASON


async def test_anti_aging_reason_for_wrinkles(catalog):
    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [issue(WRINKLES)])
    reasons = {r.product_id: r.reason for r in recommendations}

    assert reasons["retinol"] == BASE_REASON + ANTI_AGING_REASON
    assert reasons["acne-gel"] == BASE_REASON


async def test_at_most_one_augmentation_acne_first(skin_types):
    # Category qualifies for both phrases; only the acne one is appended.
    product = make_product("both", category="Acne & Anti-Aging")
    service = ProductRecommendationService(InMemoryCatalog(skin_types, [product]))

    [recommendation] = await service.recommend(OILY_ID, [issue(WRINKLES), issue(ACNE)])

    assert recommendation.reason == BASE_REASON + ACNE_REASON


async def test_falls_through_to_anti_aging_when_acne_category_missing(skin_types):
    product = make_product("serum", category="Wrinkle Repair")
    service = ProductRecommendationService(InMemoryCatalog(skin_types, [product]))

    [recommendation] = await service.recommend(OILY_ID, [issue(ACNE), issue(WRINKLES)])

    assert recommendation.reason == BASE_REASON + ANTI_AGING_REASON


async def test_unrelated_issues_keep_base_reason(catalog):
    recommendations = await ProductRecommendationService(catalog).recommend(OILY_ID, [issue(DARK_SPOTS)])

    assert all(r.reason == BASE_REASON for r in recommendations)
