import asyncio
from typing import Any, Dict, List, Optional

import pytest

from skinscan.ai.AnalysisService import AnalysisDependencies, SkinAnalysisService
from skinscan.config import Settings
from skinscan.models.Catalog import ProductCategory, ProductImage, ProductRecord, SkinTypeRecord

OILY_ID = "st-oily"
DRY_ID = "st-dry"
COMBINATION_ID = "st-combination"


def vision_document(acne=0, wrinkle=0, dark_circle=0, spot=0) -> Dict[str, Any]:
    return {
        "request_id": "1700000000,abc",
        "faces": [
            {
                "face_token": "tok",
                "attributes": {
                    "skinstatus": {
                        "acne": acne,
                        "wrinkle": wrinkle,
                        "dark_circle": dark_circle,
                        "spot": spot,
                    }
                },
            }
        ],
    }


def make_product(pid: str, category: str = "Moisturizer", skin_type_ids=(OILY_ID,),
                 thumbnail: Optional[str] = "https://cdn.test/thumb.jpg") -> ProductRecord:
    images = [ProductImage(image_url="https://cdn.test/side.jpg", is_thumbnail=False)]
    if thumbnail:
        images.append(ProductImage(image_url=thumbnail, is_thumbnail=True))
    return ProductRecord(
        id=pid,
        name=f"Product {pid}",
        description=f"Description {pid}",
        price=10.0,
        category=ProductCategory(category_name=category),
        images=images,
        skin_type_ids=list(skin_type_ids),
    )


class FakeImageStore:
    def __init__(self, url: str = "https://images.test/face.jpg", error: Exception = None, delay: float = 0):
        self.url = url
        self.error = error
        self.delay = delay
        self.calls = []

    async def upload(self, data: bytes, filename: str, media_type: str = "image/jpeg") -> str:
        self.calls.append((data, filename, media_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.url


class FakeVisionClient:
    def __init__(self, document: Any = None, error: Exception = None, delay: float = 0):
        self.document = document if document is not None else vision_document()
        self.error = error
        self.delay = delay
        self.calls = []

    async def analyze_face(self, data: bytes, filename: str = "image.jpg", media_type: str = "image/jpeg"):
        self.calls.append((data, filename, media_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.document


class InMemoryCatalog:
    """Both catalog protocols over plain lists. ``respect_limit=False`` mimics a catalog that over-returns."""

    def __init__(self, skin_types: List[SkinTypeRecord], products: List[ProductRecord] = (),
                 respect_limit: bool = True, error: Exception = None):
        self.skin_types = list(skin_types)
        self.products = list(products)
        self.respect_limit = respect_limit
        self.error = error
        self.product_queries = []

    async def find_by_name_contains(self, substring: str) -> Optional[SkinTypeRecord]:
        return next((st for st in self.skin_types if substring.lower() in st.name.lower()), None)

    async def any(self) -> Optional[SkinTypeRecord]:
        return self.skin_types[0] if self.skin_types else None

    async def is_empty(self) -> bool:
        return not self.skin_types

    async def find_by_skin_type(self, skin_type_id: str, limit: int) -> List[ProductRecord]:
        self.product_queries.append((skin_type_id, limit))
        if self.error:
            raise self.error
        matches = [p for p in self.products if skin_type_id in p.skin_type_ids]
        return matches[:limit] if self.respect_limit else matches


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def skin_types() -> List[SkinTypeRecord]:
    return [
        SkinTypeRecord(id=OILY_ID, name="Oily"),
        SkinTypeRecord(id=DRY_ID, name="Dry"),
        SkinTypeRecord(id=COMBINATION_ID, name="Combination"),
    ]


@pytest.fixture
def catalog(skin_types) -> InMemoryCatalog:
    products = [
        make_product("acne-gel", category="Acne Care", skin_type_ids=(OILY_ID, COMBINATION_ID)),
        make_product("water-gel", category="Moisturizer", skin_type_ids=(OILY_ID,), thumbnail=None),
        make_product("retinol", category="Anti-Aging Serum", skin_type_ids=(DRY_ID, OILY_ID)),
    ]
    return InMemoryCatalog(skin_types, products)


@pytest.fixture
def image_store() -> FakeImageStore:
    return FakeImageStore()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient(vision_document(acne=75, wrinkle=20, dark_circle=10, spot=5))


@pytest.fixture
def settings() -> Settings:
    return Settings(upload_timeout_s=1.0, vision_timeout_s=1.0)


@pytest.fixture
def service(image_store, vision_client, catalog, settings) -> SkinAnalysisService:
    deps = AnalysisDependencies(
        image_store=image_store,
        vision_client=vision_client,
        skin_types=catalog,
        products=catalog,
    )
    return SkinAnalysisService(deps, settings)
