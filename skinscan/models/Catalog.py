from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field


class SkinTypeRecord(BaseModel):
    id: str
    name: str


class ProductCategory(BaseModel):
    id: Optional[str] = None
    category_name: str = ""


class ProductImage(BaseModel):
    image_url: str
    is_thumbnail: bool = False


class ProductRecord(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float = 0.0
    brand: Optional[str] = None
    category: ProductCategory = Field(default_factory=ProductCategory)
    images: List[ProductImage] = []
    skin_type_ids: List[str] = []


class ImageStore(Protocol):
    async def upload(self, data: bytes, filename: str, media_type: str = "image/jpeg") -> str:
        """Stores the bytes and returns a public URL."""
        ...


class VisionClient(Protocol):
    async def analyze_face(self, data: bytes, filename: str = "image.jpg",
                           media_type: str = "image/jpeg") -> Dict[str, Any]:
        """Returns the raw, loosely-typed attribute document of the vision API."""
        ...


class SkinTypeCatalog(Protocol):
    async def find_by_name_contains(self, substring: str) -> Optional[SkinTypeRecord]: ...

    async def any(self) -> Optional[SkinTypeRecord]: ...

    async def is_empty(self) -> bool: ...


class ProductCatalog(Protocol):
    async def find_by_skin_type(self, skin_type_id: str, limit: int) -> List[ProductRecord]: ...
