import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from skinscan.models.Catalog import ProductRecord, SkinTypeRecord

logger = logging.getLogger(__name__)


class JsonCatalog:
    """
    Skin-type and product catalog read from a JSON file.

    Expected layout::

        {
          "skin_types": [{"id": "...", "name": "..."}],
          "products": [{"id": "...", "name": "...", "skin_type_ids": ["..."], ...}]
        }

    The file is read once, off the event loop, and cached; iteration order is the file order.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._cache: Optional[Dict[str, list]] = None

    def _read(self) -> Dict[str, list]:
        if not self.path.exists():
            logger.warning(f"[CATALOG] File not found: {self.path}")
            return {"skin_types": [], "products": []}

        with open(self.path, "r", encoding="utf-8") as f:
            content = json.load(f)

        records = {
            "skin_types": [SkinTypeRecord.model_validate(item) for item in content.get("skin_types", [])],
            "products": [ProductRecord.model_validate(item) for item in content.get("products", [])],
        }
        logger.info(
            f"[CATALOG] Loaded {len(records['skin_types'])} skin types "
            f"and {len(records['products'])} products from {self.path}"
        )
        return records

    async def _load(self) -> Dict[str, list]:
        if self._cache is None:
            self._cache = await run_in_threadpool(self._read)
        return self._cache

    async def skin_types(self) -> List[SkinTypeRecord]:
        return (await self._load())["skin_types"]

    async def products(self) -> List[ProductRecord]:
        return (await self._load())["products"]

    async def find_by_name_contains(self, substring: str) -> Optional[SkinTypeRecord]:
        needle = substring.lower()
        return next((st for st in await self.skin_types() if needle in st.name.lower()), None)

    async def any(self) -> Optional[SkinTypeRecord]:
        skin_types = await self.skin_types()
        return skin_types[0] if skin_types else None

    async def is_empty(self) -> bool:
        return not await self.skin_types()

    async def find_by_skin_type(self, skin_type_id: str, limit: int) -> List[ProductRecord]:
        matches = [p for p in await self.products() if skin_type_id in p.skin_type_ids]
        return matches[:limit]
