import logging
from typing import Tuple

from skinscan.ai.Errors import NoSkinTypesConfigured
from skinscan.config import SkinTypeLabels
from skinscan.models.Catalog import SkinTypeCatalog
from skinscan.models.Response import SkinCondition, SkinTypes

logger = logging.getLogger(__name__)

OILY_ACNE_THRESHOLD = 60
DRY_ACNE_THRESHOLD = 30


def skin_type_for(condition: SkinCondition) -> SkinTypes:
    """
    Ordered rules, first match wins:
    - acne > 60: oily
    - acne < 30: dry
    - otherwise: combination
    """
    if condition.acne > OILY_ACNE_THRESHOLD:
        return SkinTypes.OILY
    elif condition.acne < DRY_ACNE_THRESHOLD:
        return SkinTypes.DRY
    else:
        return SkinTypes.COMBINATION


class SkinClassifier:
    def __init__(self, catalog: SkinTypeCatalog, labels: SkinTypeLabels = SkinTypeLabels()):
        self.catalog = catalog
        self.labels = labels

    async def classify(self, condition: SkinCondition) -> Tuple[str, str]:
        """
        Resolves the rule outcome against the skin-type catalog and writes the
        resolved name back to ``condition.skin_type``.

        Returns:
            (skin_type_id, skin_type_name)

        Raises:
            NoSkinTypesConfigured: the catalog has no skin types at all
        """
        if await self.catalog.is_empty():
            raise NoSkinTypesConfigured()

        label = self.labels.for_type(skin_type_for(condition))
        record = await self.catalog.find_by_name_contains(label)

        if record is None:
            logger.warning(f"[CLASSIFIER] No skin type matching '{label}', falling back to first catalog entry")
            record = await self.catalog.any()
            if record is None:
                raise NoSkinTypesConfigured()

        condition.skin_type = record.name
        return record.id, record.name
