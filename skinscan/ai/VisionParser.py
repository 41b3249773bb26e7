"""
Normalizes the facial-attribute document returned by the vision API into a SkinCondition.

The upstream contract is not guaranteed, so every step of the lookup path has a
declared default and nothing here raises.
"""
import logging
import math
from typing import Any, Mapping, Optional, Sequence

from skinscan.models.Response import SkinCondition

logger = logging.getLogger(__name__)

NEUTRAL_HEALTH_SCORE = 50

# (field in SkinCondition, key in skinstatus)
SKIN_METRICS = (
    ("acne", "acne"),
    ("wrinkle", "wrinkle"),
    ("dark_circle", "dark_circle"),
    ("spot", "spot"),
)


def get_mapping(node: Any, key: str) -> Optional[Mapping]:
    if isinstance(node, Mapping):
        value = node.get(key)
        if isinstance(value, Mapping):
            return value
    return None


def get_first(node: Any, key: str) -> Any:
    if isinstance(node, Mapping):
        value = node.get(key)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) > 0:
            return value[0]
    return None


def get_int(node: Mapping, key: str, default: int = 0) -> int:
    value = node.get(key, default)
    # bool is an int subclass but never a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    # nearest integer, ties to even
    return int(round(value))


def health_score(acne: int, wrinkle: int, dark_circle: int, spot: int) -> int:
    """100 minus the integer average of the four sub-scores, clamped to [0, 100]."""
    total = acne + wrinkle + dark_circle + spot
    return max(0, min(100, 100 - total // 4))


def parse(raw_document: Any) -> SkinCondition:
    face = get_first(raw_document, "faces")
    skin_status = get_mapping(get_mapping(face, "attributes"), "skinstatus")

    if skin_status is None:
        logger.warning("[PARSER] skinstatus missing from vision response, using neutral condition")
        return SkinCondition(health_score=NEUTRAL_HEALTH_SCORE)

    scores = {field: get_int(skin_status, key) for field, key in SKIN_METRICS}
    return SkinCondition(**scores, health_score=health_score(**scores))
