from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SkinTypes(Enum):
    OILY = "oily"
    DRY = "dry"
    COMBINATION = "combination"
    SENSITIVE = "sensitive"


class SkinCondition(BaseModel):
    acne: int = 0
    wrinkle: int = 0
    dark_circle: int = 0
    spot: int = 0
    health_score: int = Field(default=50, ge=0, le=100)
    # Set by the classifier
    skin_type: Optional[str] = None


class SkinIssue(BaseModel):
    name: str
    description: str
    severity: int


class ProductRecommendation(BaseModel):
    product_id: str
    name: str
    description: str = ""
    image_url: str = ""
    price: float
    reason: str


class SkinAnalysisResult(BaseModel):
    image_url: str
    condition: SkinCondition
    issues: List[SkinIssue]
    recommendations: List[ProductRecommendation]
    advice: List[str]
