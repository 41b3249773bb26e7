import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

from skinscan.models.Response import SkinTypes

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / ".env")


@dataclass(frozen=True)
class SkinTypeLabels:
    """
    Text used to look up each skin type in the catalog.

    Catalogs with localized names (e.g. "Da dầu") override these through
    SKIN_TYPE_LABEL_* variables.
    """
    oily: str = SkinTypes.OILY.value
    dry: str = SkinTypes.DRY.value
    combination: str = SkinTypes.COMBINATION.value
    sensitive: str = SkinTypes.SENSITIVE.value

    def for_type(self, skin_type: SkinTypes) -> str:
        return getattr(self, skin_type.name.lower())


@dataclass(frozen=True)
class Settings:
    facepp_api_key: str = ""
    facepp_api_secret: str = ""
    facepp_endpoint: str = "https://api-us.faceplusplus.com/facepp/v3/detect"
    vision_timeout_s: float = 30.0
    upload_timeout_s: float = 30.0
    image_store: str = "local"
    local_image_dir: Path = ROOT_DIR / "uploads"
    public_base_url: str = "http://localhost:8000"
    firebase_bucket: str = ""
    firebase_access_token: str = ""
    catalog_path: Path = ROOT_DIR / "data" / "catalog.json"
    max_image_bytes: int = 10 * 1024 * 1024
    allowed_extensions: Tuple[str, ...] = (".jpg", ".jpeg", ".png")
    recommendation_limit: int = 10
    skin_type_labels: SkinTypeLabels = field(default_factory=SkinTypeLabels)


def load_settings() -> Settings:
    defaults = Settings()
    labels = SkinTypeLabels(
        oily=os.environ.get("SKIN_TYPE_LABEL_OILY", defaults.skin_type_labels.oily),
        dry=os.environ.get("SKIN_TYPE_LABEL_DRY", defaults.skin_type_labels.dry),
        combination=os.environ.get("SKIN_TYPE_LABEL_COMBINATION", defaults.skin_type_labels.combination),
        sensitive=os.environ.get("SKIN_TYPE_LABEL_SENSITIVE", defaults.skin_type_labels.sensitive),
    )
    return Settings(
        facepp_api_key=os.environ.get("FACEPP_API_KEY", ""),
        facepp_api_secret=os.environ.get("FACEPP_API_SECRET", ""),
        facepp_endpoint=os.environ.get("FACEPP_ENDPOINT", defaults.facepp_endpoint),
        vision_timeout_s=float(os.environ.get("VISION_TIMEOUT_S", defaults.vision_timeout_s)),
        upload_timeout_s=float(os.environ.get("UPLOAD_TIMEOUT_S", defaults.upload_timeout_s)),
        image_store=os.environ.get("IMAGE_STORE", defaults.image_store).lower(),
        local_image_dir=Path(os.environ.get("LOCAL_IMAGE_DIR", defaults.local_image_dir)),
        public_base_url=os.environ.get("PUBLIC_BASE_URL", defaults.public_base_url).rstrip("/"),
        firebase_bucket=os.environ.get("FIREBASE_BUCKET", ""),
        firebase_access_token=os.environ.get("FIREBASE_ACCESS_TOKEN", ""),
        catalog_path=Path(os.environ.get("CATALOG_PATH", defaults.catalog_path)),
        max_image_bytes=int(os.environ.get("MAX_IMAGE_BYTES", defaults.max_image_bytes)),
        recommendation_limit=int(os.environ.get("RECOMMENDATION_LIMIT", defaults.recommendation_limit)),
        skin_type_labels=labels,
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
