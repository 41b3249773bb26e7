import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict
from uuid import uuid4

from skinscan.ai.Errors import AnalysisError, ConfigurationError, ImageValidationError, UpstreamServiceError
from skinscan.ai.IssueDetector import detect
from skinscan.ai.ProductRecommendation import ProductRecommendationService
from skinscan.ai.SkinAdvisor import SkinAdvisor
from skinscan.ai.SkinClassifier import SkinClassifier
from skinscan.ai.VisionParser import parse
from skinscan.config import Settings
from skinscan.models.Catalog import ImageStore, ProductCatalog, SkinTypeCatalog, VisionClient
from skinscan.models.Request import AnalysisRequest
from skinscan.models.Response import SkinAnalysisResult

logger = logging.getLogger(__name__)


@dataclass
class AnalysisDependencies:
    """Collaborators injected into the pipeline."""
    image_store: ImageStore
    vision_client: VisionClient
    skin_types: SkinTypeCatalog
    products: ProductCatalog


def upload_name(filename: str) -> str:
    return f"skin-analysis-{uuid4()}_{os.path.basename(filename or 'image.jpg')}"


class SkinAnalysisService:
    def __init__(self, deps: AnalysisDependencies, settings: Settings = Settings()):
        self.deps = deps
        self.settings = settings
        self.classifier = SkinClassifier(deps.skin_types, settings.skin_type_labels)
        self.matcher = ProductRecommendationService(deps.products, settings.recommendation_limit)
        self.advisor = SkinAdvisor(settings.skin_type_labels)

    async def _upload(self, image_bytes: bytes, filename: str, media_type: str) -> str:
        timeout = self.settings.upload_timeout_s
        try:
            return await asyncio.wait_for(
                self.deps.image_store.upload(image_bytes, upload_name(filename), media_type),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamServiceError(detail=f"Image upload timed out after {timeout}s") from e

    async def _call_vision(self, image_bytes: bytes, filename: str, media_type: str) -> Dict[str, Any]:
        timeout = self.settings.vision_timeout_s
        try:
            return await asyncio.wait_for(
                self.deps.vision_client.analyze_face(image_bytes, filename, media_type),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamServiceError(detail=f"Vision API timed out after {timeout}s") from e

    async def analyze(self, image_bytes: bytes, filename: str, caller_id: str = "anonymous",
                      media_type: str = "image/jpeg") -> SkinAnalysisResult:
        """
        Runs the full pipeline for one face image.

        Stages are strictly sequential: upload, vision call, parse, classify,
        detect issues, match products, advise.

        Args:
            image_bytes: Raw image content
            filename: Original file name, kept as a suffix of the stored blob
            caller_id: Identity of the requesting user, used for logging
            media_type: Content type forwarded to the image store and vision API

        Returns:
            SkinAnalysisResult: Condition, issues, recommendations and advice

        Raises:
            ImageValidationError: Empty image
            UpstreamServiceError: Upload, vision API or catalog failure or timeout
            ConfigurationError: The skin-type catalog is empty
        """
        if not image_bytes:
            raise ImageValidationError()

        logger.info(f"[ANALYSIS] Starting - caller: {caller_id}, image: {filename}")

        try:
            image_url = await self._upload(image_bytes, filename, media_type)
            logger.info(f"[UPLOAD] Image stored at {image_url}")

            raw_document = await self._call_vision(image_bytes, filename, media_type)
            logger.info("[VISION] Face analysis received")

            condition = parse(raw_document)

            skin_type_id, skin_type_name = await self.classifier.classify(condition)
            logger.info(f"[ANALYSIS] Skin type: {skin_type_name}")

            issues = detect(condition)
            recommendations = await self.matcher.recommend(skin_type_id, issues)
            advice = self.advisor.advise(skin_type_name, issues)
        except ConfigurationError as e:
            logger.critical(f"[ANALYSIS] Configuration error: {e}")
            raise
        except UpstreamServiceError as e:
            logger.error(f"[ANALYSIS] Upstream failure for caller {caller_id}: {e.detail or e}", exc_info=True)
            raise
        except AnalysisError:
            raise
        except Exception as e:
            logger.error(f"[ANALYSIS] Failed for caller {caller_id}: {e}", exc_info=True)
            raise UpstreamServiceError(detail=str(e)) from e

        logger.info(
            f"[ANALYSIS] Done - {len(issues)} issues, {len(recommendations)} products, {len(advice)} advice lines"
        )
        return SkinAnalysisResult(
            image_url=image_url,
            condition=condition,
            issues=issues,
            recommendations=recommendations,
            advice=advice,
        )

    async def analyze_skin(self, request: AnalysisRequest) -> SkinAnalysisResult:
        image = request.image
        return await self.analyze(
            image.data,
            image.identifier or "image.jpg",
            caller_id=request.caller_id,
            media_type=image.media_type,
        )
