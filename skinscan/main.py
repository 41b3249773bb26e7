import logging
import os
from functools import lru_cache
from io import BytesIO
from typing import Optional

from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from pydantic_ai import BinaryContent
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from fastapi import FastAPI, Request, File, UploadFile, Depends, Header
from fastapi.responses import JSONResponse

from PIL import Image
import pillow_heif

from skinscan.ai.AnalysisService import AnalysisDependencies, SkinAnalysisService
from skinscan.ai.Errors import ConfigurationError, ImageValidationError, UpstreamServiceError
from skinscan.config import Settings, get_settings
from skinscan.integrations.FacePlusPlus import FacePlusPlusClient
from skinscan.integrations.ImageStore import FirebaseImageStore, LocalImageStore
from skinscan.integrations.JsonCatalog import JsonCatalog
from skinscan.models.Request import AnalysisRequest
from skinscan.models.Response import SkinAnalysisResult

# Register HEIF plugin for Pillow
pillow_heif.register_heif_opener()

app = FastAPI(title="Skin Analysis API")

origins = ['*']
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

logger = logging.getLogger('uvicorn')

app_settings = get_settings()
if app_settings.image_store == "local":
    app.mount("/static", StaticFiles(directory=app_settings.local_image_dir, check_dir=False), name="static")


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    error_details = [
        {
            "field": ".".join(str(loc_part) for loc_part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": error_details,
            "error": "Validation Error",
            "path": request.url.path,
        }
    )


@app.exception_handler(ImageValidationError)
async def image_validation_exception_handler(request: Request, exc: ImageValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc), "path": request.url.path})


@app.exception_handler(UpstreamServiceError)
async def upstream_exception_handler(request: Request, exc: UpstreamServiceError):
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "errors": [exc.detail] if exc.detail else [], "path": request.url.path},
    )


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    logger.critical(f"Skin analysis misconfigured: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc), "path": request.url.path})


def build_analysis_service(settings: Settings) -> SkinAnalysisService:
    catalog = JsonCatalog(settings.catalog_path)

    if settings.image_store == "firebase":
        image_store = FirebaseImageStore(
            settings.firebase_bucket,
            timeout_s=settings.upload_timeout_s,
            access_token=settings.firebase_access_token or None,
        )
    else:
        image_store = LocalImageStore(settings.local_image_dir, settings.public_base_url)

    vision_client = FacePlusPlusClient(
        settings.facepp_api_key,
        settings.facepp_api_secret,
        endpoint=settings.facepp_endpoint,
        timeout_s=settings.vision_timeout_s,
    )

    deps = AnalysisDependencies(
        image_store=image_store,
        vision_client=vision_client,
        skin_types=catalog,
        products=catalog,
    )
    return SkinAnalysisService(deps, settings)


@lru_cache
def get_analysis_service() -> SkinAnalysisService:
    return build_analysis_service(get_settings())


async def process_image(image: UploadFile, settings: Settings) -> BinaryContent:
    image_data = await image.read()
    content_type = image.content_type or "application/octet-stream"
    filename = image.filename or "image"

    if not image_data:
        logger.warning("Empty face image received.")
        raise ImageValidationError("Face image must not be empty.")

    if len(image_data) > settings.max_image_bytes:
        raise ImageValidationError(f"File too large, maximum is {settings.max_image_bytes // (1024 * 1024)}MB.")

    # Check for HEIC or an unknown format
    if content_type in ["image/heic", "image/heif", "application/octet-stream"] or \
       filename.lower().endswith(('.heic', '.heif')):
        try:
            pil_image = Image.open(BytesIO(image_data))

            if pil_image.mode in ("RGBA", "LA", "P"):
                pil_image = pil_image.convert("RGB")

            jpeg_buffer = BytesIO()
            pil_image.save(jpeg_buffer, format="JPEG", quality=95)
            jpeg_buffer.seek(0)

            image_data = jpeg_buffer.read()
            content_type = "image/jpeg"
            filename = filename.rsplit('.', 1)[0] + '.jpg'

            logger.info(f"Image converted to JPEG: {filename}")
        except Exception as e:
            logger.error(f"Failed to convert image: {e}")
            raise ImageValidationError(f"Could not process image: {str(e)}")

    extension = os.path.splitext(filename)[1].lower()
    if extension not in settings.allowed_extensions:
        raise ImageValidationError(f"Only {', '.join(settings.allowed_extensions)} images are accepted.")

    return BinaryContent(data=image_data, media_type=content_type, identifier=filename)


@app.get('/health', summary='Liveness probe')
async def health():
    return {"status": "ok"}


@app.post('/api/skin-analysis/analyze', summary='Analyzes a face image', response_model=SkinAnalysisResult)
async def analyze_skin(
        faceImage: UploadFile = File(...),
        x_user_id: Optional[str] = Header(default=None),
        service: SkinAnalysisService = Depends(get_analysis_service),
        settings: Settings = Depends(get_settings),
):
    image = await process_image(faceImage, settings)

    ai_request = AnalysisRequest(
        image=image,
        caller_id=x_user_id or "anonymous",
    )

    return await service.analyze_skin(ai_request)
