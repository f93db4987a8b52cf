"""
Product recognition endpoint.
"""
from fastapi import APIRouter, Depends, File, UploadFile, status

from smartshop.api.v1.deps import get_context
from smartshop.context import AppContext
from smartshop.core.exceptions import AppException, RecognitionUnavailable
from smartshop.recognition import scan_product
from smartshop.schemas.scan import ScanOutcome

router = APIRouter(prefix="/scan", tags=["Scan"])


@router.post("", response_model=ScanOutcome)
async def scan(
    file: UploadFile = File(...),
    ctx: AppContext = Depends(get_context)
):
    """
    Identify a product from a photo.

    Returns the matched product, a suggested name for a new product, or
    `not_found`. Nothing is stored.
    """
    if ctx.recognizer is None:
        raise RecognitionUnavailable("recognizer is not configured")

    image = await file.read()
    if len(image) > ctx.settings.max_upload_size:
        raise AppException(
            f"Image exceeds {ctx.settings.max_upload_size} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        )

    catalog = await ctx.catalog.get_all()
    return await scan_product(ctx.recognizer, image, catalog)
