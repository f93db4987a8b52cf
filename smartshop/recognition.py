# smartshop/recognition.py
"""
Product recognition from a photo with Gemini.

The model sees the catalog summary and either returns the id of a matching
product or suggests a name for an unknown one.
"""
import io
import json
from typing import List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from PIL import Image, ImageOps, UnidentifiedImageError
from pydantic import ValidationError

from smartshop.core.exceptions import RecognitionUnavailable
from smartshop.logging_config import get_logger
from smartshop.match import build_product_name_map, fuzzy_match_products
from smartshop.schemas.product import Product
from smartshop.schemas.scan import ScanOutcome, ScanResult, ScanStatus, SimilarProduct

logger = get_logger("recognition")

PROMPT = """Task: identify the product in the image.
Inventory: {catalog}

Instructions:
1. Read the product name and brand visible in the image.
2. Compare with the inventory. If it matches an item with more than 80% confidence, return its id as productId.
3. If it is not in the inventory, set productId to null and suggest a product name from the image.

Return JSON: {{"productId": string|null, "confidence": number (0-100), "suggestedName": string, "description": string}}
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "productId": {"type": "STRING", "nullable": True, "description": "Inventory product id or null"},
        "confidence": {"type": "NUMBER", "description": "Confidence 0-100"},
        "suggestedName": {"type": "STRING", "description": "Suggested product name"},
        "description": {"type": "STRING", "description": "Short explanation"},
    },
    "required": ["productId", "confidence"],
}


def prepare_image(image_bytes: bytes, max_side: int = 1024) -> bytes:
    """Decode any Pillow-readable image, fix orientation, downscale and re-encode as JPEG."""
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img = ImageOps.exif_transpose(img)
        img = img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise RecognitionUnavailable("image could not be read", str(e)) from e

    # Smaller uploads keep latency and token use down
    img.thumbnail((max_side, max_side))
    out = io.BytesIO()
    img.save(out, format="JPEG", quality=85)
    return out.getvalue()


def catalog_summary(products: List[Product]) -> list[dict]:
    return [{"id": p.id, "name": p.name, "price": p.selling_price} for p in products]


class ProductRecognizer:
    """Thin wrapper over the async Gemini client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-flash-latest",
        confidence_threshold: float = 80.0,
        max_image_side: int = 1024,
        client: Optional[genai.Client] = None,
    ):
        self.client = client or genai.Client(api_key=api_key)
        self.model = model
        self.confidence_threshold = confidence_threshold
        self.max_image_side = max_image_side

    async def recognize(self, image_bytes: bytes, catalog: List[Product]) -> ScanResult:
        """
        Ask the model which catalog product the image shows.

        Raises RecognitionUnavailable on quota, transport or parse failures.
        """
        jpeg = prepare_image(image_bytes, self.max_image_side)
        prompt = PROMPT.format(catalog=json.dumps(catalog_summary(catalog), ensure_ascii=False))

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[prompt, types.Part.from_bytes(data=jpeg, mime_type="image/jpeg")],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"[SCAN] Gemini API error {e.code}: {e}")
            if e.code == 429:
                raise RecognitionUnavailable("API quota exhausted, try again later", str(e)) from e
            raise RecognitionUnavailable("service returned an error", str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"[SCAN] Gemini transport error: {e}")
            raise RecognitionUnavailable("service unreachable", str(e)) from e

        text = response.text
        if not text:
            raise RecognitionUnavailable("empty response from service")

        try:
            result = ScanResult.model_validate_json(text)
        except ValidationError as e:
            raise RecognitionUnavailable("unreadable response from service", str(e)) from e

        return self.apply_threshold(result, catalog)

    def apply_threshold(self, result: ScanResult, catalog: List[Product]) -> ScanResult:
        """Drop product ids that are unknown or below the confidence threshold."""
        confidence = result.confidence
        # Some replies use a 0..1 scale; 1 itself is read as 1%
        if 0 < confidence < 1:
            confidence *= 100
        result = result.model_copy(update={"confidence": confidence})

        if result.product_id is None:
            return result

        known = {p.id for p in catalog}
        if result.product_id not in known or confidence < self.confidence_threshold:
            logger.info(
                f"[SCAN] Discarding match {result.product_id} "
                f"(known={result.product_id in known}, confidence={confidence:.0f})"
            )
            return result.model_copy(update={"product_id": None})
        return result


async def scan_product(recognizer: ProductRecognizer, image_bytes: bytes, catalog: List[Product]) -> ScanOutcome:
    """Recognize an image and resolve the answer against the catalog."""
    result = await recognizer.recognize(image_bytes, catalog)

    if result.product_id:
        product = next(p for p in catalog if p.id == result.product_id)
        return ScanOutcome(
            status=ScanStatus.MATCHED,
            confidence=result.confidence,
            product=product,
            description=result.description
        )

    suggested = (result.suggested_name or "").strip()
    if suggested:
        similar = fuzzy_match_products(suggested, build_product_name_map(catalog))
        return ScanOutcome(
            status=ScanStatus.SUGGESTED,
            confidence=result.confidence,
            suggested_name=suggested,
            description=result.description,
            similar_products=[SimilarProduct(id=pid, name=name, score=score) for pid, name, score in similar]
        )

    return ScanOutcome(status=ScanStatus.NOT_FOUND, confidence=result.confidence, description=result.description)
