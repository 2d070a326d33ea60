"""Image pre-processing before food analysis."""

import base64
import io

from PIL import Image, UnidentifiedImageError

from nutrition_coach.errors import InvalidImageError

MAX_IMAGE_SIDE = 512
JPEG_QUALITY = 90


def prepare_image(image_bytes: bytes, max_side: int = MAX_IMAGE_SIDE) -> bytes:
    """Decode, shrink to fit max_side and re-encode as baseline JPEG."""
    if not image_bytes:
        raise InvalidImageError("Empty image upload")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidImageError("Uploaded file is not a readable image") from exc

    # thumbnail keeps the aspect ratio and never upscales
    rgb.thumbnail((max_side, max_side))
    buffer = io.BytesIO()
    rgb.save(buffer, format="JPEG", quality=JPEG_QUALITY, progressive=False)
    return buffer.getvalue()


def to_data_url(jpeg_bytes: bytes) -> str:
    """Convert prepared JPEG bytes to a base64 data URL for image input."""
    encoded = base64.b64encode(jpeg_bytes).decode("utf-8")
    return f"data:image/jpeg;base64,{encoded}"
