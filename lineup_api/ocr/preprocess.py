import logging
from io import BytesIO

import numpy as np
from PIL import Image, ImageEnhance, ImageFile, ImageOps

from .errors import PreprocessError
from .tuning import UPSCALE

ImageFile.LOAD_TRUNCATED_IMAGES = True

logger = logging.getLogger("lineup.ocr")

# Canvas-style filter: grayscale(100%) contrast(180%) brightness(110%)
CONTRAST_FACTOR = 1.8
BRIGHTNESS_FACTOR = 1.1


def _target_size(width: int, height: int, scale: float) -> tuple[int, int]:
    return int(round(width * scale)), int(round(height * scale))


def preprocess(image_bytes: bytes, scale: float = UPSCALE) -> np.ndarray:
    """
    Decode a roster screenshot and return the OCR input as a read-only
    grayscale uint8 array of shape (H*scale, W*scale).

    Gradient backgrounds and decorative fonts wreck Tesseract's token
    boundaries; upsampling plus a contrast/brightness push helps a lot.
    No binarization here: thresholding turns gradients into "ink".
    """
    if not image_bytes:
        raise PreprocessError("Empty image payload")

    try:
        # The decoded handle is closed on every exit path.
        with Image.open(BytesIO(image_bytes)) as src:
            src.load()
            # phone photos: apply the Orientation tag like a browser would
            img = ImageOps.exif_transpose(src)
            w, h = img.size
            tw, th = _target_size(w, h, scale)
            if tw < 1 or th < 1:
                raise PreprocessError(
                    "Image has no drawable area",
                    details={"width": w, "height": h, "scale": scale},
                )
            logger.debug("preprocess: decoded %dx%d (%s), upscaling to %dx%d", w, h, img.mode, tw, th)

            g = ImageOps.grayscale(img.convert("RGB"))
    except PreprocessError:
        raise
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        # UnidentifiedImageError is an OSError
        raise PreprocessError("Could not decode image", details={"error": str(e)}) from e

    g = ImageEnhance.Contrast(g).enhance(CONTRAST_FACTOR)
    g = ImageEnhance.Brightness(g).enhance(BRIGHTNESS_FACTOR)
    g = g.resize((tw, th), Image.LANCZOS)

    buf = np.array(g, dtype=np.uint8)
    # Both OCR passes read the same buffer; nobody gets to scribble on it.
    buf.flags.writeable = False
    return buf
