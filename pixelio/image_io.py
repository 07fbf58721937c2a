# pixelio/image_io.py
from PIL import Image
import numpy as np
import logging
import os

from pixelcore.errors import PixelIOError
from pixelcore.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Only lossless containers round-trip the bytes exactly.
LOSSLESS_FORMATS = {'.bmp': 'BMP', '.png': 'PNG', '.tif': 'TIFF', '.tiff': 'TIFF'}

def infer_format_from_path(path: str, default: str = 'BMP') -> str:
    ext = os.path.splitext(str(path))[1].lower()
    return LOSSLESS_FORMATS.get(ext, default)

def load_pixel_buffer(path: str) -> PixelBuffer:
    """Decode any Pillow-readable image into row-major RGB bytes (alpha dropped)."""
    try:
        with Image.open(path) as im:
            arr = np.array(im.convert("RGB"), dtype=np.uint8)
    except OSError as e:  # includes FileNotFoundError and UnidentifiedImageError
        raise PixelIOError(f"Could not load image {path}: {e}") from e
    buf = PixelBuffer.from_array(arr)
    logger.debug(f"Loaded {path}: {buf.width}x{buf.height}")
    return buf

def save_pixel_buffer(buf: PixelBuffer, path: str, fmt: str = None) -> bool:
    """Write buf as an RGB image. Failure is logged and reported, never raised."""
    fmt = fmt or infer_format_from_path(path)
    try:
        Image.fromarray(buf.to_array()).save(path, fmt)
    except (OSError, ValueError) as e:
        logger.error(f"Could not save image {path}: {e}")
        return False
    logger.info(f"Image saved as {path}")
    return True
