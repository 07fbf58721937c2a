# pixelcore/diff.py
import numpy as np
from PIL import Image

from .pixel_buffer import PixelBuffer

def count_mismatches(a: PixelBuffer, b: PixelBuffer) -> int:
    """Number of differing bytes between two equally sized buffers."""
    a.require_same_size(b)
    return int(np.count_nonzero(a.data != b.data))

def difference_map(a: PixelBuffer, b: PixelBuffer) -> Image.Image:
    """
    Returns a grayscale PIL image highlighting pixels that differ between a and b.
    """
    a.require_same_size(b)
    other = b.data.reshape(a.height, a.width, 3)
    diff = np.abs(other.astype(np.int16) - a.to_array().astype(np.int16)).sum(axis=2)
    diff = np.clip(diff * 32, 0, 255).astype(np.uint8)  # amplify for visibility
    return Image.fromarray(diff)  # 2-D uint8 -> mode 'L'
