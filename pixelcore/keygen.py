# pixelcore/keygen.py
import numpy as np

from .pixel_buffer import PixelBuffer

def _rng_from_key(key: int):
    return np.random.default_rng(np.random.SeedSequence(int(key) & 0xFFFFFFFF))

def generate_secret(width: int, height: int, key: int) -> PixelBuffer:
    """Deterministic secret buffer: the same (width, height, key) always gives the same bytes."""
    rng = _rng_from_key(key)
    data = rng.integers(0, 256, size=width * height * 3, dtype=np.uint8)
    return PixelBuffer(width, height, data)
