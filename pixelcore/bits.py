# pixelcore/bits.py
import numpy as np

# All helpers take either a single byte (int) or a uint8 array.
# Scalars come back as int, arrays as uint8 arrays of the same shape.

def _widen(v) -> np.ndarray:
    return np.asarray(v, dtype=np.uint8).astype(np.uint16)

def _narrow(like, out: np.ndarray):
    out = (out & 0xFF).astype(np.uint8)
    if np.ndim(like) == 0:
        return int(out)
    return out

def xor_bytes(a, b):
    return _narrow(a, _widen(a) ^ _widen(b))

def rotate_right(v, k: int):
    """Cyclic right rotation of each byte by k bits (k taken mod 8)."""
    k %= 8
    w = _widen(v)
    return _narrow(v, (w >> k) | (w << (8 - k)))

def rotate_left(v, k: int):
    """Cyclic left rotation of each byte by k bits (k taken mod 8)."""
    k %= 8
    w = _widen(v)
    return _narrow(v, (w << k) | (w >> (8 - k)))

def shift_left(v, k: int):
    # lossy: high bits fall off
    assert 0 <= k <= 7
    return _narrow(v, _widen(v) << k)

def shift_right(v, k: int):
    # lossy: low bits fall off
    assert 0 <= k <= 7
    return _narrow(v, _widen(v) >> k)

def add_mod(a, b):
    """(a + b) mod 256, byte-wise."""
    return _narrow(a, _widen(a) + _widen(b))

def sub_mod(a, b):
    """(a - b) mod 256, byte-wise. Wraps, never clamps."""
    diff = _widen(a).astype(np.int32) - _widen(b).astype(np.int32)
    return _narrow(a, np.mod(diff, 256).astype(np.uint16))
