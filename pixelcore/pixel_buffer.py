# pixelcore/pixel_buffer.py
from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from .errors import DimensionMismatch, IndexOutOfRange


@dataclass(eq=False)
class PixelBuffer:
    """
    Flat RGB bytes, row-major, no padding: len(data) == width * height * 3.
    Stages never write into a buffer they were handed; they return a new one.
    """
    width: int
    height: int
    data: np.ndarray  # shape (width*height*3,), dtype uint8

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid dimensions {self.width}x{self.height}")
        self.data = np.ascontiguousarray(self.data, dtype=np.uint8).reshape(-1)
        if self.data.size != self.width * self.height * 3:
            raise ValueError(
                f"{self.width}x{self.height} RGB needs {self.width * self.height * 3} bytes, "
                f"got {self.data.size}")

    @classmethod
    def create(cls, width: int, height: int) -> PixelBuffer:
        return cls(width, height, np.zeros(width * height * 3, dtype=np.uint8))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelBuffer:
        """Wrap an (H, W, 3) uint8 array as produced by PIL/numpy."""
        arr = np.asarray(arr, dtype=np.uint8)
        assert arr.ndim == 3 and arr.shape[2] == 3
        h, w, _ = arr.shape
        return cls(w, h, arr.reshape(-1).copy())

    def to_array(self) -> np.ndarray:
        return self.data.reshape(self.height, self.width, 3)

    def with_data(self, data: np.ndarray) -> PixelBuffer:
        """New buffer with the same geometry and the given bytes."""
        return PixelBuffer(self.width, self.height, data)

    def copy(self) -> PixelBuffer:
        return self.with_data(self.data.copy())

    def __len__(self) -> int:
        return int(self.data.size)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) \
            and np.array_equal(self.data, other.data)

    def _check(self, offset: int, length: int):
        if offset < 0 or length < 0 or offset + length > len(self):
            raise IndexOutOfRange(offset, length, len(self))

    def read_region(self, offset: int, length: int) -> np.ndarray:
        self._check(offset, length)
        return self.data[offset:offset + length].copy()

    def write_region(self, offset: int, length: int, values) -> None:
        self._check(offset, length)
        values = np.asarray(values, dtype=np.uint8).reshape(-1)
        if values.size != length:
            raise ValueError(f"write_region expected {length} bytes, got {values.size}")
        self.data[offset:offset + length] = values

    def byte_at(self, i: int) -> int:
        self._check(i, 1)
        return int(self.data[i])

    def set_byte_at(self, i: int, v: int) -> None:
        self._check(i, 1)
        if not 0 <= v <= 255:
            raise ValueError(f"byte value out of range: {v}")
        self.data[i] = v

    def require_same_size(self, other: PixelBuffer, what: str = "buffer") -> None:
        if len(other) != len(self):
            raise DimensionMismatch(len(self), len(other), what)
