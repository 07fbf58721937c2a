# pixelcore/mask.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple
import numpy as np

from .errors import MalformedMaskFile

Triplet = Tuple[int, int, int]


@dataclass(frozen=True)
class MaskRecord:
    """
    Seed offset into a pixel buffer plus the RGB triplets recorded for the
    contiguous region starting there.
    """
    seed: int
    triplets: Tuple[Triplet, ...]

    def __post_init__(self):
        if self.seed < 0:
            raise MalformedMaskFile(f"Negative seed: {self.seed}")
        triplets = []
        for i, t in enumerate(self.triplets):
            if len(t) != 3:
                raise MalformedMaskFile(f"Pixel {i}: expected 3 components, got {len(t)}")
            triplets.append(tuple(_component(int(v), i) for v in t))
        object.__setattr__(self, "seed", int(self.seed))
        object.__setattr__(self, "triplets", tuple(triplets))

    @property
    def patch_length(self) -> int:
        return len(self.triplets) * 3

    @property
    def values(self) -> np.ndarray:
        if not self.triplets:
            return np.zeros(0, dtype=np.uint8)
        return np.array(self.triplets, dtype=np.uint8).reshape(-1)

    def fits(self, buffer_length: int) -> bool:
        return self.seed + self.patch_length <= buffer_length

    @classmethod
    def from_values(cls, seed: int, values) -> MaskRecord:
        """Build a record from a flat byte sequence whose length is a multiple of 3."""
        flat = [int(v) for v in np.asarray(values, dtype=np.uint8).reshape(-1)]
        assert len(flat) % 3 == 0
        return cls(seed, tuple(tuple(flat[i:i + 3]) for i in range(0, len(flat), 3)))


def _component(v: int, pixel: int) -> int:
    if not 0 <= v <= 255:
        raise MalformedMaskFile(f"Pixel {pixel}: component {v} outside [0, 255]")
    return v

def parse_mask_values(values: Iterable[int]) -> MaskRecord:
    """
    First value is the seed, the rest are consumed three at a time as RGB.
    A trailing incomplete triplet is dropped.
    """
    it = iter(values)
    try:
        seed = int(next(it))
    except StopIteration:
        raise MalformedMaskFile("Mask data is empty: missing seed") from None

    triplets = []
    pending = []
    for v in it:
        pending.append(_component(int(v), len(triplets)))
        if len(pending) == 3:
            triplets.append(tuple(pending))
            pending = []
    return MaskRecord(seed, tuple(triplets))

def _tokens(text: str):
    for tok in text.split():
        try:
            yield int(tok)
        except ValueError:
            raise MalformedMaskFile(f"Not an integer: {tok!r}") from None

def parse_mask_text(text: str) -> MaskRecord:
    return parse_mask_values(_tokens(text))

def format_mask_text(record: MaskRecord) -> str:
    lines = [str(record.seed)]
    lines += [f"{r} {g} {b}" for r, g, b in record.triplets]
    return "\n".join(lines) + "\n"
