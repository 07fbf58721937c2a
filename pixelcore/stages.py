# pixelcore/stages.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .bits import xor_bytes, rotate_right, rotate_left, shift_left, shift_right, add_mod, sub_mod
from .errors import IrreversibleStage
from .mask import MaskRecord
from .pixel_buffer import PixelBuffer


class Stage:
    """One byte-wise transform over a whole buffer (or a region of it)."""

    def apply(self, buf: PixelBuffer) -> PixelBuffer:
        raise NotImplementedError

    def inverse(self) -> Stage:
        raise IrreversibleStage(f"{self!r} has no inverse")


@dataclass(frozen=True)
class Xor(Stage):
    key: PixelBuffer

    def apply(self, buf):
        buf.require_same_size(self.key, "secret")
        return buf.with_data(xor_bytes(buf.data, self.key.data))

    def inverse(self):
        return self

    def __repr__(self):
        return f"Xor(key={self.key.width}x{self.key.height})"


@dataclass(frozen=True)
class RotateRight(Stage):
    k: int

    def apply(self, buf):
        return buf.with_data(rotate_right(buf.data, self.k))

    def inverse(self):
        return RotateLeft(self.k)


@dataclass(frozen=True)
class RotateLeft(Stage):
    k: int

    def apply(self, buf):
        return buf.with_data(rotate_left(buf.data, self.k))

    def inverse(self):
        return RotateRight(self.k)


@dataclass(frozen=True)
class ShiftLeft(Stage):
    k: int

    def apply(self, buf):
        return buf.with_data(shift_left(buf.data, self.k))


@dataclass(frozen=True)
class ShiftRight(Stage):
    k: int

    def apply(self, buf):
        return buf.with_data(shift_right(buf.data, self.k))


@dataclass(frozen=True)
class MaskApply(Stage):
    """
    Forward masking of [seed, seed + len(mask)).

    capture() records S[k] = (img[seed+k] + mask[k]) mod 256, apply() then
    substitutes the region with the mask bytes. The record is what lets
    MaskRestore put the original bytes back.
    """
    mask: PixelBuffer
    seed: Optional[int] = None

    def _seed(self) -> int:
        if self.seed is None:
            raise ValueError("MaskApply needs a seed to run forward")
        return self.seed

    def capture(self, buf: PixelBuffer) -> MaskRecord:
        region = buf.read_region(self._seed(), len(self.mask))
        return MaskRecord.from_values(self._seed(), add_mod(region, self.mask.data))

    def apply(self, buf):
        out = buf.copy()
        out.write_region(self._seed(), len(self.mask), self.mask.data)
        return out

    def inverse(self, record: Optional[MaskRecord] = None) -> MaskRestore:
        return MaskRestore(record, self.mask)

    def __repr__(self):
        return f"MaskApply(seed={self.seed}, length={len(self.mask)})"


@dataclass(frozen=True)
class MaskRestore(Stage):
    """img[seed+k] = (S[k] - mask[k]) mod 256 for k in [0, len(mask))."""
    record: Optional[MaskRecord]
    mask: PixelBuffer

    @property
    def patch_length(self) -> int:
        return len(self.mask)

    def problem(self, buf: PixelBuffer) -> Optional[str]:
        """Why this restore cannot run on buf, or None when it can."""
        if self.record is None:
            return "no mask record"
        if self.record.patch_length < self.patch_length:
            return (f"record has {len(self.record.triplets)} triplets, "
                    f"mask needs {self.patch_length // 3}")
        if self.record.seed < 0 or not self.record.fits(len(buf)):
            return (f"seed {self.record.seed} + {self.record.patch_length} bytes "
                    f"exceeds buffer of {len(buf)}")
        return None

    def restored_values(self):
        return sub_mod(self.record.values[:self.patch_length], self.mask.data)

    def apply(self, buf):
        reason = self.problem(buf)
        if reason is not None:
            raise ValueError(f"correction not valid: {reason}")
        out = buf.copy()
        out.write_region(self.record.seed, self.patch_length, self.restored_values())
        return out

    def inverse(self):
        return MaskApply(self.mask, None if self.record is None else self.record.seed)

    def __repr__(self):
        seed = None if self.record is None else self.record.seed
        return f"MaskRestore(seed={seed}, length={len(self.mask)})"


def canonical_stages(secret: PixelBuffer, rotation: int = 3,
                     mask: Optional[PixelBuffer] = None,
                     seeds: Sequence[Optional[int]] = ()) -> List[Stage]:
    """
    Xor(secret) -> [mask 1] -> RotateRight(rotation) -> [mask 2] -> Xor(secret).
    Mask stages are only present when a mask buffer is given.
    """
    seeds = list(seeds) + [None] * (2 - len(seeds))
    stages: List[Stage] = [Xor(secret)]
    if mask is not None:
        stages.append(MaskApply(mask, seeds[0]))
    stages.append(RotateRight(rotation))
    if mask is not None:
        stages.append(MaskApply(mask, seeds[1]))
    stages.append(Xor(secret))
    return stages
