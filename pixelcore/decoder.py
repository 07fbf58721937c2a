# pixelcore/decoder.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import numpy as np

from .mask import MaskRecord
from .pixel_buffer import PixelBuffer
from .stages import MaskApply, MaskRestore, Stage, Xor

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    output: PixelBuffer
    warnings: List[str] = field(default_factory=list)
    # (label, record, reconstructed bytes of the region) per restore that ran
    restored: List[Tuple[str, MaskRecord, np.ndarray]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


class Decoder:
    """
    Replays an already-inverted stage list. Use from_stages() to derive it
    from the forward list the Encoder ran.
    """

    def __init__(self, stages: Sequence[Stage]):
        self.stages = list(stages)

    @classmethod
    def from_stages(cls, forward: Sequence[Stage],
                    records: Iterable[Optional[MaskRecord]] = ()) -> Decoder:
        """
        Reverse the forward list and invert each stage. The i-th MaskApply is
        paired with records[i]; missing records give a restore that will be
        skipped at run time.
        """
        records = list(records)
        inverted: List[Stage] = []
        i = 0
        for stage in forward:
            if isinstance(stage, MaskApply):
                inverted.append(stage.inverse(records[i] if i < len(records) else None))
                i += 1
            else:
                inverted.append(stage.inverse())
        inverted.reverse()
        return cls(inverted)

    def run(self, artifact: PixelBuffer) -> DecodeResult:
        for stage in self.stages:
            if isinstance(stage, Xor):
                artifact.require_same_size(stage.key, "secret")

        result = DecodeResult(output=artifact)
        n_masks = sum(isinstance(s, MaskRestore) for s in self.stages)
        current = artifact
        for stage in self.stages:
            if not isinstance(stage, MaskRestore):
                current = stage.apply(current)
                continue

            label = f"M{n_masks}"
            n_masks -= 1
            reason = stage.problem(current)
            if reason is not None:
                msg = f"{label}: correction not valid ({reason})"
                logger.warning(msg)
                result.warnings.append(msg)
                continue
            current = stage.apply(current)
            result.restored.append((label, stage.record,
                                    current.read_region(stage.record.seed, stage.patch_length)))
            logger.info(f"{label}: restored {stage.patch_length} bytes at seed {stage.record.seed}")

        result.output = current
        return result
