# pixelcore/encoder.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Sequence
import logging

from .mask import MaskRecord
from .pixel_buffer import PixelBuffer
from .stages import MaskApply, Stage, Xor

logger = logging.getLogger(__name__)


@dataclass
class EncodeResult:
    output: PixelBuffer
    intermediates: Dict[str, PixelBuffer] = field(default_factory=dict)  # "P1", "P2", ...
    records: List[MaskRecord] = field(default_factory=list)              # M1, M2, ... in order


class Encoder:
    """Runs a stage list forward over a source buffer."""

    def __init__(self, stages: Sequence[Stage]):
        self.stages = list(stages)

    def run(self, source: PixelBuffer) -> EncodeResult:
        # size problems are fatal before anything is computed
        for stage in self.stages:
            if isinstance(stage, Xor):
                source.require_same_size(stage.key, "secret")

        result = EncodeResult(output=source)
        current = source
        n = 0
        for stage in self.stages:
            if isinstance(stage, MaskApply):
                record = stage.capture(current)
                result.records.append(record)
                logger.info(f"M{len(result.records)}: seed={record.seed}, "
                            f"{len(record.triplets)} pixels masked")
            current = stage.apply(current)
            if not isinstance(stage, MaskApply):
                n += 1
                result.intermediates[f"P{n}"] = current
                logger.debug(f"P{n} <- {stage!r}")
        result.output = current
        return result
