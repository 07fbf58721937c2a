# pixelcore/errors.py

class PipelineError(Exception):
    """Base class for everything the obfuscation pipeline raises."""


class PixelIOError(PipelineError, OSError):
    """A pixel buffer or mask file could not be read or written."""


class DimensionMismatch(PipelineError, ValueError):
    def __init__(self, expected: int, got: int, what: str = "buffer"):
        super().__init__(f"{what} size mismatch: expected {expected} bytes, got {got}")
        self.expected = expected
        self.got = got


class MalformedMaskFile(PipelineError, ValueError):
    """Mask text had a bad token, a missing seed or an out-of-range component."""


class IndexOutOfRange(PipelineError, IndexError):
    def __init__(self, offset: int, length: int, size: int):
        super().__init__(f"region [{offset}, {offset + length}) outside buffer of {size} bytes")
        self.offset = offset
        self.length = length
        self.size = size


class IrreversibleStage(PipelineError):
    """Raised when an inverse is requested for a stage that discards bits."""
