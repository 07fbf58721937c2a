# pixelio/mask_io.py
import logging

from pixelcore.errors import MalformedMaskFile, PixelIOError
from pixelcore.mask import MaskRecord, format_mask_text, parse_mask_text

logger = logging.getLogger(__name__)

def load_mask_record(path: str) -> MaskRecord:
    """Read a mask text file: seed, then whitespace-separated RGB triplets."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except (IOError, OSError) as e:
        raise PixelIOError(f"Could not open mask file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise MalformedMaskFile(f"{path} is not a text file") from e
    record = parse_mask_text(text)
    logger.debug(f"{path}: seed={record.seed}, {len(record.triplets)} pixels")
    return record

def save_mask_record(record: MaskRecord, path: str) -> bool:
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(format_mask_text(record))
    except (IOError, OSError) as e:
        logger.error(f"Could not write mask file {path}: {e}")
        return False
    logger.info(f"Mask record saved as {path}")
    return True
