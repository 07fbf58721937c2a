# pixelapp/config.py
import logging
import os
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Values from a local .env win over nothing, but never over the real environment.
load_dotenv()

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default

SOURCE_IMAGE = os.getenv('PIXMASK_SOURCE', 'I_O.bmp')
SECRET_IMAGE = os.getenv('PIXMASK_SECRET', 'I_M.bmp')
RESTORED_IMAGE = os.getenv('PIXMASK_RESTORED', 'I_D.bmp')
ARTIFACT_IMAGE = os.getenv('PIXMASK_ARTIFACT', 'P3.bmp')

# Intermediates are written as <prefix><n><ext>, mask records as M<n>.txt
INTERMEDIATE_PREFIX = os.getenv('PIXMASK_INTERMEDIATE_PREFIX', 'P')
IMAGE_EXT = os.getenv('PIXMASK_IMAGE_EXT', '.bmp')

ROTATION_BITS = _int_env('PIXMASK_ROTATION_BITS', 3)
LOG_LEVEL = os.getenv('PIXMASK_LOG_LEVEL', 'INFO').upper()
