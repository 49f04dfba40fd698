"""
Natural size discovery for drawing images.
"""

import logging
from pathlib import Path
from typing import Tuple, Union

import PIL
from PIL import Image

logger = logging.getLogger(__name__)

# Site plans are large scans
PIL.Image.MAX_IMAGE_PIXELS = 1063733067


def measure_image(path: Union[str, Path]) -> Tuple[int, int]:
    """
    Return the natural (width, height) of an image file.

    Only the header is read. An image that cannot be opened measures as
    (0, 0), which callers treat as "not yet known".
    """
    try:
        with Image.open(path) as image:
            return image.size
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning("Could not read image size of %s: %s", path, e)
        return 0, 0
