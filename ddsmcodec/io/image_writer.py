"""PNG output for converted images and annotation masks."""

import numpy as np
from pathlib import Path
from PIL import Image


def write_png16(image: np.ndarray, path: str) -> None:
    """
    Write a greyscale image as a lossless 16-bit PNG.

    Args:
        image: 2D array with values in [0, 65535]
        path: Output file path

    Raises:
        ValueError: If the image is not 2D or values do not fit in 16 bits
    """
    if image.ndim != 2:
        raise ValueError(f"Expected 2D array, got {image.ndim}D")
    if image.size and (image.min() < 0 or image.max() > 65535):
        raise ValueError("Image values must be in range [0, 65535]")

    data = np.ascontiguousarray(image, dtype=np.uint16)
    Image.fromarray(data).save(str(Path(path)), format='PNG')


def write_mask_png(mask: np.ndarray, path: str) -> None:
    """Write a binary mask as an 8-bit PNG (0 or 255)."""
    if mask.ndim != 2:
        raise ValueError(f"Expected 2D array, got {mask.ndim}D")

    data = np.where(mask.astype(bool), 255, 0).astype(np.uint8)
    Image.fromarray(data).save(str(Path(path)), format='PNG')
