"""Plain (ASCII) greyscale PNM reading and writing."""

import os
import numpy as np
from typing import Iterable, List, Tuple

from ..config import ConversionConfig, DEFAULT_CONFIG
from ..constants import PNM_MAGIC
from ..exceptions import PnmFormatError


def format_pnm_header(rows: int, cols: int, bits_per_pixel: int,
                      max_value: int) -> str:
    """
    Build the header of a plain PNM file.

    The comment records the native bit depth of the digitizer; tools such
    as ImageMagick keep it when converting.

    Args:
        rows: Image height
        cols: Image width
        bits_per_pixel: Bit depth the original data was digitized at
        max_value: Maximum grey level

    Returns:
        Header text ending in a newline
    """
    return (
        f"{PNM_MAGIC}\n"
        f"# Generated by ddsmcodec. Original data was digitized at {bits_per_pixel} bits/pixel.\n"
        f"{cols}\n"
        f"{rows}\n"
        f"{max_value}\n"
    )


class PnmWriter:
    """Writes a plain PNM header and line-wrapped pixel values to a text file."""

    def __init__(self, f, config: ConversionConfig = DEFAULT_CONFIG):
        """
        Initialize PNM writer.

        Args:
            f: File object opened in text write mode
            config: Conversion settings (line wrapping, max grey level)
        """
        self.f = f
        self.config = config
        self.column = 0
        self.pixels_written = 0

    def write_header(self, rows: int, cols: int, bits_per_pixel: int) -> None:
        """Write the PNM header."""
        self.f.write(format_pnm_header(rows, cols, bits_per_pixel,
                                       self.config.max_grey_level))

    def write_pixels(self, values: Iterable[int]) -> None:
        """
        Write pixel values, each followed by a space.

        A newline goes in once column * max_chars_per_pixel reaches
        break_around_col. The column count carries over between calls.
        """
        per_char = self.config.max_chars_per_pixel
        break_col = self.config.break_around_col
        parts = []

        for value in values:
            parts.append(f"{value} ")
            self.pixels_written += 1
            self.column += 1
            if self.column * per_char >= break_col:
                parts.append("\n")
                self.column = 0

        self.f.write("".join(parts))


def read_plain_pnm(source) -> Tuple[np.ndarray, List[str]]:
    """
    Read a plain greyscale PNM (P2) file.

    Args:
        source: Path or text file object

    Returns:
        Tuple of (2D uint16 array, list of header comments)

    Raises:
        PnmFormatError: If the file is not a valid plain PNM
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, 'r', encoding='ascii') as f:
            return read_plain_pnm(f)

    header = []
    comments = []
    body = []

    for line in source:
        if len(header) < 4:
            content, sep, comment = line.partition('#')
            if sep:
                comments.append(comment.strip())
            for token in content.split():
                if len(header) < 4:
                    header.append(token)
                else:
                    body.append(token)
        else:
            body.append(line.partition('#')[0])

    if len(header) < 4:
        raise PnmFormatError("Truncated PNM header")
    if header[0] != PNM_MAGIC:
        raise PnmFormatError(f"Unsupported PNM magic: {header[0]!r}")

    try:
        width, height, max_value = (int(v) for v in header[1:])
    except ValueError:
        raise PnmFormatError(f"Invalid PNM header values: {header[1:]}") from None

    if width < 1 or height < 1:
        raise PnmFormatError(f"Invalid image size {width}x{height}")
    if not 0 < max_value <= 65535:
        raise PnmFormatError(f"Invalid maximum grey level {max_value}")

    try:
        pixels = np.array(" ".join(body).split(), dtype=np.int64)
    except ValueError:
        raise PnmFormatError("Non-numeric pixel value") from None

    if pixels.size != width * height:
        raise PnmFormatError(
            f"Expected {width * height} pixel values, got {pixels.size}"
        )
    if pixels.size and (pixels.min() < 0 or pixels.max() > max_value):
        raise PnmFormatError(f"Pixel value outside [0, {max_value}]")

    return pixels.reshape((height, width)).astype(np.uint16), comments
