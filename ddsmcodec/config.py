"""Immutable conversion settings."""

from dataclasses import dataclass

from .constants import (
    MAX_OPTICAL_DENSITY, NUM_BITS, OUTPUT_SUFFIX,
    MAX_CHARS_PER_PIXEL, BREAK_AROUND_COL, READ_CHUNK_SIZE
)


@dataclass(frozen=True)
class ConversionConfig:
    """
    Settings shared by the calibration functions and the PNM codec.

    Attributes:
        max_od: Optical density that maps to grey level 0
        num_bits: Bits per output sample
        output_suffix: Appended to the input filename to name the output
        max_chars_per_pixel: Assumed width of one serialized value
        break_around_col: Insert a newline once this column is reached
        chunk_size: Bytes read from the raw source per call
    """
    max_od: float = MAX_OPTICAL_DENSITY
    num_bits: int = NUM_BITS
    output_suffix: str = OUTPUT_SUFFIX
    max_chars_per_pixel: int = MAX_CHARS_PER_PIXEL
    break_around_col: int = BREAK_AROUND_COL
    chunk_size: int = READ_CHUNK_SIZE

    def __post_init__(self):
        if self.max_od <= 0:
            raise ValueError(f"max_od must be positive, got {self.max_od}")
        if not 1 <= self.num_bits <= 16:
            raise ValueError(f"num_bits must be in range [1, 16], got {self.num_bits}")
        if self.chunk_size < 2 or self.chunk_size % 2:
            raise ValueError(f"chunk_size must be an even number >= 2, got {self.chunk_size}")

    @property
    def max_grey_level(self) -> int:
        """Largest value representable with num_bits (65535 for 16-bit)."""
        return (1 << self.num_bits) - 1

    @property
    def values_per_line(self) -> int:
        """Number of pixel values written before each line break."""
        return max(1, -(-self.break_around_col // self.max_chars_per_pixel))


DEFAULT_CONFIG = ConversionConfig()
