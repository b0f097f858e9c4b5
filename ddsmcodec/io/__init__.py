"""I/O modules for the DDSM raw-to-PNM converter."""

from .bytestream import RawSampleReader, decode_samples
from .pnm import PnmWriter, format_pnm_header, read_plain_pnm
from .raw_reader import read_raw_image, read_calibrated_image
from .image_writer import write_png16, write_mask_png

__all__ = [
    'RawSampleReader',
    'decode_samples',
    'PnmWriter',
    'format_pnm_header',
    'read_plain_pnm',
    'read_raw_image',
    'read_calibrated_image',
    'write_png16',
    'write_mask_png',
]
