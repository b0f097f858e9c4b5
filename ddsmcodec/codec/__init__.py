"""Codec modules for the DDSM raw-to-PNM converter."""

from .converter import RawToPnmConverter, ConversionResult, convert_file, output_path_for

__all__ = [
    'RawToPnmConverter',
    'ConversionResult',
    'convert_file',
    'output_path_for',
]
