"""Ground-truth annotation modules for DDSM overlay files."""

from .chain_code import ChainCode, DIRECTION_STEPS
from .overlay import Abnormality, parse_overlay

__all__ = [
    'ChainCode',
    'DIRECTION_STEPS',
    'Abnormality',
    'parse_overlay',
]
