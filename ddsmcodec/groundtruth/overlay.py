"""Parser for DDSM .OVERLAY ground-truth files."""

import os
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..exceptions import OverlayFormatError
from .chain_code import ChainCode

_TOTAL_RE = re.compile(r'^TOTAL_ABNORMALITIES\s+(\d+)')
_ABNORMALITY_RE = re.compile(r'^ABNORMALITY\s+(\d+)')
_FIELD_RE = re.compile(r'^(LESION_TYPE|ASSESSMENT|SUBTLETY|PATHOLOGY|TOTAL_OUTLINES)\s+(.*)$')


@dataclass
class Abnormality:
    """One annotated abnormality: the radiologist's description and outlines."""
    number: int
    lesion_types: List[str] = field(default_factory=list)
    assessment: Optional[int] = None
    subtlety: Optional[int] = None
    pathology: Optional[str] = None
    total_outlines: Optional[int] = None
    boundary: Optional[ChainCode] = None
    cores: List[ChainCode] = field(default_factory=list)


def _to_int(key: str, value: str) -> int:
    try:
        return int(value.split()[0])
    except (ValueError, IndexError):
        raise OverlayFormatError(f"Invalid {key} value: {value!r}") from None


def parse_overlay(source) -> List[Abnormality]:
    """
    Parse a DDSM overlay file.

    Args:
        source: Path to the .OVERLAY file, or an iterable of its lines

    Returns:
        List of Abnormality, in file order

    Raises:
        OverlayFormatError: If the file is malformed or the number of
            abnormalities does not match TOTAL_ABNORMALITIES
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, 'r') as f:
            return parse_overlay(f.readlines())

    return _parse_lines(source)


def _parse_lines(lines: Iterable[str]) -> List[Abnormality]:
    total = None
    abnormalities = []
    current = None
    code_is = None

    for line in lines:
        line = line.strip()
        if not line:
            continue

        m = _TOTAL_RE.match(line)
        if m:
            total = int(m.group(1))
            continue

        m = _ABNORMALITY_RE.match(line)
        if m:
            current = Abnormality(number=int(m.group(1)))
            abnormalities.append(current)
            code_is = None
            continue

        if current is None:
            raise OverlayFormatError(f"Unexpected line before first ABNORMALITY: {line[:40]!r}")

        if line.startswith('BOUNDARY'):
            code_is = 'boundary'
            continue
        if line.startswith('CORE'):
            code_is = 'core'
            continue

        m = _FIELD_RE.match(line)
        if m and code_is is None:
            key, value = m.group(1), m.group(2).strip()
            if key == 'LESION_TYPE':
                current.lesion_types.append(value)
            elif key == 'PATHOLOGY':
                current.pathology = value
            elif key == 'ASSESSMENT':
                current.assessment = _to_int(key, value)
            elif key == 'SUBTLETY':
                current.subtlety = _to_int(key, value)
            else:
                current.total_outlines = _to_int(key, value)
            continue

        if code_is == 'boundary':
            current.boundary = ChainCode.parse(line)
        elif code_is == 'core':
            current.cores.append(ChainCode.parse(line))
        else:
            raise OverlayFormatError(f"Unrecognised overlay line: {line[:40]!r}")

    if total is None:
        raise OverlayFormatError("Missing TOTAL_ABNORMALITIES line")
    if len(abnormalities) != total:
        raise OverlayFormatError(
            f"Expected {total} abnormalities, found {len(abnormalities)}"
        )
    for abnormality in abnormalities:
        if abnormality.boundary is None:
            raise OverlayFormatError(f"Abnormality {abnormality.number} has no boundary")

    return abnormalities
