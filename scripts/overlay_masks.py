#!/usr/bin/env python3
"""
Write ground-truth masks for a DDSM overlay file.

One PNG is written per boundary and per core annotation. The image size
comes from the ".ics" file for the case (LINES and PIXELS_PER_LINE).

Usage:
    python scripts/overlay_masks.py --overlay A_1580_1.LEFT_MLO.OVERLAY \\
        --rows 4606 --cols 2221 --output-dir masks
"""

import argparse
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pathlib import Path

from ddsmcodec.groundtruth import parse_overlay
from ddsmcodec.io import write_mask_png
from ddsmcodec.exceptions import OverlayFormatError


def write_abnormality_masks(overlay_path: str, rows: int, cols: int, output_dir: str):
    """Write masks for every abnormality and return the written paths."""
    abnormalities = parse_overlay(overlay_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(overlay_path).name.replace('.OVERLAY', '')

    written = []
    for abnormality in abnormalities:
        prefix = f"{stem}_abnormality{abnormality.number}"
        print(f"Abnormality {abnormality.number}: {abnormality.pathology} "
              f"({'; '.join(abnormality.lesion_types)})")
        print(f"  Assessment: {abnormality.assessment}, subtlety: {abnormality.subtlety}")

        path = output_dir / f"{prefix}_boundary.png"
        mask = abnormality.boundary.to_mask((rows, cols))
        write_mask_png(mask, path)
        print(f"  Boundary: {int(mask.sum()):,} pixels -> {path}")
        written.append(path)

        for i, core in enumerate(abnormality.cores, start=1):
            path = output_dir / f"{prefix}_core{i}.png"
            mask = core.to_mask((rows, cols))
            write_mask_png(mask, path)
            print(f"  Core {i}: {int(mask.sum()):,} pixels -> {path}")
            written.append(path)

    return written


def main():
    parser = argparse.ArgumentParser(description='Write DDSM overlay ground-truth masks')
    parser.add_argument('--overlay', required=True, help='Path to the .OVERLAY file')
    parser.add_argument('--rows', type=int, required=True, help='Mammogram rows (LINES)')
    parser.add_argument('--cols', type=int, required=True, help='Mammogram columns (PIXELS_PER_LINE)')
    parser.add_argument('--output-dir', default='masks', help='Output directory')
    args = parser.parse_args()

    if args.rows < 1 or args.cols < 1:
        print("Error: --rows and --cols must be positive", file=sys.stderr)
        return 1

    try:
        written = write_abnormality_masks(args.overlay, args.rows, args.cols, args.output_dir)
    except OverlayFormatError as e:
        print(f"Error: Invalid overlay file - {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nWrote {len(written)} masks to {args.output_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
