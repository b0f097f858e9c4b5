#!/usr/bin/env python3
"""
PNM to 16-bit PNG converter CLI

Usage:
    python pnm2png.py --input <path> [--output <path>]

Example:
    python pnm2png.py --input A_0069_1.LEFT_CC.LJPEG.1-ddsmraw2pnm.pnm --delete-pnm
"""

import argparse
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pathlib import Path

from ddsmcodec.io import read_plain_pnm, write_png16
from ddsmcodec.exceptions import PnmFormatError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog='pnm2png',
        description='Convert a plain PNM file to a lossless 16-bit PNG',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert next to the input file (same name, .png suffix)
  python pnm2png.py --input scan.LJPEG.1-ddsmraw2pnm.pnm

  # Convert and remove the (large) PNM file
  python pnm2png.py --input scan.LJPEG.1-ddsmraw2pnm.pnm --delete-pnm
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input plain PNM file (.pnm)')

    # Optional arguments
    parser.add_argument('--output', '-o',
                        help='Output PNG path (default: input with .png suffix)')
    parser.add_argument('--delete-pnm', action='store_true',
                        help='Delete the PNM file after a successful conversion')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    output = args.output or str(Path(args.input).with_suffix('.png'))

    try:
        if args.verbose:
            print(f"Reading PNM file: {args.input}")

        start_time = time.time()
        image, comments = read_plain_pnm(args.input)

        if args.verbose:
            print(f"  Shape: {image.shape}")
            print(f"  Range: [{image.min()}, {image.max()}]")
            for comment in comments:
                print(f"  Comment: {comment}")

        write_png16(image, output)
        elapsed = time.time() - start_time

        if args.delete_pnm:
            os.unlink(args.input)

        if args.verbose:
            print(f"  Conversion time: {elapsed:.2f}s")
            print(f"\nOutput written to: {output}")
        else:
            print(f"Converted: {args.input} -> {output} "
                  f"({image.shape[0]}x{image.shape[1]})")

    except PnmFormatError as e:
        print(f"Error: Invalid PNM file - {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
