#!/usr/bin/env python3
"""
DDSM raw to PNM converter CLI

Usage:
    python ddsmraw2pnm.py <some-ddsm-raw-file> <num-rows> <num-cols> <digitizer>

Example:
    python ddsmraw2pnm.py A_0069_1.LEFT_CC.LJPEG.1 4616 1736 howtek-mgh
"""

import argparse
import re
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ddsmcodec.calibration import DIGITIZERS
from ddsmcodec.codec import convert_file
from ddsmcodec.constants import (
    EXIT_SUCCESS, EXIT_SYNTAX_ERROR, EXIT_ROWS_NOT_POSITIVE, EXIT_COLS_NOT_POSITIVE,
    EXIT_FILE_ERROR, EXIT_PNM_ERROR, EXIT_PROGRAM_ERROR, EXIT_IMAGE_SIZE_ERROR
)
from ddsmcodec.exceptions import (
    UsageError, DimensionError, CalibrationCheckError,
    ImageSizeError, StreamDecodeError
)

DESCRIPTION = """\
Convert a DDSM mammogram image from raw (LJPEG.1) format to plain PNM format.

The raw file holds big-endian byte pairs as written by the DDSM "jpeg"
program ("jpeg -d -s A_0069_1.LEFT_CC.LJPEG"). Grey levels are calibrated
to optical density with the function for the given digitizer and then
normalised, so a grey level maps to the same optical density for all four
digitizers. An optical density of 0 maps to 65535 and the maximum expected
optical density (4.0) maps to 0; a quadratic companding function then gives
more precision to medium and high grey levels.
"""

EPILOG = """\
The number of rows and columns can be found in the ".ics" file for the case.
Text that does not start with a number counts as 0 rows or columns.
The calibration functions are checked before the digitizer name.

On success the PNM file "<some-ddsm-raw-file>-ddsmraw2pnm.pnm" is written
(overwriting any existing file), its name is printed to standard output and
the exit code is zero. On failure a message is printed to standard error and
the exit code is non-zero. The PNM file may be partially written even on
failure, so callers must check the exit code.

Plain PNM files are uncompressed and very large; convert them to 16-bit PNG
(see pnm2png.py) and delete the PNM file afterwards.

Examples:
  # Convert a Howtek (MGH) scan
  python ddsmraw2pnm.py A_0069_1.LEFT_CC.LJPEG.1 4616 1736 howtek-mgh

  # Same, with conversion statistics on standard error
  python ddsmraw2pnm.py A_0069_1.LEFT_CC.LJPEG.1 4616 1736 howtek-mgh --verbose
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with the syntax error code."""

    def error(self, message):
        self.print_help(sys.stderr)
        print(f"\nError: {message}", file=sys.stderr)
        sys.exit(EXIT_SYNTAX_ERROR)


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def leading_int(text: str) -> int:
    """Parse the leading integer of text; 0 if there is none (C atoi rules)."""
    m = _LEADING_INT_RE.match(text)
    return int(m.group(1)) if m else 0


def create_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='ddsmraw2pnm',
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG
    )

    parser.add_argument('input',
                        help='DDSM raw file (LJPEG.1)')
    parser.add_argument('rows', type=leading_int,
                        help='Number of image rows (non-numeric text counts as 0)')
    parser.add_argument('cols', type=leading_int,
                        help='Number of image columns (non-numeric text counts as 0)')
    parser.add_argument('digitizer',
                        help=f"Digitizer used to scan the film: {', '.join(DIGITIZERS)}")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print conversion statistics to standard error')

    return parser


def main(argv=None) -> int:
    args = create_parser().parse_args(argv)

    try:
        start_time = time.time()
        result = convert_file(args.input, args.rows, args.cols, args.digitizer)
        elapsed = time.time() - start_time

    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SYNTAX_ERROR
    except DimensionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ROWS_NOT_POSITIVE if e.axis == 'rows' else EXIT_COLS_NOT_POSITIVE
    except CalibrationCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Error: Sorry, there is a problem with the program's calibration functions!",
              file=sys.stderr)
        return EXIT_PROGRAM_ERROR
    except ImageSizeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IMAGE_SIZE_ERROR
    except StreamDecodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Error: Could not create the PNM file.", file=sys.stderr)
        return EXIT_PNM_ERROR
    except OSError as e:
        print(f"Error: A file error was detected at runtime - {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    if args.verbose:
        print(f"Digitizer: {result.digitizer} ({result.bits_per_pixel} bits/pixel)",
              file=sys.stderr)
        print(f"  Image size: {result.rows}x{result.cols} ({result.num_pixels:,} pixels)",
              file=sys.stderr)
        print(f"  Grey level range: [{result.min_value}, {result.max_value}]", file=sys.stderr)
        if result.dropped_trailing_byte:
            print("  Ignored a trailing odd byte", file=sys.stderr)
        print(f"  Conversion time: {elapsed:.2f}s", file=sys.stderr)

    print(result.output_path)
    return EXIT_SUCCESS


if __name__ == '__main__':
    sys.exit(main())
