"""DDSM raw to plain PNM converter - integrates all conversion stages."""

import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ConversionConfig, DEFAULT_CONFIG
from ..calibration import Digitizer, get_digitizer, check_calibration_functions
from ..exceptions import (
    CalibrationRangeError, DimensionError, FileAccessError, ImageSizeError
)
from ..io.bytestream import RawSampleReader
from ..io.pnm import PnmWriter


@dataclass
class ConversionResult:
    """Summary of one raw-to-PNM conversion."""
    rows: int
    cols: int
    num_pixels: int
    min_value: int
    max_value: int
    digitizer: str
    bits_per_pixel: int
    dropped_trailing_byte: bool = False
    output_path: Optional[Path] = None


class RawToPnmConverter:
    """
    Converter from a DDSM raw sample stream to a plain PNM image.

    Pipeline:
    1. Write PNM header (with the digitizer's native bit depth)
    2. Read byte pairs as big-endian 16-bit samples
    3. Calibrate raw values to normalised grey levels
    4. Write line-wrapped grey levels
    5. Check the sample count against rows x cols
    """

    def __init__(self, digitizer: Digitizer, config: ConversionConfig = DEFAULT_CONFIG):
        self.digitizer = digitizer
        self.config = config

    def convert(self, source, sink, rows: int, cols: int) -> ConversionResult:
        """
        Convert a raw stream to a PNM image.

        The sink may hold a complete header and partial pixel data if an
        error is raised; callers must not rely on the output file existing.

        Args:
            source: File object opened in binary read mode
            sink: File object opened in text write mode
            rows: Number of image rows
            cols: Number of image columns

        Returns:
            ConversionResult

        Raises:
            DimensionError: If rows or cols is not positive
            CalibrationRangeError: If a sample calibrates out of range
            ImageSizeError: If the number of samples is not rows * cols
        """
        if rows < 1:
            raise DimensionError('rows', rows)
        if cols < 1:
            raise DimensionError('cols', cols)

        max_grey = self.config.max_grey_level
        writer = PnmWriter(sink, self.config)
        writer.write_header(rows, cols, self.digitizer.bits_per_pixel)

        reader = RawSampleReader(source, self.config.chunk_size)
        min_value = max_grey
        max_value = 0

        for raw in reader:
            grey, ok = self.digitizer.calibrate(raw, self.config)

            bad = np.flatnonzero(~ok | (grey > max_grey))
            if bad.size:
                first = int(bad[0])
                writer.write_pixels(grey[:first].tolist())
                index = writer.pixels_written
                raise CalibrationRangeError(index, int(raw[first]), int(grey[first]))

            writer.write_pixels(grey.tolist())
            min_value = min(min_value, int(grey.min()))
            max_value = max(max_value, int(grey.max()))

        num_pixels = writer.pixels_written
        if num_pixels != rows * cols:
            raise ImageSizeError(num_pixels, rows, cols)

        return ConversionResult(
            rows=rows,
            cols=cols,
            num_pixels=num_pixels,
            min_value=min_value,
            max_value=max_value,
            digitizer=self.digitizer.name,
            bits_per_pixel=self.digitizer.bits_per_pixel,
            dropped_trailing_byte=reader.dropped_trailing_byte,
        )


def output_path_for(input_path, config: ConversionConfig = DEFAULT_CONFIG) -> Path:
    """Name of the PNM file written for input_path."""
    return Path(str(input_path) + config.output_suffix)


def convert_file(input_path, rows: int, cols: int, digitizer_name: str,
                 config: ConversionConfig = DEFAULT_CONFIG) -> ConversionResult:
    """
    Convert a DDSM raw file to a PNM file next to it.

    The output is named <input_path><output_suffix> and is overwritten if
    it exists. Both files are closed on every exit path.

    Args:
        input_path: Path to the raw file
        rows: Number of image rows
        cols: Number of image columns
        digitizer_name: One of 'dba', 'howtek-mgh', 'howtek-ismd', 'lumisys'
        config: Conversion settings

    Returns:
        ConversionResult with output_path set

    Raises:
        UnknownDigitizerError: If digitizer_name is not recognised
        CalibrationCheckError: If the calibration functions are broken
        DimensionError: If rows or cols is not positive
        FileAccessError: If a file cannot be opened, read, written or closed
        CalibrationRangeError, ImageSizeError: If the stream is invalid
    """
    check_calibration_functions(config=config)
    digitizer = get_digitizer(digitizer_name)

    if rows < 1:
        raise DimensionError('rows', rows)
    if cols < 1:
        raise DimensionError('cols', cols)

    output_path = output_path_for(input_path, config)
    converter = RawToPnmConverter(digitizer, config)

    try:
        source = open(input_path, 'rb')
    except OSError as e:
        raise FileAccessError(f"Cannot open input file {input_path}: {e.strerror}") from e

    try:
        with source:
            try:
                sink = open(output_path, 'w', encoding='ascii', newline='\n')
            except OSError as e:
                raise FileAccessError(f"Cannot create output file {output_path}: {e.strerror}") from e

            with sink:
                result = converter.convert(source, sink, rows, cols)
    except FileAccessError:
        raise
    except OSError as e:
        # Read, write or close failure after both files were opened
        raise FileAccessError(f"A file error was detected while converting {input_path}: {e}") from e

    result.output_path = output_path
    return result
