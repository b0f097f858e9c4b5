"""Exception types raised by the converter."""


class DDSMCodecError(Exception):
    """Base class for all converter errors."""


class UsageError(DDSMCodecError):
    """The converter was invoked incorrectly."""


class UnknownDigitizerError(UsageError, KeyError):
    """No calibration function exists for the requested digitizer."""

    def __init__(self, name, known=()):
        self.name = name
        self.known = tuple(known)
        super().__init__(name)

    def __str__(self):
        return f"Unknown digitizer '{self.name}'. Expected one of: {', '.join(self.known)}"


class DimensionError(DDSMCodecError, ValueError):
    """The number of rows or columns is not positive."""

    def __init__(self, axis: str, value: int):
        self.axis = axis
        self.value = value
        super().__init__(f"The number of {axis} must be positive, got {value}")


class FileAccessError(DDSMCodecError, OSError):
    """An input or output file could not be opened or closed."""


class CalibrationCheckError(DDSMCodecError, RuntimeError):
    """A calibration function produced an out-of-range grey level."""

    def __init__(self, digitizer: str, raw: int, value: int):
        self.digitizer = digitizer
        self.raw = raw
        self.value = value
        super().__init__(
            f"The calibration function for the {digitizer} digitizer has a range problem. "
            f"The input value that generated this error was {raw} (output {value})"
        )


class StreamDecodeError(DDSMCodecError, ValueError):
    """The raw stream could not be converted."""


class CalibrationRangeError(StreamDecodeError):
    """A pixel calibrated to a value outside the output range."""

    def __init__(self, index: int, raw: int, value: int):
        self.index = index
        self.raw = raw
        self.value = value
        super().__init__(
            f"A pixel value error was detected at sample {index}. "
            f"Raw value is {raw}, calibrated value is {value}"
        )


class ImageSizeError(StreamDecodeError):
    """The number of decoded samples does not match rows x cols."""

    def __init__(self, num_pixels: int, rows: int, cols: int):
        self.num_pixels = num_pixels
        self.rows = rows
        self.cols = cols
        super().__init__(
            f"The specified number of pixels seems to be incorrect for the input file. "
            f"Read {num_pixels} pixels, which is not equal to {rows} x {cols}"
        )


class PnmFormatError(DDSMCodecError, ValueError):
    """A PNM file is malformed."""


class OverlayFormatError(DDSMCodecError, ValueError):
    """A DDSM overlay file or chain code is malformed."""
