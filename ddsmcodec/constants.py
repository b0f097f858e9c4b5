"""Constants for the DDSM raw-to-PNM converter."""

# Plain (ASCII) greyscale PNM magic
PNM_MAGIC = 'P2'

# Sample width of the raw data and of the output grey levels
NUM_BITS = 16
MAX_GREY_LEVEL = (1 << NUM_BITS) - 1  # 65535

# Optical density that maps to a normalised grey level of 0
MAX_OPTICAL_DENSITY = 4.0

# Suffix appended to the input filename to name the PNM file
OUTPUT_SUFFIX = '-ddsmraw2pnm.pnm'

# Plain PNM lines must stay under 70 characters. Each value is assumed
# to take at most 5 characters, so a newline goes in around column 50.
MAX_CHARS_PER_PIXEL = 5
BREAK_AROUND_COL = 50

# Bytes read from the raw file per I/O call (always even)
READ_CHUNK_SIZE = 1 << 16

# Digitizer names
DBA = 'dba'
HOWTEK_MGH = 'howtek-mgh'
HOWTEK_ISMD = 'howtek-ismd'
LUMISYS = 'lumisys'

# Process exit codes
EXIT_SUCCESS = 0
EXIT_SYNTAX_ERROR = -1
EXIT_ROWS_NOT_POSITIVE = -2
EXIT_COLS_NOT_POSITIVE = -3
EXIT_FILE_ERROR = -4
EXIT_PNM_ERROR = -5
EXIT_PROGRAM_ERROR = -6
EXIT_IMAGE_SIZE_ERROR = -7
