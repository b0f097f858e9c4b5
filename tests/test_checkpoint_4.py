"""Checkpoint 4: File Conversion, Raw Reading and CLI Exit Codes."""

import sys
import os
import io
import errno
import builtins
import subprocess
import tempfile

# Add parent directory to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

import numpy as np
import ddsmraw2pnm
import ddsmcodec.codec.converter as converter_module
from ddsmcodec.calibration import Digitizer, DIGITIZERS, get_digitizer
from ddsmcodec.codec import convert_file, output_path_for
from ddsmcodec.constants import (
    EXIT_SUCCESS, EXIT_SYNTAX_ERROR, EXIT_ROWS_NOT_POSITIVE, EXIT_COLS_NOT_POSITIVE,
    EXIT_FILE_ERROR, EXIT_PNM_ERROR, EXIT_PROGRAM_ERROR, EXIT_IMAGE_SIZE_ERROR,
    OUTPUT_SUFFIX
)
from ddsmcodec.exceptions import (
    DimensionError, FileAccessError, ImageSizeError, UnknownDigitizerError
)
from ddsmcodec.io import read_plain_pnm, read_raw_image, read_calibrated_image


def write_raw(directory: str, rows: int, cols: int, seed: int = 0, extra: bytes = b'') -> str:
    """Write a random raw image and return its path."""
    rng = np.random.default_rng(seed)
    raw = rng.integers(0, 4096, size=(rows, cols)).astype('>u2')
    path = os.path.join(directory, 'case.LJPEG.1')
    with open(path, 'wb') as f:
        f.write(raw.tobytes() + extra)
    return path


def run_cli(*args):
    """Run the CLI script and return (returncode, stdout, stderr)."""
    result = subprocess.run(
        [sys.executable, os.path.join(PROJECT_ROOT, 'ddsmraw2pnm.py')] + [str(a) for a in args],
        capture_output=True,
        text=True
    )
    return result.returncode, result.stdout, result.stderr


def exit_status(code: int) -> int:
    """Process exit status as seen by the parent for sys.exit(code)."""
    return code & 0xFF


def test_convert_file():
    """A raw file converts to <input>-ddsmraw2pnm.pnm."""
    print("=" * 60)
    print("Test 1: File Conversion")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 12, 17)
        result = convert_file(path, 12, 17, 'lumisys')

        assert str(result.output_path) == path + OUTPUT_SUFFIX
        assert result.output_path == output_path_for(path)
        assert result.num_pixels == 12 * 17

        image, _ = read_plain_pnm(result.output_path)
        expected = read_calibrated_image(path, 12, 17, get_digitizer('lumisys'))
        assert np.array_equal(image, expected)
        print(f"   ✓ Output: {os.path.basename(result.output_path)}")
    print("✅ File conversion test passed")


def test_convert_file_overwrites():
    """An existing output file is replaced."""
    print("\n" + "=" * 60)
    print("Test 2: Output Overwrite")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 3, 3)
        with open(path + OUTPUT_SUFFIX, 'w') as f:
            f.write('stale contents ' * 1000)

        result = convert_file(path, 3, 3, 'dba')
        image, _ = read_plain_pnm(result.output_path)
        assert image.shape == (3, 3)
    print("✅ Output overwrite test passed")


def test_convert_file_errors():
    """Usage, dimension and file errors are raised before any output is written."""
    print("\n" + "=" * 60)
    print("Test 3: File Conversion Errors")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 4, 4)
        output = path + OUTPUT_SUFFIX

        for rows, cols, axis in ((0, 4, 'rows'), (4, 0, 'cols'), (-3, -3, 'rows')):
            try:
                convert_file(path, rows, cols, 'dba')
                raise AssertionError("Expected DimensionError")
            except DimensionError as e:
                assert e.axis == axis
        assert not os.path.exists(output)

        try:
            convert_file(path, 4, 4, 'xerox')
            raise AssertionError("Expected UnknownDigitizerError")
        except UnknownDigitizerError:
            pass
        assert not os.path.exists(output)

        missing = os.path.join(tmp, 'missing.LJPEG.1')
        try:
            convert_file(missing, 4, 4, 'dba')
            raise AssertionError("Expected FileAccessError")
        except FileAccessError:
            pass
        assert not os.path.exists(missing + OUTPUT_SUFFIX)
    print("✅ File conversion errors test passed")


def test_partial_output_on_size_error():
    """A size mismatch leaves a partially written file behind."""
    print("\n" + "=" * 60)
    print("Test 4: Partial Output on Size Error")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 4, 4)
        try:
            convert_file(path, 4, 5, 'howtek-mgh')
            raise AssertionError("Expected ImageSizeError")
        except ImageSizeError as e:
            assert e.num_pixels == 16

        with open(path + OUTPUT_SUFFIX) as f:
            text = f.read()
        assert text.startswith('P2\n')
        assert len(text.split('\n', 5)[5].split()) == 16
    print("✅ Partial output test passed")


def test_raw_reader():
    """Whole-file reading gives a (rows, cols) uint16 array."""
    print("\n" + "=" * 60)
    print("Test 5: Raw Reader")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 6, 8, seed=5, extra=b'\x01')
        image = read_raw_image(path, 6, 8)

        rng = np.random.default_rng(5)
        expected = rng.integers(0, 4096, size=(6, 8))
        assert image.dtype == np.uint16
        assert np.array_equal(image, expected)

        try:
            read_raw_image(path, 6, 9)
            raise AssertionError("Expected ImageSizeError")
        except ImageSizeError:
            pass
    print("✅ Raw reader test passed")


def test_cli_success():
    """The CLI prints the output filename and exits with 0."""
    print("\n" + "=" * 60)
    print("Test 6: CLI Success")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 5, 7)
        code, stdout, stderr = run_cli(path, 5, 7, 'howtek-ismd')

        assert code == EXIT_SUCCESS, stderr
        assert stdout.strip() == path + OUTPUT_SUFFIX
        assert stderr == ''
        assert os.path.exists(path + OUTPUT_SUFFIX)
    print("✅ CLI success test passed")


def test_cli_exit_codes():
    """Each failure category has its own exit code."""
    print("\n" + "=" * 60)
    print("Test 7: CLI Exit Codes")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 5, 7)
        missing = os.path.join(tmp, 'missing')

        cases = [
            ((path, 5, 7), EXIT_SYNTAX_ERROR, "missing digitizer"),
            ((path, 5, 7, 'xerox'), EXIT_SYNTAX_ERROR, "unknown digitizer"),
            ((path, 0, 7, 'dba'), EXIT_ROWS_NOT_POSITIVE, "zero rows"),
            ((path, 5, -7, 'dba'), EXIT_COLS_NOT_POSITIVE, "negative cols"),
            ((missing, 5, 7, 'dba'), EXIT_FILE_ERROR, "missing input"),
            ((path, 5, 8, 'dba'), EXIT_IMAGE_SIZE_ERROR, "wrong size"),
        ]
        for args, expected, label in cases:
            code, stdout, stderr = run_cli(*args)
            assert code == exit_status(expected), f"{label}: got {code}"
            assert stderr, f"{label}: no diagnostic"
            print(f"   ✓ {label}: exit {expected}")
    print("✅ CLI exit codes test passed")


def test_cli_main_in_process():
    """main() returns exit codes instead of exiting for runtime errors."""
    print("\n" + "=" * 60)
    print("Test 8: CLI main()")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 2, 2)
        assert ddsmraw2pnm.main([path, '2', '2', 'dba', '--verbose']) == EXIT_SUCCESS
        assert ddsmraw2pnm.main([path, '2', '0', 'dba']) == EXIT_COLS_NOT_POSITIVE

        try:
            ddsmraw2pnm.main([path, '2'])
            raise AssertionError("Expected SystemExit")
        except SystemExit as e:
            assert e.code == EXIT_SYNTAX_ERROR
    print("✅ CLI main() test passed")


def broken_digitizer():
    """Digitizer whose density goes above the maximum for raw > 100."""
    return Digitizer('broken', bits_per_pixel=12, raw_min=None, raw_max=65535,
                     formula=lambda raw: np.where(raw > 100, 4.5, 1.0))


def test_cli_calibration_failures():
    """A broken self-check exits -6 before any file is opened; a bad pixel exits -5."""
    print("\n" + "=" * 60)
    print("Test 9: CLI Calibration Failures")
    print("=" * 60)

    check = converter_module.check_calibration_functions
    DIGITIZERS['broken'] = broken_digitizer()
    try:
        with tempfile.TemporaryDirectory() as tmp:
            path = write_raw(tmp, 5, 7)
            output = path + OUTPUT_SUFFIX

            assert ddsmraw2pnm.main([path, '5', '7', 'dba']) == EXIT_PROGRAM_ERROR
            assert not os.path.exists(output)

            # The self-check runs before the digitizer name is looked up
            assert ddsmraw2pnm.main([path, '5', '7', 'xerox']) == EXIT_PROGRAM_ERROR
            print("   ✓ Self-check failure: exit -6, no output file")

            converter_module.check_calibration_functions = lambda **kwargs: None
            assert ddsmraw2pnm.main([path, '5', '7', 'broken']) == EXIT_PNM_ERROR
            with open(output) as f:
                assert f.read().startswith('P2\n')
            print("   ✓ Pixel range failure: exit -5, partial output left behind")
    finally:
        converter_module.check_calibration_functions = check
        del DIGITIZERS['broken']
    print("✅ CLI calibration failures test passed")


def test_cli_dimension_parsing():
    """Row and column counts follow C atoi rules."""
    print("\n" + "=" * 60)
    print("Test 10: CLI Dimension Parsing")
    print("=" * 60)

    assert ddsmraw2pnm.leading_int('abc') == 0
    assert ddsmraw2pnm.leading_int(' 42px') == 42
    assert ddsmraw2pnm.leading_int('-3') == -3

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 5, 7)
        assert ddsmraw2pnm.main([path, 'abc', '7', 'dba']) == EXIT_ROWS_NOT_POSITIVE
        assert ddsmraw2pnm.main([path, '5', 'x7', 'dba']) == EXIT_COLS_NOT_POSITIVE
        assert ddsmraw2pnm.main([path, '5', '7cols', 'dba']) == EXIT_SUCCESS
    print("✅ CLI dimension parsing test passed")


class FailingCloseFile(io.StringIO):
    """Text sink whose close fails as if the disk were full."""

    def close(self):
        super().close()
        raise OSError(errno.ENOSPC, 'No space left on device')


def test_close_failure():
    """A failure closing the output file is reported as FileAccessError."""
    print("\n" + "=" * 60)
    print("Test 11: Output Close Failure")
    print("=" * 60)

    def fake_open(file, mode='r', **kwargs):
        if 'w' in mode:
            return FailingCloseFile()
        return builtins.open(file, mode, **kwargs)

    with tempfile.TemporaryDirectory() as tmp:
        path = write_raw(tmp, 3, 3)
        converter_module.open = fake_open
        try:
            convert_file(path, 3, 3, 'dba')
            raise AssertionError("Expected FileAccessError")
        except FileAccessError as e:
            assert isinstance(e.__cause__, OSError)
            assert e.__cause__.errno == errno.ENOSPC
        finally:
            del converter_module.open

        converter_module.open = fake_open
        try:
            assert ddsmraw2pnm.main([path, '3', '3', 'dba']) == EXIT_FILE_ERROR
        finally:
            del converter_module.open
    print("✅ Output close failure test passed")


def main():
    """Run all Checkpoint 4 tests."""
    print("\n" + "=" * 60)
    print("CHECKPOINT 4: FILE CONVERSION AND CLI")
    print("=" * 60 + "\n")

    tests = [
        ("File Conversion", test_convert_file),
        ("Output Overwrite", test_convert_file_overwrites),
        ("Conversion Errors", test_convert_file_errors),
        ("Partial Output", test_partial_output_on_size_error),
        ("Raw Reader", test_raw_reader),
        ("CLI Success", test_cli_success),
        ("CLI Exit Codes", test_cli_exit_codes),
        ("CLI main()", test_cli_main_in_process),
        ("CLI Calibration Failures", test_cli_calibration_failures),
        ("CLI Dimension Parsing", test_cli_dimension_parsing),
        ("Close Failure", test_close_failure),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except Exception as e:
            print(f"❌ {name} failed: {e}")
            results.append((name, False))

    print("\n" + "=" * 60)
    print("CHECKPOINT 4 SUMMARY")
    print("=" * 60)

    all_passed = True
    for name, passed in results:
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"   {name}: {status}")
        if not passed:
            all_passed = False

    print("\n" + "=" * 60)
    if all_passed:
        print("🎉 CHECKPOINT 4 PASSED - All tests successful!")
    else:
        print("⚠️  CHECKPOINT 4 FAILED - Some tests did not pass")
    print("=" * 60 + "\n")

    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
