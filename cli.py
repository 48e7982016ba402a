#!/usr/bin/env python3
"""
nibs command line interface.

Prints the contents of a file as a sequence of fixed-width nibbles, one hex
value per line. Handy for eyeballing packed binary formats.

Usage:
    python cli.py <input> <width> [--count N] [--buffer-size B] [--debug]

Examples:
    python cli.py data.bin 4                # hex digits
    python cli.py data.bin 12 --count 10    # first ten 12-bit values
"""

import logging
import sys

from nibs import Nibs, StreamExhausted, __version__
from nibs.reader import DEFAULT_BUFFER_SIZE, MAX_NIBBLE, MIN_BUFFER_SIZE

log = logging.getLogger("nibs.cli")


def print_version() -> None:
    """Print version information."""
    print(f"nibs {__version__}")


def print_help(prog_name: str) -> None:
    """Print help message."""
    print(f"nibs {__version__}: read a file in nibbles of 1-{MAX_NIBBLE} bits")
    print()
    print("Usage:")
    print(f"  {prog_name} <input> <width> [--count N] [--buffer-size B] [--debug]")
    print()
    print("Options:")
    print("  --count N        Stop after N nibbles")
    print(f"  --buffer-size B  Lookahead buffer in bytes (default {DEFAULT_BUFFER_SIZE})")
    print("  --debug          Log buffer refills to stderr")
    print("  -h, --help       Show this help message")
    print("  -v, --version    Show version information")
    print()
    print("Arguments:")
    print("  input            File to read")
    print(f"  width            Nibble width in bits (1-{MAX_NIBBLE})")
    print()
    print("Output:")
    print("  One zero-padded hex value per line. If the file does not hold a")
    print("  whole number of nibbles, 'Remaining: <n> bits' is printed followed")
    print("  by the value of those last bits.")
    print()


def hex_digits(width: int) -> int:
    """Number of hex digits needed to show a ``width``-bit value."""
    return (width + 3) // 4


def do_dump(input_path: str, width: int, count, buffer_size: int) -> int:
    """Print the nibbles of a file.

    Args:
        input_path: Input file path.
        width: Nibble width in bits.
        count: Maximum number of nibbles to print, or None for all.
        buffer_size: Reader buffer size in bytes.

    Returns:
        0 on success, 1 if the file cannot be opened, 2 on a read error.
    """
    try:
        f = open(input_path, "rb")
    except OSError as e:
        print(f"Error: Cannot open input file: {input_path} ({e})", file=sys.stderr)
        return 1

    with f:
        nib = Nibs(f, buffer_size)
        digits = hex_digits(width)
        printed = 0
        try:
            while count is None or printed < count:
                try:
                    value = nib.nibble(width)
                except StreamExhausted:
                    break
                print(f"{value:0{digits}x}")
                printed += 1
            else:
                log.debug("stopped after %d nibbles", printed)
                return 0

            remaining = nib.bits_remaining()
            if remaining:
                print(f"Remaining: {remaining} bits")
                print(f"{nib.nibble(remaining):0{hex_digits(remaining)}x}")

            # A source error only shows once every buffered bit is read
            try:
                nib.nibble(1)
            except StreamExhausted:
                pass
        except OSError as e:
            print(f"Error: Read failed after {printed} nibbles ({e})", file=sys.stderr)
            return 2

    log.debug("read %d nibbles from %s", printed, input_path)
    return 0


def main() -> int:
    """CLI entry point."""
    args = sys.argv
    prog_name = args[0] if args else "cli.py"

    # Check for help flag or no arguments
    if len(args) < 2:
        print_help(prog_name)
        return 1

    if args[1] in ("-h", "--help"):
        print_help(prog_name)
        return 0

    if args[1] in ("-v", "--version"):
        print_version()
        return 0

    positional = []
    count = None
    buffer_size = DEFAULT_BUFFER_SIZE
    debug = False

    rest = args[1:]
    i = 0
    while i < len(rest):
        arg = rest[i]
        if arg in ("--count", "--buffer-size"):
            if i + 1 >= len(rest):
                print(f"Error: {arg} requires a value", file=sys.stderr)
                return 1
            try:
                value = int(rest[i + 1])
            except ValueError:
                print(f"Error: {arg} must be an integer", file=sys.stderr)
                return 1
            if arg == "--count":
                count = value
            else:
                buffer_size = value
            i += 2
            continue
        if arg == "--debug":
            debug = True
        elif arg.startswith("--"):
            print(f"Error: Unknown option: {arg}", file=sys.stderr)
            return 1
        else:
            positional.append(arg)
        i += 1

    if len(positional) != 2:
        print("Error: Expected <input> and <width>", file=sys.stderr)
        print(f"Usage: {prog_name} <input> <width> [--count N]", file=sys.stderr)
        return 1

    input_path = positional[0]

    try:
        width = int(positional[1])
    except ValueError:
        print("Error: width must be an integer", file=sys.stderr)
        return 1

    # Validate parameters
    if width < 1 or width > MAX_NIBBLE:
        print(f"Error: width must be 1-{MAX_NIBBLE} bits", file=sys.stderr)
        return 1

    if count is not None and count < 0:
        print("Error: count must not be negative", file=sys.stderr)
        return 1

    if buffer_size < MIN_BUFFER_SIZE:
        print(
            f"Error: buffer size must be at least {MIN_BUFFER_SIZE} bytes",
            file=sys.stderr,
        )
        return 1

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    return do_dump(input_path, width, count, buffer_size)


if __name__ == "__main__":
    sys.exit(main())
