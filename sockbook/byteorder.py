"""Report the byte order of the running machine."""

from __future__ import annotations

import argparse
import struct
import sys


def byteorder():
    """Return ``"big endian"``, ``"little endian"`` or ``"unknown..."``."""
    first, second = struct.pack("=h", 0x0102)
    if (first, second) == (1, 2):
        return "big endian"
    if (first, second) == (2, 1):
        return "little endian"
    return "unknown..."


def main(argv=None):
    """Print the machine byte order; extra arguments are ignored."""
    parser = argparse.ArgumentParser(description="Print the machine byte order.")
    parser.parse_known_args(argv)
    print(byteorder())
    return 0


if __name__ == "__main__":
    sys.exit(main())