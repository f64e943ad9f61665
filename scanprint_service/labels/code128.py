"""
Code 128 Encoder
================

Code 128 subset B encoding for serial numbers.

Every symbol is 11 modules wide (three bars, three spaces); the stop
symbol is 13 modules (four bars, three spaces). A module is the narrowest
bar/space, ``module_width`` dots wide on the label.

Characters outside printable ASCII (0x20-0x7F) are encoded as a space.
This is a lossy fallback: serial numbers are plain ASCII, and the printer
renders the barcode from the same text anyway.
"""

from typing import List, Sequence

START_B = 104
STOP = 106
CHECKSUM_MODULUS = 103

# Symbol value for characters that cannot be encoded in subset B
SPACE = 0
MAX_SUBSET_B = 95

SYMBOL_MODULES = 11
STOP_MODULES = 13

# Bar/space widths per symbol value, bar first
PATTERNS = (
    (2, 1, 2, 2, 2, 2), (2, 2, 2, 1, 2, 2), (2, 2, 2, 2, 2, 1), (1, 2, 1, 2, 2, 3), (1, 2, 1, 3, 2, 2),
    (1, 3, 1, 2, 2, 2), (1, 2, 2, 2, 1, 3), (1, 2, 2, 3, 1, 2), (1, 3, 2, 2, 1, 2), (2, 2, 1, 2, 1, 3),
    (2, 2, 1, 3, 1, 2), (2, 3, 1, 2, 1, 2), (1, 1, 2, 2, 3, 2), (1, 2, 2, 1, 3, 2), (1, 2, 2, 2, 3, 1),
    (1, 1, 3, 2, 2, 2), (1, 2, 3, 1, 2, 2), (1, 2, 3, 2, 2, 1), (2, 2, 3, 2, 1, 1), (2, 2, 1, 1, 3, 2),
    (2, 2, 1, 2, 3, 1), (2, 1, 3, 2, 1, 2), (2, 2, 3, 1, 1, 2), (3, 1, 2, 1, 3, 1), (3, 1, 1, 2, 2, 2),
    (3, 2, 1, 1, 2, 2), (3, 2, 1, 2, 2, 1), (3, 1, 2, 2, 1, 2), (3, 2, 2, 1, 1, 2), (3, 2, 2, 2, 1, 1),
    (2, 1, 2, 1, 2, 3), (2, 1, 2, 3, 2, 1), (2, 3, 2, 1, 2, 1), (1, 1, 1, 3, 2, 3), (1, 3, 1, 1, 2, 3),
    (1, 3, 1, 3, 2, 1), (1, 1, 2, 3, 1, 3), (1, 3, 2, 1, 1, 3), (1, 3, 2, 3, 1, 1), (2, 1, 1, 3, 1, 3),
    (2, 3, 1, 1, 1, 3), (2, 3, 1, 3, 1, 1), (1, 1, 2, 1, 3, 3), (1, 1, 2, 3, 3, 1), (1, 3, 2, 1, 3, 1),
    (1, 1, 3, 1, 2, 3), (1, 1, 3, 3, 2, 1), (1, 3, 3, 1, 2, 1), (3, 1, 3, 1, 2, 1), (2, 1, 1, 3, 3, 1),
    (2, 3, 1, 1, 3, 1), (2, 1, 3, 1, 1, 3), (2, 1, 3, 3, 1, 1), (2, 1, 3, 1, 3, 1), (3, 1, 1, 1, 2, 3),
    (3, 1, 1, 3, 2, 1), (3, 3, 1, 1, 2, 1), (3, 1, 2, 1, 1, 3), (3, 1, 2, 3, 1, 1), (3, 3, 2, 1, 1, 1),
    (3, 1, 4, 1, 1, 1), (2, 2, 1, 4, 1, 1), (4, 3, 1, 1, 1, 1), (1, 1, 1, 2, 2, 4), (1, 1, 1, 4, 2, 2),
    (1, 2, 1, 1, 2, 4), (1, 2, 1, 4, 2, 1), (1, 4, 1, 1, 2, 2), (1, 4, 1, 2, 2, 1), (1, 1, 2, 2, 1, 4),
    (1, 1, 2, 4, 1, 2), (1, 2, 2, 1, 1, 4), (1, 2, 2, 4, 1, 1), (1, 4, 2, 1, 1, 2), (1, 4, 2, 2, 1, 1),
    (2, 4, 1, 2, 1, 1), (2, 2, 1, 1, 1, 4), (4, 1, 3, 1, 1, 1), (2, 4, 1, 1, 1, 2), (1, 3, 4, 1, 1, 1),
    (1, 1, 1, 2, 4, 2), (1, 2, 1, 1, 4, 2), (1, 2, 1, 2, 4, 1), (1, 1, 4, 2, 1, 2), (1, 2, 4, 1, 1, 2),
    (1, 2, 4, 2, 1, 1), (4, 1, 1, 2, 1, 2), (4, 2, 1, 1, 1, 2), (4, 2, 1, 2, 1, 1), (2, 1, 2, 1, 4, 1),
    (2, 1, 4, 1, 2, 1), (4, 1, 2, 1, 2, 1), (1, 1, 1, 1, 4, 3), (1, 1, 1, 3, 4, 1), (1, 3, 1, 1, 4, 1),
    (1, 1, 4, 1, 1, 3), (1, 1, 4, 3, 1, 1), (4, 1, 1, 1, 1, 3), (4, 1, 1, 3, 1, 1), (1, 1, 3, 1, 4, 1),
    (1, 1, 4, 1, 3, 1), (3, 1, 1, 1, 4, 1), (4, 1, 1, 1, 3, 1), (2, 1, 1, 4, 1, 2), (2, 1, 1, 2, 1, 4),
    (2, 1, 1, 2, 3, 2), (2, 3, 3, 1, 1, 1, 2),
)


def symbol_value(char: str) -> int:
    """Subset B value of one character, space for anything unencodable."""
    value = ord(char) - 32
    if value < 0 or value > MAX_SUBSET_B:
        return SPACE
    return value


def checksum(data_values: Sequence[int], start: int = START_B) -> int:
    """
    Modulo-103 check symbol.

    ``(start + sum(value_i * i)) % 103`` with data symbols numbered from 1.
    """
    total = start
    for position, value in enumerate(data_values, start=1):
        total += value * position
    return total % CHECKSUM_MODULUS


def encode_symbols(text: str) -> List[int]:
    """Symbol values for ``text``: start, data, checksum, stop."""
    data = [symbol_value(c) for c in text]
    return [START_B] + data + [checksum(data), STOP]


def encode(text: str) -> List[int]:
    """
    Encode ``text`` as a module-width sequence.

    The result alternates bar and space widths starting with a bar, in
    modules. Its sum is ``estimate_width(text, 1)``.
    """
    widths: List[int] = []
    for value in encode_symbols(text):
        widths.extend(PATTERNS[value])
    return widths


def estimate_width(text: str, module_width: int) -> int:
    """Printed width in dots of ``text`` at ``module_width`` dots per module."""
    total_modules = SYMBOL_MODULES * (len(text) + 2) + STOP_MODULES
    return total_modules * module_width
