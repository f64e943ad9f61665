"""Tests for the Code 128 subset B encoder."""

import pytest

from scanprint_service.labels.code128 import (
    PATTERNS, START_B, STOP, checksum, encode, encode_symbols, estimate_width, symbol_value,
)


def test_patterns_cover_all_symbols():
    assert len(PATTERNS) == 107
    assert all(sum(p) == 11 for p in PATTERNS[:STOP])
    assert sum(PATTERNS[STOP]) == 13


def test_symbol_value_printable_ascii():
    assert symbol_value(' ') == 0
    assert symbol_value('5') == 21
    assert symbol_value('V') == 54
    assert symbol_value('\x7f') == 95


@pytest.mark.parametrize('char', ['\t', '\n', '\x80', 'é', '€'])
def test_symbol_value_out_of_range_coerces_to_space(char):
    assert symbol_value(char) == 0


def test_checksum_law():
    text = '55V0001'
    values = [ord(c) - 32 for c in text]
    expected = (104 + sum(v * (i + 1) for i, v in enumerate(values))) % 103

    symbols = encode_symbols(text)

    assert symbols[0] == START_B
    assert symbols[1:-2] == values
    assert symbols[-2] == expected
    assert symbols[-1] == STOP


def test_checksum_known_value():
    # 104 + 48*1 + 42*2 + 42*3 + 17*4 + 18*5 + 19*6 + 35*7 = 879 = 8*103 + 55
    assert checksum([symbol_value(c) for c in 'PJJ123C']) == 55


def test_checksum_empty_text_is_start_value():
    assert checksum([]) == START_B % 103
    assert encode_symbols('') == [START_B, 1, STOP]


def test_encode_width_matches_estimate():
    for text in ['', 'A', '55V10M29F04381', 'x' * 40]:
        assert sum(encode(text)) == estimate_width(text, 1)


def test_encode_alternates_bar_and_space():
    widths = encode('55V0001')
    # start + 7 data + checksum = 9 symbols of 6 elements, stop has 7
    assert len(widths) == 9 * 6 + 7
    assert all(1 <= w <= 4 for w in widths)


def test_encode_unencodable_characters_like_spaces():
    assert encode('A\x01B') == encode('A B')


def test_estimate_width():
    assert estimate_width('55V0001', 1) == 112
    assert estimate_width('55V0001', 2) == 224
    assert estimate_width('', 3) == (11 * 2 + 13) * 3
