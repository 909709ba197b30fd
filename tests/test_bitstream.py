import pytest

from qr_encoder import (
    PAD0,
    PAD1,
    BitBuffer,
    CapacityExceededError,
    InputTooLargeError,
    build_data_codewords,
    encode_data,
    get_character_count_bits,
    pad_data,
    select_version,
)


def test_bit_buffer_msb_first():
    buffer = BitBuffer()
    buffer.put(0b101, 3)
    buffer.put_bit(True)
    assert len(buffer) == 4
    assert buffer.buffer == bytearray([0b10110000])
    assert [buffer.get(i) for i in range(4)] == [True, False, True, True]


def test_bit_buffer_grows_lazily():
    buffer = BitBuffer()
    assert buffer.buffer == bytearray()
    buffer.put(0xAB, 8)
    assert len(buffer.buffer) == 1
    buffer.put_bit(False)
    assert len(buffer.buffer) == 2
    assert buffer.buffer == bytearray([0xAB, 0])


def test_bit_buffer_get_out_of_range():
    buffer = BitBuffer()
    buffer.put_bit(True)
    with pytest.raises(IndexError):
        buffer.get(1)


def test_character_count_bits():
    assert get_character_count_bits(1) == 8
    assert get_character_count_bits(9) == 8
    assert get_character_count_bits(10) == 16
    assert get_character_count_bits(40) == 16


def test_header_and_payload():
    buffer = encode_data(b'HELLO', 1)
    assert len(buffer) == 4 + 8 + 40
    # 0100 00000101 01001000 ...
    assert buffer.buffer[:3] == bytearray([0x40, 0x54, 0x84])


def test_header_for_large_versions():
    buffer = encode_data(b'A', 10)
    assert len(buffer) == 4 + 16 + 8
    assert buffer.buffer == bytearray([0x40, 0x00, 0x14, 0x10])


def test_hello_data_codewords():
    codewords = build_data_codewords(b'HELLO', 1, 'M')
    assert codewords == [0x40, 0x54, 0x84, 0x54, 0xC4, 0xC4, 0xF0,
                         PAD0, PAD1, PAD0, PAD1, PAD0, PAD1, PAD0, PAD1, PAD0]


def test_full_capacity_has_no_pad_bytes():
    # 1-L holds 19 codewords: 12 header bits + 17 bytes + terminator
    codewords = build_data_codewords(b'x' * 17, 1, 'L')
    assert len(codewords) == 19
    assert codewords[-1] & 0x0F == 0
    assert PAD0 not in codewords[-2:]


def test_terminator_skipped_when_it_does_not_fit():
    buffer = BitBuffer()
    for _ in range(150):
        buffer.put_bit(True)
    codewords = pad_data(buffer, 152)
    assert len(buffer) == 152
    assert codewords[-1] == 0b11111100


def test_capacity_exceeded():
    buffer = BitBuffer()
    buffer.put(0, 17)
    with pytest.raises(CapacityExceededError) as excinfo:
        pad_data(buffer, 16)
    assert excinfo.value.bits == 17
    assert excinfo.value.limit == 16


def test_select_version():
    assert select_version(b'HELLO', 'M') == 1
    # 1-M holds 14 bytes, 2-M holds 26
    assert select_version(b'a' * 14, 'M') == 1
    assert select_version(b'a' * 15, 'M') == 2
    assert select_version(b'a' * 26, 'M') == 2
    assert select_version(b'a' * 27, 'M') == 3


def test_select_version_accounts_for_wider_count_field():
    # 9-L holds 230 bytes with an 8 bit count; 10-L holds 271 with 16 bits
    assert select_version(b'a' * 230, 'L') == 9
    assert select_version(b'a' * 231, 'L') == 10


def test_select_version_too_large():
    with pytest.raises(InputTooLargeError):
        select_version(b'a' * 1274, 'H')
    assert select_version(b'a' * 1273, 'H') == 40
