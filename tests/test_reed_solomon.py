from qr_encoder import create_codewords, get_rs_blocks, interleave, rs_encoder
from qr_tables import RSBlock

# Version 1-M data codewords for "HELLO WORLD" in alphanumeric mode
HELLO_WORLD_DATA = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64,
                    236, 17, 236, 17, 236, 17]
HELLO_WORLD_EC = [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


def test_known_ec_codewords():
    assert rs_encoder.encode(HELLO_WORLD_DATA, 10) == HELLO_WORLD_EC


def test_ec_length_is_exact():
    for num_ec in (7, 10, 13, 17, 22, 30):
        assert len(rs_encoder.encode([0, 0, 0, 1], num_ec)) == num_ec
        assert len(rs_encoder.encode([0] * 15, num_ec)) == num_ec


def test_all_zero_block_has_zero_ec():
    assert rs_encoder.encode([0] * 15, 10) == [0] * 10


def test_interleave_skips_exhausted_blocks():
    blocks = [[1, 2], [3, 4], [5, 6, 7], [8, 9, 10]]
    assert interleave(blocks) == [1, 3, 5, 8, 2, 4, 6, 9, 7, 10]


def test_interleave_empty():
    assert interleave([]) == []


def test_single_block_is_data_then_ec():
    blocks = get_rs_blocks(1, 'M')
    assert blocks == [RSBlock(26, 16)]
    assert create_codewords(HELLO_WORLD_DATA, blocks) == HELLO_WORLD_DATA + HELLO_WORLD_EC


def test_two_block_sizes_are_interleaved():
    # 5-Q: two blocks of 15 data codewords then two of 16, 18 EC each
    blocks = get_rs_blocks(5, 'Q')
    data = list(range(62))
    codewords = create_codewords(data, blocks)

    assert len(codewords) == sum(block.total_codewords for block in blocks) == 134
    assert codewords[:4] == [0, 15, 30, 46]
    # Only the longer blocks contribute the last data column
    assert codewords[60:62] == [45, 61]

    ec_blocks = [rs_encoder.encode(data[0:15], 18),
                 rs_encoder.encode(data[15:30], 18),
                 rs_encoder.encode(data[30:46], 18),
                 rs_encoder.encode(data[46:62], 18)]
    assert codewords[62:66] == [block[0] for block in ec_blocks]
    assert codewords[-4:] == [block[-1] for block in ec_blocks]
