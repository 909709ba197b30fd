"""
QR Code Symbol Encoder (byte mode)

Turns a byte string into the module matrix of a QR code symbol, following
the ISO/IEC 18004 layout rules. Rendering the matrix is left to the caller.

This module contains:
- Galois Field GF(256) arithmetic
- Polynomial operations over GF(256)
- Reed-Solomon error correction encoding and codeword interleaving
- Byte mode bitstream assembly and version selection
- BCH code for format and version information
- QR code matrix construction with function patterns
- Data masking with penalty calculation
- Complete QR code generation

Based on: ISO/IEC 18004 and Kazuhiko Arase's qrcode-generator
"""

import logging
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from qr_tables import (
    ALIGNMENT_POSITIONS,
    EC_LEVEL_BITS,
    MAX_VERSION,
    MIN_VERSION,
    RS_BLOCK_TABLE,
    RSBlock,
)

logger = logging.getLogger(__name__)

# A module is dark (True), light (False) or not yet placed (None).
Module = Optional[bool]


#==============================================================================
# ERRORS
#==============================================================================

class QRCodeError(ValueError):
    """Base class for all errors raised while encoding a symbol."""


class InputTooLargeError(QRCodeError):
    """No version from 1 to 40 can hold the payload at the requested level."""

    def __init__(self, length: int, ec_level: str):
        self.length = length
        self.ec_level = ec_level
        super().__init__(
            f"{length} bytes do not fit in any version at level {ec_level}")


class CapacityExceededError(QRCodeError):
    """The bitstream is longer than the data capacity of the version."""

    def __init__(self, bits: int, limit: int):
        self.bits = bits
        self.limit = limit
        super().__init__(f"code length overflow ({bits} > {limit} bits)")


class GFDomainError(QRCodeError):
    """Logarithm requested for a value outside GF(256)*."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"glog({value}) is undefined")


class UnsupportedParameterError(QRCodeError):
    """Unknown error correction level, version or mask pattern."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"Unsupported {name}: {value!r}")


#==============================================================================
# GALOIS FIELD GF(256) ARITHMETIC
#==============================================================================

class GF256:
    """
    Galois Field GF(2^8) arithmetic for QR codes.

    Uses the primitive polynomial x^8 + x^4 + x^3 + x^2 + 1 (0x11d) with
    generator alpha = 2. Multiplying by alpha and reducing by that
    polynomial gives the recurrence

        alpha^i = alpha^(i-4) + alpha^(i-5) + alpha^(i-6) + alpha^(i-8)

    which is how the exponent table is filled.

    References:
    - https://en.wikipedia.org/wiki/Finite_field_arithmetic
    - https://research.swtch.com/field
    """

    def __init__(self):
        """Initialize the field with precomputed exp and log tables."""
        self.exp_table = [0] * 256
        self.log_table = [0] * 256
        self._build_tables()

    def _build_tables(self):
        for i in range(8):
            self.exp_table[i] = 1 << i
        for i in range(8, 256):
            self.exp_table[i] = (self.exp_table[i - 4] ^ self.exp_table[i - 5] ^
                                 self.exp_table[i - 6] ^ self.exp_table[i - 8])
        for i in range(255):
            self.log_table[self.exp_table[i]] = i

    def gexp(self, n: int) -> int:
        """Return alpha^n for any integer n (the group has order 255)."""
        return self.exp_table[n % 255]

    def glog(self, n: int) -> int:
        """Return the discrete logarithm of a nonzero field element."""
        if n < 1 or n > 255:
            raise GFDomainError(n)
        return self.log_table[n]

    def multiply(self, a: int, b: int) -> int:
        """Multiply two GF(256) elements using log tables."""
        if a == 0 or b == 0:
            return 0
        return self.gexp(self.glog(a) + self.glog(b))


# Global GF256 instance, read-only after import
gf = GF256()
gexp = gf.gexp
glog = gf.glog


#==============================================================================
# POLYNOMIAL OPERATIONS OVER GF(256)
#==============================================================================

class Polynomial:
    """
    Polynomial with coefficients in GF(256).

    Coefficients are stored in descending order of degree:
    coeffs[0] is the coefficient of the highest power. Leading zeros are
    dropped and `shift` zero coefficients appended, which multiplies the
    polynomial by x^shift. Instances are immutable.
    """

    def __init__(self, coefficients: Sequence[int], shift: int = 0):
        offset = 0
        while offset < len(coefficients) and coefficients[offset] == 0:
            offset += 1
        self.coeffs = tuple(coefficients[offset:]) + (0,) * shift

    def __len__(self) -> int:
        return len(self.coeffs)

    def __getitem__(self, index: int) -> int:
        return self.coeffs[index]

    def __eq__(self, other) -> bool:
        return isinstance(other, Polynomial) and self.coeffs == other.coeffs

    def __hash__(self) -> int:
        return hash(self.coeffs)

    def __repr__(self) -> str:
        terms = []
        for i, c in enumerate(self.coeffs):
            power = self.degree - i
            if c != 0:
                if power == 0:
                    terms.append(f"{c}")
                elif power == 1:
                    terms.append(f"{c}x")
                else:
                    terms.append(f"{c}x^{power}")
        return " + ".join(terms) if terms else "0"

    @property
    def degree(self) -> int:
        """Return the degree of the polynomial (-1 for the zero polynomial)."""
        return len(self.coeffs) - 1

    def multiply(self, other: 'Polynomial') -> 'Polynomial':
        """Multiply two polynomials."""
        if not self.coeffs or not other.coeffs:
            return Polynomial([])
        result = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                result[i + j] ^= gf.multiply(a, b)
        return Polynomial(result)

    def mod(self, divisor: 'Polynomial') -> 'Polynomial':
        """
        Remainder of polynomial long division by `divisor`.

        Each step cancels the leading term by XORing in the divisor scaled
        by alpha^(log(lead) - log(divisor lead)).
        """
        if not divisor.coeffs:
            raise ZeroDivisionError("Division by zero polynomial in GF(256)")

        coeffs = self.coeffs
        while len(coeffs) >= len(divisor.coeffs):
            ratio = glog(coeffs[0]) - glog(divisor.coeffs[0])
            scale = gexp(ratio)
            num = list(coeffs)
            for i, c in enumerate(divisor.coeffs):
                num[i] ^= gf.multiply(c, scale)
            coeffs = Polynomial(num).coeffs
        return Polynomial(coeffs)


#==============================================================================
# REED-SOLOMON ERROR CORRECTION
#==============================================================================

class ReedSolomonEncoder:
    """
    Reed-Solomon encoder for QR code error correction.

    Generator polynomials are memoised per EC length. The cache is the only
    process-wide state that changes after import; its entries are pure
    functions of the key and are never replaced once stored.

    References:
    - https://en.wikipedia.org/wiki/Reed-Solomon_error_correction
    - https://en.wikiversity.org/wiki/Reed-Solomon_codes_for_coders
    """

    def __init__(self):
        self._generator_cache = {}

    def build_generator(self, num_ec_codewords: int) -> Polynomial:
        """
        Build generator polynomial for given number of EC codewords.

        g(x) = (x - alpha^0)(x - alpha^1)...(x - alpha^(n-1))
             = (x + alpha^0)(x + alpha^1)...(x + alpha^(n-1))

        In GF(256), subtraction equals addition.
        """
        if num_ec_codewords in self._generator_cache:
            return self._generator_cache[num_ec_codewords]

        gen = Polynomial([1])
        for i in range(num_ec_codewords):
            gen = gen.multiply(Polynomial([1, gexp(i)]))

        self._generator_cache[num_ec_codewords] = gen
        return gen

    def encode(self, data: Sequence[int], num_ec_codewords: int) -> List[int]:
        """
        Compute the error correction codewords of one block.

        Args:
            data: Data codewords of the block (integers 0-255)
            num_ec_codewords: Number of error correction codewords to generate

        Returns:
            Exactly num_ec_codewords codewords; a short remainder is
            zero-filled on the high-order side.
        """
        generator = self.build_generator(num_ec_codewords)
        message = Polynomial(data, shift=len(generator) - 1)
        remainder = message.mod(generator)
        return [0] * (num_ec_codewords - len(remainder)) + list(remainder.coeffs)


# Global encoder instance
rs_encoder = ReedSolomonEncoder()


def interleave(blocks: List[List[int]]) -> List[int]:
    """Take one codeword from each block in turn, skipping exhausted blocks."""
    result = []
    longest = max((len(block) for block in blocks), default=0)
    for i in range(longest):
        for block in blocks:
            if i < len(block):
                result.append(block[i])
    return result


def create_codewords(data_codewords: Sequence[int],
                     rs_blocks: List[RSBlock]) -> List[int]:
    """
    Split data codewords into blocks, add EC codewords and interleave.

    Returns:
        Interleaved data codewords followed by interleaved EC codewords.
    """
    data_blocks = []
    ec_blocks = []
    offset = 0
    for block in rs_blocks:
        data_block = list(data_codewords[offset:offset + block.data_codewords])
        offset += block.data_codewords
        data_blocks.append(data_block)
        ec_blocks.append(rs_encoder.encode(data_block, block.ec_codewords))

    return interleave(data_blocks) + interleave(ec_blocks)


#==============================================================================
# CAPACITY LOOKUPS
#==============================================================================

def check_version(version: int) -> int:
    if not MIN_VERSION <= version <= MAX_VERSION:
        raise UnsupportedParameterError('version', version)
    return version


def check_ec_level(ec_level: str) -> str:
    if ec_level not in EC_LEVEL_BITS:
        raise UnsupportedParameterError('ec_level', ec_level)
    return ec_level


def get_rs_blocks(version: int, ec_level: str) -> List[RSBlock]:
    """Expand the table row for (version, level) into one entry per block."""
    row = RS_BLOCK_TABLE[check_version(version)][check_ec_level(ec_level)]
    blocks = []
    for i in range(0, len(row), 3):
        count, total, data = row[i:i + 3]
        blocks.extend([RSBlock(total, data)] * count)
    return blocks


def get_total_data_codewords(version: int, ec_level: str) -> int:
    return sum(block.data_codewords for block in get_rs_blocks(version, ec_level))


def get_alignment_positions(version: int) -> Tuple[int, ...]:
    """Get alignment pattern center positions (empty for version 1)."""
    return ALIGNMENT_POSITIONS[check_version(version)]


#==============================================================================
# DATA ENCODING
#==============================================================================

MODE_BYTE = 0b0100
MODE_TERMINATOR = 0b0000

# Pad codewords, alternated until the data capacity is filled
PAD0 = 0xEC
PAD1 = 0x11


class BitBuffer:
    """
    Append-only sequence of bits, MSB first within each byte.

    Backed by a bytearray that grows one byte at a time as bits arrive.
    """

    def __init__(self):
        self.buffer = bytearray()
        self.length = 0

    def __len__(self) -> int:
        return self.length

    def get(self, index: int) -> bool:
        if not 0 <= index < self.length:
            raise IndexError(f"bit index {index} out of range")
        return ((self.buffer[index // 8] >> (7 - index % 8)) & 1) == 1

    def put(self, num: int, length: int):
        """Append the lowest `length` bits of num, most significant first."""
        for i in range(length):
            self.put_bit(((num >> (length - i - 1)) & 1) == 1)

    def put_bit(self, bit: bool):
        buf_index = self.length // 8
        if len(self.buffer) <= buf_index:
            self.buffer.append(0)
        if bit:
            self.buffer[buf_index] |= 0x80 >> (self.length % 8)
        self.length += 1

    def put_bytes(self, data: Sequence[int]):
        for byte in data:
            self.put(byte, 8)


def to_bytes(data: Union[str, bytes, Sequence[int]]) -> bytes:
    """Text is UTF-8 encoded; anything else must already be bytes-like."""
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)


def get_character_count_bits(version: int) -> int:
    """Width of the byte mode character count field."""
    if check_version(version) <= 9:
        return 8
    return 16


def encode_data(data: bytes, version: int) -> BitBuffer:
    """Mode indicator, character count and payload, without padding."""
    buffer = BitBuffer()
    buffer.put(MODE_BYTE, 4)
    buffer.put(len(data), get_character_count_bits(version))
    buffer.put_bytes(data)
    return buffer


def pad_data(buffer: BitBuffer, capacity_bits: int) -> List[int]:
    """
    Terminate and pad an encoded bitstream to the data capacity.

    Args:
        buffer: Encoded bitstream, extended in place
        capacity_bits: Data capacity of the version in bits

    Returns:
        The data codewords.
    """
    if len(buffer) > capacity_bits:
        raise CapacityExceededError(len(buffer), capacity_bits)

    # Terminator, only when it fits completely
    if len(buffer) + 4 <= capacity_bits:
        buffer.put(MODE_TERMINATOR, 4)

    while len(buffer) % 8 != 0:
        buffer.put_bit(False)

    pad_bytes = [PAD0, PAD1]
    i = 0
    while len(buffer) < capacity_bits:
        buffer.put(pad_bytes[i % 2], 8)
        i += 1

    return list(buffer.buffer)


def build_data_codewords(data: bytes, version: int, ec_level: str) -> List[int]:
    capacity_bits = get_total_data_codewords(version, ec_level) * 8
    return pad_data(encode_data(data, version), capacity_bits)


def select_version(data: bytes, ec_level: str) -> int:
    """Determine the smallest version whose data capacity holds the payload."""
    for version in range(MIN_VERSION, MAX_VERSION + 1):
        buffer = encode_data(data, version)
        if len(buffer) <= get_total_data_codewords(version, ec_level) * 8:
            return version
    raise InputTooLargeError(len(data), ec_level)


#==============================================================================
# BCH CODE FOR FORMAT AND VERSION INFORMATION
#==============================================================================

# Format information generator: x^10 + x^8 + x^5 + x^4 + x^2 + x + 1
G15 = 0b10100110111
# Version information generator: x^12 + x^11 + x^10 + x^9 + x^8 + x^5 + x^2 + 1
G18 = 0b1111100100101
# Format information mask
G15_MASK = 0b101010000010010


def get_bch_type_info(data: int) -> int:
    """
    Encode 5 bits of format data (EC level bits << 3 | mask) as BCH(15,5).

    Returns:
        15-bit format information, already XORed with G15_MASK.
    """
    d = data << 10
    while d.bit_length() - G15.bit_length() >= 0:
        d ^= G15 << (d.bit_length() - G15.bit_length())
    return ((data << 10) | d) ^ G15_MASK


def get_bch_type_number(data: int) -> int:
    """Encode a 6-bit version number as BCH(18,6). No mask is applied."""
    d = data << 12
    while d.bit_length() - G18.bit_length() >= 0:
        d ^= G18 << (d.bit_length() - G18.bit_length())
    return (data << 12) | d


#==============================================================================
# DATA MASKING
#==============================================================================

MASK_PATTERNS: List[Callable[[int, int], bool]] = [
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r * c) % 3 + (r + c) % 2) % 2 == 0,
]


def get_mask_function(mask_pattern: int) -> Callable[[int, int], bool]:
    if not 0 <= mask_pattern < len(MASK_PATTERNS):
        raise UnsupportedParameterError('mask_pattern', mask_pattern)
    return MASK_PATTERNS[mask_pattern]


#==============================================================================
# QR CODE MATRIX CONSTRUCTION
#==============================================================================

def _codeword_bits(codewords: Sequence[int]) -> Iterator[bool]:
    for byte in codewords:
        for i in range(7, -1, -1):
            yield ((byte >> i) & 1) == 1


class QRMatrix:
    """
    QR Code matrix construction.

    In test mode every format and version bit, and the dark module, is
    written light so that only the data area differs between mask trials.

    References:
    - https://www.thonky.com/qr-code-tutorial/module-placement-matrix
    """

    def __init__(self, version: int):
        self.version = check_version(version)
        self.size = 4 * version + 17
        self.modules: List[List[Module]] = [[None] * self.size for _ in range(self.size)]

    def build(self, codewords: Sequence[int], ec_level: str, mask_pattern: int,
              test: bool = False) -> 'QRMatrix':
        """Lay out every pattern and the masked data for one mask pattern."""
        mask_func = get_mask_function(mask_pattern)

        for row in self.modules:
            for col in range(self.size):
                row[col] = None

        self._place_finder_pattern(0, 0)
        self._place_finder_pattern(self.size - 7, 0)
        self._place_finder_pattern(0, self.size - 7)
        self._place_alignment_patterns()
        self._place_timing_patterns()
        self._place_format_info(ec_level, mask_pattern, test)
        if self.version >= 7:
            self._place_version_info(test)
        self._place_data(codewords, mask_func)
        return self

    def _place_finder_pattern(self, row: int, col: int):
        """Place a finder pattern with its light separator, clipped to the grid."""
        for r in range(-1, 8):
            if not 0 <= row + r < self.size:
                continue
            for c in range(-1, 8):
                if not 0 <= col + c < self.size:
                    continue
                self.modules[row + r][col + c] = (
                    (0 <= r <= 6 and c in (0, 6)) or
                    (0 <= c <= 6 and r in (0, 6)) or
                    (2 <= r <= 4 and 2 <= c <= 4))

    def _place_alignment_patterns(self):
        positions = get_alignment_positions(self.version)
        for row in positions:
            for col in positions:
                # Centre already taken by a finder pattern
                if self.modules[row][col] is not None:
                    continue
                for r in range(-2, 3):
                    for c in range(-2, 3):
                        self.modules[row + r][col + c] = (
                            abs(r) == 2 or abs(c) == 2 or (r == 0 and c == 0))

    def _place_timing_patterns(self):
        for i in range(8, self.size - 8):
            if self.modules[i][6] is None:
                self.modules[i][6] = i % 2 == 0
            if self.modules[6][i] is None:
                self.modules[6][i] = i % 2 == 0

    def _place_format_info(self, ec_level: str, mask_pattern: int, test: bool):
        """
        Write the 15 format bits twice, least significant bit first.

        Vertical copy: column 8, rows 0-8 (skipping the timing row) and then
        the bottom seven rows. Horizontal copy: row 8, the right-most eight
        columns and then columns 7 down to 0 (skipping the timing column).
        """
        bits = get_bch_type_info((EC_LEVEL_BITS[check_ec_level(ec_level)] << 3) | mask_pattern)
        size = self.size

        for i in range(15):
            mod = not test and ((bits >> i) & 1) == 1

            if i < 6:
                self.modules[i][8] = mod
            elif i < 8:
                self.modules[i + 1][8] = mod
            else:
                self.modules[size - 15 + i][8] = mod

            if i < 8:
                self.modules[8][size - i - 1] = mod
            elif i < 9:
                self.modules[8][15 - i] = mod
            else:
                self.modules[8][15 - i - 1] = mod

        # Dark module
        self.modules[size - 8][8] = not test

    def _place_version_info(self, test: bool):
        """Two 3x6 blocks beside the top-right and bottom-left finders."""
        bits = get_bch_type_number(self.version)
        for i in range(18):
            mod = not test and ((bits >> i) & 1) == 1
            self.modules[i // 3][i % 3 + self.size - 11] = mod
            self.modules[i % 3 + self.size - 11][i // 3] = mod

    def _place_data(self, codewords: Sequence[int],
                    mask_func: Callable[[int, int], bool]):
        """
        Place masked data bits in the zigzag order.

        Column pairs are walked right to left, alternately upwards and
        downwards, skipping the vertical timing column. Cells left over once
        the codewords run out receive a masked light bit.
        """
        bits = _codeword_bits(codewords)
        col = self.size - 1
        upward = True

        while col > 0:
            if col == 6:
                col -= 1

            rows = range(self.size - 1, -1, -1) if upward else range(self.size)
            for row in rows:
                for c in (col, col - 1):
                    if self.modules[row][c] is not None:
                        continue
                    dark = next(bits, False)
                    if mask_func(row, c):
                        dark = not dark
                    self.modules[row][c] = dark

            col -= 2
            upward = not upward

    def is_complete(self) -> bool:
        return all(cell is not None for row in self.modules for cell in row)

    def to_bool_matrix(self) -> List[List[bool]]:
        """Copy of the grid as booleans (True = dark)."""
        for r, row in enumerate(self.modules):
            for c, cell in enumerate(row):
                if cell is None:
                    raise QRCodeError(f"Module ({r}, {c}) was never placed")
        return [list(row) for row in self.modules]


#==============================================================================
# PENALTY CALCULATION
#==============================================================================

FINDER_LIKE = (True, False, True, True, True, False, True)


def calculate_penalty(modules: List[List[Module]]) -> float:
    """Calculate total penalty score for a masked matrix."""
    penalty = 0
    penalty += penalty_adjacency(modules)
    penalty += penalty_blocks(modules)
    penalty += penalty_finder_like(modules)
    penalty += penalty_balance(modules)
    return penalty


def penalty_adjacency(modules: List[List[Module]]) -> int:
    """Penalty for modules with more than five same-color neighbours."""
    size = len(modules)
    penalty = 0

    for row in range(size):
        for col in range(size):
            dark = modules[row][col]
            same_count = 0
            for r in range(max(row - 1, 0), min(row + 2, size)):
                for c in range(max(col - 1, 0), min(col + 2, size)):
                    if (r != row or c != col) and modules[r][c] == dark:
                        same_count += 1
            if same_count > 5:
                penalty += 3 + (same_count - 5)

    return penalty


def penalty_blocks(modules: List[List[Module]]) -> int:
    """Penalty for 2x2 same-color boxes."""
    size = len(modules)
    penalty = 0
    for r in range(size - 1):
        for c in range(size - 1):
            color = modules[r][c]
            if (modules[r][c + 1] == color and modules[r + 1][c] == color and
                    modules[r + 1][c + 1] == color):
                penalty += 3
    return penalty


def penalty_finder_like(modules: List[List[Module]]) -> int:
    """Penalty for 1:1:3:1:1 runs, counted in rows and columns separately."""
    size = len(modules)
    penalty = 0
    columns = [tuple(column) for column in zip(*modules)]

    for line in [tuple(row) for row in modules] + columns:
        for i in range(size - 6):
            if line[i:i + 7] == FINDER_LIKE:
                penalty += 40

    return penalty


def penalty_balance(modules: List[List[Module]]) -> float:
    """Penalty based on dark/light module ratio."""
    size = len(modules)
    dark_count = sum(1 for row in modules for cell in row if cell)
    ratio = abs(100 * dark_count / size / size - 50) / 5
    return ratio * 10


def choose_best_mask(codewords: Sequence[int], version: int,
                     ec_level: str) -> Tuple[int, List[float]]:
    """
    Build a test matrix for each mask pattern and score it.

    Returns:
        The mask with the strictly lowest penalty (the lowest index wins a
        tie) and the list of all eight penalties.
    """
    best_mask = 0
    penalties = []

    for mask_num in range(len(MASK_PATTERNS)):
        trial = QRMatrix(version).build(codewords, ec_level, mask_num, test=True)
        penalty = calculate_penalty(trial.modules)
        penalties.append(penalty)
        logger.debug("Mask pattern %d: penalty %s", mask_num, penalty)

        if penalty < penalties[best_mask]:
            best_mask = mask_num

    return best_mask, penalties


#==============================================================================
# COMPLETE QR CODE GENERATOR
#==============================================================================

class QRCodeGenerator:
    """
    Complete QR code generator (byte mode).

    After each call to generate() the instance records the selected
    version, size, mask pattern, the eight mask penalties and the final
    codeword stream.
    """

    def __init__(self, ec_level: str = 'M'):
        """
        Initialize generator with error correction level.

        Args:
            ec_level: 'L' (7%), 'M' (15%), 'Q' (25%), or 'H' (30%)
        """
        self.ec_level = check_ec_level(ec_level)
        self.version: Optional[int] = None
        self.size: Optional[int] = None
        self.mask_pattern: Optional[int] = None
        self.penalties: List[float] = []
        self.codewords: List[int] = []

    def generate(self, data: Union[str, bytes, Sequence[int]],
                 version: Optional[int] = None) -> List[List[bool]]:
        """
        Generate a QR code for the given data.

        Args:
            data: Text (UTF-8 encoded) or bytes to encode
            version: QR version (1-40), or None / 0 to auto-detect

        Returns:
            Square 2D list of booleans, True for dark modules
        """
        payload = to_bytes(data)

        # Step 1: Determine version
        if version is None or version < MIN_VERSION:
            version = select_version(payload, self.ec_level)
        else:
            check_version(version)
        logger.debug("Encoding %d bytes as version %d, level %s",
                     len(payload), version, self.ec_level)

        # Step 2: Bitstream with terminator and padding
        data_codewords = build_data_codewords(payload, version, self.ec_level)

        # Step 3: Error correction and interleaving
        codewords = create_codewords(data_codewords, get_rs_blocks(version, self.ec_level))
        logger.debug("Data codewords: %d, total codewords: %d",
                     len(data_codewords), len(codewords))

        # Step 4: Choose mask and build the final matrix
        best_mask, penalties = choose_best_mask(codewords, version, self.ec_level)
        qr = QRMatrix(version).build(codewords, self.ec_level, best_mask)
        logger.debug("Applied mask pattern %d (penalty: %s)",
                     best_mask, penalties[best_mask])

        self.version = version
        self.size = qr.size
        self.mask_pattern = best_mask
        self.penalties = penalties
        self.codewords = codewords

        return qr.to_bool_matrix()


def encode(data: Union[str, bytes, Sequence[int]], version: Optional[int] = None,
           ec_level: str = 'M') -> List[List[bool]]:
    """Encode data as a QR code matrix (True = dark)."""
    return QRCodeGenerator(ec_level).generate(data, version)
