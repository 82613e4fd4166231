"""
ChaCha20 keystream used as a one-shot pseudo-random stream.

The stream is keyed with the entropy pool state and starts at block zero with
an all-zero nonce. Output is consumed in 32-bit little-endian words so that
a given key always yields the same ids and magnitudes, word for word, as a
reference ChaCha20 generator.
"""

import struct

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .utils import to_signed32

KEY_SIZE = 32
WORD_SIZE = 4
BLOCK_WORDS = 16  # 64-byte ChaCha20 block
BUFFER_BLOCKS = 4  # keystream is generated four blocks at a time
MAX_BLOCKS = 1 << 32


class ChaCha20Stream:
    """
    Deterministic, seekable pseudo-random stream over a ChaCha20 keystream.

    Two streams built from the same key produce bit-identical output. A
    stream is meant to be created for a single registry operation and then
    dropped.
    """

    def __init__(self, key: bytes):
        """
        Initialize the stream at word position zero.

        Args:
            key: 32-byte ChaCha20 key (the entropy pool state)
        """
        if len(key) != KEY_SIZE:
            raise ValueError("Stream key must be 32 bytes")

        self._key = bytes(key)
        self._start(0)

    def _start(self, block: int) -> None:
        """Re-key the cipher so the next keystream byte is the start of ``block``."""
        if not 0 <= block < MAX_BLOCKS:
            raise ValueError(f"Block index {block} outside the keystream")

        # 16-byte nonce: little-endian block counter followed by a zero nonce
        nonce = struct.pack('<Q', block) + b'\x00' * 8
        cipher = Cipher(algorithms.ChaCha20(self._key, nonce), mode=None)
        self._encryptor = cipher.encryptor()
        self._buffer = b''
        self._index = 0
        self._word_pos = block * BLOCK_WORDS

    def _refill(self) -> None:
        # Encrypting zeros yields the raw keystream
        self._buffer = self._encryptor.update(b'\x00' * (BUFFER_BLOCKS * BLOCK_WORDS * WORD_SIZE))
        self._index = 0

    def _next_words(self, count: int) -> bytes:
        needed = count * WORD_SIZE
        out = bytearray()
        while len(out) < needed:
            if self._index >= len(self._buffer):
                self._refill()
            take = min(needed - len(out), len(self._buffer) - self._index)
            out += self._buffer[self._index:self._index + take]
            self._index += take
        self._word_pos += count
        return bytes(out)

    @property
    def word_pos(self) -> int:
        """Number of 32-bit words consumed since the start of the keystream."""
        return self._word_pos

    def seek(self, word_pos: int) -> None:
        """
        Move the stream to an absolute word position.

        Args:
            word_pos: Word index to continue from
        """
        if word_pos < 0:
            raise ValueError("Word position must be non-negative")

        block, offset = divmod(word_pos, BLOCK_WORDS)
        self._start(block)
        if offset:
            self._next_words(offset)

    def next_u32(self) -> int:
        """Next unsigned 32-bit integer."""
        return int.from_bytes(self._next_words(1), byteorder='little')

    def next_u64(self) -> int:
        """Next unsigned 64-bit integer, low word first."""
        return int.from_bytes(self._next_words(2), byteorder='little')

    def next_i32(self) -> int:
        """Next signed 32-bit integer covering the full range."""
        return to_signed32(self.next_u32())

    def next_bytes(self, n: int) -> bytes:
        """
        Return the next ``n`` pseudo-random bytes.

        Whole words are consumed; the unused tail of the last word is dropped.

        Args:
            n: Number of bytes

        Returns:
            ``n`` bytes of keystream
        """
        if n < 0:
            raise ValueError("Byte count must be non-negative")
        words = (n + WORD_SIZE - 1) // WORD_SIZE
        return self._next_words(words)[:n]

    def next_uniform_int(self, lo: int, hi: int) -> int:
        """
        Draw an integer uniformly from the half-open range ``[lo, hi)``.

        Uses a widening multiply and rejects draws that fall in the biased
        zone. Spans up to 2**32 take 32-bit words, spans up to 2**64 take
        64-bit draws.

        Args:
            lo: Inclusive lower bound
            hi: Exclusive upper bound

        Returns:
            Integer in ``[lo, hi)``

        Raises:
            ValueError: If the range is empty or wider than 2**64
        """
        if lo >= hi:
            raise ValueError(f"Empty range [{lo}, {hi})")

        span = hi - lo
        if span <= 1 << 32:
            bits, draw = 32, self.next_u32
        elif span <= 1 << 64:
            bits, draw = 64, self.next_u64
        else:
            raise ValueError("Range wider than 2**64 is not supported")

        if span == 1 << bits:
            return lo + draw()

        mask = (1 << bits) - 1
        zone = (span << (bits - span.bit_length())) - 1
        while True:
            product = draw() * span
            if product & mask <= zone:
                return lo + (product >> bits)

    def __repr__(self) -> str:
        return f"ChaCha20Stream(word_pos={self._word_pos})"
