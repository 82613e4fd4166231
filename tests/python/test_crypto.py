"""
Test suite for the reseed cryptographic building blocks.
"""

import hashlib

import pytest

from reseed.crypto.hashing import digest, supported_algorithms
from reseed.crypto.pool import EntropyPool, reseed_state
from reseed.crypto.stream import ChaCha20Stream
from reseed.crypto.utils import format_hex, int_to_bytes, secure_zero, to_signed32
from reseed.registry.account import AccountId, InvalidAccountId, is_valid_account_id

ZERO_KEY = b'\x00' * 32

# ChaCha20 keystream for an all-zero key and nonce, blocks 0 and 1
ZERO_BLOCK_0 = (
    "76b8e0ada0f13d90405d6ae55386bd28bdd219b8a08ded1aa836efcc8b770dc7"
    "da41597c5157488d7724e03fb8d84a376a43b8f41518a11cc387b669b2ee6586"
)
ZERO_BLOCK_1 = (
    "9f07e7be5551387a98ba977c732d080dcb0f29a048e3656912c6533e32ee7aed"
    "29b721769ce64e43d57133b074d839d531ed1f28510afb45ace10a1f4b794d6f"
)


class TestHashing:
    """Test digest selection."""

    def test_sha256_default(self):
        """Test the default digest is SHA-256."""
        assert digest(b"abc") == hashlib.sha256(b"abc").digest()

    def test_all_algorithms_32_bytes(self):
        """Test every algorithm gives a distinct 32-byte digest."""
        digests = {name: digest(b"abc", name) for name in supported_algorithms()}

        assert all(len(value) == 32 for value in digests.values())
        assert len(set(digests.values())) == len(digests)
        assert digests["sha3_256"] == hashlib.sha3_256(b"abc").digest()
        assert digests["blake2s"] == hashlib.blake2s(b"abc").digest()

    def test_unknown_algorithm(self):
        """Test rejection of unknown names."""
        with pytest.raises(ValueError):
            digest(b"abc", "md5")


class TestStream:
    """Test the ChaCha20 stream."""

    def test_known_keystream(self):
        """Test the zero-key keystream."""
        stream = ChaCha20Stream(ZERO_KEY)

        assert stream.next_bytes(64).hex() == ZERO_BLOCK_0
        assert stream.next_bytes(64).hex() == ZERO_BLOCK_1

    def test_words_are_little_endian(self):
        """Test word decoding."""
        stream = ChaCha20Stream(ZERO_KEY)

        assert stream.next_u32() == 0xade0b876
        assert stream.next_u64() == int.from_bytes(bytes.fromhex(ZERO_BLOCK_0[8:24]), 'little')

    def test_signed_words(self):
        """Test signed reinterpretation."""
        stream = ChaCha20Stream(ZERO_KEY)

        assert stream.next_i32() == 0xade0b876 - (1 << 32)

    def test_partial_word_is_dropped(self):
        """Test that byte draws consume whole words."""
        stream = ChaCha20Stream(ZERO_KEY)

        assert stream.next_bytes(3).hex() == ZERO_BLOCK_0[:6]
        assert stream.word_pos == 1
        assert stream.next_bytes(4).hex() == ZERO_BLOCK_0[8:16]
        assert stream.next_bytes(0) == b''

    def test_seek(self):
        """Test seeking within and across blocks."""
        stream = ChaCha20Stream(ZERO_KEY)
        stream.next_bytes(200)

        stream.seek(16)
        assert stream.next_bytes(64).hex() == ZERO_BLOCK_1

        stream.seek(3)
        assert stream.word_pos == 3
        assert stream.next_bytes(4).hex() == ZERO_BLOCK_0[24:32]

    def test_long_stream_matches_seek(self):
        """Test continuity across buffer refills."""
        stream = ChaCha20Stream(b'\x07' * 32)
        data = stream.next_bytes(1024)

        other = ChaCha20Stream(b'\x07' * 32)
        other.seek(200)
        assert other.next_bytes(64) == data[800:864]

    def test_determinism(self):
        """Test that equal keys give equal streams."""
        first = ChaCha20Stream(b'\x01' * 32)
        second = ChaCha20Stream(b'\x01' * 32)

        assert first.next_bytes(100) == second.next_bytes(100)
        assert ChaCha20Stream(b'\x02' * 32).next_bytes(16) != ChaCha20Stream(b'\x01' * 32).next_bytes(16)

    def test_bad_key(self):
        """Test key length check."""
        with pytest.raises(ValueError):
            ChaCha20Stream(b'\x00' * 16)

    def test_uniform_matches_rejection_rule(self):
        """Test the [0, 256) draw against the widening-multiply rule."""
        for key_byte in range(20):
            key = bytes([key_byte]) * 32
            drawn = ChaCha20Stream(key).next_uniform_int(0, 256)

            words = ChaCha20Stream(key)
            while True:
                v = words.next_u32()
                if (v << 8) & 0xFFFFFFFF <= 0x7FFFFFFF:
                    expected = v >> 24
                    break
            assert drawn == expected

    def test_uniform_bounds(self):
        """Test ranges of several widths."""
        stream = ChaCha20Stream(b'\x05' * 32)

        for lo, hi in [(0, 1), (-5, 5), (0, 256), (10, 1 << 40), (0, 1 << 32), (0, 1 << 64)]:
            for _ in range(50):
                assert lo <= stream.next_uniform_int(lo, hi) < hi

    def test_uniform_invalid(self):
        """Test empty and oversized ranges."""
        stream = ChaCha20Stream(ZERO_KEY)

        with pytest.raises(ValueError):
            stream.next_uniform_int(5, 5)
        with pytest.raises(ValueError):
            stream.next_uniform_int(0, (1 << 64) + 1)

    def test_full_word_range(self):
        """Test a span equal to the word size returns the raw word."""
        assert ChaCha20Stream(ZERO_KEY).next_uniform_int(0, 1 << 32) == 0xade0b876


class TestEntropyPool:
    """Test pool seeding and reseeding."""

    def test_initialize_hashes_seed(self):
        """Test that the initial state is Hash(seed)."""
        pool = EntropyPool.initialize(bytes([0, 1, 2]))
        expected = ChaCha20Stream(hashlib.sha256(bytes([0, 1, 2])).digest())

        assert pool.derive_stream().next_bytes(32) == expected.next_bytes(32)
        assert pool.generation == 0

    def test_reseed_state(self):
        """Test the successor formula."""
        state = b'\x11' * 32

        assert reseed_state(state, [b'a', b'bc']) == hashlib.sha256(state + b'abc').digest()

    def test_reseed_order_matters(self):
        """Test that input order is significant."""
        state = b'\x11' * 32

        assert reseed_state(state, [b'x', b'y']) != reseed_state(state, [b'y', b'x'])

    def test_reseed_returns_successor(self):
        """Test that reseeding leaves the original pool untouched."""
        pool = EntropyPool.initialize(b'seed')
        before = pool.derive_stream().next_bytes(16)

        successor = pool.reseed([b'fresh'])

        assert pool.derive_stream().next_bytes(16) == before
        assert successor.derive_stream().next_bytes(16) != before
        assert successor.generation == 1

    def test_reseed_rejects_non_bytes(self):
        """Test input type checks."""
        pool = EntropyPool.initialize(b'seed')

        with pytest.raises(TypeError):
            pool.reseed(["text"])
        with pytest.raises(ValueError):
            reseed_state(b'short', [])

    def test_empty_seed(self):
        """Test that an empty weak seed is accepted."""
        pool = EntropyPool.initialize(b'')

        assert len(pool.derive_stream().next_bytes(16)) == 16


class TestUtils:
    """Test byte helpers."""

    def test_secure_zero(self):
        """Test wiping a mutable buffer."""
        data = bytearray(b'secret')
        secure_zero(data)

        assert data == bytearray(6)
        with pytest.raises(TypeError):
            secure_zero("secret")

    def test_int_to_bytes(self):
        """Test fixed-width encoding."""
        assert int_to_bytes(1, 8) == b'\x00' * 7 + b'\x01'
        with pytest.raises(ValueError):
            int_to_bytes(-1, 8)
        with pytest.raises(ValueError):
            int_to_bytes(1 << 64, 8)

    def test_to_signed32(self):
        """Test two's complement reinterpretation."""
        assert to_signed32(0x7FFFFFFF) == 2147483647
        assert to_signed32(0x80000000) == -2147483648
        assert to_signed32(1 << 32) == 0

    def test_format_hex(self):
        """Test hex formatting."""
        assert format_hex(b'\x01\xab') == "01ab"
        assert format_hex(b'\x01\xab', ":") == "01:ab"


class TestAccountId:
    """Test account name validation."""

    @pytest.mark.parametrize("name", [
        "alice.testnet", "bob", "a1", "user_1.near", "my-app.sub.near", "0x12",
    ])
    def test_valid(self, name):
        assert is_valid_account_id(name)
        assert AccountId(name) == name

    @pytest.mark.parametrize("name", [
        "a", "Alice", "alice..near", ".alice", "alice.", "al ice", "a" * 65,
        "alice-_bob", "alice\n", "", None, 42,
    ])
    def test_invalid(self, name):
        assert not is_valid_account_id(name)
        with pytest.raises(InvalidAccountId):
            AccountId(name)

    def test_bytes(self):
        """Test the encoding mixed into the pool."""
        assert AccountId("alice.testnet").to_bytes() == b"alice.testnet"
        assert AccountId(AccountId("bob")) == "bob"
