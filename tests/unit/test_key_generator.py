"""
Unit tests for deterministic record key generation.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from textload.core.keys import (
    KEY_HEX_LENGTH,
    KeyGenerator,
    KeyScratch,
    generate_run_seed,
    path_fingerprint,
)
from textload.core.models import PartitionContext

ZERO_SEED = b"\x00\x00\x00\x00"

# Key layout in hex characters
PATH_PART = slice(0, 16)
PARTITION_PART = slice(16, 24)
OFFSET_PART = slice(24, 40)
LINE_PART = slice(40, 64)


class TestGoldenVectors:
    """Bit-for-bit expectations computed with sha1sum"""

    def test_empty_line_at_origin(self):
        """Seed 00000000, path /a, partition 0, offset 0, empty line"""
        key = KeyGenerator(["/a"], seed=ZERO_SEED).key("/a", 0, 0, "")

        assert key == (
            "98dc3ab2b5cc1d30"
            "00000000"
            "0000000000000000"
            "3255bfef95601890afd80709"
        )

    def test_path_fingerprint_is_last_eight_digest_bytes(self):
        """Test the path fingerprint against sha1sum output"""
        assert path_fingerprint(ZERO_SEED, "/a") == bytes.fromhex("98dc3ab2b5cc1d30")
        assert path_fingerprint(b"\x01\x02\x03\x04", "/data/in.csv") == bytes.fromhex("181e69e2f8e9e5e2")

    def test_line_fingerprint_is_last_twelve_digest_bytes(self):
        """Test the line fingerprint against sha1sum output"""
        scratch = KeyScratch()
        assert scratch.line_fingerprint("a,b,c") == bytes.fromhex("281346b0bf7a82b5200e67e2")

    def test_position_is_big_endian(self):
        """Test partition and offset are packed big-endian"""
        scratch = KeyScratch()
        assert scratch.position_fingerprint(1, 256).hex() == "00000001" "0000000000000100"


class TestKeyShape:
    """Tests for key format and seeds"""

    def test_key_is_64_lowercase_hex_characters(self):
        """Test keys are 64 lowercase hex characters"""
        key = KeyGenerator(["/data/in.csv"]).key("/data/in.csv", 3, 1024, "Ünïcode,line")

        assert len(key) == KEY_HEX_LENGTH == 64
        assert key == key.lower()
        int(key, 16)

    def test_run_seed_is_four_bytes(self):
        """Test run seeds are four bytes"""
        assert len(generate_run_seed()) == 4

    def test_wrong_seed_length_rejected(self):
        """Test a seed of the wrong length raises ValueError"""
        with pytest.raises(ValueError, match="4 bytes"):
            KeyGenerator(["/a"], seed=b"\x00\x00")

    def test_fresh_generators_draw_fresh_seeds(self):
        """Test generators without a seed draw different seeds"""
        seeds = {KeyGenerator().seed for _ in range(20)}
        assert len(seeds) > 1


class TestDeterminism:
    """Tests for key determinism"""

    @given(
        seed=st.binary(min_size=4, max_size=4),
        path=st.text(min_size=1),
        partition=st.integers(min_value=0, max_value=2 ** 31 - 1),
        offset=st.integers(min_value=0, max_value=2 ** 63 - 1),
        line=st.text(),
    )
    def test_property_same_inputs_same_key(self, seed, path, partition, offset, line):
        """Property test: a key depends only on seed, path, partition, offset and line"""
        first = KeyGenerator([path], seed=seed).key(path, partition, offset, line)
        second = KeyGenerator([], seed=seed).key(path, partition, offset, line)

        assert first == second

    def test_reused_scratch_matches_fresh_scratch(self):
        """Test reusing one scratch gives the same keys as fresh ones"""
        generator = KeyGenerator(["/a"], seed=ZERO_SEED)
        scratch = KeyScratch()
        lines = [(0, "first"), (6, "second"), (13, ""), (14, "first")]

        reused = [generator.key("/a", 2, offset, line, scratch) for offset, line in lines]
        fresh = [generator.key("/a", 2, offset, line) for offset, line in lines]

        assert reused == fresh

    def test_unknown_path_fingerprint_is_cached(self):
        """Test fingerprints of unlisted paths are cached"""
        generator = KeyGenerator(["/a"], seed=ZERO_SEED)

        fingerprint = generator.fingerprint_for("/b")

        assert generator.path_fingerprints["/b"] == fingerprint == path_fingerprint(ZERO_SEED, "/b")


class TestSensitivity:
    """Tests for which inputs change which part of the key"""

    @pytest.fixture
    def generator(self):
        return KeyGenerator(["/a", "/b"], seed=ZERO_SEED)

    def test_path_changes_key(self, generator):
        """Test the path only changes the path portion"""
        a = generator.key("/a", 0, 0, "line")
        b = generator.key("/b", 0, 0, "line")

        assert a != b
        assert a[PATH_PART] != b[PATH_PART]
        assert a[PATH_PART.stop:] == b[PATH_PART.stop:]

    def test_partition_changes_key(self, generator):
        """Test the partition index is visible in the partition portion"""
        a = generator.key("/a", 0, 0, "line")
        b = generator.key("/a", 1, 0, "line")

        assert a[PARTITION_PART] == "00000000"
        assert b[PARTITION_PART] == "00000001"

    def test_offset_only_changes_offset_portion(self, generator):
        """Identical lines at different offsets differ only in the offset portion"""
        a = generator.key("/a", 0, 0, "same")
        b = generator.key("/a", 0, 5, "same")

        assert a != b
        assert a[OFFSET_PART] != b[OFFSET_PART]
        assert a[:OFFSET_PART.start] == b[:OFFSET_PART.start]
        assert a[OFFSET_PART.stop:] == b[OFFSET_PART.stop:]

    def test_line_changes_key(self, generator):
        """Test the line only changes the line portion"""
        a = generator.key("/a", 0, 0, "line one")
        b = generator.key("/a", 0, 0, "line two")

        assert a[LINE_PART] != b[LINE_PART]
        assert a[:LINE_PART.start] == b[:LINE_PART.start]

    def test_seed_changes_path_portion_only(self):
        """Test the seed only changes the path portion"""
        a = KeyGenerator(seed=ZERO_SEED).key("/a", 0, 0, "line")
        b = KeyGenerator(seed=b"\x00\x00\x00\x01").key("/a", 0, 0, "line")

        assert a[PATH_PART] != b[PATH_PART]
        assert a[PATH_PART.stop:] == b[PATH_PART.stop:]


class TestPositionBounds:
    """Tests for partition index and byte offset limits"""

    @pytest.fixture
    def generator(self):
        return KeyGenerator(["/a"], seed=ZERO_SEED)

    def test_largest_position_fits(self, generator):
        """Test the maximum signed values are packed unchanged"""
        key = generator.key("/a", 2 ** 31 - 1, 2 ** 63 - 1, "line")

        assert key[PARTITION_PART] == "7fffffff"
        assert key[OFFSET_PART] == "7fffffffffffffff"

    @pytest.mark.parametrize("partition_index", [-1, 2 ** 31])
    def test_partition_index_out_of_range(self, generator, partition_index):
        """Test a partition index outside 0..2**31-1 raises ValueError"""
        with pytest.raises(ValueError, match="partition_index must be between 0 and 2147483647"):
            generator.key("/a", partition_index, 0, "line")

    @pytest.mark.parametrize("byte_offset", [-1, 2 ** 63])
    def test_byte_offset_out_of_range(self, generator, byte_offset):
        """Test a byte offset outside 0..2**63-1 raises ValueError"""
        with pytest.raises(ValueError, match="byte_offset must be between 0 and 9223372036854775807"):
            generator.key("/a", 0, byte_offset, "line")


def test_key_at_partition_context():
    """Test key_at matches key for the same position"""
    generator = KeyGenerator(seed=ZERO_SEED)
    context = PartitionContext(path="/a", partition_index=0, byte_offset=0)

    assert generator.key_at(context, "") == generator.key("/a", 0, 0, "")
