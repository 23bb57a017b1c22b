"""
Deterministic 256-bit record keys.

Every record of a keyed load gets a key computed only from facts the worker
reading it already has, so no coordination is needed beyond one run seed:

    key = PathFingerprint(path)      8 bytes
        || partition_index           4 bytes, big-endian
        || byte_offset               8 bytes, big-endian
        || LineFingerprint(line)    12 bytes

rendered as 64 lowercase hex characters.

- The run seed is 4 random bytes drawn once on the driver.
- PathFingerprint is the last 8 bytes of SHA-1(seed || utf8(path)), computed
  once per source path and shared read-only with every task.
- LineFingerprint is the last 12 bytes of SHA-1(utf8(line)).

Two runs can only produce colliding keys for the same position if their seeds
collide (about 2**-32). The key is a fingerprint for uniqueness and
partitioning, not a security token.
"""

import hashlib
import secrets
import struct
from typing import Iterable

from textload.core.models import PartitionContext

SEED_BYTES = 4
PATH_FINGERPRINT_BYTES = 8
LINE_FINGERPRINT_BYTES = 12
POSITION_BYTES = 12
KEY_HEX_LENGTH = 2 * (PATH_FINGERPRINT_BYTES + POSITION_BYTES + LINE_FINGERPRINT_BYTES)

_POSITION = struct.Struct(">iq")
MAX_PARTITION_INDEX = 2 ** 31 - 1
MAX_BYTE_OFFSET = 2 ** 63 - 1


def generate_run_seed() -> bytes:
    """Draw a fresh run seed from the OS CSPRNG."""
    return secrets.token_bytes(SEED_BYTES)


def path_fingerprint(seed: bytes, path: str) -> bytes:
    """Last 8 bytes of SHA-1(seed || utf8(path))."""
    return hashlib.sha1(seed + path.encode("utf-8")).digest()[-PATH_FINGERPRINT_BYTES:]


class KeyScratch:
    """
    Mutable per-task state for key generation.

    Holds an empty SHA-1 instance that is copied for each line and a 12-byte
    buffer the position is packed into. One instance belongs to exactly one
    task and is reused for every line that task processes; never share it
    between tasks running concurrently.
    """

    def __init__(self):
        self._digest = hashlib.sha1()
        self._position = bytearray(POSITION_BYTES)

    def line_fingerprint(self, line: str) -> bytes:
        md = self._digest.copy()
        md.update(line.encode("utf-8"))
        return md.digest()[-LINE_FINGERPRINT_BYTES:]

    def position_fingerprint(self, partition_index: int, byte_offset: int) -> bytes:
        _POSITION.pack_into(self._position, 0, partition_index, byte_offset)
        return bytes(self._position)


class KeyGenerator:
    """
    Run-scoped key generator.

    Created once on the driver for a keyed load. It is pickled into every
    task closure; after construction only the path fingerprint cache is
    written, and only for paths that were not listed up front.

    Args:
        sources: Source paths whose fingerprints are computed eagerly
        seed: Run seed; a fresh one is drawn when omitted
    """

    def __init__(self, sources: Iterable[str] = (), seed: bytes | None = None):
        if seed is None:
            seed = generate_run_seed()
        if len(seed) != SEED_BYTES:
            raise ValueError(f"Run seed must be {SEED_BYTES} bytes, got {len(seed)}")

        self.seed = bytes(seed)
        self.path_fingerprints: dict[str, bytes] = {
            path: path_fingerprint(self.seed, path) for path in sources
        }

    def fingerprint_for(self, path: str) -> bytes:
        fingerprint = self.path_fingerprints.get(path)
        if fingerprint is None:
            fingerprint = path_fingerprint(self.seed, path)
            self.path_fingerprints[path] = fingerprint
        return fingerprint

    def key(
        self,
        path: str,
        partition_index: int,
        byte_offset: int,
        line: str,
        scratch: KeyScratch | None = None,
    ) -> str:
        """
        Compute the 64-character hex key of one line.

        Args:
            path: Source path the line was read from
            partition_index: Index of the partition holding the line
            byte_offset: Offset of the line's first byte in the source file
            line: Line content without its terminator
            scratch: The calling task's scratch state; a throwaway one is used when omitted

        Returns:
            Lowercase hex string of length 64

        Raises:
            ValueError: If partition_index or byte_offset does not fit its signed field
        """
        if not 0 <= partition_index <= MAX_PARTITION_INDEX:
            raise ValueError(f"partition_index must be between 0 and {MAX_PARTITION_INDEX}, got {partition_index}")
        if not 0 <= byte_offset <= MAX_BYTE_OFFSET:
            raise ValueError(f"byte_offset must be between 0 and {MAX_BYTE_OFFSET}, got {byte_offset}")

        scratch = scratch or KeyScratch()
        return (
            self.fingerprint_for(path)
            + scratch.position_fingerprint(partition_index, byte_offset)
            + scratch.line_fingerprint(line)
        ).hex()

    def key_at(self, context: PartitionContext, line: str, scratch: KeyScratch | None = None) -> str:
        """Key of line read at the position described by context."""
        return self.key(context.path, context.partition_index, context.byte_offset, line, scratch)
