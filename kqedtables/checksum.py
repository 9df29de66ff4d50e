"""CRC-32C (Castagnoli) checksums and the paired rotating checksum used by
the precomputed table files."""

from __future__ import annotations

from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF
_POLY_REFLECTED = 0x82F63B78


def _build_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        value = byte
        for _ in range(8):
            value = (value >> 1) ^ _POLY_REFLECTED if value & 1 else value >> 1
        table.append(value)
    return tuple(table)


_TABLE = _build_table()


def _as_bytes(data) -> bytes:
    """Return the raw bytes of any buffer-protocol object."""
    if isinstance(data, bytes):
        return data
    return memoryview(data).tobytes()


def crc32c(data, crc: int = 0) -> int:
    """Update ``crc`` with the bytes of ``data`` and return the new value.

    No initial or final inversion is applied: the register is used as given.
    """
    if not 0 <= crc <= _MASK32:
        raise ValueError(f"crc must fit in 32 bits, got {crc}")
    table = _TABLE
    for byte in _as_bytes(data):
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc


def _rotl32(value: int, shift: int) -> int:
    if shift == 0:
        return value
    return ((value << shift) | (value >> (32 - shift))) & _MASK32


@dataclass
class DualChecksum:
    """A pair of 32-bit checksums built from rank-rotated CRC-32C values."""

    a: int = 0
    b: int = 0

    def accumulate(self, rank: int, data) -> int:
        """Fold the CRC-32C of ``data`` into both sums, rotated by ``rank``.

        Returns the CRC-32C of ``data``.
        """
        if not 0 <= rank <= _MASK32:
            raise ValueError(f"rank must fit in 32 bits, got {rank}")
        work = crc32c(data)
        self.a ^= _rotl32(work, rank % 29)
        self.b ^= _rotl32(work, rank % 31)
        return work