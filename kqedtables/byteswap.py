"""Reverse the byte order of every element in a buffer of 16, 32 or 64-bit words."""

from __future__ import annotations

import numpy as np

__all__ = ["bswap_16", "bswap_32", "bswap_64"]


def _swap(data, dtype: type) -> bytes:
    raw = memoryview(data).cast("B")
    width = np.dtype(dtype).itemsize
    if len(raw) % width:
        raise ValueError(
            f"buffer of {len(raw)} bytes is not a whole number of {width}-byte words"
        )
    return np.frombuffer(raw, dtype=dtype).byteswap().tobytes()


def bswap_16(data) -> bytes:
    """Return ``data`` with the two bytes of every 16-bit word swapped."""
    return _swap(data, np.uint16)


def bswap_32(data) -> bytes:
    """Return ``data`` with the bytes of every 32-bit word reversed."""
    return _swap(data, np.uint32)


def bswap_64(data) -> bytes:
    """Return ``data`` with the bytes of every 64-bit word reversed."""
    return _swap(data, np.uint64)