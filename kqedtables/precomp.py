"""Reading and writing the checksummed binary tables behind the kernel grid.

All three files start with a fixed magic number, store little-endian 32-bit
integers, 64-bit doubles for grids and Taylor rows, and 32-bit floats for the
form factors. Every block carries CRC-32C based checksums, which are checked
on reading.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO

import numpy as np

from .checksum import DualChecksum
from .grid import NXTAY, NYTAY, TX_LEN, TY_LEN, FormFactorTable, Grid

__all__ = [
    "MONIKER",
    "FF_FILE",
    "TAYLORX_FILE",
    "TAYLORY_FILE",
    "PrecompError",
    "read_ff",
    "read_taylorx",
    "read_taylory",
    "write_ff",
    "write_taylorx",
    "write_taylory",
    "load_grid",
]

MONIKER = 816968
"""Magic number at the start of every table file."""

FF_FILE = "FFxy_single_cksum.bin"
TAYLORX_FILE = "taylorx_cksum.bin"
TAYLORY_FILE = "taylory_cksum.bin"

_F64 = np.dtype("<f8")
_F32 = np.dtype("<f4")


class PrecompError(Exception):
    """A table file is missing, malformed or fails its checksums."""


class _Reader:
    """Reads little-endian fields from a binary stream, failing on short reads."""

    def __init__(self, stream: BinaryIO, name: str) -> None:
        self._stream = stream
        self.name = name

    def take(self, nbytes: int) -> bytes:
        data = self._stream.read(nbytes)
        if len(data) != nbytes:
            raise PrecompError(f"{self.name}: unexpected end of file")
        return data

    def int32(self) -> int:
        return struct.unpack("<i", self.take(4))[0]

    def count(self, what: str) -> int:
        value = self.int32()
        if value < 0:
            raise PrecompError(f"{self.name}: negative {what} {value}")
        return value

    def uint32s(self, n: int) -> tuple[int, ...]:
        return struct.unpack(f"<{n}I", self.take(4 * n))

    def moniker(self) -> None:
        if self.int32() != MONIKER:
            raise PrecompError(f"{self.name}: missing magic number")


def _open_read(path) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise PrecompError(f"cannot open {path}") from exc


def _verify(computed: DualChecksum, stored, what: str, name: str) -> None:
    if (computed.a, computed.b) != tuple(stored):
        raise PrecompError(
            f"{name}: computed and read {what} checksums do not match: "
            f"({computed.a}, {computed.b}) != ({stored[0]}, {stored[1]})"
        )


def _read_axis(reader: _Reader, what: str) -> np.ndarray:
    n = reader.count(f"{what} length")
    raw = reader.take(n * _F64.itemsize)
    computed = DualChecksum()
    computed.accumulate(0, raw)
    _verify(computed, reader.uint32s(2), what, reader.name)
    return np.frombuffer(raw, dtype=_F64).astype(np.float64)


def read_ff(path) -> FormFactorTable:
    """Read the form-factor table file at ``path``."""
    with _open_read(path) as stream:
        reader = _Reader(stream, str(path))
        reader.moniker()
        xx = _read_axis(reader, "XX")
        yy = _read_axis(reader, "YY")
        nstpx, nstpy = xx.size, yy.size
        nffa = reader.count("form factor count")

        nfx = np.zeros(nstpx, dtype=np.int64)
        seen = [False] * nstpx
        rows: list[tuple[int, int, int, np.ndarray, np.ndarray]] = []
        sum_m, sum_p = DualChecksum(), DualChecksum()
        rank = 0
        for i in range(nffa):
            if reader.int32() != nstpx:
                raise PrecompError(f"{reader.name}: inconsistent nstpx")
            for j in range(nstpx):
                if reader.int32() != nstpy:
                    raise PrecompError(f"{reader.name}: inconsistent nstpy")
                for k in range(nstpy):
                    nx = reader.count("row length")
                    if seen[j] and nx != nfx[j]:
                        raise PrecompError(f"{reader.name}: nx mismatch at x index {j}")
                    nfx[j] = nx
                    seen[j] = True
                    raw_m = reader.take(nx * _F32.itemsize)
                    sum_m.accumulate(rank, raw_m)
                    raw_p = reader.take(nx * _F32.itemsize)
                    sum_p.accumulate(rank, raw_p)
                    rows.append(
                        (
                            i,
                            j,
                            k,
                            np.frombuffer(raw_m, dtype=_F32),
                            np.frombuffer(raw_p, dtype=_F32),
                        )
                    )
                    rank += 1
        trailer = reader.uint32s(4)

    _verify(sum_m, trailer[0:2], "Ffm", str(path))
    _verify(sum_p, trailer[2:4], "Ffp", str(path))

    nfx_max = int(nfx.max()) if nfx.size else 0
    shape = (nffa, nstpx, nstpy, nfx_max)
    ffm = np.zeros(shape, dtype=np.float32)
    ffp = np.zeros(shape, dtype=np.float32)
    for i, j, k, row_m, row_p in rows:
        ffm[i, j, k, : row_m.size] = row_m
        ffp[i, j, k, : row_p.size] = row_p
    return FormFactorTable(xx=xx, yy=yy, nfx=nfx, ffp=ffp, ffm=ffm)


def _read_taylor(path, rows: int, width: int, label: str) -> np.ndarray:
    with _open_read(path) as stream:
        reader = _Reader(stream, str(path))
        reader.moniker()
        nrows = reader.int32()
        if nrows != rows:
            raise PrecompError(f"{reader.name}: {label} has {nrows} rows, expected {rows}")
        table = np.empty((rows, width), dtype=np.float64)
        computed = DualChecksum()
        for i in range(rows):
            n = reader.int32()
            if n != width:
                raise PrecompError(
                    f"{reader.name}: {label} row {i} has {n} entries, expected {width}"
                )
            raw = reader.take(width * _F64.itemsize)
            computed.accumulate(i, raw)
            table[i] = np.frombuffer(raw, dtype=_F64)
        _verify(computed, reader.uint32s(2), label, reader.name)
    return table


def read_taylorx(path) -> np.ndarray:
    """Read the x Taylor coefficient table, of shape ``(TX_LEN, NYTAY)``."""
    return _read_taylor(path, TX_LEN, NYTAY, "taylorx")


def read_taylory(path) -> np.ndarray:
    """Read the y Taylor coefficient table, of shape ``(TY_LEN, NXTAY)``."""
    return _read_taylor(path, TY_LEN, NXTAY, "taylory")


def _pack_int(value: int) -> bytes:
    return struct.pack("<i", int(value))


def _pack_pair(checksum: DualChecksum) -> bytes:
    return struct.pack("<2I", checksum.a, checksum.b)


def _write_axis(stream: BinaryIO, values: np.ndarray) -> None:
    raw = np.ascontiguousarray(values, dtype=_F64).tobytes()
    computed = DualChecksum()
    computed.accumulate(0, raw)
    stream.write(_pack_int(values.size))
    stream.write(raw)
    stream.write(_pack_pair(computed))


def write_ff(table: FormFactorTable, path) -> None:
    """Write ``table`` to ``path`` in the checksummed form-factor format."""
    sum_m, sum_p = DualChecksum(), DualChecksum()
    rank = 0
    with open(path, "wb") as stream:
        stream.write(_pack_int(MONIKER))
        _write_axis(stream, table.xx)
        _write_axis(stream, table.yy)
        stream.write(_pack_int(table.nffa))
        for i in range(table.nffa):
            stream.write(_pack_int(table.nstpx))
            for j in range(table.nstpx):
                nx = int(table.nfx[j])
                stream.write(_pack_int(table.nstpy))
                for k in range(table.nstpy):
                    stream.write(_pack_int(nx))
                    raw_m = np.ascontiguousarray(table.ffm_row(i, j, k), dtype=_F32).tobytes()
                    stream.write(raw_m)
                    sum_m.accumulate(rank, raw_m)
                    raw_p = np.ascontiguousarray(table.ffp_row(i, j, k), dtype=_F32).tobytes()
                    stream.write(raw_p)
                    sum_p.accumulate(rank, raw_p)
                    rank += 1
        stream.write(_pack_pair(sum_m))
        stream.write(_pack_pair(sum_p))


def _write_taylor(table, path) -> None:
    rows = np.asarray(table, dtype=np.float64)
    if rows.ndim != 2:
        raise ValueError(f"Taylor table must be two-dimensional, got shape {rows.shape}")
    computed = DualChecksum()
    with open(path, "wb") as stream:
        stream.write(_pack_int(MONIKER))
        stream.write(_pack_int(rows.shape[0]))
        for i, row in enumerate(rows):
            raw = np.ascontiguousarray(row, dtype=_F64).tobytes()
            stream.write(_pack_int(row.size))
            stream.write(raw)
            computed.accumulate(i, raw)
        stream.write(_pack_pair(computed))


def write_taylorx(tx, path) -> None:
    """Write the x Taylor coefficient table to ``path``."""
    _write_taylor(tx, path)


def write_taylory(ty, path) -> None:
    """Write the y Taylor coefficient table to ``path``."""
    _write_taylor(ty, path)


def load_grid(prefix) -> Grid:
    """Read all three tables from ``<prefix>/PRECOMP`` and build the grid."""
    base = Path(prefix) / "PRECOMP"
    return Grid(
        ff=read_ff(base / FF_FILE),
        tx=read_taylorx(base / TAYLORX_FILE),
        ty=read_taylory(base / TAYLORY_FILE),
    )