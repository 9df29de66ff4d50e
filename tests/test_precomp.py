import struct

import numpy as np
import pytest

from kqedtables.checksum import DualChecksum
from kqedtables.grid import NXTAY, NYTAY, TX_LEN, TY_LEN, FormFactorTable, TaylorX, TaylorY
from kqedtables.precomp import (
    FF_FILE,
    MONIKER,
    TAYLORX_FILE,
    TAYLORY_FILE,
    PrecompError,
    load_grid,
    read_ff,
    read_taylorx,
    read_taylory,
    write_ff,
    write_taylorx,
    write_taylory,
)


def _table() -> FormFactorTable:
    nfx = np.array([1, 3, 2])
    shape = (2, 3, 2, 3)
    ffp = np.arange(np.prod(shape), dtype=np.float32).reshape(shape) * 0.5
    ffm = -np.arange(np.prod(shape), dtype=np.float32).reshape(shape) * 0.25
    for j, n in enumerate(nfx):
        ffp[:, j, :, n:] = 0.0
        ffm[:, j, :, n:] = 0.0
    return FormFactorTable(
        xx=np.array([0.0, 0.5, 1.0]),
        yy=np.array([0.0, 0.25]),
        nfx=nfx,
        ffp=ffp,
        ffm=ffm,
    )


def _tx() -> np.ndarray:
    return np.linspace(-1.0, 1.0, TX_LEN * NYTAY).reshape(TX_LEN, NYTAY)


def _ty() -> np.ndarray:
    return np.linspace(0.0, 3.0, TY_LEN * NXTAY).reshape(TY_LEN, NXTAY)


def test_ff_round_trip(tmp_path):
    table = _table()
    path = tmp_path / "ff.bin"
    write_ff(table, path)
    back = read_ff(path)
    np.testing.assert_array_equal(back.xx, table.xx)
    np.testing.assert_array_equal(back.yy, table.yy)
    np.testing.assert_array_equal(back.nfx, table.nfx)
    np.testing.assert_array_equal(back.ffp, table.ffp)
    np.testing.assert_array_equal(back.ffm, table.ffm)
    assert back.nfx_max == table.nfx_max
    assert back.xstp == table.xstp


def test_ff_header_bytes(tmp_path):
    path = tmp_path / "ff.bin"
    write_ff(_table(), path)
    data = path.read_bytes()
    assert data[:4] == struct.pack("<i", MONIKER)
    assert data[4:8] == struct.pack("<i", 3)
    assert data[8:32] == np.array([0.0, 0.5, 1.0], dtype="<f8").tobytes()


def test_ff_bad_moniker(tmp_path):
    path = tmp_path / "ff.bin"
    write_ff(_table(), path)
    data = bytearray(path.read_bytes())
    data[0:4] = struct.pack("<i", 12345)
    path.write_bytes(bytes(data))
    with pytest.raises(PrecompError, match="magic"):
        read_ff(path)


def test_ff_corrupt_axis_fails_checksum(tmp_path):
    path = tmp_path / "ff.bin"
    write_ff(_table(), path)
    data = bytearray(path.read_bytes())
    data[16] ^= 0xFF
    path.write_bytes(bytes(data))
    with pytest.raises(PrecompError, match="checksum"):
        read_ff(path)


def test_ff_corrupt_form_factor_fails_checksum(tmp_path):
    path = tmp_path / "ff.bin"
    write_ff(_table(), path)
    data = bytearray(path.read_bytes())
    data[-17] ^= 0x01
    path.write_bytes(bytes(data))
    with pytest.raises(PrecompError, match="Ffp"):
        read_ff(path)


def test_ff_truncated(tmp_path):
    path = tmp_path / "ff.bin"
    write_ff(_table(), path)
    path.write_bytes(path.read_bytes()[:-3])
    with pytest.raises(PrecompError, match="end of file"):
        read_ff(path)


def test_missing_file(tmp_path):
    with pytest.raises(PrecompError, match="cannot open"):
        read_ff(tmp_path / "absent.bin")
    with pytest.raises(PrecompError, match="cannot open"):
        read_taylorx(tmp_path / "absent.bin")


def test_taylorx_round_trip(tmp_path):
    tx = _tx()
    path = tmp_path / "tx.bin"
    write_taylorx(tx, path)
    back = read_taylorx(path)
    assert back.shape == (TX_LEN, NYTAY)
    np.testing.assert_array_equal(back, tx)


def test_taylorx_trailer_matches_row_checksums(tmp_path):
    tx = _tx()
    path = tmp_path / "tx.bin"
    write_taylorx(tx, path)
    expected = DualChecksum()
    for i, row in enumerate(tx):
        expected.accumulate(i, row.astype("<f8").tobytes())
    assert path.read_bytes()[-8:] == struct.pack("<2I", expected.a, expected.b)


def test_taylorx_wrong_row_count(tmp_path):
    path = tmp_path / "tx.bin"
    write_taylorx(_tx()[:-1], path)
    with pytest.raises(PrecompError, match="rows"):
        read_taylorx(path)


def test_taylory_round_trip_and_size(tmp_path):
    ty = _ty()
    path = tmp_path / "ty.bin"
    write_taylory(ty, path)
    assert path.stat().st_size == 4 + 4 + TY_LEN * (4 + 8 * NXTAY) + 8
    np.testing.assert_array_equal(read_taylory(path), ty)


def test_taylory_wrong_width(tmp_path):
    path = tmp_path / "ty.bin"
    write_taylory(_ty()[:, :-1], path)
    with pytest.raises(PrecompError, match="entries"):
        read_taylory(path)


def test_taylory_corrupt(tmp_path):
    path = tmp_path / "ty.bin"
    write_taylory(_ty(), path)
    data = bytearray(path.read_bytes())
    data[20] ^= 0x10
    path.write_bytes(bytes(data))
    with pytest.raises(PrecompError, match="checksum"):
        read_taylory(path)


def test_load_grid(tmp_path):
    base = tmp_path / "PRECOMP"
    base.mkdir()
    table, tx, ty = _table(), _tx(), _ty()
    write_ff(table, base / FF_FILE)
    write_taylorx(tx, base / TAYLORX_FILE)
    write_taylory(ty, base / TAYLORY_FILE)
    grid = load_grid(tmp_path)
    np.testing.assert_array_equal(grid.ff.ffm, table.ffm)
    np.testing.assert_array_equal(grid.tx_row(TaylorX.G0dy), tx[1])
    np.testing.assert_array_equal(grid.ty_row(TaylorY.alpha1dx_0p), ty[13])
    assert grid.ny_tay == NYTAY
    assert grid.nx_tay == NXTAY


def test_load_grid_missing_directory(tmp_path):
    with pytest.raises(PrecompError):
        load_grid(tmp_path / "nowhere")