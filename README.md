# kqedtables

`kqedtables` reads, checks and writes the precomputed binary tables that
the QED kernel interpolates from. There are three tables:

- the form-factor grid, `FFxy_single_cksum.bin`
- the Taylor coefficients in x, `taylorx_cksum.bin`, which has 23 rows of 810 doubles
- the Taylor coefficients in y, `taylory_cksum.bin`, which has 14 rows of 100 doubles

Every file starts with the magic number `816968`. Integers are stored as
little-endian 32-bit values. The grids and Taylor rows are 64-bit doubles,
and the form factors are 32-bit floats. Each block is followed by a pair
of checksums built from CRC-32C.

When a file is read, its checksums are recomputed. A missing file, a
truncated file, a wrong magic number, inconsistent dimensions or a
checksum that does not match raises `kqedtables.precomp.PrecompError`.

## Installation

```
pip install kqedtables
```

To run the tests, install the `test` extra and run `pytest`.

## Loading the whole grid

`load_grid(prefix)` reads all three tables from `<prefix>/PRECOMP` and
returns a `kqedtables.grid.Grid`:

```python
from kqedtables.grid import FFidx, TaylorX
from kqedtables.precomp import load_grid

grid = load_grid("/usr/local")
print(grid.ff.xstp, grid.ff.ystp)            # spacing from the first two grid points
row = grid.ff.ffp_row(FFidx.QG0, 10, 20)     # valid entries at x index 10, y index 20
g21 = grid.tx_row(TaylorX.G21)               # one row of the x Taylor table
```

The grid is made of the following parts:

- `Grid.ff` is a `FormFactorTable`. It has the following fields:
  - `xx` and `yy` are the x and y grid points.
  - `nfx` gives the row length at each x point.
  - `ffp` and `ffm` are arrays of shape `(nffa, nstpx, nstpy, nfx_max)`. Entries past `nfx[j]` are zero.
  - `ffp_row` and `ffm_row` return only the valid part of a row.
- `Grid.tx` and `Grid.ty` are the Taylor tables. `Grid.tx_row` and `Grid.ty_row` return their rows.

`kqedtables.grid` defines the enumerations for indexing:

- `FFidx` for the form factors and their derivatives in x.
- `TaylorX` and `TaylorY` for the rows of the Taylor tables.
- `NDCB` for the derivative order in the cosine of the angle.

The same module also defines the constants `ALPHA_QED`, `TX_LEN`,
`TY_LEN`, `NYTAY` and `NXTAY`.

## Reading and writing single files

```python
from kqedtables.precomp import read_ff, write_ff, read_taylorx, write_taylorx

table = read_ff("PRECOMP/FFxy_single_cksum.bin")
write_ff(table, "copy.bin")

tx = read_taylorx("PRECOMP/taylorx_cksum.bin")
write_taylorx(tx, "taylorx_copy.bin")
```

`read_taylory` and `write_taylory` work the same way for the y table.

The writers compute the checksums and store them, so the files they
produce can be read back. The Taylor writers accept a table of any
two-dimensional shape. The readers, however, accept only the fixed shapes
given above.

## Utilities

- `kqedtables.checksum.crc32c(data, crc=0)` returns the CRC-32C (Castagnoli) of any bytes-like object. The register is used as given: no initial or final inversion is applied.
- `kqedtables.checksum.DualChecksum` holds the pair of sums `a` and `b`. Its `accumulate(rank, data)` method takes the CRC of `data`, rotates it left by `rank % 29` and folds it into `a`. It also rotates the CRC left by `rank % 31` and folds it into `b`.
- `kqedtables.byteswap.bswap_16`, `bswap_32` and `bswap_64` each return a copy of a buffer with the bytes of every 16-, 32- or 64-bit word reversed. They raise `ValueError` if the buffer length is not a whole number of words.
- `kqedtables.timer.Timer` is a wall-clock timer that starts when it is created.
  - `start()` resets it.
  - `elapsed()` returns the seconds since the last start.
  - `report(stream=None)` writes the elapsed time to the stream, or to stdout by default, and returns the elapsed time.
- `kqedtables.timer.get_date()` returns the current GMT date in `asctime` form.

## What this package does not do

This package only loads, validates and stores the tables. It does not:

- evaluate the QED kernel itself,
- interpolate in the tables,
- provide a command-line program.