"""Index enumerations and containers for the precomputed interpolation grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

__all__ = [
    "ALPHA_QED",
    "TX_LEN",
    "TY_LEN",
    "NYTAY",
    "NXTAY",
    "NDCB",
    "FFidx",
    "TaylorX",
    "TaylorY",
    "FormFactorTable",
    "Grid",
]

ALPHA_QED = 1.0 / 137.035999
"""QED fine-structure coupling."""

TX_LEN = 23
"""Number of coefficient rows in the x Taylor table."""
TY_LEN = 14
"""Number of coefficient rows in the y Taylor table."""
NYTAY = 810
"""Entries in each row of the x Taylor table."""
NXTAY = 100
"""Entries in each row of the y Taylor table."""


class NDCB(IntEnum):
    """Order of the derivative with respect to the cosine of the angle."""

    d0cb = 0
    d1cb = 1
    d2cb = 2
    d3cb = 3


class FFidx(IntEnum):
    """Labels of the form factors and their x-derivatives."""

    QG0 = 0
    QG1 = 1
    QG2 = 2
    QG3 = 3
    QL4 = 4
    QL2 = 5
    dxQG0 = 6
    dxQG1 = 7
    dxQG2 = 8
    dxQG3 = 9
    dxQL4 = 10
    dxQL2 = 11
    d2xQG2 = 12
    d2xQG3 = 13


class TaylorX(IntEnum):
    """Rows of the x Taylor table, in file order."""

    YY = 0
    G0dy = 1
    G0dx = 2
    Gl2 = 3
    Gl2dy = 4
    Gl21 = 5
    Gl21dy = 6
    Gl3 = 7
    Gl3dy = 8
    G21 = 9
    G21dy = 10
    G22A = 11
    G22B = 12
    G22Ady = 13
    G22Bdy = 14
    G3A = 15
    G3B = 16
    G3Ady = 17
    G3Bdy = 18
    G31A = 19
    G31B = 20
    G31Ady = 21
    G31Bdy = 22


class TaylorY(IntEnum):
    """Rows of the y Taylor table, in file order."""

    alpha0dx_0p = 0
    alpha0_1p = 1
    alpha3_0p = 2
    beta2_1p = 3
    alpha3_1p = 4
    alpha1_0p = 5
    beta4_1p = 6
    alpha1_1p = 7
    alpha1dx_1p = 8
    alpha3dx_0p = 9
    alpha3dxdx_0p = 10
    beta2dx_1p = 11
    alpha3dx_1p = 12
    alpha1dx_0p = 13


@dataclass(eq=False)
class FormFactorTable:
    """Form factors tabulated on an (x, y) grid.

    ``ffp`` and ``ffm`` have shape ``(nffa, nstpx, nstpy, nfx_max)``; only the
    first ``nfx[j]`` entries of a row at x index ``j`` carry data.
    """

    xx: np.ndarray
    yy: np.ndarray
    nfx: np.ndarray
    ffp: np.ndarray
    ffm: np.ndarray

    def __post_init__(self) -> None:
        self.xx = np.asarray(self.xx, dtype=np.float64)
        self.yy = np.asarray(self.yy, dtype=np.float64)
        self.nfx = np.asarray(self.nfx, dtype=np.int64)
        self.ffp = np.asarray(self.ffp, dtype=np.float32)
        self.ffm = np.asarray(self.ffm, dtype=np.float32)
        if self.xx.ndim != 1 or self.yy.ndim != 1:
            raise ValueError("xx and yy must be one-dimensional")
        if self.nfx.shape != self.xx.shape:
            raise ValueError(
                f"nfx has {self.nfx.size} entries but there are {self.xx.size} x points"
            )
        if self.ffp.ndim != 4:
            raise ValueError("ffp must be four-dimensional")
        if self.ffp.shape != self.ffm.shape:
            raise ValueError(
                f"ffp shape {self.ffp.shape} differs from ffm shape {self.ffm.shape}"
            )
        if self.ffp.shape[1:3] != (self.xx.size, self.yy.size):
            raise ValueError(
                f"form factor grid {self.ffp.shape[1:3]} does not match "
                f"({self.xx.size}, {self.yy.size}) points"
            )
        if self.nfx.size and (self.nfx.min() < 0 or self.nfx.max() > self.nfx_max):
            raise ValueError(f"row lengths must lie in [0, {self.nfx_max}]")

    @property
    def nffa(self) -> int:
        """Number of form factors."""
        return self.ffp.shape[0]

    @property
    def nstpx(self) -> int:
        """Number of x grid points."""
        return self.xx.size

    @property
    def nstpy(self) -> int:
        """Number of y grid points."""
        return self.yy.size

    @property
    def nfx_max(self) -> int:
        """Longest row length."""
        return self.ffp.shape[3]

    @property
    def xstp(self) -> float:
        """Spacing of the x grid, taken from its first two points."""
        if self.xx.size < 2:
            raise ValueError("x grid needs at least two points for a step")
        return float(self.xx[1] - self.xx[0])

    @property
    def ystp(self) -> float:
        """Spacing of the y grid, taken from its first two points."""
        if self.yy.size < 2:
            raise ValueError("y grid needs at least two points for a step")
        return float(self.yy[1] - self.yy[0])

    def ffp_row(self, i: int, j: int, k: int) -> np.ndarray:
        """The valid entries of the plus form factor ``i`` at grid point ``(j, k)``."""
        return self.ffp[i, j, k, : self.nfx[j]]

    def ffm_row(self, i: int, j: int, k: int) -> np.ndarray:
        """The valid entries of the minus form factor ``i`` at grid point ``(j, k)``."""
        return self.ffm[i, j, k, : self.nfx[j]]


@dataclass(eq=False)
class Grid:
    """The form-factor table together with both Taylor coefficient tables."""

    ff: FormFactorTable
    tx: np.ndarray
    ty: np.ndarray = field()

    def __post_init__(self) -> None:
        self.tx = np.asarray(self.tx, dtype=np.float64)
        self.ty = np.asarray(self.ty, dtype=np.float64)
        if self.tx.ndim != 2 or self.tx.shape[0] != TX_LEN:
            raise ValueError(f"tx must have {TX_LEN} rows, got shape {self.tx.shape}")
        if self.ty.ndim != 2 or self.ty.shape[0] != TY_LEN:
            raise ValueError(f"ty must have {TY_LEN} rows, got shape {self.ty.shape}")

    @property
    def ny_tay(self) -> int:
        """Entries in each row of the x Taylor table."""
        return self.tx.shape[1]

    @property
    def nx_tay(self) -> int:
        """Entries in each row of the y Taylor table."""
        return self.ty.shape[1]

    def tx_row(self, i: int) -> np.ndarray:
        """Row ``i`` (a :class:`TaylorX` label) of the x Taylor table."""
        return self.tx[int(i)]

    def ty_row(self, i: int) -> np.ndarray:
        """Row ``i`` (a :class:`TaylorY` label) of the y Taylor table."""
        return self.ty[int(i)]