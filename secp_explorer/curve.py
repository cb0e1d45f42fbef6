"""Real-valued elliptic curves in short Weierstrass form.

Purpose
-------
Defines ``EllipticCurve``, the symbolic description of a curve
``y**2 = x**3 + a*x + b`` evaluated over the real numbers, and the
``SECP256K1`` instance (``a = 0``, ``b = 7``) plotted by the explorer.

Concepts and structure
----------------------
The curve keeps its right-hand side as a SymPy expression and compiles it
once to a NumPy callable with :func:`sympy.lambdify`. The sampler evaluates
that callable on whole arrays of x-values, so the symbolic form is the single
source of truth for both the numeric path and the LaTeX title.

Important gotchas
-----------------
- Only the defining equation is used. There is no finite-field arithmetic and
  no group law here; the curve is a set of real points.
- For ``SECP256K1`` SymPy drops the ``0*x`` term, so the compiled callable is
  exactly ``x**3 + 7``.

Examples
--------
>>> from secp_explorer.curve import SECP256K1
>>> float(SECP256K1.rhs(2.0))
15.0
>>> SECP256K1.latex
'y^{2} = x^{3} + 7'
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np
import sympy as sp

from .InputConvert import InputConvert

X_SYMBOL = sp.Symbol("x", real=True)
Y_SYMBOL = sp.Symbol("y", real=True)

SECP256K1_FIELD_PRIME_LATEX = r"p = 2^{256} - 2^{32} - 977"


@dataclass(frozen=True)
class EllipticCurve:
    """A real elliptic curve ``y**2 = x**3 + a*x + b``.

    Parameters
    ----------
    a : float
        Linear coefficient.
    b : float
        Constant coefficient.
    name : str
        Display name used in titles.
    properties : tuple[str, ...]
        Static facts shown in the explorer's properties panel.

    Raises
    ------
    ValueError
        If a coefficient is not a finite real number or the curve is singular
        (``4*a**3 + 27*b**2 == 0``).
    """

    a: float
    b: float
    name: str = ""
    properties: tuple[str, ...] = ()
    _rhs_numeric: Callable[[Any], Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        a = InputConvert(self.a, float)
        b = InputConvert(self.b, float)
        if 4.0 * a**3 + 27.0 * b**2 == 0.0:
            raise ValueError(f"Singular curve: 4a^3 + 27b^2 = 0 for a={a!r}, b={b!r}")
        object.__setattr__(self, "a", a)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "properties", tuple(str(p) for p in self.properties))
        object.__setattr__(
            self, "_rhs_numeric", sp.lambdify(X_SYMBOL, self.rhs_expr, modules="numpy")
        )

    @property
    def rhs_expr(self) -> sp.Expr:
        """Return the SymPy right-hand side ``x**3 + a*x + b``."""
        return X_SYMBOL**3 + _exact(self.a) * X_SYMBOL + _exact(self.b)

    @property
    def equation(self) -> sp.Eq:
        """Return the defining equation as a SymPy ``Eq``."""
        return sp.Eq(Y_SYMBOL**2, self.rhs_expr)

    @property
    def latex(self) -> str:
        """Return the equation rendered as LaTeX, e.g. ``y^{2} = x^{3} + 7``."""
        return f"{sp.latex(Y_SYMBOL**2)} = {sp.latex(self.rhs_expr)}"

    @property
    def discriminant(self) -> float:
        """Return ``-16 * (4*a**3 + 27*b**2)``."""
        return -16.0 * (4.0 * self.a**3 + 27.0 * self.b**2)

    def rhs(self, x: Any) -> np.ndarray:
        """Evaluate ``x**3 + a*x + b`` elementwise on ``x``.

        The result always has the shape of ``np.asarray(x)``; a constant
        right-hand side is broadcast.
        """
        x_arr = np.asarray(x, dtype=float)
        return np.broadcast_to(np.asarray(self._rhs_numeric(x_arr), dtype=float), x_arr.shape)

    def contains(self, x: float, y: float, *, rel_tol: float = 1e-9, abs_tol: float = 1e-9) -> bool:
        """Return True when ``(x, y)`` satisfies the equation within tolerance."""
        return math.isclose(float(y) ** 2, float(self.rhs(x)), rel_tol=rel_tol, abs_tol=abs_tol)

    def real_root(self) -> float | None:
        """Return the smallest real root of ``x**3 + a*x + b``.

        This is the leftmost x where the curve has a real point. For
        ``SECP256K1`` it is the cube root of -7 (about -1.913).
        """
        roots = [
            float(sp.re(r))
            for r in sp.Poly(self.rhs_expr, X_SYMBOL).nroots()
            if abs(float(sp.im(r))) < 1e-12
        ]
        return min(roots) if roots else None


def _exact(value: float) -> sp.Expr:
    """Return an exact SymPy number for integral coefficients, else a Float."""
    if float(value).is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


SECP256K1 = EllipticCurve(
    a=0,
    b=7,
    name="SECP256K1",
    properties=(
        r"Equation: \(y^2 = x^3 + 7\)",
        r"Point at infinity (\(\infty\)) serves as the identity element",
        "The curve is symmetric about the x-axis",
        "Every x-coordinate either has two corresponding y-coordinates (positive and negative) or none",
        "The curve has no singularities (smooth everywhere)",
        rf"When used in Bitcoin, coordinates are reduced modulo \({SECP256K1_FIELD_PRIME_LATEX}\)",
        r"The base point \(G\) has order \(n\) (a prime number)",
    ),
)


__all__ = ["EllipticCurve", "SECP256K1", "X_SYMBOL", "Y_SYMBOL"]
