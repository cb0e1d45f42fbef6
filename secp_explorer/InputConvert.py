# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, *, finite: bool = True) -> T:
    """
    Convert a user-supplied number-like value to ``dest_type``.

    Supported destination types:
    - float
    - int (the value must be an exact integer; ``3.0`` is accepted, ``3.5`` is not)

    Accepted inputs:
    - real numbers (``bool`` is rejected, it is almost always a mistake),
    - strings holding a plain literal (``"1e-4"``) or a SymPy-parsable real
      expression (``"2**-10"``, ``"pi/2"``, ``"7**(1/3)"``),
    - anything else exposing ``__float__`` (NumPy scalars, SymPy numbers).

    Parameters
    ----------
    obj : Any
        Value to convert.
    dest_type : type, optional
        ``float`` (default) or ``int``.
    finite : bool, optional
        When True (default), NaN and infinities are rejected.

    Raises
    ------
    NotImplementedError
        If ``dest_type`` is unsupported.
    ValueError
        If the value cannot be interpreted as a real number of the requested
        kind.

    Examples
    --------
    >>> InputConvert("1e-4")
    0.0001
    >>> InputConvert("2**3", int)
    8
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )
    if isinstance(obj, bool):
        raise ValueError(f"Could not convert boolean {obj!r} to {dest_type.__name__}.")

    if isinstance(obj, str):
        value = _parse_real_string(obj, dest_type)
    else:
        try:
            value = float(obj)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e

    if finite and not math.isfinite(value):
        raise ValueError(f"Expected a finite {dest_type.__name__}, got {obj!r}.")

    if dest_type is float:
        return value  # type: ignore[return-value]

    if not math.isfinite(value) or not value.is_integer():
        raise ValueError(f"Could not convert {obj!r} to int: value is not an exact integer.")
    return int(value)  # type: ignore[return-value]


def _parse_real_string(text: str, dest_type: type) -> float:
    """Parse ``text`` as a float literal, falling back to SymPy evaluation."""
    s = text.strip()
    if s == "":
        raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")

    try:
        return float(s)
    except ValueError:
        pass

    try:
        expr = sp.sympify(s)
        evaluated = expr.evalf()
        if not evaluated.is_real:
            raise ValueError(f"{s!r} does not evaluate to a real number")
        return float(evaluated)
    except Exception as e:
        raise ValueError(
            f"Could not convert {text!r} to {dest_type.__name__} (neither directly nor via SymPy)."
        ) from e

# === END OF SECTION: InputConvert [id: InputConvert]===
