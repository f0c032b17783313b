from __future__ import annotations

from typing import Any, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float) -> T:
    """
    Convert a user-supplied configuration value to ``dest_type``.

    Used for thresholds and tick counts, which may arrive from code, from a
    text field, or from a notebook cell as strings like ``"1e3"`` or ``"pi/2"``.

    Rules:
    - Numbers (excluding ``bool``) are cast directly.
    - Strings are tried as plain ``float`` first, then parsed with SymPy and
      evaluated.
    - Complex results must have a zero imaginary part.
    - ``int`` destinations require an exact integer value (``3.0`` is fine,
      ``3.5`` is not).

    Raises
    ------
    NotImplementedError
        If ``dest_type`` is not ``float`` or ``int``.
    ValueError
        If the value cannot be converted.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    def _coerce_real(x: complex) -> T:
        if x.imag != 0:
            raise ValueError(
                f"Could not convert non-real {x!r} to {dest_type.__name__}: imaginary part is non-zero."
            )
        r_val = float(x.real)
        if dest_type is float:
            return r_val  # type: ignore[return-value]
        if not r_val.is_integer():
            raise ValueError(f"Could not convert {x!r} to int: value is not an exact integer.")
        return int(r_val)  # type: ignore[return-value]

    if isinstance(obj, bool):
        raise ValueError(f"Refusing to convert boolean {obj!r} to {dest_type.__name__}.")

    if isinstance(obj, (int, float, complex)):
        try:
            return _coerce_real(complex(obj))
        except (OverflowError, ValueError) as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")

        try:
            return _coerce_real(complex(float(s)))
        except ValueError:
            pass

        try:
            expr = sp.sympify(s)
            val = complex(expr.evalf())
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to {dest_type.__name__} (neither directly nor via SymPy)."
            ) from e
        return _coerce_real(val)

    # numpy scalars and other objects implementing __complex__/__float__
    try:
        return _coerce_real(complex(obj))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e
