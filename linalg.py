import numpy as np

import config


class DegenerateSystemError(ValueError):
    """Raised when no numerically safe pivot exists for a column."""


def gauss_jordan(a, b, tolerance=config.PIVOT_TOLERANCE):
    """Solve a @ x = b by Gauss-Jordan elimination with partial pivoting.

    The augmented system [a | b] is reduced all the way to [I | x], so the
    solution is read straight off the right-hand side. For each column the
    row with the largest absolute value at or below the diagonal is swapped
    in (lowest index on ties). A pivot smaller than `tolerance`, or not
    finite, raises DegenerateSystemError.

    a and b are copied; the caller's arrays are left untouched.
    """
    a = np.array(a, dtype=float)
    b = np.array(b, dtype=float)
    n = b.shape[0]
    if a.shape != (n, n):
        raise ValueError(f"Expected a {n}x{n} matrix, got shape {a.shape}")

    for i in range(n):
        pivot = i + int(np.argmax(np.abs(a[i:, i])))
        if pivot != i:
            a[[i, pivot]] = a[[pivot, i]]
            b[[i, pivot]] = b[[pivot, i]]

        d = a[i, i]
        if not np.isfinite(d) or abs(d) < tolerance:
            raise DegenerateSystemError(f"degenerate control points (pivot {d:.3g} in column {i})")
        a[i, i:] /= d
        b[i] /= d

        for r in range(n):
            if r == i:
                continue
            f = a[r, i]
            a[r, i:] -= f * a[i, i:]
            b[r] -= f * b[i]

    return b


def solve_normal_equations(normal, rhs, tolerance=config.PIVOT_TOLERANCE):
    """Solve a symmetric normal system after scaling it to a unit diagonal.

    Rows and columns are scaled by 1 / sqrt(N[i, i]) so the pivot tolerance
    is relative to the data rather than to the coordinate magnitudes; the
    solution is unscaled before returning. A zero or non-finite diagonal
    entry means an unconstrained parameter and raises DegenerateSystemError.
    """
    normal = np.array(normal, dtype=float)
    rhs = np.array(rhs, dtype=float)
    diag = np.diag(normal)
    for i, value in enumerate(diag):
        if not np.isfinite(value) or value <= 0:
            raise DegenerateSystemError(f"degenerate control points (diagonal {value:.3g} in column {i})")

    d = 1.0 / np.sqrt(diag)
    scaled = gauss_jordan(normal * np.outer(d, d), rhs * d, tolerance)
    return scaled * d
