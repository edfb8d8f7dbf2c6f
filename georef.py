from math import hypot, isfinite, sqrt

import numpy as np

import config
from linalg import DegenerateSystemError, solve_normal_equations
from models import Degenerate, InvalidInput, Residual, Solved, Unsolved
from projection import project, unproject


def complete_pairs(pairs):
    """Pairs with both a source pixel and a map target, in input order."""
    return [p for p in pairs if p.is_complete]


def scaled_source(pair, scale):
    return pair.source.x * scale, pair.source.y * scale


def apply_affine(params, sx, sy):
    a, b, c, d, e, f = params
    return a * sx + b * sy + c, d * sx + e * sy + f


def build_normal_equations(pairs, scale):
    """Accumulate the least-squares normal equations for the affine model.

    Each complete pair adds two rows to the (implicit) design matrix:
        [sx, sy, 1, 0,  0,  0] -> X
        [0,  0,  0, sx, sy, 1] -> Y
    Only the 6x6 normal matrix and the 6-vector right-hand side are kept.
    """
    normal = np.zeros((6, 6))
    rhs = np.zeros(6)
    for pair in complete_pairs(pairs):
        sx, sy = scaled_source(pair, scale)
        t = project(pair.target.lat, pair.target.lng)
        for row, value in (
            (np.array([sx, sy, 1.0, 0.0, 0.0, 0.0]), t.x),
            (np.array([0.0, 0.0, 0.0, sx, sy, 1.0]), t.y),
        ):
            normal += np.outer(row, row)
            rhs += row * value
    return normal, rhs


def evaluate_fit(params, pairs, scale):
    """Per-pair planar error of the fitted transform and the aggregate RMS."""
    residuals = []
    for pair in complete_pairs(pairs):
        sx, sy = scaled_source(pair, scale)
        t = project(pair.target.lat, pair.target.lng)
        x, y = apply_affine(params, sx, sy)
        residuals.append(Residual(pair.id, hypot(x - t.x, y - t.y)))
    if not residuals:
        return residuals, 0.0
    rms = sqrt(sum(r.error ** 2 for r in residuals) / len(residuals))
    return residuals, rms


def _first_non_finite(pairs, scale):
    for pair in pairs:
        sx, sy = scaled_source(pair, scale)
        t = project(pair.target.lat, pair.target.lng)
        if not (isfinite(sx) and isfinite(sy) and t.is_finite()):
            return pair
    return None


def solve(pairs, scale):
    """Fit an affine transform from scaled source pixels to Web Mercator metres.

    Always returns a FitResult:
      Unsolved      fewer than MIN_COMPLETE_PAIRS complete pairs
      InvalidInput  scale is not a finite positive number
      Degenerate    non-finite coordinates, or the system has no unique solution
      Solved        params, per-pair residuals and RMS error
    """
    complete = complete_pairs(pairs)
    if len(complete) < config.MIN_COMPLETE_PAIRS:
        return Unsolved()

    try:
        valid_scale = not isinstance(scale, bool) and isfinite(scale) and scale > 0
    except TypeError:
        valid_scale = False
    if not valid_scale:
        return InvalidInput(f"invalid scale {scale!r} (metres per pixel must be finite and positive)")

    bad = _first_non_finite(complete, scale)
    if bad is not None:
        return Degenerate(f"non-finite coordinates for pair #{bad.id}")

    normal, rhs = build_normal_equations(complete, scale)
    try:
        params = solve_normal_equations(normal, rhs)
    except DegenerateSystemError as e:
        return Degenerate(str(e))

    if not np.all(np.isfinite(params)):
        return Degenerate("transform parameters are not finite")

    residuals, rms = evaluate_fit(params, complete, scale)
    if not isfinite(rms):
        return Degenerate("residuals are not finite")
    return Solved(params, residuals, rms)


def pixel_to_geo(fit, x, y, scale):
    """Transform a source pixel to latitude/longitude."""
    if not fit.is_solved:
        raise RuntimeError(f"Affine transform not fitted ({fit.status}).")
    planar = fit.transform(x, y, scale)
    return unproject(planar.x, planar.y)


def georeference_points(points, fit, scale):
    """Map source-image points to latitude/longitude with a solved fit."""
    return [pixel_to_geo(fit, p.x, p.y, scale) for p in points]
