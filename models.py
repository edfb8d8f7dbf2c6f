from math import isfinite


class GeoPoint:
    """Geographic coordinate: lat is latitude, lng is longitude (degrees).

    elevation is carried along for export only; the solver ignores it.
    """

    def __init__(self, lat, lng, elevation=None):
        self.lat = lat
        self.lng = lng
        self.elevation = elevation

    def __eq__(self, other):
        if not isinstance(other, GeoPoint):
            return False
        return (self.lat, self.lng, self.elevation) == (other.lat, other.lng, other.elevation)

    def __hash__(self):
        return hash((self.lat, self.lng, self.elevation))

    def __repr__(self):
        return f"GeoPoint(lat={self.lat}, lng={self.lng})"


class ImagePoint:
    """Pixel position in the source raster's native resolution."""

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __eq__(self, other):
        if not isinstance(other, ImagePoint):
            return False
        return (self.x, self.y) == (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"ImagePoint(x={self.x}, y={self.y})"


class PlanarPoint:
    """Projected position in metres."""

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def is_finite(self):
        return isfinite(self.x) and isfinite(self.y)

    def __eq__(self, other):
        if not isinstance(other, PlanarPoint):
            return False
        return (self.x, self.y) == (other.x, other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"PlanarPoint(x={self.x:.2f}, y={self.y:.2f})"


class PointPair:
    def __init__(self, id, source=None, target=None):
        self.id = id
        self.source = source
        self.target = target

    @property
    def is_complete(self):
        return self.source is not None and self.target is not None

    def __eq__(self, other):
        if not isinstance(other, PointPair):
            return False
        return (self.id, self.source, self.target) == (other.id, other.source, other.target)

    def __hash__(self):
        return hash(self.id)

    def __str__(self):
        state = f"{'S' if self.source else '-'}{'M' if self.target else '-'}"
        return f"#{self.id} {state}"

    def __repr__(self):
        return f"PointPair(id={self.id}, source={self.source!r}, target={self.target!r})"


class Residual:
    def __init__(self, pair_id, error):
        self.pair_id = pair_id
        self.error = error

    def __repr__(self):
        return f"Residual(pair={self.pair_id}, error={self.error:.2f}m)"


class FitResult:
    """Outcome of one solve attempt. Subclasses carry the per-kind payload."""

    status = None
    is_solved = False

    def __init__(self, reason=None):
        self.reason = reason

    def status_text(self):
        return f"Could not solve transform: {self.reason}"

    def report(self):
        """Print fit status."""
        print("Affine Georeferencing Transform:")
        print(f"  {self.status_text()}")

    def __repr__(self):
        return f"{type(self).__name__}(reason={self.reason!r})"


class Unsolved(FitResult):
    status = "unsolved"

    def __init__(self, reason="insufficient data"):
        super().__init__(reason)

    def status_text(self):
        return "Need 3 completed point pairs."


class Degenerate(FitResult):
    status = "degenerate"


class InvalidInput(FitResult):
    status = "invalid_input"


class Solved(FitResult):
    """Solved affine fit.

    params = [a, b, c, d, e, f] with
        X = a * sx + b * sy + c
        Y = d * sx + e * sy + f
    where (sx, sy) is the source pixel scaled to metres.
    """

    status = "solved"
    is_solved = True

    def __init__(self, params, residuals, rms_error):
        super().__init__()
        self.params = tuple(float(p) for p in params)
        self.residuals = residuals
        self.rms_error = rms_error

    def transform(self, x, y, scale):
        """Transform a source pixel to planar metres."""
        a, b, c, d, e, f = self.params
        sx, sy = x * scale, y * scale
        return PlanarPoint(a * sx + b * sy + c, d * sx + e * sy + f)

    def status_text(self):
        return f"Solved with {len(self.residuals)} points. RMS error: {self.rms_error:.2f} m"

    def report(self):
        """Print fit quality."""
        print("Affine Georeferencing Transform:")
        print(f"  {self.status_text()}")
        print(f"  Params: {', '.join(f'{p:.6f}' for p in self.params)}")
        for r in self.residuals:
            print(f"  Pair #{r.pair_id}: {r.error:.2f} m")

    def __repr__(self):
        return f"Solved(params={self.params}, rms={self.rms_error:.3f}m, n={len(self.residuals)})"


def next_pair_id(pairs):
    """Id for a new pair: one past the highest existing id."""
    if not pairs:
        return 1
    return max(p.id for p in pairs) + 1


def upsert_pair(pairs, pair_id, source=None, target=None):
    """Return a new pair list with the source/target of pair_id replaced.

    Fields passed as None keep their current value. Pairs are never modified
    in place, so callers may still hold the old list.
    """
    updated = []
    for pair in pairs:
        if pair.id == pair_id:
            pair = PointPair(
                pair.id,
                source=source if source is not None else pair.source,
                target=target if target is not None else pair.target,
            )
        updated.append(pair)
    return updated
