from math import atan, degrees, exp, isfinite, log, pi, radians, tan

from models import GeoPoint, PlanarPoint


# Half the projected extent at the equator (EPSG:3857, sphere of radius 6378137 m)
ORIGIN_SHIFT = 20037508.34


def project(lat, lng):
    """Spherical Web Mercator forward projection.

    Returns planar metres. Never raises: the poles map to y = +/-inf and
    latitudes outside [-90, 90] (or non-finite input) map to y = nan, so the
    caller decides what to do with them.
    """
    x = lng * ORIGIN_SHIFT / 180
    if not isfinite(lat) or abs(lat) > 90:
        return PlanarPoint(x, float("nan"))
    if lat == 90:
        return PlanarPoint(x, float("inf"))
    if lat == -90:
        return PlanarPoint(x, float("-inf"))
    y = log(tan(radians(90 + lat) / 2)) / (pi / 180)
    return PlanarPoint(x, y * ORIGIN_SHIFT / 180)


def unproject(x, y):
    """Inverse of project(): planar metres back to latitude/longitude."""
    lng = x * 180 / ORIGIN_SHIFT
    lat = degrees(2 * atan(exp(y / ORIGIN_SHIFT * pi)) - pi / 2)
    return GeoPoint(lat, lng)
