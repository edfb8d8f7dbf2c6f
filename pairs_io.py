import json
from datetime import datetime, timezone
from math import isfinite

from models import GeoPoint, ImagePoint, PointPair


SCHEMA_VERSION = 1


def pair_to_dict(pair):
    source = None
    if pair.source is not None:
        source = {"x": pair.source.x, "y": pair.source.y}
    target = None
    if pair.target is not None:
        target = {"lat": pair.target.lat, "lng": pair.target.lng}
        if pair.target.elevation is not None:
            target["elevation"] = pair.target.elevation
    return {
        "id": pair.id,
        "source": source,
        "target": target,
        "complete": pair.is_complete,
    }


def pair_from_dict(d):
    try:
        source = d.get("source")
        target = d.get("target")
        return PointPair(
            int(d["id"]),
            source=ImagePoint(float(source["x"]), float(source["y"])) if source else None,
            target=GeoPoint(
                float(target["lat"]), float(target["lng"]),
                elevation=target.get("elevation"),
            ) if target else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ValueError(f"Invalid pair entry {d!r}: {e}") from e


def _scale_or_none(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not isfinite(value) or value <= 0:
        return None
    return float(value)


def export_pairs(pairs, meters_per_pixel, path=None):
    """Build the flat pair export payload, writing it to path when given."""
    payload = {
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "schemaVersion": SCHEMA_VERSION,
        "units": "metres",
        "metersPerPixel": meters_per_pixel,
        "pairs": [pair_to_dict(p) for p in pairs],
    }
    if path is not None:
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
    return payload


def parse_pairs(data):
    """Read pairs and scale from a decoded pairs document.

    Accepts an export payload ("pairs"), or a list of source points only
    ("points" with x/y, or "controlPoints" with sourceX/sourceY); source-only
    points get ids 1..n. The scale is None unless the document carries a
    finite positive "metersPerPixel".
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    if "pairs" in data:
        pairs = [pair_from_dict(d) for d in data["pairs"]]
    else:
        if "points" in data:
            points, keys = data["points"], ("x", "y")
        else:
            points, keys = data.get("controlPoints", []), ("sourceX", "sourceY")
        pairs = []
        for index, raw in enumerate(points):
            try:
                source = ImagePoint(float(raw[keys[0]]), float(raw[keys[1]]))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid source point {raw!r}: {e}") from e
            pairs.append(PointPair(index + 1, source=source))

    return pairs, _scale_or_none(data.get("metersPerPixel"))


def load_pairs(path):
    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse pairs file {path}: {e}") from e
    return parse_pairs(data)
