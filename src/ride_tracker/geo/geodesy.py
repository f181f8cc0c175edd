"""Geodesy helpers — haversine distance and convex-hull coverage area.

All coordinates are ``(lat, lon)`` pairs in degrees.  Nothing here raises on
out-of-range input: NaN simply propagates through the arithmetic.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

EARTH_RADIUS_M = 6_371_000.0
"""Mean Earth radius used by the haversine formula (metres)."""

WGS84_SEMI_MAJOR_M = 6_378_137.0
"""Equatorial radius used for the longitude scale factor (metres)."""

Coord = tuple[float, float]


def distance_meters(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the great-circle distance between *a* and *b* in metres.

    Examples
    --------
    >>> distance_meters((0.0, 0.0), (0.0, 0.0))
    0.0
    >>> round(distance_meters((0.0, 0.0), (0.0, 0.001)), 2)
    111.19
    """
    lat1, lon1 = a[0], a[1]
    lat2, lon2 = b[0], b[1]
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    h = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2)
        * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def _cross(o: Coord, a: Coord, b: Coord) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points: Iterable[Sequence[float]]) -> list[Coord]:
    """Return the convex hull of *points* using Andrew's monotone chain.

    Points are sorted by ``(lat, lon)``.  Collinear points are dropped
    (a turn with cross product ``<= 0`` is popped).  The result is the lower
    chain followed by the upper chain, without the repeated endpoints.
    """
    pts = sorted((float(p[0]), float(p[1])) for p in points)
    if len(pts) < 3:
        return pts

    lower: list[Coord] = []
    for p in pts:
        while len(lower) >= 2 and _cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: list[Coord] = []
    for p in reversed(pts):
        while len(upper) >= 2 and _cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


def metres_per_degree(lat_rad: float) -> tuple[float, float]:
    """Return ``(m_per_deg_lat, m_per_deg_lon)`` at latitude *lat_rad* (radians)."""
    m_per_deg_lat = (
        111132.92 - 559.82 * math.cos(2 * lat_rad) + 1.175 * math.cos(4 * lat_rad)
    )
    m_per_deg_lon = (math.pi / 180) * WGS84_SEMI_MAJOR_M * math.cos(lat_rad)
    return m_per_deg_lat, m_per_deg_lon


def coverage_area_m2(points: Sequence[Sequence[float]]) -> float:
    """Return the planar area (m²) of the convex hull of *points*.

    The hull is projected onto a local equirectangular plane scaled at the
    mean hull latitude, then measured with the shoelace formula.  Valid for
    regions that are small compared to the Earth's radius.

    Returns 0.0 for fewer than 3 points or a degenerate (collinear) hull.
    """
    if len(points) < 3:
        return 0.0

    hull = convex_hull(points)
    if len(hull) < 3:
        return 0.0

    lat_ref = math.radians(sum(p[0] for p in hull) / len(hull))
    m_per_deg_lat, m_per_deg_lon = metres_per_degree(lat_ref)
    verts = [(lon * m_per_deg_lon, lat * m_per_deg_lat) for lat, lon in hull]

    area = 0.0
    n = len(verts)
    for i in range(n):
        x1, y1 = verts[i]
        x2, y2 = verts[(i + 1) % n]
        area += x1 * y2 - x2 * y1
    return abs(area / 2)
