"""Geodesic distance and coverage-area helpers."""

from ride_tracker.geo.geodesy import convex_hull, coverage_area_m2, distance_meters

__all__ = ["convex_hull", "coverage_area_m2", "distance_meters"]
