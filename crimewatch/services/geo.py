"""Proximity search over report coordinates.

A rectangular latitude/longitude range narrows the candidates in the
database, then the Haversine distance drops the corners of that rectangle.
Matches keep the store's ordering; nothing is re-sorted by distance.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlmodel import Session

from crimewatch.core.errors import ValidationError
from crimewatch.models.report import Report
from crimewatch.services import report_store
from crimewatch.services.pagination import page_offset, slice_page

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    # cos(lat) shrinks towards the poles, so the box widens without bound there.
    d_lat = radius_km / EARTH_RADIUS_KM * (180 / math.pi)
    d_lng = radius_km / (EARTH_RADIUS_KM * math.cos(lat * math.pi / 180)) * (180 / math.pi)
    return BoundingBox(
        min_lat=lat - d_lat,
        max_lat=lat + d_lat,
        min_lng=lng - d_lng,
        max_lng=lng + d_lng,
    )


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coerce_geo_point(lat: Any, lng: Any) -> Optional[tuple[float, float]]:
    """Return ``(lat, lng)`` for a usable coordinate pair, ``None`` otherwise."""
    if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
        return None
    try:
        lat_value = float(lat)
        lng_value = float(lng)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat_value) and math.isfinite(lng_value)):
        return None
    if not (-90 <= lat_value <= 90 and -180 <= lng_value <= 180):
        return None
    return lat_value, lng_value


def parse_coordinate(name: str, value: Any) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a number") from exc
    if not math.isfinite(parsed):
        raise ValidationError(f"{name} must be a finite number")
    return parsed


def within_radius(records: Iterable[Report], lat: float, lng: float, radius_km: float) -> list[Report]:
    matches: list[Report] = []
    for record in records:
        point = coerce_geo_point(record.latitude, record.longitude)
        if point is None:
            continue
        if haversine_km(lat, lng, point[0], point[1]) <= radius_km:
            matches.append(record)
    return matches


def search_within_radius(
    session: Session,
    lat: Any,
    lng: Any,
    radius_km: Any,
    page: int,
    page_size: int,
    where=None,
) -> tuple[list[Report], int]:
    page_offset(page, page_size)
    lat_value = parse_coordinate('lat', lat)
    lng_value = parse_coordinate('lng', lng)
    radius_value = parse_coordinate('radius', radius_km)
    if not -90 <= lat_value <= 90:
        raise ValidationError('lat must be between -90 and 90')
    if not -180 <= lng_value <= 180:
        raise ValidationError('lng must be between -180 and 180')
    if radius_value < 0:
        raise ValidationError('radius must not be negative')

    box = bounding_box(lat_value, lng_value, radius_value)
    candidates = report_store.list_in_bounding_box(session, box, where=where)
    matches = within_radius(candidates, lat_value, lng_value, radius_value)
    return slice_page(matches, page, page_size), len(matches)
