"""
Spatial helpers: great-circle distance and greedy area grouping.
"""

import math
from collections import namedtuple
from datetime import timedelta

EARTH_RADIUS_M = 6371e3

# area is the anchor event's own location.area
AreaGroup = namedtuple("AreaGroup", ["area", "anchor", "members"])


def haversine_distance(lat1, lng1, lat2, lng2):
    """Great-circle distance in meters between two lat/lng points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def group_by_area(events, radius_meters):
    """
    Greedy nearest-representative grouping.

    Each group is anchored at its first member's coordinates and named by that
    member's area. An event joins the first group (in creation order)
    whose anchor is within `radius_meters`, otherwise it starts a new group.
    Anchors never move, so the result depends on input order and close events
    near a radius boundary can land in different groups. This is an
    approximation, not a clustering algorithm.

    Returns a list of `AreaGroup` in creation order. Two far-apart groups
    may share an area name; both are kept.
    """
    groups = []

    for event in events:
        lat, lng = event.location.lat, event.location.lng
        for group in groups:
            anchor = group.anchor
            distance = haversine_distance(lat, lng, anchor.location.lat, anchor.location.lng)
            # NaN compares false, so a degenerate distance never matches
            if distance <= radius_meters:
                group.members.append(event)
                break
        else:
            groups.append(AreaGroup(event.location.area, event, [event]))

    return groups


def time_span(events):
    """Elapsed time between the earliest and latest event."""
    if not events:
        return timedelta(0)
    stamps = [e.timestamp for e in events]
    return max(stamps) - min(stamps)
