"""Helpers for reading the backend's camelCase DTOs.

The backend is not consistent about user keys (``userId``/``id``,
``userName``/``username``) so everything that compares users goes through here.
"""
from typing import Any, Dict, List, Optional

USER_TYPES = (
    ('STUDENT', 'Student'),
    ('TEACHER', 'Teacher'),
    ('DRIVER', 'Driver'),
)

DRIVER = 'DRIVER'


def user_id(user: Optional[Dict[str, Any]]) -> Optional[int]:
    if not user:
        return None
    return user.get('userId', user.get('id'))


def user_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return ''
    return user.get('userName') or user.get('username') or ''


def coordinate(lat, lng) -> Dict[str, float]:
    return {'lat': float(lat), 'lng': float(lng)}


def _nested_user(entry: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not entry:
        return None
    return entry.get('user')


def trip_host_id(trip: Dict[str, Any]) -> Optional[int]:
    return user_id(_nested_user(trip.get('host')))


def trip_rider_ids(trip: Dict[str, Any]) -> List[int]:
    ids = []
    for rider in trip.get('riders') or []:
        rider_id = user_id(_nested_user(rider))
        if rider_id is not None:
            ids.append(rider_id)
    return ids


def trip_coordinates(trip: Dict[str, Any], key: str) -> Optional[Dict[str, float]]:
    """Return the ``trippickup``/``tripdrop`` pair as floats, or None when absent."""
    point = trip.get(key)
    if not point or point.get('lat') is None or point.get('lng') is None:
        return None
    return coordinate(point['lat'], point['lng'])


def is_driver(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get('userType') == DRIVER
