import math

EARTH_RADIUS_KM = 6371.0


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in kilometers."""
    ph1, ph2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(ph1) * math.cos(ph2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def trip_distance_km(pickup, drop) -> int:
    """Whole-kilometer distance between two ``{lat, lng}`` points, as the backend stores it."""
    distance = calculate_distance(
        float(pickup['lat']), float(pickup['lng']),
        float(drop['lat']), float(drop['lng'])
    )
    return int(round(distance))
