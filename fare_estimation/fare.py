from .distance import calculate_distance

# Per-kilometer rate shown as the base price when a host creates a trip
PER_KM_RATE = {
    'SEDAN': 13,
    'SUV': 30,
}


def estimate_base_price(distance_km, cab_type):
    rate = PER_KM_RATE.get((cab_type or '').upper())
    if rate is None:
        return None
    return round(distance_km * rate, 2)


def calculate_fare(lat1, lon1, lat2, lon2, cab_type='SEDAN'):
    distance_km = round(calculate_distance(lat1, lon1, lat2, lon2))
    return estimate_base_price(distance_km, cab_type)
