from .distance import calculate_distance, trip_distance_km
from .fare import PER_KM_RATE, calculate_fare, estimate_base_price

__all__ = (
    'calculate_distance',
    'trip_distance_km',
    'PER_KM_RATE',
    'calculate_fare',
    'estimate_base_price',
)
