from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from api.dto import is_driver, trip_host_id, trip_rider_ids, user_id

Trip = Dict[str, Any]
User = Optional[Dict[str, Any]]

CAB_TYPES = (
    ('SEDAN', 'Sedan'),
    ('SUV', 'SUV'),
)

# Seat rows as seen from the driver's seat
SEAT_LAYOUTS = {
    'suv': [['1', '2'], ['3', '4'], ['5', '6']],
    'sedan': [['1', '2'], ['3', '4']],
}


# ---- Seats ----

def seat_layout(cab_type: Optional[str]) -> List[List[str]]:
    """SUVs seat six in three rows, everything else is treated as a four-seat sedan."""
    if (cab_type or '').lower() == 'suv':
        return SEAT_LAYOUTS['suv']
    return SEAT_LAYOUTS['sedan']


def seats_for_cab_type(cab_type: Optional[str]) -> List[str]:
    return [seat for row in seat_layout(cab_type) for seat in row]


def available_seats(cab_type: Optional[str], booked_seats: Iterable) -> List[str]:
    booked = {str(seat) for seat in booked_seats or []}
    return [seat for seat in seats_for_cab_type(cab_type) if seat not in booked]


def seat_rows(cab_type: Optional[str], booked_seats: Iterable = (), selected: Optional[str] = None) -> List[List[Dict[str, Any]]]:
    """Seat layout annotated for rendering the seat picker."""
    booked = {str(seat) for seat in booked_seats or []}
    return [
        [
            {
                'label': seat,
                'booked': seat in booked,
                'selected': seat == selected and seat not in booked,
            }
            for seat in row
        ]
        for row in seat_layout(cab_type)
    ]


# ---- Dates ----

def date_to_number(value: Union[date, str]) -> int:
    """2025-03-07 -> 20250307, the backend's trip date format."""
    if isinstance(value, (date, datetime)):
        return int(value.strftime('%Y%m%d'))
    return int(str(value).replace('-', ''))


def number_to_date(value: Any) -> Optional[date]:
    text = str(value or '')
    if len(text) != 8 or not text.isdigit():
        return None
    try:
        return datetime.strptime(text, '%Y%m%d').date()
    except ValueError:
        return None


def format_trip_date(value: Any) -> str:
    """20250307 -> 07/03/2025; anything that is not eight digits prints unchanged."""
    text = str(value if value is not None else '')
    if len(text) == 8 and text.isdigit():
        return f'{text[6:8]}/{text[4:6]}/{text[0:4]}'
    return text


# ---- Roles ----

def is_pending(trip: Trip) -> bool:
    return not trip.get('tripStatus')


def status_text(trip: Trip) -> str:
    return 'Pending' if is_pending(trip) else 'Completed'


def is_host(trip: Trip, user: User) -> bool:
    host_id = trip_host_id(trip)
    return host_id is not None and host_id == user_id(user)


def has_booked(trip: Trip, user: User) -> bool:
    uid = user_id(user)
    return uid is not None and uid in trip_rider_ids(trip)


def can_accept_trip(trip: Trip, user: User) -> bool:
    return is_driver(user) and is_pending(trip)


def can_book_from_card(trip: Trip, user: User) -> bool:
    return bool(user) and not is_driver(user) and is_pending(trip) and not is_host(trip, user)


def can_book_trip(trip: Trip, user: User) -> bool:
    """Details-page eligibility: the card rule plus not already being a rider."""
    if not trip or not user:
        return False
    return can_book_from_card(trip, user) and not has_booked(trip, user)


def can_manage_trip(trip: Trip, user: User) -> bool:
    return is_host(trip, user) and is_pending(trip)


def trip_card(trip: Trip, user: User) -> Dict[str, Any]:
    """Everything a trip card template needs, precomputed."""
    return {
        'trip': trip,
        'trip_id': trip.get('tripId'),
        'date_display': format_trip_date(trip.get('tripDate')),
        'status_text': status_text(trip),
        'is_pending': is_pending(trip),
        'is_host': is_host(trip, user),
        'show_accept': can_accept_trip(trip, user),
        'show_book': can_book_from_card(trip, user),
        'show_host_actions': can_manage_trip(trip, user),
    }


# ---- Cabs ----

def compatible_cabs(cabs: Iterable[Dict[str, Any]], cab_type: Optional[str]) -> List[Dict[str, Any]]:
    wanted = (cab_type or '').lower()
    return [cab for cab in cabs or [] if (cab.get('cabType') or '').lower() == wanted]


# ---- Keeping "my trips" and search results in step ----

def replace_trip(trips: Optional[List[Trip]], updated: Trip) -> List[Trip]:
    updated_id = updated.get('tripId')
    return [updated if trip.get('tripId') == updated_id else trip for trip in trips or []]


def remove_trip(trips: Optional[List[Trip]], trip_id: int) -> List[Trip]:
    return [trip for trip in trips or [] if trip.get('tripId') != trip_id]
