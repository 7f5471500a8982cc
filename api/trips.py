from typing import Any, Dict

from .base import BackendResource
from .envelope import ApiResponse


class TripApi(BackendResource):
    """Trip endpoints under ``/trip``."""

    def get_user_trips(self) -> ApiResponse:
        return self._call('GET', '/trip/usertrips',
                          'Trips fetched successfully', 'Failed to fetch trips')

    def get_trip(self, trip_id: int) -> ApiResponse:
        return self._call('GET', f'/trip/{trip_id}',
                          'Trip fetched successfully', 'Failed to fetch trip')

    def get_booked_seats(self, trip_id: int) -> ApiResponse:
        return self._call('GET', f'/trip/bookedseat/{trip_id}',
                          'Booked seats fetched successfully', 'Failed to fetch booked seats')

    def book_trip(self, trip_id: int, booking: Dict[str, Any]) -> ApiResponse:
        """Book ``booking['tripSeat']`` with the rider's ``trippickup`` coordinates."""
        return self._call('POST', f'/trip/book/{trip_id}',
                          'Trip booked successfully', 'Failed to book trip', json=booking)

    def search_trips(self, search: Dict[str, Any]) -> ApiResponse:
        return self._call('POST', '/trip/search',
                          'Trips searched successfully', 'Failed to search trips', json=search)

    def accept_trip(self, trip_id: int, cab_id: int) -> ApiResponse:
        return self._call('POST', f'/trip/accept/{trip_id}',
                          'Trip accepted successfully', 'Failed to accept trip',
                          json={'cabId': cab_id})

    def add_trip(self, trip: Dict[str, Any]) -> ApiResponse:
        return self._call('POST', '/trip/add',
                          'Trip added successfully', 'Failed to add trip', json=trip)

    def update_trip(self, trip_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return self._call('PUT', f'/trip/update/{trip_id}',
                          'Trip updated successfully', 'Failed to update trip', json=changes)

    def delete_trip(self, trip_id: int) -> ApiResponse:
        return self._call('DELETE', f'/trip/delete/{trip_id}',
                          'Trip deleted successfully', 'Failed to delete trip')
