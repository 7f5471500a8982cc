from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from api.client import BackendClient
from api.trips import TripApi
from fare_estimation import calculate_distance, calculate_fare
from user.permissions import IsBackendAuthenticated
from .services import RoutingService


def _float_param(params, name):
    try:
        return float(params.get(name))
    except (TypeError, ValueError):
        return None


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def location_suggestions(request):
    """Autocomplete entries for the pickup/drop inputs"""
    query = request.query_params.get('q', '')
    return Response({'results': RoutingService().suggest(query)})


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def geocode(request):
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response({'error': 'q is required'}, status=status.HTTP_400_BAD_REQUEST)

    focus = None
    lat = _float_param(request.query_params, 'lat')
    lng = _float_param(request.query_params, 'lng')
    if lat is not None and lng is not None:
        focus = (lng, lat)
    return Response({'results': RoutingService().geocode_address(query, focus_point=focus)})


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def reverse_geocode(request):
    """Address for a point clicked on the map"""
    lat = _float_param(request.query_params, 'lat')
    lng = _float_param(request.query_params, 'lng')
    if lat is None or lng is None:
        return Response({'error': 'Latitude and longitude required'}, status=status.HTTP_400_BAD_REQUEST)

    place = RoutingService().reverse_geocode(lat, lng)
    if place is None:
        return Response({'error': 'No address found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(place)


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def trip_route(request, trip_id):
    """Pickup, drop and route geometry for the trip map"""
    response = TripApi(BackendClient.for_request(request)).get_trip(trip_id)
    if not (response.success and isinstance(response.data, dict)):
        return Response({'error': response.message or 'Trip not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(RoutingService().trip_route(response.data))


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def booked_seats(request, trip_id):
    response = TripApi(BackendClient.for_request(request)).get_booked_seats(trip_id)
    if not response.success:
        return Response(response.as_dict(), status=status.HTTP_502_BAD_GATEWAY)
    return Response({'tripId': trip_id, 'bookedSeats': response.data or []})


@api_view(['GET'])
@permission_classes([IsBackendAuthenticated])
def fare_estimate(request):
    """Base price for the add-trip page, from straight-line distance"""
    points = [_float_param(request.query_params, name)
              for name in ('pickup_lat', 'pickup_lng', 'drop_lat', 'drop_lng')]
    if any(value is None for value in points):
        return Response({'error': 'Pickup and drop coordinates required'}, status=status.HTTP_400_BAD_REQUEST)

    cab_type = request.query_params.get('cab_type', 'SEDAN')
    price = calculate_fare(*points, cab_type=cab_type)
    if price is None:
        return Response({'error': 'Unknown cab type'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'distance': round(calculate_distance(*points)), 'cabType': cab_type.upper(), 'price': price})
