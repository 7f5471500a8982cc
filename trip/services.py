import hashlib
import logging

import openrouteservice
import requests
from django.conf import settings
from django.core.cache import cache
from openrouteservice import exceptions as ors_exceptions

from api.dto import coordinate, trip_coordinates
from fare_estimation import calculate_distance

logger = logging.getLogger(__name__)

# Routes between points further apart than this (in degrees) are not requested
MAX_ROUTE_SPAN_DEGREES = 10
MIN_ROUTE_DISTANCE_M = 50
MIN_SUGGESTION_LENGTH = 3

ROUTING_ERRORS = (
    ors_exceptions.ApiError,
    ors_exceptions.HTTPError,
    ors_exceptions.Timeout,
    requests.RequestException,
    KeyError,
    IndexError,
    ValueError,
)


def _cache_key(prefix, *parts):
    raw = '|'.join(str(part) for part in parts)
    return f'safar:{prefix}:{hashlib.md5(raw.encode("utf-8")).hexdigest()}'


class RoutingService:
    def __init__(self, api_key=None, country=None, client=None):
        self.api_key = api_key if api_key is not None else settings.OPENROUTESERVICE_API_KEY
        self.country = country or settings.GEOCODING_COUNTRY
        self.base_url = 'https://api.openrouteservice.org'
        self.timeout = getattr(settings, 'SAFAR_API_TIMEOUT', 15)
        self._client = client

    @property
    def client(self):
        # openrouteservice.Client refuses to build without a key
        if self._client is None:
            self._client = openrouteservice.Client(key=self.api_key, timeout=self.timeout)
        return self._client

    def _get(self, path, params):
        params = dict(params, api_key=self.api_key)
        response = requests.get(f'{self.base_url}{path}', params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _feature_to_place(feature):
        props = feature['properties']
        lng, lat = feature['geometry']['coordinates'][:2]
        return {
            'formatted': props.get('label', ''),
            'name': props.get('name', ''),
            'lat': lat,
            'lng': lng,
        }

    def suggest(self, query):
        """
        Autocomplete a partially typed address.

        Queries shorter than three characters return nothing without a request.
        """
        query = (query or '').strip()
        if len(query) < MIN_SUGGESTION_LENGTH:
            return []

        key = _cache_key('suggest', self.country, query.lower())
        cached = cache.get(key)
        if cached is not None:
            return cached

        try:
            data = self._get('/geocode/autocomplete', {
                'text': query,
                'boundary.country': self.country,
            })
            results = [self._feature_to_place(f) for f in data.get('features', [])]
        except ROUTING_ERRORS as e:
            logger.warning('Autocomplete failed for %r: %s', query, e)
            return []

        cache.set(key, results, settings.ROUTE_CACHE_TTL)
        return results

    def geocode_address(self, query, focus_point=None):
        """
        Geocode an address using ORS Geocoding API

        Args:
            query: Address string to geocode
            focus_point: tuple (lng, lat) to bias results (optional)

        Returns:
            list of results with formatted address, lat, lng
        """
        query = (query or '').strip()
        if not query:
            return []

        params = {
            'text': query,
            'size': 10,
            'boundary.country': self.country,
        }
        if focus_point:
            params['focus.point.lon'] = focus_point[0]
            params['focus.point.lat'] = focus_point[1]

        try:
            data = self._get('/geocode/search', params)
            return [self._feature_to_place(f) for f in data.get('features', [])]
        except ROUTING_ERRORS as e:
            logger.warning('Geocoding failed for %r: %s', query, e)
            return []

    def reverse_geocode(self, lat, lng):
        """Closest address to a point, or None."""
        try:
            data = self._get('/geocode/reverse', {
                'point.lon': lng,
                'point.lat': lat,
                'size': 1,
            })
        except ROUTING_ERRORS as e:
            logger.warning('Reverse geocoding failed for %s,%s: %s', lat, lng, e)
            return None

        if not data.get('features'):
            return None
        props = data['features'][0]['properties']
        return {
            'formatted': props.get('label', ''),
            'name': props.get('name', ''),
            'lat': lat,
            'lng': lng,
        }

    def calculate_route(self, start_coords, end_coords, profile='driving-car'):
        """
        Calculate route between two points

        Args:
            start_coords: tuple (longitude, latitude)
            end_coords: tuple (longitude, latitude)
            profile: 'driving-car', 'cycling-regular', 'foot-walking'

        Returns:
            dict with route_data, geometry ([lat, lng] pairs), distance (km),
            duration (seconds), too_close and too_far; None if ORS failed
        """
        distance_m = calculate_distance(
            start_coords[1], start_coords[0],
            end_coords[1], end_coords[0]
        ) * 1000
        straight_line = [[start_coords[1], start_coords[0]], [end_coords[1], end_coords[0]]]

        if distance_m < MIN_ROUTE_DISTANCE_M:
            logger.debug('Points too close for routing: %.0fm', distance_m)
            return {
                'route_data': None,
                'geometry': straight_line,
                'distance': round(distance_m / 1000, 2),
                'duration': int(distance_m / 1.4),  # walking speed
                'too_close': True,
                'too_far': False,
            }

        span = max(abs(start_coords[0] - end_coords[0]), abs(start_coords[1] - end_coords[1]))
        if span > MAX_ROUTE_SPAN_DEGREES:
            return {
                'route_data': None,
                'geometry': [],
                'distance': round(distance_m / 1000, 2),
                'duration': None,
                'too_close': False,
                'too_far': True,
            }

        key = _cache_key('route', profile, start_coords, end_coords)
        cached = cache.get(key)
        if cached is not None:
            return cached

        try:
            route = self.client.directions(
                coordinates=[list(start_coords), list(end_coords)],
                profile=profile,
                format='geojson',
                geometry='true',
                instructions='false',
            )
            feature = route['features'][0]
            segment = feature['properties']['segments'][0]
            geometry = [[lat, lng] for lng, lat in feature['geometry']['coordinates']]
        except ROUTING_ERRORS as e:
            logger.warning('Routing failed between %s and %s: %s', start_coords, end_coords, e)
            return None

        result = {
            'route_data': route,
            'geometry': geometry,
            'distance': round(segment['distance'] / 1000, 2),
            'duration': int(segment['duration']),
            'too_close': False,
            'too_far': False,
        }
        cache.set(key, result, settings.ROUTE_CACHE_TTL)
        return result

    def _locate(self, trip, coords_key, address_key):
        point = trip_coordinates(trip, coords_key)
        if point:
            return point
        matches = self.geocode_address(trip.get(address_key))
        if matches:
            return coordinate(matches[0]['lat'], matches[0]['lng'])
        return None

    def trip_route(self, trip):
        """
        Map payload for one trip.

        Stored coordinates win; addresses are geocoded only when a point is missing.
        When no route can be drawn the map falls back to the two markers.
        """
        pickup = self._locate(trip, 'trippickup', 'tripPickuplocation')
        drop = self._locate(trip, 'tripdrop', 'tripDroplocation')
        payload = {
            'pickup': pickup,
            'drop': drop,
            'pickup_label': trip.get('tripPickuplocation', ''),
            'drop_label': trip.get('tripDroplocation', ''),
            'geometry': [],
            'distance': None,
            'duration': None,
            'markers_only': True,
        }
        if not (pickup and drop):
            return payload

        route = self.calculate_route((pickup['lng'], pickup['lat']), (drop['lng'], drop['lat']))
        if route:
            payload['distance'] = route['distance']
            payload['duration'] = route['duration']
            if route['geometry'] and not route['too_far']:
                payload['geometry'] = route['geometry']
                payload['markers_only'] = False
        return payload

