from unittest import mock

import requests
from django.core.cache import cache
from django.test import SimpleTestCase, override_settings
from openrouteservice import exceptions as ors_exceptions

from api.tests.fakes import make_response
from trip.services import RoutingService

PUNE_STATION = (73.8743, 18.5286)
SHIVAJINAGAR = (73.8475, 18.5308)


def feature(label, lng, lat):
    return {
        'properties': {'label': label, 'name': label.split(',')[0]},
        'geometry': {'coordinates': [lng, lat]},
    }


def directions_response():
    return {
        'features': [{
            'properties': {'segments': [{'distance': 3456.7, 'duration': 512.9}]},
            'geometry': {'coordinates': [list(PUNE_STATION), [73.86, 18.53], list(SHIVAJINAGAR)]},
        }]
    }


@override_settings(ROUTE_CACHE_TTL=60, GEOCODING_COUNTRY='IN')
class GeocodingTest(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.service = RoutingService(api_key='test-key', client=mock.Mock())

    @mock.patch('trip.services.requests.get')
    def test_short_queries_are_not_sent(self, get):
        self.assertEqual(self.service.suggest('pu'), [])
        self.assertEqual(self.service.suggest('   '), [])
        get.assert_not_called()

    @mock.patch('trip.services.requests.get')
    def test_suggest_limits_country_and_caches(self, get):
        get.return_value = make_response(200, {'features': [feature('Pune Station, Pune', 73.8743, 18.5286)]})

        first = self.service.suggest('Pune St')
        second = self.service.suggest('pune st')

        self.assertEqual(first, [{'formatted': 'Pune Station, Pune', 'name': 'Pune Station',
                                  'lat': 18.5286, 'lng': 73.8743}])
        self.assertEqual(second, first)
        get.assert_called_once()
        args, kwargs = get.call_args
        self.assertEqual(args[0], 'https://api.openrouteservice.org/geocode/autocomplete')
        self.assertEqual(kwargs['params']['boundary.country'], 'IN')
        self.assertEqual(kwargs['params']['api_key'], 'test-key')

    @mock.patch('trip.services.requests.get')
    def test_suggest_failure_is_empty(self, get):
        get.side_effect = requests.ConnectionError('down')
        self.assertEqual(self.service.suggest('Pune Station'), [])

    @mock.patch('trip.services.requests.get')
    def test_geocode_with_focus(self, get):
        get.return_value = make_response(200, {'features': [feature('Shivajinagar, Pune', 73.8475, 18.5308)]})
        results = self.service.geocode_address('Shivajinagar', focus_point=(73.8, 18.5))
        self.assertEqual(results[0]['lat'], 18.5308)
        params = get.call_args[1]['params']
        self.assertEqual(params['focus.point.lon'], 73.8)
        self.assertEqual(params['focus.point.lat'], 18.5)

    @mock.patch('trip.services.requests.get')
    def test_geocode_http_error(self, get):
        get.return_value = make_response(403, {'error': 'forbidden'})
        self.assertEqual(self.service.geocode_address('Shivajinagar'), [])

    @mock.patch('trip.services.requests.get')
    def test_reverse_geocode(self, get):
        get.return_value = make_response(200, {'features': [feature('FC Road, Pune', 73.84, 18.52)]})
        place = self.service.reverse_geocode(18.52, 73.84)
        self.assertEqual(place, {'formatted': 'FC Road, Pune', 'name': 'FC Road', 'lat': 18.52, 'lng': 73.84})

    @mock.patch('trip.services.requests.get')
    def test_reverse_geocode_nothing_found(self, get):
        get.return_value = make_response(200, {'features': []})
        self.assertIsNone(self.service.reverse_geocode(0, 0))


@override_settings(ROUTE_CACHE_TTL=60)
class RouteTest(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.ors = mock.Mock()
        self.service = RoutingService(api_key='test-key', client=self.ors)

    def test_route_from_directions(self):
        self.ors.directions.return_value = directions_response()
        route = self.service.calculate_route(PUNE_STATION, SHIVAJINAGAR)

        self.assertEqual(route['distance'], 3.46)
        self.assertEqual(route['duration'], 512)
        self.assertFalse(route['too_close'])
        self.assertFalse(route['too_far'])
        self.assertEqual(route['geometry'][0], [18.5286, 73.8743])
        self.assertEqual(self.ors.directions.call_args[1]['format'], 'geojson')

    def test_route_is_cached(self):
        self.ors.directions.return_value = directions_response()
        self.service.calculate_route(PUNE_STATION, SHIVAJINAGAR)
        self.service.calculate_route(PUNE_STATION, SHIVAJINAGAR)
        self.ors.directions.assert_called_once()

    def test_too_close(self):
        route = self.service.calculate_route(PUNE_STATION, (73.8744, 18.5286))
        self.assertTrue(route['too_close'])
        self.assertEqual(route['distance'], 0.01)
        self.assertEqual(len(route['geometry']), 2)
        self.ors.directions.assert_not_called()

    def test_too_far_is_markers_only(self):
        route = self.service.calculate_route(PUNE_STATION, (88.3639, 22.5726))
        self.assertTrue(route['too_far'])
        self.assertEqual(route['geometry'], [])
        self.ors.directions.assert_not_called()

    def test_directions_failure(self):
        self.ors.directions.side_effect = ors_exceptions.ApiError(500, 'boom')
        self.assertIsNone(self.service.calculate_route(PUNE_STATION, SHIVAJINAGAR))

    def test_trip_route_uses_stored_coordinates(self):
        self.ors.directions.return_value = directions_response()
        trip = {
            'tripPickuplocation': 'Pune Station',
            'tripDroplocation': 'Shivajinagar',
            'trippickup': {'lat': 18.5286, 'lng': 73.8743},
            'tripdrop': {'lat': 18.5308, 'lng': 73.8475},
        }
        with mock.patch.object(self.service, 'geocode_address') as geocode:
            payload = self.service.trip_route(trip)
        geocode.assert_not_called()
        self.assertFalse(payload['markers_only'])
        self.assertEqual(payload['distance'], 3.46)
        self.assertEqual(payload['pickup_label'], 'Pune Station')

    def test_trip_route_geocodes_missing_points(self):
        self.ors.directions.side_effect = ors_exceptions.Timeout()
        trip = {
            'tripPickuplocation': 'Pune Station',
            'tripDroplocation': 'Shivajinagar',
            'trippickup': {'lat': 18.5286, 'lng': 73.8743},
        }
        with mock.patch.object(self.service, 'geocode_address',
                               return_value=[{'lat': 18.5308, 'lng': 73.8475}]) as geocode:
            payload = self.service.trip_route(trip)
        geocode.assert_called_once_with('Shivajinagar')
        self.assertEqual(payload['drop'], {'lat': 18.5308, 'lng': 73.8475})
        self.assertTrue(payload['markers_only'])

    def test_trip_route_without_any_location(self):
        with mock.patch.object(self.service, 'geocode_address', return_value=[]):
            payload = self.service.trip_route({'tripPickuplocation': 'Nowhere'})
        self.assertIsNone(payload['pickup'])
        self.assertTrue(payload['markers_only'])
