from django.test import SimpleTestCase

from fare_estimation import calculate_distance, calculate_fare, estimate_base_price, trip_distance_km

# Pune station to Shivajinagar, roughly 2.4 km apart
PUNE_STATION = (18.5286, 73.8743)
SHIVAJINAGAR = (18.5308, 73.8475)


class DistanceTest(SimpleTestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(calculate_distance(18.5, 73.8, 18.5, 73.8), 0)

    def test_known_distance(self):
        distance = calculate_distance(*PUNE_STATION, *SHIVAJINAGAR)
        self.assertAlmostEqual(distance, 2.84, delta=0.2)

    def test_one_degree_of_latitude(self):
        self.assertAlmostEqual(calculate_distance(0, 0, 1, 0), 111.19, places=1)

    def test_trip_distance_rounds_to_whole_km(self):
        pickup = {'lat': PUNE_STATION[0], 'lng': PUNE_STATION[1]}
        drop = {'lat': str(SHIVAJINAGAR[0]), 'lng': str(SHIVAJINAGAR[1])}
        self.assertEqual(trip_distance_km(pickup, drop), 3)


class FareTest(SimpleTestCase):
    def test_per_km_rates(self):
        self.assertEqual(estimate_base_price(10, 'SEDAN'), 130)
        self.assertEqual(estimate_base_price(10, 'suv'), 300)

    def test_unknown_cab_type(self):
        self.assertIsNone(estimate_base_price(10, 'TRICYCLE'))
        self.assertIsNone(estimate_base_price(10, None))

    def test_calculate_fare_uses_rounded_distance(self):
        self.assertEqual(calculate_fare(0, 0, 1, 0), 111 * 13)
        self.assertEqual(calculate_fare(0, 0, 1, 0, cab_type='SUV'), 111 * 30)
