from django import forms
from django.core.exceptions import ValidationError

from api.dto import coordinate
from fare_estimation import calculate_distance, trip_distance_km
from .utils import CAB_TYPES, date_to_number, number_to_date, seats_for_cab_type, available_seats

# Pickup and drop closer than this are treated as the same place
MIN_TRIP_DISTANCE_M = 20


def _location_widget(placeholder, input_id):
    return forms.TextInput(attrs={
        'placeholder': placeholder,
        'id': input_id,
        'class': 'autocomplete-input',
        'autocomplete': 'off',
    })


class RouteForm(forms.Form):
    """Pickup and drop picked from the map or the autocomplete list."""
    pickup_address = forms.CharField(
        max_length=255,
        required=False,
        widget=_location_widget('Enter pickup location', 'pickup_location_input')
    )
    pickup_latitude = forms.FloatField(required=False, widget=forms.HiddenInput())
    pickup_longitude = forms.FloatField(required=False, widget=forms.HiddenInput())
    drop_address = forms.CharField(
        max_length=255,
        required=False,
        widget=_location_widget('Enter drop location', 'drop_location_input')
    )
    drop_latitude = forms.FloatField(required=False, widget=forms.HiddenInput())
    drop_longitude = forms.FloatField(required=False, widget=forms.HiddenInput())

    require_locations = True

    def clean(self):
        cleaned_data = super().clean()
        pickup = self.pickup_point()
        drop = self.drop_point()

        if self.require_locations:
            if pickup is None:
                self.add_error('pickup_address', 'Please select a pickup location')
            if drop is None:
                self.add_error('drop_address', 'Please select a drop location')

        if pickup and drop:
            distance_m = calculate_distance(pickup['lat'], pickup['lng'], drop['lat'], drop['lng']) * 1000
            if distance_m < MIN_TRIP_DISTANCE_M:
                raise ValidationError(
                    f'Pickup and drop are too close ({distance_m:.0f}m apart). '
                    'Please select two different locations.'
                )
        return cleaned_data

    def _point(self, prefix):
        data = getattr(self, 'cleaned_data', {})
        lat = data.get(f'{prefix}_latitude')
        lng = data.get(f'{prefix}_longitude')
        if lat is None or lng is None:
            return None
        return coordinate(lat, lng)

    def pickup_point(self):
        return self._point('pickup')

    def drop_point(self):
        return self._point('drop')


class ScheduleForm(forms.Form):
    tripDeparturetime = forms.TimeField(
        required=False,
        input_formats=['%H:%M', '%H:%M:%S'],
        widget=forms.TimeInput(attrs={'type': 'time'}, format='%H:%M')
    )
    tripDate = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d')
    )

    def schedule_payload(self):
        payload = {}
        if self.cleaned_data.get('tripDeparturetime'):
            payload['tripDeparturetime'] = self.cleaned_data['tripDeparturetime'].strftime('%H:%M')
        if self.cleaned_data.get('tripDate'):
            payload['tripDate'] = date_to_number(self.cleaned_data['tripDate'])
        return payload


class TripSearchForm(RouteForm, ScheduleForm):
    def clean_tripDeparturetime(self):
        value = self.cleaned_data.get('tripDeparturetime')
        if not value:
            raise ValidationError('Please select departure time')
        return value

    def clean_tripDate(self):
        value = self.cleaned_data.get('tripDate')
        if not value:
            raise ValidationError('Please select trip date')
        return value

    def to_payload(self):
        payload = {
            'trippickup': self.pickup_point(),
            'tripdrop': self.drop_point(),
        }
        payload.update(self.schedule_payload())
        return payload


class AddTripForm(TripSearchForm):
    tripCabtype = forms.ChoiceField(
        choices=(('', 'Select cab type'),) + CAB_TYPES,
        required=False,
        error_messages={'invalid_choice': 'Please select cab type'},
    )
    tripSeat = forms.ChoiceField(
        choices=[(seat, f'Seat {seat}') for seat in seats_for_cab_type('SUV')],
        required=False,
        error_messages={'invalid_choice': 'Please select your seat'},
    )

    def clean_tripCabtype(self):
        cab_type = self.cleaned_data.get('tripCabtype')
        if not cab_type:
            raise ValidationError('Please select cab type')
        return cab_type

    def clean(self):
        cleaned_data = super().clean()
        seat = cleaned_data.get('tripSeat')
        cab_type = cleaned_data.get('tripCabtype')
        if 'tripSeat' in self.errors:
            return cleaned_data
        if not seat or (cab_type and seat not in seats_for_cab_type(cab_type)):
            self.add_error('tripSeat', 'Please select your seat')
        return cleaned_data

    def distance_km(self):
        return trip_distance_km(self.pickup_point(), self.drop_point())

    def to_payload(self):
        data = self.cleaned_data
        payload = {
            'tripPickuplocation': data['pickup_address'],
            'trippickup': self.pickup_point(),
            'tripDroplocation': data['drop_address'],
            'tripdrop': self.drop_point(),
            'tripDistance': self.distance_km(),
            'tripCabtype': data['tripCabtype'],
            'tripSeat': data['tripSeat'],
        }
        payload.update(self.schedule_payload())
        return payload


class UpdateTripForm(RouteForm, ScheduleForm):
    """Every field optional; untouched fields keep the trip's current values."""
    tripCabtype = forms.ChoiceField(
        choices=(('', 'Keep current'),) + CAB_TYPES,
        required=False,
    )

    require_locations = False

    @classmethod
    def for_trip(cls, trip, *args, **kwargs):
        pickup = trip.get('trippickup') or {}
        drop = trip.get('tripdrop') or {}
        kwargs.setdefault('initial', {
            'pickup_address': trip.get('tripPickuplocation', ''),
            'pickup_latitude': pickup.get('lat'),
            'pickup_longitude': pickup.get('lng'),
            'drop_address': trip.get('tripDroplocation', ''),
            'drop_latitude': drop.get('lat'),
            'drop_longitude': drop.get('lng'),
            'tripDeparturetime': trip.get('tripDeparturetime', ''),
            'tripDate': number_to_date(trip.get('tripDate')),
            'tripCabtype': trip.get('tripCabtype', ''),
        })
        return cls(*args, **kwargs)

    def changes_for(self, trip):
        data = self.cleaned_data
        changes = {}

        pickup = self.pickup_point()
        if data.get('pickup_address') and data['pickup_address'] != trip.get('tripPickuplocation'):
            changes['tripPickuplocation'] = data['pickup_address']
        if pickup and pickup != trip.get('trippickup'):
            changes['trippickup'] = pickup

        drop = self.drop_point()
        if data.get('drop_address') and data['drop_address'] != trip.get('tripDroplocation'):
            changes['tripDroplocation'] = data['drop_address']
        if drop and drop != trip.get('tripdrop'):
            changes['tripdrop'] = drop

        for key, value in self.schedule_payload().items():
            if value != trip.get(key):
                changes[key] = value

        if data.get('tripCabtype') and data['tripCabtype'] != trip.get('tripCabtype'):
            changes['tripCabtype'] = data['tripCabtype']

        if 'trippickup' in changes or 'tripdrop' in changes:
            new_pickup = changes.get('trippickup') or trip.get('trippickup')
            new_drop = changes.get('tripdrop') or trip.get('tripdrop')
            if new_pickup and new_drop:
                changes['tripDistance'] = trip_distance_km(new_pickup, new_drop)
        return changes


class BookTripForm(forms.Form):
    tripSeat = forms.ChoiceField(required=False, error_messages={'invalid_choice': 'Please select a seat'})
    pickup_address = forms.CharField(
        max_length=255,
        required=False,
        widget=_location_widget('Enter pickup location', 'pickup_location_input')
    )
    pickup_latitude = forms.FloatField(required=False, widget=forms.HiddenInput())
    pickup_longitude = forms.FloatField(required=False, widget=forms.HiddenInput())

    def __init__(self, *args, cab_type=None, booked_seats=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.cab_type = cab_type
        self.booked_seats = [str(seat) for seat in booked_seats or []]
        self.fields['tripSeat'].choices = [
            (seat, f'Seat {seat}') for seat in available_seats(cab_type, self.booked_seats)
        ]

    def clean_tripSeat(self):
        seat = self.cleaned_data.get('tripSeat')
        if not seat or seat in self.booked_seats:
            raise ValidationError('Please select a seat')
        return seat

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('pickup_latitude') is None or cleaned_data.get('pickup_longitude') is None:
            self.add_error('pickup_address', 'Please select your pickup location on the map')
        return cleaned_data

    def to_payload(self):
        return {
            'trippickup': coordinate(self.cleaned_data['pickup_latitude'], self.cleaned_data['pickup_longitude']),
            'tripSeat': self.cleaned_data['tripSeat'],
        }


class AcceptTripForm(forms.Form):
    cabId = forms.ChoiceField(required=False, error_messages={'invalid_choice': 'Please select a cab'})

    def __init__(self, *args, cabs=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['cabId'].choices = [('', 'Select a cab')] + [
            (str(cab.get('cabId')), f"{cab.get('cabName', '')} ({cab.get('cabNumber', '')})")
            for cab in cabs
        ]

    def clean_cabId(self):
        cab_id = self.cleaned_data.get('cabId')
        if not cab_id:
            raise ValidationError('Please select a cab')
        return int(cab_id)
