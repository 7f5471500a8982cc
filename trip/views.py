import logging

from django.contrib import messages
from django.shortcuts import render, redirect
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.http import require_POST

from api.cabs import CabApi
from api.client import BackendClient
from api.dto import is_driver, user_name
from api.trips import TripApi
from fare_estimation import PER_KM_RATE
from user.session import backend_login_required, get_session_user
from .forms import AcceptTripForm, AddTripForm, BookTripForm, TripSearchForm, UpdateTripForm
from .utils import (
    can_book_trip,
    can_manage_trip,
    compatible_cabs,
    format_trip_date,
    remove_trip,
    replace_trip,
    seat_rows,
    trip_card,
)

logger = logging.getLogger(__name__)

SEARCH_RESULTS_KEY = 'trip_search_results'


def _report_form_errors(request, form):
    for errors in form.errors.values():
        for error in errors:
            messages.error(request, error)


def _trip_api(request):
    return TripApi(BackendClient.for_request(request))


def _load_trip(request, trip_id, template_name='trip/trip_detail.html'):
    """Fetch a trip, or build the "Trip not found" page. Returns (trip, response)."""
    response = _trip_api(request).get_trip(trip_id)
    if response.success and isinstance(response.data, dict):
        return response.data, None
    logger.info('Trip %s could not be loaded: %s', trip_id, response.message)
    messages.error(request, response.message or "Trip not found")
    return None, render(request, template_name, {'trip': None, 'trip_id': trip_id}, status=404)


def _reconcile_search_results(request, updated=None, removed_id=None):
    results = request.session.get(SEARCH_RESULTS_KEY)
    if results is None:
        return
    if updated is not None:
        results = replace_trip(results, updated)
    if removed_id is not None:
        results = remove_trip(results, removed_id)
    request.session[SEARCH_RESULTS_KEY] = results


@method_decorator(backend_login_required, name='dispatch')
class TripsPage(View):
    """My trips, plus the latest search results until the user clears them."""
    template_name = 'trip/trips.html'

    def _render(self, request, form):
        user = get_session_user(request)
        response = _trip_api(request).get_user_trips()
        my_trips = []
        if response.success:
            my_trips = response.data or []
        else:
            messages.error(request, response.message or "Failed to fetch trips")

        search_results = request.session.get(SEARCH_RESULTS_KEY)
        context = {
            'form': form,
            'my_trips': [trip_card(trip, user) for trip in my_trips],
            'search_results': [trip_card(trip, user) for trip in search_results or []],
            'showing_search': search_results is not None,
        }
        return render(request, self.template_name, context)

    def get(self, request):
        return self._render(request, TripSearchForm())

    def post(self, request):
        form = TripSearchForm(request.POST)
        if not form.is_valid():
            _report_form_errors(request, form)
            return self._render(request, form)

        response = _trip_api(request).search_trips(form.to_payload())
        if not response.success:
            messages.error(request, response.message or "Failed to search trips")
            return self._render(request, form)

        results = response.data if isinstance(response.data, list) else []
        request.session[SEARCH_RESULTS_KEY] = results
        messages.success(request, f"Found {len(results)} matching trips")
        return redirect('trip:trips')


@require_POST
@backend_login_required
def clear_search(request):
    request.session.pop(SEARCH_RESULTS_KEY, None)
    return redirect('trip:trips')


@method_decorator(backend_login_required, name='dispatch')
class TripDetail(View):
    template_name = 'trip/trip_detail.html'

    def get(self, request, trip_id):
        trip, error_page = _load_trip(request, trip_id)
        if error_page:
            return error_page

        user = get_session_user(request)
        seats = _trip_api(request).get_booked_seats(trip_id)
        booked = seats.data if seats.success and isinstance(seats.data, list) else []
        context = {
            'trip': trip,
            'trip_id': trip_id,
            'host_name': user_name((trip.get('host') or {}).get('user')),
            'driver_name': user_name((trip.get('driver') or {}).get('user')),
            'riders': [
                {'name': user_name(rider.get('user')), 'seat': rider.get('tripSeat')}
                for rider in trip.get('riders') or []
            ],
            'card': trip_card(trip, user),
            'can_book': can_book_trip(trip, user),
            'seat_rows': seat_rows(trip.get('tripCabtype'), booked),
        }
        return render(request, self.template_name, context)


@method_decorator(backend_login_required, name='dispatch')
class AddTrip(View):
    template_name = 'trip/add_trip.html'

    def _context(self, form):
        return {'form': form, 'rates': PER_KM_RATE}

    def get(self, request):
        return render(request, self.template_name, self._context(AddTripForm()))

    def post(self, request):
        form = AddTripForm(request.POST)
        if not form.is_valid():
            _report_form_errors(request, form)
            return render(request, self.template_name, self._context(form))

        response = _trip_api(request).add_trip(form.to_payload())
        if not response.success:
            messages.error(request, response.message or "Failed to add trip")
            return render(request, self.template_name, self._context(form))

        messages.success(request, "Trip added successfully!")
        return redirect('trip:trips')


@method_decorator(backend_login_required, name='dispatch')
class EditTrip(View):
    template_name = 'trip/edit_trip.html'

    def _load_managed_trip(self, request, trip_id):
        trip, error_page = _load_trip(request, trip_id)
        if error_page:
            return None, error_page
        if not can_manage_trip(trip, get_session_user(request)):
            messages.error(request, "Only the host can edit a pending trip.")
            return None, redirect('trip:trip_detail', trip_id=trip_id)
        return trip, None

    def get(self, request, trip_id):
        trip, error_page = self._load_managed_trip(request, trip_id)
        if error_page:
            return error_page
        form = UpdateTripForm.for_trip(trip)
        return render(request, self.template_name, {'form': form, 'trip': trip})

    def post(self, request, trip_id):
        trip, error_page = self._load_managed_trip(request, trip_id)
        if error_page:
            return error_page

        form = UpdateTripForm.for_trip(trip, request.POST)
        if not form.is_valid():
            _report_form_errors(request, form)
            return render(request, self.template_name, {'form': form, 'trip': trip})

        changes = form.changes_for(trip)
        if not changes:
            messages.info(request, "No changes were made to update.")
            return redirect('trip:trip_detail', trip_id=trip_id)

        response = _trip_api(request).update_trip(trip_id, changes)
        if not response.success:
            messages.error(request, response.message or "Failed to update trip")
            return render(request, self.template_name, {'form': form, 'trip': trip})

        if isinstance(response.data, dict):
            _reconcile_search_results(request, updated=response.data)
        messages.success(request, "Trip updated successfully!")
        return redirect('trip:trip_detail', trip_id=trip_id)


@method_decorator(backend_login_required, name='dispatch')
class BookTrip(View):
    template_name = 'trip/book_trip.html'

    def _prepare(self, request, trip_id):
        trip, error_page = _load_trip(request, trip_id)
        if error_page:
            return None, None, error_page
        if not can_book_trip(trip, get_session_user(request)):
            messages.error(request, "You cannot book this trip.")
            return None, None, redirect('trip:trip_detail', trip_id=trip_id)

        seats = _trip_api(request).get_booked_seats(trip_id)
        if not seats.success:
            messages.error(request, seats.message or "Failed to fetch booked seats")
            return None, None, redirect('trip:trip_detail', trip_id=trip_id)
        return trip, seats.data or [], None

    def _context(self, trip, booked, form):
        selected = form.data.get('tripSeat') if form.is_bound else None
        return {
            'trip': trip,
            'form': form,
            'date_display': format_trip_date(trip.get('tripDate')),
            'seat_rows': seat_rows(trip.get('tripCabtype'), booked, selected),
        }

    def get(self, request, trip_id):
        trip, booked, error_page = self._prepare(request, trip_id)
        if error_page:
            return error_page
        form = BookTripForm(cab_type=trip.get('tripCabtype'), booked_seats=booked)
        return render(request, self.template_name, self._context(trip, booked, form))

    def post(self, request, trip_id):
        trip, booked, error_page = self._prepare(request, trip_id)
        if error_page:
            return error_page

        form = BookTripForm(request.POST, cab_type=trip.get('tripCabtype'), booked_seats=booked)
        if not form.is_valid():
            _report_form_errors(request, form)
            return render(request, self.template_name, self._context(trip, booked, form))

        response = _trip_api(request).book_trip(trip_id, form.to_payload())
        if not response.success:
            messages.error(request, response.message or "Failed to book trip")
            return render(request, self.template_name, self._context(trip, booked, form))

        if isinstance(response.data, dict):
            _reconcile_search_results(request, updated=response.data)
        messages.success(request, "Trip booked successfully!")
        return redirect('trip:trip_detail', trip_id=trip_id)


@method_decorator(backend_login_required, name='dispatch')
class AcceptTrip(View):
    template_name = 'trip/accept_trip.html'

    def _prepare(self, request, trip_id):
        if not is_driver(get_session_user(request)):
            messages.error(request, "Only drivers can accept trips.")
            return None, None, redirect('trip:trips')

        trip, error_page = _load_trip(request, trip_id)
        if error_page:
            return None, None, error_page

        cab_response = CabApi(BackendClient.for_request(request)).get_cabs()
        if not cab_response.success:
            messages.error(request, cab_response.message or "Failed to fetch cabs")
            return None, None, redirect('trip:trips')

        cab_type = trip.get('tripCabtype') or ''
        cabs = compatible_cabs(cab_response.data, cab_type)
        if not cabs:
            messages.error(request, f"No {cab_type} cabs found. Please add a {cab_type} cab first.")
            return None, None, redirect('user:add_cab')
        return trip, cabs, None

    def get(self, request, trip_id):
        trip, cabs, error_page = self._prepare(request, trip_id)
        if error_page:
            return error_page
        form = AcceptTripForm(cabs=cabs)
        return render(request, self.template_name, {'trip': trip, 'cabs': cabs, 'form': form})

    def post(self, request, trip_id):
        trip, cabs, error_page = self._prepare(request, trip_id)
        if error_page:
            return error_page

        form = AcceptTripForm(request.POST, cabs=cabs)
        if not form.is_valid():
            _report_form_errors(request, form)
            return render(request, self.template_name, {'trip': trip, 'cabs': cabs, 'form': form})

        response = _trip_api(request).accept_trip(trip_id, form.cleaned_data['cabId'])
        if not response.success:
            messages.error(request, response.message or "Failed to accept trip")
            return redirect('trip:trips')

        if isinstance(response.data, dict):
            _reconcile_search_results(request, updated=response.data)
        messages.success(request, f"Trip #{trip_id} has been accepted!")
        return redirect('trip:trips')


@require_POST
@backend_login_required
def delete_trip(request, trip_id):
    response = _trip_api(request).delete_trip(trip_id)
    if not response.success:
        messages.error(request, response.message or "Failed to delete trip")
        return redirect('trip:trips')

    _reconcile_search_results(request, removed_id=trip_id)
    messages.success(request, f"Trip #{trip_id} has been deleted!")
    return redirect('trip:trips')
