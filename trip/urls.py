from django.urls import path
from . import views, api_views

app_name = 'trip'
urlpatterns = [
    path('', views.TripsPage.as_view(), name='trips'),
    path('search/clear/', views.clear_search, name='clear_search'),
    path('add/', views.AddTrip.as_view(), name='add_trip'),
    path('<int:trip_id>/', views.TripDetail.as_view(), name='trip_detail'),
    path('<int:trip_id>/edit/', views.EditTrip.as_view(), name='edit_trip'),
    path('<int:trip_id>/book/', views.BookTrip.as_view(), name='book_trip'),
    path('<int:trip_id>/accept/', views.AcceptTrip.as_view(), name='accept_trip'),
    path('<int:trip_id>/delete/', views.delete_trip, name='delete_trip'),

    # Map and autocomplete endpoints
    path('api/suggestions/', api_views.location_suggestions, name='location_suggestions'),
    path('api/geocode/', api_views.geocode, name='geocode'),
    path('api/reverse/', api_views.reverse_geocode, name='reverse_geocode'),
    path('api/fare/', api_views.fare_estimate, name='fare_estimate'),
    path('api/<int:trip_id>/route/', api_views.trip_route, name='trip_route'),
    path('api/<int:trip_id>/seats/', api_views.booked_seats, name='booked_seats'),
]
