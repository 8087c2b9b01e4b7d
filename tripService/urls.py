from django.urls import path
from tripService import views

urlpatterns = [
    path('login/', views.login, name='login'),
    path('signup/', views.signup, name='signup'),
    path('logout/', views.logout, name='logout'),
    path('session/', views.current_session, name='current-session'),
    path('trips/', views.list_trips, name='list-trips'),
    path('trips/<int:trip_id>/', views.trip_detail, name='trip-detail'),
    path('createTrip/', views.create_trip, name='create-trip'),
    path('driverTrips/', views.driver_trips, name='driver-trips'),
    path('deleteTrip/<int:trip_id>/', views.delete_trip, name='delete-trip'),
    path('createBooking/', views.create_booking, name='create-booking'),
    path('confirmBooking/<int:booking_id>/', views.confirm_booking, name='confirm-booking'),
    path('cancelBooking/<int:booking_id>/', views.cancel_booking, name='cancel-booking'),
    path('passengerBookings/', views.passenger_bookings, name='passenger-bookings'),
    path('driverBookings/', views.driver_bookings, name='driver-bookings'),
    path('geocode/', views.geocode, name='geocode'),
]
