from datetime import time, timedelta

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from tripService.models import Booking, DriverProfile, Trip, User, UserSession

DEMO_PASSWORD = 'password123'

DRIVERS = [
    {
        'email': 'jean.kamga@example.com', 'first_name': 'Jean', 'last_name': 'Kamga',
        'phone': '+237699123456', 'avatar': 'https://i.pravatar.cc/150?u=jean.kamga',
        'vehicle': ('Toyota', 'Corolla', 'Black', 'CE 1234 AB', 2000),
    },
    {
        'email': 'marie.fotso@example.com', 'first_name': 'Marie', 'last_name': 'Fotso',
        'phone': '+237677456789', 'avatar': 'https://i.pravatar.cc/150?u=marie.fotso',
        'vehicle': ('Honda', 'Civic', 'White', 'LT 5678 CD', 1800),
    },
]

PASSENGERS = [
    {'email': 'paul.mbarga@example.com', 'first_name': 'Paul', 'last_name': 'Mbarga', 'phone': '+237655987654'},
    {'email': 'sophie.ngono@example.com', 'first_name': 'Sophie', 'last_name': 'Ngono', 'phone': '+237699876543'},
    {'email': 'pierre.etoga@example.com', 'first_name': 'Pierre', 'last_name': 'Etoga', 'phone': '+237677123987'},
]

# (driver index, from, to, from coords, to coords, days ahead, time, seats, price, description)
TRIPS = [
    (0, 'Douala', 'Yaoundé', '4.0511,9.7679', '3.8480,11.5021', 1, time(8, 0), 4, 5000,
     'Leaving from Akwa, arriving at Mvan. Air-conditioned car.'),
    (1, 'Yaoundé', 'Bamenda', '3.8480,11.5021', '5.9631,10.1591', 1, time(10, 30), 3, 7000,
     'Leaving from the city centre, stop possible in Bafoussam.'),
    (0, 'Bafoussam', 'Douala', '5.4768,10.4214', '4.0511,9.7679', 7, time(7, 0), 4, 6000,
     'Early start, direct trip.'),
    (1, 'Kribi', 'Buea', '2.9405,9.9095', '4.1537,9.2920', 7, time(14, 0), 3, 8000,
     'Coastal road with a sea view.'),
]

# (trip index, passenger index, seats, status)
BOOKINGS = [
    (0, 0, 2, 'CONFIRMED'),
    (1, 1, 1, 'PENDING'),
    (2, 2, 1, 'PENDING'),
]


class Command(BaseCommand):
    help = "Reset the trip database and load demo drivers, passengers, trips and bookings."

    def add_arguments(self, parser):
        parser.add_argument('--database', default=DEFAULT_DB_ALIAS, help="Database alias to seed.")

    def handle(self, *args, **options):
        using = options['database']
        password = make_password(DEMO_PASSWORD)

        with transaction.atomic(using=using):
            for model in (Booking, Trip, UserSession, DriverProfile, User):
                model.objects.using(using).all().delete()
            self.stdout.write("Database cleared")

            drivers = []
            for data in DRIVERS:
                brand, vehicle_model, color, plate, rate = data['vehicle']
                driver = User.objects.using(using).create(
                    email=data['email'], first_name=data['first_name'], last_name=data['last_name'],
                    phone=data['phone'], avatar=data['avatar'], is_driver=True, password=password,
                )
                DriverProfile.objects.using(using).create(
                    user=driver, vehicle_brand=brand, vehicle_model=vehicle_model,
                    vehicle_color=color, license_plate=plate, default_rate=rate,
                )
                drivers.append(driver)

            passengers = [
                User.objects.using(using).create(is_driver=False, password=password, **data)
                for data in PASSENGERS
            ]
            self.stdout.write(f"Created {len(drivers)} drivers and {len(passengers)} passengers")

            today = timezone.localdate()
            trips = []
            for driver_index, origin, destination, origin_coords, destination_coords, days, departure_time, \
                    seats, price, description in TRIPS:
                trips.append(Trip.objects.using(using).create(
                    driver=drivers[driver_index],
                    departure_city=origin,
                    arrival_city=destination,
                    departure_coords=origin_coords,
                    arrival_coords=destination_coords,
                    departure_date=today + timedelta(days=days),
                    departure_time=departure_time,
                    available_seats=seats,
                    price_per_seat=price,
                    description=description,
                ))
            self.stdout.write(f"Created {len(trips)} trips")

            for trip_index, passenger_index, seats, booking_status in BOOKINGS:
                trip = trips[trip_index]
                Booking.objects.using(using).create(
                    trip=trip,
                    user=passengers[passenger_index],
                    seats=seats,
                    total_price=seats * trip.price_per_seat,
                    status=booking_status,
                )
            self.stdout.write(f"Created {len(BOOKINGS)} bookings")

        self.stdout.write(self.style.SUCCESS(f"Demo data loaded; every account uses the password '{DEMO_PASSWORD}'"))
