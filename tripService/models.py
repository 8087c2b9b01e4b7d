from datetime import datetime

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone


class User(models.Model):
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True, default='')
    avatar = models.URLField(null=True, blank=True)
    is_driver = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        return self.email


class DriverProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='driver_profile')
    vehicle_brand = models.CharField(max_length=100)
    vehicle_model = models.CharField(max_length=100)
    vehicle_color = models.CharField(max_length=50)
    license_plate = models.CharField(max_length=20)
    default_rate = models.FloatField(null=True, blank=True)

    @property
    def vehicle_description(self):
        return f"{self.vehicle_brand} {self.vehicle_model} {self.vehicle_color}"


class UserSession(models.Model):
    session_key = models.CharField(max_length=64, unique=True)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sessions')
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('expired', 'Expired'),
    ]
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')


'''
PENDING and CONFIRMED bookings both hold seats; only CANCELLED ones free them.
'''
RESERVING = Q(bookings__status__in=['PENDING', 'CONFIRMED'])


class TripQuerySet(models.QuerySet):

    def with_reserved_seats(self):
        return self.annotate(
            reserved_seats=Coalesce(Sum('bookings__seats', filter=RESERVING), 0)
        )

    def upcoming(self, now=None):
        '''
        Trips that have not departed at `now`; same boundary as
        Trip.has_departed.
        '''
        now = timezone.localtime(now)
        return self.filter(
            Q(departure_date__gt=now.date()) |
            Q(departure_date=now.date(), departure_time__gte=now.time())
        )


class Trip(models.Model):
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('COMPLETED', 'Completed'),
        ('CANCELLED', 'Cancelled'),
    ]
    driver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='trips')
    departure_city = models.CharField(max_length=255)
    arrival_city = models.CharField(max_length=255)
    departure_coords = models.CharField(max_length=64)
    arrival_coords = models.CharField(max_length=64)
    departure_date = models.DateField()
    departure_time = models.TimeField()
    available_seats = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_per_seat = models.FloatField(validators=[MinValueValidator(0)])
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='ACTIVE')
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TripQuerySet.as_manager()

    def departs_at(self):
        return timezone.make_aware(datetime.combine(self.departure_date, self.departure_time))

    def has_departed(self, now=None):
        return self.departs_at() < (now or timezone.now())

    def booked_seats(self):
        return self.bookings.exclude(status='CANCELLED').aggregate(
            total=Coalesce(Sum('seats'), 0)
        )['total']

    def remaining_seats(self):
        reserved = getattr(self, 'reserved_seats', None)
        if reserved is None:
            reserved = self.booked_seats()
        return self.available_seats - reserved

    def __str__(self):
        return f"{self.departure_city} -> {self.arrival_city} ({self.departure_date})"


class Booking(models.Model):
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('CONFIRMED', 'Confirmed'),
        ('CANCELLED', 'Cancelled'),
    ]
    trip = models.ForeignKey(Trip, on_delete=models.CASCADE, related_name='bookings')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='bookings')
    seats = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    total_price = models.FloatField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='PENDING')
    created_at = models.DateTimeField(auto_now_add=True)
