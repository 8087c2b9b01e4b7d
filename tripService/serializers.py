from rest_framework import serializers
from tripService.models import User, DriverProfile, Trip, Booking

class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        exclude = ['password']

class DriverProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = DriverProfile
        exclude = ['user']

class BookingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Booking
        fields = '__all__'

class TripSerializer(serializers.ModelSerializer):
    bookings = BookingSerializer(many=True, read_only=True)
    remaining_seats = serializers.SerializerMethodField()

    class Meta:
        model = Trip
        fields = '__all__'

    def get_remaining_seats(self, trip):
        return trip.remaining_seats()

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()

class SignupSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    password = serializers.CharField(min_length=6)
    is_driver = serializers.BooleanField(default=False)
    driver_profile = DriverProfileSerializer(required=False)

class CreateTripSerializer(serializers.Serializer):
    departure_city = serializers.CharField(max_length=255)
    arrival_city = serializers.CharField(max_length=255)
    departure_date = serializers.DateField()
    departure_time = serializers.TimeField()
    available_seats = serializers.IntegerField(min_value=1)
    price_per_seat = serializers.FloatField(min_value=0)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    departure_coords = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    arrival_coords = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')

class CreateBookingSerializer(serializers.Serializer):
    trip_id = serializers.IntegerField()
    seats = serializers.IntegerField(min_value=1)
