import secrets
from datetime import time, timedelta

import pytest
from django.contrib.auth.hashers import make_password
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from tripService.models import Booking, DriverProfile, Trip, User, UserSession

PASSWORD = 'correct-horse'


@pytest.fixture(autouse=True)
def test_settings(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.RATELIMIT_ENABLE = False
    settings.OPENCAGE_API_KEY = 'test-key'
    cache.clear()
    return settings


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make_user(email, is_driver=False, with_profile=False, **fields):
        user = User.objects.create(
            email=email,
            password=make_password(PASSWORD),
            first_name=fields.pop('first_name', 'Test'),
            last_name=fields.pop('last_name', 'User'),
            is_driver=is_driver,
            **fields,
        )
        if with_profile:
            DriverProfile.objects.create(
                user=user, vehicle_brand='Toyota', vehicle_model='Corolla',
                vehicle_color='Black', license_plate='CE 1234 AB', default_rate=2000,
            )
        return user
    return _make_user


@pytest.fixture
def driver(make_user):
    return make_user('jean.kamga@example.com', is_driver=True, with_profile=True,
                     first_name='Jean', last_name='Kamga', phone='+237699123456')


@pytest.fixture
def other_driver(make_user):
    return make_user('marie.fotso@example.com', is_driver=True, first_name='Marie', last_name='Fotso')


@pytest.fixture
def passenger(make_user):
    return make_user('paul.mbarga@example.com', first_name='Paul', last_name='Mbarga', phone='+237655987654')


@pytest.fixture
def other_passenger(make_user):
    return make_user('sophie.ngono@example.com', first_name='Sophie', last_name='Ngono')


@pytest.fixture
def make_trip(db):
    def _make_trip(driver, days_ahead=1, available_seats=4, price_per_seat=5000, **fields):
        return Trip.objects.create(
            driver=driver,
            departure_city=fields.pop('departure_city', 'Douala'),
            arrival_city=fields.pop('arrival_city', 'Yaoundé'),
            departure_coords='4.0511,9.7679',
            arrival_coords='3.8480,11.5021',
            departure_date=timezone.localdate() + timedelta(days=days_ahead),
            departure_time=fields.pop('departure_time', time(8, 0)),
            available_seats=available_seats,
            price_per_seat=price_per_seat,
            **fields,
        )
    return _make_trip


@pytest.fixture
def make_booking(db):
    def _make_booking(trip, user, seats=1, status='PENDING'):
        return Booking.objects.create(
            trip=trip, user=user, seats=seats,
            total_price=seats * trip.price_per_seat, status=status,
        )
    return _make_booking


@pytest.fixture
def session_for(db):
    def _session_for(user):
        return UserSession.objects.create(
            session_key=secrets.token_urlsafe(32),
            user=user,
            expires_at=timezone.now() + timedelta(days=1),
        )
    return _session_for


@pytest.fixture
def login_as(api_client):
    def _login_as(user):
        response = api_client.post('/api/login/', {'email': user.email, 'password': PASSWORD}, format='json')
        assert response.status_code == 200
        return api_client
    return _login_as
