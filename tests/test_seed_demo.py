import pytest
from django.core.management import call_command

from tripService import auth, trips
from tripService.models import Booking, DriverProfile, Trip, User


@pytest.mark.django_db
def test_seed_demo_loads_bookable_data(driver):
    call_command('seed_demo')

    assert not User.objects.filter(pk=driver.pk).exists()
    assert User.objects.filter(is_driver=True).count() == 2
    assert User.objects.filter(is_driver=False).count() == 3
    assert DriverProfile.objects.count() == 2
    assert Trip.objects.count() == 4
    assert Booking.objects.count() == 3

    assert auth.login('jean.kamga@example.com', 'password123')['success']

    listed = {(t['from'], t['to']): t for t in trips.get_all_trips()['trips']}
    assert listed[('Douala', 'Yaoundé')]['availableSeats'] == 2
    assert listed[('Yaoundé', 'Bamenda')]['availableSeats'] == 2
