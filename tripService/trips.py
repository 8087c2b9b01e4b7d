import logging

from django.db import DEFAULT_DB_ALIAS, DatabaseError

from tripService.models import Trip, User
from tripService.results import fail, ok
from tripService.serializers import TripSerializer

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = '/placeholder.svg?height=40&width=40'
UNKNOWN_VEHICLE = 'Vehicle not specified'


def vehicle_info(driver):
    profile = getattr(driver, 'driver_profile', None)
    return profile.vehicle_description if profile else UNKNOWN_VEHICLE


def driver_summary(driver):
    return {
        'id': driver.id,
        'name': driver.full_name,
        'avatar': driver.avatar or DEFAULT_AVATAR,
        'vehicle': vehicle_info(driver),
    }


def trip_summary(trip):
    return {
        'id': trip.id,
        'from': trip.departure_city,
        'to': trip.arrival_city,
        'date': trip.departure_date.isoformat(),
        'time': trip.departure_time.strftime('%H:%M'),
    }


def create_trip(data, driver_id, using=DEFAULT_DB_ALIAS):
    try:
        driver = User.objects.using(using).filter(pk=driver_id).first()
        if driver is None or not driver.is_driver:
            return fail("You are not authorized to create a trip", 403)

        if not data.get('departure_coords') or not data.get('arrival_coords'):
            return fail("Departure and arrival coordinates are required", 400)

        trip = Trip.objects.using(using).create(
            driver=driver,
            departure_city=data['departure_city'],
            arrival_city=data['arrival_city'],
            departure_coords=data['departure_coords'],
            arrival_coords=data['arrival_coords'],
            departure_date=data['departure_date'],
            departure_time=data['departure_time'],
            available_seats=data['available_seats'],
            price_per_seat=data['price_per_seat'],
            description=data.get('description') or '',
        )
    except DatabaseError:
        logger.exception("Trip creation failed for driver %s", driver_id)
        return fail("An error occurred while creating the trip", 500)

    logger.info("Driver %s published trip %s", driver_id, trip.id)
    return ok(trip=trip)


def get_all_trips(using=DEFAULT_DB_ALIAS):
    try:
        trips = list(
            Trip.objects.using(using)
            .filter(status='ACTIVE')
            .upcoming()
            .with_reserved_seats()
            .select_related('driver', 'driver__driver_profile')
            .order_by('departure_date', 'departure_time')
        )
    except DatabaseError:
        logger.exception("Trip listing failed")
        return fail("An error occurred while fetching trips", 500)

    formatted_trips = []
    for trip in trips:
        formatted = trip_summary(trip)
        formatted.update({
            'driver': driver_summary(trip.driver),
            'availableSeats': trip.remaining_seats(),
            'pricePerSeat': trip.price_per_seat,
            'departureCoords': trip.departure_coords,
            'arrivalCoords': trip.arrival_coords,
        })
        formatted_trips.append(formatted)

    return ok(trips=formatted_trips)


def get_driver_trips(driver_id, using=DEFAULT_DB_ALIAS):
    try:
        trips = (
            Trip.objects.using(using)
            .filter(driver_id=driver_id)
            .with_reserved_seats()
            .prefetch_related('bookings')
            .order_by('departure_date', 'departure_time')
        )
        data = TripSerializer(trips, many=True).data
    except DatabaseError:
        logger.exception("Trip lookup failed for driver %s", driver_id)
        return fail("An error occurred while fetching trips", 500)

    return ok(trips=data)


def get_trip_for_booking(trip_id, using=DEFAULT_DB_ALIAS):
    try:
        trip = (
            Trip.objects.using(using)
            .with_reserved_seats()
            .select_related('driver', 'driver__driver_profile')
            .filter(pk=trip_id)
            .first()
        )
    except DatabaseError:
        logger.exception("Trip lookup failed for trip %s", trip_id)
        return fail("An error occurred while fetching the trip", 500)

    if trip is None:
        return fail("Trip not found", 404)

    formatted = trip_summary(trip)
    formatted.update({
        'driver': driver_summary(trip.driver),
        'availableSeats': trip.remaining_seats(),
        'pricePerSeat': trip.price_per_seat,
        'description': trip.description,
        'status': trip.status,
    })
    return ok(trip=formatted)


def delete_trip(trip_id, user_id, using=DEFAULT_DB_ALIAS):
    try:
        trip = Trip.objects.using(using).filter(pk=trip_id).first()
        if trip is None:
            return fail("Trip not found", 404)

        if trip.driver_id != user_id:
            logger.warning("User %s tried to delete trip %s", user_id, trip_id)
            return fail("You are not authorized to delete this trip", 403)

        trip.delete()
    except DatabaseError:
        logger.exception("Trip deletion failed for trip %s", trip_id)
        return fail("An error occurred while deleting the trip", 500)

    logger.info("Driver %s deleted trip %s", user_id, trip_id)
    return ok()
