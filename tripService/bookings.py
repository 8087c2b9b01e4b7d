import logging

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from tripService.models import Booking, Trip, User
from tripService.results import fail, ok
from tripService.trips import DEFAULT_AVATAR, trip_summary, vehicle_info

logger = logging.getLogger(__name__)

NOT_ENOUGH_SEATS = "Not enough seats available"


def create_booking(session, trip_id, seats, using=DEFAULT_DB_ALIAS):
    if session is None:
        return fail("You must be logged in to book a trip", 401)
    if seats < 1:
        return fail("At least one seat must be booked", 400)

    user = session.user
    if user.is_driver:
        logger.warning("Driver %s tried to book trip %s", user.id, trip_id)
        return fail("Only passengers can book a trip", 403)

    try:
        '''
        The trip row stays locked until the booking is written, so two
        requests for the same trip cannot both pass the seat check.
        '''
        with transaction.atomic(using=using):
            trip = Trip.objects.using(using).select_for_update().filter(pk=trip_id).first()

            if trip is None:
                return fail("Trip not found", 404)

            if trip.status != 'ACTIVE':
                return fail("This trip is no longer available", 400)

            if trip.has_departed():
                return fail("This trip has already departed", 400)

            booked_seats = trip.booked_seats()
            if trip.available_seats - booked_seats < seats:
                logger.info(
                    "Trip %s has %s seats left, %s requested",
                    trip.id, trip.available_seats - booked_seats, seats,
                )
                return fail(NOT_ENOUGH_SEATS, 400)

            booking = Booking.objects.using(using).create(
                trip=trip,
                user=user,
                seats=seats,
                total_price=trip.price_per_seat * seats,
                status='PENDING',
            )
    except DatabaseError:
        logger.exception("Booking failed for trip %s", trip_id)
        return fail("An error occurred while booking the trip", 500)

    logger.info("User %s booked %s seat(s) on trip %s", user.id, seats, trip_id)
    return ok(booking=booking)


def confirm_booking(booking_id, driver_id, using=DEFAULT_DB_ALIAS):
    try:
        with transaction.atomic(using=using):
            booking = Booking.objects.using(using).select_for_update().select_related('trip').filter(
                pk=booking_id
            ).first()

            if booking is None:
                return fail("Booking not found", 404)

            if booking.trip.driver_id != driver_id:
                logger.warning("User %s tried to confirm booking %s", driver_id, booking_id)
                return fail("You are not authorized to confirm this booking", 403)

            '''
            A cancelled booking no longer holds seats; confirming it again
            would take them back without a capacity check.
            '''
            if booking.status == 'CANCELLED':
                return fail("A cancelled booking cannot be confirmed", 409)

            booking.status = 'CONFIRMED'
            booking.save(update_fields=['status'])
    except DatabaseError:
        logger.exception("Confirmation failed for booking %s", booking_id)
        return fail("An error occurred while confirming the booking", 500)

    return ok(booking=booking)


def cancel_booking(booking_id, user_id, using=DEFAULT_DB_ALIAS):
    try:
        booking = Booking.objects.using(using).select_related('trip').filter(pk=booking_id).first()
        if booking is None:
            return fail("Booking not found", 404)

        user = User.objects.using(using).filter(pk=user_id).first()
        if user is None:
            authorized = False
        elif user.is_driver:
            authorized = booking.trip.driver_id == user.id
        else:
            authorized = booking.user_id == user.id

        if not authorized:
            logger.warning("User %s tried to cancel booking %s", user_id, booking_id)
            return fail("You are not authorized to cancel this booking", 403)

        booking.status = 'CANCELLED'
        booking.save(update_fields=['status'])
    except DatabaseError:
        logger.exception("Cancellation failed for booking %s", booking_id)
        return fail("An error occurred while cancelling the booking", 500)

    return ok(booking=booking)


def get_passenger_bookings(user_id, using=DEFAULT_DB_ALIAS):
    try:
        bookings = list(
            Booking.objects.using(using)
            .filter(user_id=user_id)
            .select_related('trip', 'trip__driver', 'trip__driver__driver_profile')
            .order_by('-created_at', '-id')
        )
    except DatabaseError:
        logger.exception("Booking lookup failed for passenger %s", user_id)
        return fail("An error occurred while fetching bookings", 500)

    formatted_bookings = []
    for booking in bookings:
        driver = booking.trip.driver
        formatted_bookings.append({
            'id': booking.id,
            'driver': {
                'id': driver.id,
                'name': driver.full_name,
                'avatar': driver.avatar or DEFAULT_AVATAR,
                'phone': driver.phone or '',
                'vehicle': vehicle_info(driver),
            },
            'trip': trip_summary(booking.trip),
            'seats': booking.seats,
            'totalPrice': booking.total_price,
            'status': booking.status,
            'createdAt': booking.created_at,
        })

    return ok(bookings=formatted_bookings)


def get_driver_bookings(driver_id, using=DEFAULT_DB_ALIAS):
    try:
        bookings = list(
            Booking.objects.using(using)
            .filter(trip__driver_id=driver_id)
            .select_related('trip', 'user')
            .order_by('-created_at', '-id')
        )
    except DatabaseError:
        logger.exception("Booking lookup failed for driver %s", driver_id)
        return fail("An error occurred while fetching bookings", 500)

    formatted_bookings = []
    for booking in bookings:
        passenger = booking.user
        formatted_bookings.append({
            'id': booking.id,
            'passenger': {
                'id': passenger.id,
                'name': passenger.full_name,
                'avatar': passenger.avatar or DEFAULT_AVATAR,
                'phone': passenger.phone or '',
            },
            'trip': trip_summary(booking.trip),
            'seats': booking.seats,
            'totalPrice': booking.total_price,
            'status': booking.status,
            'createdAt': booking.created_at,
        })

    return ok(bookings=formatted_bookings)
