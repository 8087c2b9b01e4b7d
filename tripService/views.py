import logging

from django.conf import settings
from django.db import DatabaseError
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from tripService import auth, bookings, geocoding, trips
from tripService.serializers import (
    BookingSerializer, CreateBookingSerializer, CreateTripSerializer,
    LoginSerializer, SignupSerializer, TripSerializer, UserSerializer,
)

logger = logging.getLogger(__name__)

DB_ALIAS = settings.RIDESHARE_DATABASE


def result_response(result):
    '''
    Turns an operation result into a Response; failures carry their own
    status code, which is not part of the body.
    '''
    body = {k: v for k, v in result.items() if k != 'status_code'}
    if result['success']:
        return Response(body, status=status.HTTP_200_OK)
    return Response(body, status=result['status_code'])


def invalid_request(serializer):
    return Response({'success': False, 'message': 'Invalid request data', 'errors': serializer.errors},
                    status=status.HTTP_400_BAD_REQUEST)


def unauthorized():
    return Response({'success': False, 'message': 'You must be logged in'}, status=status.HTTP_401_UNAUTHORIZED)


def session_response(user, redirect_url, status_code):
    response = Response({'success': True, 'redirectUrl': redirect_url}, status=status_code)
    try:
        auth.open_session(response, user, using=DB_ALIAS)
    except DatabaseError:
        logger.exception("Could not open a session for user %s", user.id)
        return Response({'success': False, 'message': 'An error occurred while logging in'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return response


@ratelimit(group='tripService.login', key='ip', rate='5/m', block=True)
@api_view(['POST'])
def login(request):
    data = request.data if isinstance(request.data, dict) else {}
    email = data.get('email')
    password = data.get('password')
    if not email or not password:
        return Response({'success': False, 'message': 'Please fill in all fields'},
                        status=status.HTTP_400_BAD_REQUEST)

    serializer = LoginSerializer(data=data)
    if not serializer.is_valid():
        return Response({'success': False, 'message': 'Invalid email format'},
                        status=status.HTTP_400_BAD_REQUEST)

    result = auth.login(email, password, using=DB_ALIAS)
    if not result['success']:
        return result_response(result)

    return session_response(result['user'], result['redirect_url'], status.HTTP_200_OK)


@ratelimit(group='tripService.signup', key='ip', rate='5/m', block=True)
@api_view(['POST'])
def signup(request):
    serializer = SignupSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer)

    result = auth.signup(serializer.validated_data, using=DB_ALIAS)
    if not result['success']:
        return result_response(result)

    return session_response(result['user'], result['redirect_url'], status.HTTP_201_CREATED)


@api_view(['POST'])
def logout(request):
    response = Response({'success': True, 'redirectUrl': '/'}, status=status.HTTP_200_OK)
    auth.logout(request, response, using=DB_ALIAS)
    return response


@api_view(['GET'])
def current_session(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return Response({'success': True, 'user': UserSerializer(session.user).data}, status=status.HTTP_200_OK)


@api_view(['GET'])
def list_trips(request):
    return result_response(trips.get_all_trips(using=DB_ALIAS))


@api_view(['GET'])
def trip_detail(request, trip_id):
    return result_response(trips.get_trip_for_booking(trip_id, using=DB_ALIAS))


@api_view(['POST'])
def create_trip(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()

    serializer = CreateTripSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer)

    result = trips.create_trip(serializer.validated_data, session.user_id, using=DB_ALIAS)
    if not result['success']:
        return result_response(result)
    return Response({'success': True, 'trip': TripSerializer(result['trip']).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def driver_trips(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return result_response(trips.get_driver_trips(session.user_id, using=DB_ALIAS))


@api_view(['DELETE'])
def delete_trip(request, trip_id):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return result_response(trips.delete_trip(trip_id, session.user_id, using=DB_ALIAS))


@api_view(['POST'])
def create_booking(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()

    serializer = CreateBookingSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer)

    result = bookings.create_booking(
        session,
        serializer.validated_data['trip_id'],
        serializer.validated_data['seats'],
        using=DB_ALIAS,
    )
    if not result['success']:
        return result_response(result)
    return Response({'success': True, 'booking': BookingSerializer(result['booking']).data},
                    status=status.HTTP_201_CREATED)


@api_view(['POST'])
def confirm_booking(request, booking_id):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()

    result = bookings.confirm_booking(booking_id, session.user_id, using=DB_ALIAS)
    if not result['success']:
        return result_response(result)
    return Response({'success': True, 'booking': BookingSerializer(result['booking']).data},
                    status=status.HTTP_200_OK)


@api_view(['POST'])
def cancel_booking(request, booking_id):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()

    result = bookings.cancel_booking(booking_id, session.user_id, using=DB_ALIAS)
    if not result['success']:
        return result_response(result)
    return Response({'success': True, 'booking': BookingSerializer(result['booking']).data},
                    status=status.HTTP_200_OK)


@api_view(['GET'])
def passenger_bookings(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return result_response(bookings.get_passenger_bookings(session.user_id, using=DB_ALIAS))


@api_view(['GET'])
def driver_bookings(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return result_response(bookings.get_driver_bookings(session.user_id, using=DB_ALIAS))


@api_view(['GET'])
def geocode(request):
    session = auth.get_session(request, using=DB_ALIAS)
    if session is None:
        return unauthorized()
    return result_response(geocoding.search_places(request.query_params.get('q', '')))
