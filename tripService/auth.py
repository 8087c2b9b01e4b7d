import json
import logging
import secrets
from datetime import timedelta

import jwt
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, transaction
from django.utils import timezone

from tripService.models import DriverProfile, User, UserSession
from tripService.results import fail, ok

logger = logging.getLogger(__name__)

SESSION_COOKIE = 'session_id'
USER_INFO_COOKIE = 'user_info'
TOKEN_ALGORITHM = 'HS256'

INVALID_CREDENTIALS = 'Invalid email or password'
EMAIL_IN_USE = 'This email is already in use'


def normalize_email(email):
    return (email or '').strip().lower()


def dashboard_url(user):
    role = 'driver' if user.is_driver else 'passenger'
    return f'/dashboard/{role}/{user.id}/'


def user_info(user):
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'isDriver': user.is_driver,
    }


def login(email, password, using=DEFAULT_DB_ALIAS):
    '''
    Unknown email and wrong password produce the same failure so that the
    endpoint cannot be used to discover registered addresses.
    '''
    try:
        user = User.objects.using(using).filter(email=normalize_email(email)).first()
    except DatabaseError:
        logger.exception("Login lookup failed")
        return fail("An error occurred while logging in", 500)

    if user is None or not check_password(password, user.password):
        logger.info("Rejected login attempt for %s", normalize_email(email))
        return fail(INVALID_CREDENTIALS, 401)

    return ok(user=user, redirect_url=dashboard_url(user))


def signup(data, using=DEFAULT_DB_ALIAS):
    email = normalize_email(data['email'])
    try:
        if User.objects.using(using).filter(email=email).exists():
            return fail(EMAIL_IN_USE, 409)

        with transaction.atomic(using=using):
            user = User.objects.using(using).create(
                email=email,
                password=make_password(data['password']),
                first_name=data['first_name'],
                last_name=data['last_name'],
                phone=data.get('phone', ''),
                is_driver=data.get('is_driver', False),
            )
            '''
            Vehicle details are only kept for drivers.
            '''
            profile = data.get('driver_profile')
            if user.is_driver and profile:
                DriverProfile.objects.using(using).create(user=user, **profile)
    except IntegrityError:
        '''
        A concurrent signup registered the same email between the check and
        the insert.
        '''
        logger.info("Duplicate signup for %s", email)
        return fail(EMAIL_IN_USE, 409)
    except DatabaseError:
        logger.exception("Signup failed for %s", email)
        return fail("An error occurred while signing up", 500)

    logger.info("Registered user %s (driver=%s)", user.id, user.is_driver)
    return ok(user=user, redirect_url=dashboard_url(user))


def open_session(response, user, using=DEFAULT_DB_ALIAS):
    expires_at = timezone.now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    user_session = UserSession.objects.using(using).create(
        session_key=secrets.token_urlsafe(32),
        user=user,
        expires_at=expires_at,
    )

    token = jwt.encode(
        {'sid': user_session.session_key, 'sub': str(user.id), 'exp': expires_at},
        settings.SECRET_KEY,
        algorithm=TOKEN_ALGORITHM,
    )
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    response.set_cookie(
        SESSION_COOKIE, token,
        max_age=max_age, path='/', httponly=True,
        secure=settings.SESSION_COOKIE_SECURE, samesite='Lax',
    )
    '''
    Readable by the frontend for display; never used to identify the caller.
    '''
    response.set_cookie(
        USER_INFO_COOKIE, json.dumps(user_info(user)),
        max_age=max_age, path='/', httponly=False,
        secure=settings.SESSION_COOKIE_SECURE, samesite='Lax',
    )
    return user_session


def get_session(request, using=DEFAULT_DB_ALIAS):
    token = request.COOKIES.get(SESSION_COOKIE)
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[TOKEN_ALGORITHM])
    except jwt.InvalidTokenError:
        return None

    try:
        user_session = UserSession.objects.using(using).select_related('user').filter(
            session_key=payload.get('sid'),
            status='active',
            expires_at__gt=timezone.now(),
        ).first()
    except DatabaseError:
        logger.exception("Session lookup failed")
        return None

    if user_session is None or str(user_session.user_id) != payload.get('sub'):
        return None
    return user_session


def logout(request, response, using=DEFAULT_DB_ALIAS):
    user_session = get_session(request, using=using)
    if user_session is not None:
        try:
            user_session.status = 'expired'
            user_session.save(update_fields=['status'])
        except DatabaseError:
            logger.exception("Could not expire session %s", user_session.pk)

    response.delete_cookie(SESSION_COOKIE, path='/')
    response.delete_cookie(USER_INFO_COOKIE, path='/')
    return user_session
