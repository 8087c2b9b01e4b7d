from django.apps import AppConfig


class TripServiceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tripService'
