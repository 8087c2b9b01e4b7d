import logging

import requests
from django.conf import settings

from tripService.results import fail, ok

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 5


def search_places(query):
    '''
    Address suggestions from the OpenCage geocoder, restricted to the
    configured country. Each suggestion carries the "lat,lng" string that
    trips store as departure/arrival coordinates.
    '''
    query = (query or '').strip()
    if len(query) < MIN_QUERY_LENGTH:
        return ok(suggestions=[])

    if not settings.OPENCAGE_API_KEY:
        logger.error("OPENCAGE_API_KEY is not configured")
        return fail("Geocoding is not available", 503)

    params = {
        'q': query,
        'key': settings.OPENCAGE_API_KEY,
        'language': settings.GEOCODER_LANGUAGE,
        'limit': MAX_SUGGESTIONS,
        'countrycode': settings.GEOCODER_COUNTRY_CODE,
    }

    try:
        response = requests.get(settings.GEOCODER_URL, params=params, timeout=settings.GEOCODER_TIMEOUT)
        response.raise_for_status()
        results = response.json().get('results', [])
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Geocoding request failed: %s", e)
        return fail("Geocoding lookup failed", 502)

    suggestions = []
    for result in results[:MAX_SUGGESTIONS]:
        geometry = result.get('geometry') or {}
        if 'lat' not in geometry or 'lng' not in geometry:
            continue
        suggestions.append({
            'formatted': result.get('formatted', ''),
            'lat': geometry['lat'],
            'lng': geometry['lng'],
            'coords': f"{geometry['lat']},{geometry['lng']}",
        })

    return ok(suggestions=suggestions)
