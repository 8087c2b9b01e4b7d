from unittest import mock

import pytest
import requests

from tripService import geocoding


def opencage_payload(count):
    return {
        'results': [
            {'formatted': f'Place {i}, Cameroun', 'geometry': {'lat': 4.0 + i, 'lng': 9.7 + i}}
            for i in range(count)
        ]
    }


@mock.patch('tripService.geocoding.requests.get')
def test_search_places_returns_coordinate_strings(mock_get, settings):
    mock_get.return_value.json.return_value = opencage_payload(2)

    result = geocoding.search_places('Douala')

    assert result['success']
    assert result['suggestions'][0] == {
        'formatted': 'Place 0, Cameroun', 'lat': 4.0, 'lng': 9.7, 'coords': '4.0,9.7',
    }
    params = mock_get.call_args.kwargs['params']
    assert params['q'] == 'Douala'
    assert params['key'] == 'test-key'
    assert params['countrycode'] == settings.GEOCODER_COUNTRY_CODE
    assert params['limit'] == 5
    assert mock_get.call_args.kwargs['timeout'] == settings.GEOCODER_TIMEOUT


@mock.patch('tripService.geocoding.requests.get')
def test_search_places_caps_suggestions(mock_get):
    mock_get.return_value.json.return_value = opencage_payload(8)
    assert len(geocoding.search_places('Yaoundé')['suggestions']) == 5


@mock.patch('tripService.geocoding.requests.get')
def test_search_places_skips_short_queries(mock_get):
    assert geocoding.search_places(' D ') == {'success': True, 'suggestions': []}
    mock_get.assert_not_called()


@mock.patch('tripService.geocoding.requests.get')
def test_search_places_without_api_key(mock_get, settings):
    settings.OPENCAGE_API_KEY = ''
    result = geocoding.search_places('Douala')
    assert result['status_code'] == 503
    mock_get.assert_not_called()


@mock.patch('tripService.geocoding.requests.get')
def test_search_places_upstream_failure(mock_get):
    mock_get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError('402 Payment Required')
    result = geocoding.search_places('Douala')
    assert not result['success']
    assert result['status_code'] == 502


@pytest.mark.django_db
@mock.patch('tripService.geocoding.requests.get')
def test_geocode_endpoint_requires_session(mock_get, api_client, login_as, driver):
    mock_get.return_value.json.return_value = opencage_payload(1)

    assert api_client.get('/api/geocode/', {'q': 'Douala'}).status_code == 401

    client = login_as(driver)
    response = client.get('/api/geocode/', {'q': 'Douala'})
    assert response.status_code == 200
    assert response.data['suggestions'][0]['coords'] == '4.0,9.7'
