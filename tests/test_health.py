from unittest import mock

import pytest
from django.db.utils import OperationalError
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
def test_health_check_reports_healthy(api_client):
    response = api_client.get(reverse('health_check'))

    assert response.status_code == status.HTTP_200_OK
    assert response.data['status'] == 'healthy'
    assert response.data['service'] == 'campus-connect-api'
    assert response.data['services']['database'] == 'healthy'
    assert 'timestamp' in response.data


@pytest.mark.django_db
def test_health_check_needs_no_token(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

    response = api_client.get(reverse('health_check'))

    assert response.status_code == status.HTTP_200_OK


@pytest.mark.django_db
def test_health_check_reports_database_failure(api_client):
    with mock.patch('core.views.connection.cursor', side_effect=OperationalError('connection refused')):
        response = api_client.get(reverse('health_check'))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.data['status'] == 'unhealthy'
    assert response.data['services']['database'].startswith('unhealthy')
