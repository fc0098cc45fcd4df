"""
Shared fixtures for the Campus Connect test suite.
"""

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from factories import auth_client, create_delivery_request, create_student, create_trip


@pytest.fixture(autouse=True)
def clear_cache():
    """Reset throttle counters between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def traveler(db):
    return create_student('ama')


@pytest.fixture
def requester(db):
    return create_student('kwame')


@pytest.fixture
def rider(db):
    return create_student('esi')


@pytest.fixture
def stranger(db):
    return create_student('yaw')


@pytest.fixture
def trip(traveler):
    return create_trip(traveler, max_deliveries=2)


@pytest.fixture
def delivery_request(requester):
    return create_delivery_request(requester)


@pytest.fixture
def traveler_client(traveler):
    return auth_client(traveler)


@pytest.fixture
def requester_client(requester):
    return auth_client(requester)


@pytest.fixture
def rider_client(rider):
    return auth_client(rider)


@pytest.fixture
def stranger_client(stranger):
    return auth_client(stranger)
