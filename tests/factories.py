"""
Object builders shared by the test modules.
"""

import itertools
from datetime import time, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.models import DeliveryRequest, Trip

User = get_user_model()

CAMPUS_DOMAIN = 'st.knust.edu.gh'
PASSWORD = 'CampusPass123!'

_sequence = itertools.count(1)


def auth_client(user):
    """Return an APIClient carrying a bearer token for ``user``."""
    client = APIClient()
    token = str(RefreshToken.for_user(user).access_token)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


def create_student(name=None, verified=True, **extra):
    number = next(_sequence)
    name = name or f'student{number}'
    email = f'{name}@{CAMPUS_DOMAIN}'
    defaults = {
        'first_name': name.capitalize(),
        'last_name': 'Mensah',
        'student_id': f'2024{number:05d}',
        'verification_status': (
            User.VerificationStatus.APPROVED if verified else User.VerificationStatus.PENDING
        ),
    }
    defaults.update(extra)
    return User.objects.create_user(username=email, email=email, password=PASSWORD, **defaults)


def create_trip(traveler, max_deliveries=2, **extra):
    defaults = {
        'from_location': 'Unity Hall',
        'to_location': 'Adum',
        'departure_time': timezone.now() + timedelta(days=1),
        'transport_method': Trip.TransportMethod.CAR,
        'max_deliveries': max_deliveries,
        'price_per_delivery': Decimal('15.00'),
    }
    defaults.update(extra)
    return Trip.objects.create(traveler=traveler, **defaults)


def create_delivery_request(requester, **extra):
    defaults = {
        'pickup_location': 'Main Library',
        'dropoff_location': 'Queens Hall',
        'item_description': 'Box of textbooks',
        'item_size': DeliveryRequest.ItemSize.MEDIUM,
        'priority': DeliveryRequest.Priority.NORMAL,
        'payment_amount': Decimal('20.00'),
        'pickup_date': timezone.localdate() + timedelta(days=1),
        'pickup_time': time(14, 30),
        'contact_info': '0241234567',
    }
    defaults.update(extra)
    return DeliveryRequest.objects.create(requester=requester, **defaults)
