"""
Delivery request endpoint tests.

Test Coverage:
- Creating requests (verified students only, camelCase payload)
- Browsing pending requests with filters and search
- The caller's own requests
- Status updates and who may perform them
"""

import uuid
from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from core import matching
from core.models import DeliveryRequest
from factories import auth_client, create_delivery_request, create_student

pytestmark = pytest.mark.django_db


@pytest.fixture
def request_data():
    return {
        'pickupLocation': 'Main Library',
        'dropoffLocation': 'Republic Hall',
        'itemDescription': 'Mini fridge',
        'itemSize': 'large',
        'priority': 'high',
        'paymentAmount': '35.00',
        'pickupDate': (timezone.localdate() + timedelta(days=2)).isoformat(),
        'pickupTime': '16:00',
        'contactInfo': '0551234567',
        'specialInstructions': 'Handle with care',
    }


@pytest.fixture
def matched_request(traveler, trip, delivery_request):
    matching.offer_delivery(delivery_request.id, trip.id, traveler)
    delivery_request.refresh_from_db()
    return delivery_request


def status_url(delivery_request):
    return reverse('delivery_request_status', args=[delivery_request.id])


# ============================================================================
# 1. CREATE
# ============================================================================

class TestDeliveryRequestCreate:

    def test_verified_student_creates_request(self, requester, requester_client, request_data):
        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Delivery request created successfully'
        body = response.data['deliveryRequest']
        assert body['status'] == 'pending'
        assert body['matched_trip'] is None
        assert body['item_size'] == 'large'
        assert body['priority'] == 'high'
        assert body['requester']['id'] == str(requester.id)

    def test_priority_defaults_to_normal(self, requester_client, request_data):
        request_data.pop('priority')

        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['deliveryRequest']['priority'] == 'normal'

    def test_pending_student_forbidden(self, request_data):
        client = auth_client(create_student(verified=False))

        response = client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not DeliveryRequest.objects.exists()

    def test_pickup_date_in_past(self, requester_client, request_data):
        request_data['pickupDate'] = (timezone.localdate() - timedelta(days=1)).isoformat()

        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['details']['pickupDate'] == ['Pickup date cannot be in the past.']

    @pytest.mark.parametrize('field', ['pickupLocation', 'itemDescription', 'itemSize', 'paymentAmount', 'contactInfo'])
    def test_missing_required_field(self, requester_client, request_data, field):
        request_data.pop(field)

        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data['details']

    def test_special_instructions_too_long(self, requester_client, request_data):
        request_data['specialInstructions'] = 'x' * 501

        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_negative_payment(self, requester_client, request_data):
        request_data['paymentAmount'] = '-1'

        response = requester_client.post(reverse('delivery_request_create'), request_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# ============================================================================
# 2. BROWSE
# ============================================================================

class TestDeliveryRequestBrowse:

    def test_list_shows_only_pending(self, requester, traveler_client, matched_request):
        pending = create_delivery_request(requester)

        response = traveler_client.get(reverse('delivery_request_list'))

        assert response.status_code == status.HTTP_200_OK
        assert [r['id'] for r in response.data['results']] == [str(pending.id)]

    def test_filters_and_search(self, requester, traveler_client):
        fridge = create_delivery_request(
            requester,
            item_description='Mini fridge',
            item_size=DeliveryRequest.ItemSize.LARGE,
            priority=DeliveryRequest.Priority.URGENT,
        )
        create_delivery_request(requester, item_description='Lecture notes', item_size=DeliveryRequest.ItemSize.SMALL)

        by_size = traveler_client.get(reverse('delivery_request_list'), {'item_size': 'large'})
        by_priority = traveler_client.get(reverse('delivery_request_list'), {'priority': 'urgent'})
        by_search = traveler_client.get(reverse('delivery_request_list'), {'search': 'FRIDGE'})

        for response in (by_size, by_priority, by_search):
            assert [r['id'] for r in response.data['results']] == [str(fridge.id)]

    @pytest.mark.parametrize('param', ['item_size', 'priority'])
    def test_invalid_filter_value(self, traveler_client, param):
        response = traveler_client.get(reverse('delivery_request_list'), {param: 'enormous'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mine_lists_all_statuses(self, requester, requester_client, matched_request):
        create_delivery_request(requester)
        create_delivery_request(create_student())

        response = requester_client.get(reverse('my_delivery_requests'))
        matched_only = requester_client.get(reverse('my_delivery_requests'), {'status': 'matched'})

        assert response.data['count'] == 2
        assert [r['id'] for r in matched_only.data['results']] == [str(matched_request.id)]
        assert matched_only.data['results'][0]['matched_trip'] == matched_request.matched_trip_id

    def test_detail(self, requester_client, delivery_request):
        response = requester_client.get(reverse('delivery_request_detail', args=[delivery_request.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deliveryRequest']['id'] == str(delivery_request.id)

    def test_detail_not_found(self, requester_client):
        response = requester_client.get(reverse('delivery_request_detail', args=[uuid.uuid4()]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Delivery request not found'}


# ============================================================================
# 3. STATUS UPDATES
# ============================================================================

class TestDeliveryStatusUpdate:

    def test_requester_cancels_pending_request(self, requester_client, delivery_request):
        response = requester_client.put(status_url(delivery_request), {'status': 'cancelled'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['deliveryRequest']['status'] == 'cancelled'

    def test_traveler_delivers(self, traveler, traveler_client, matched_request):
        in_transit = traveler_client.put(status_url(matched_request), {'status': 'in_transit'}, format='json')
        delivered = traveler_client.put(status_url(matched_request), {'status': 'delivered'}, format='json')

        assert in_transit.status_code == status.HTTP_200_OK
        assert delivered.status_code == status.HTTP_200_OK
        traveler.refresh_from_db()
        assert traveler.total_deliveries == 1

    def test_requester_cannot_mark_in_transit(self, requester_client, matched_request):
        response = requester_client.put(status_url(matched_request), {'status': 'in_transit'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {'error': 'Only the traveler of the matched trip can update delivery progress.'}

    def test_traveler_cannot_cancel_request(self, traveler_client, matched_request):
        response = traveler_client.put(status_url(matched_request), {'status': 'cancelled'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {'error': 'Only the requester can cancel a delivery request.'}

    def test_stranger_forbidden(self, stranger_client, delivery_request):
        response = stranger_client.put(status_url(delivery_request), {'status': 'cancelled'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {'error': 'You do not have permission to modify this delivery request.'}

    def test_matched_request_cannot_be_cancelled_by_requester(self, requester_client, matched_request):
        response = requester_client.put(status_url(matched_request), {'status': 'cancelled'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        matched_request.refresh_from_db()
        assert matched_request.status == DeliveryRequest.Status.MATCHED

    def test_skipping_transit_conflicts(self, traveler_client, matched_request):
        response = traveler_client.put(status_url(matched_request), {'status': 'delivered'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {'error': 'Cannot transition from matched to delivered. Must be in transit first.'}

    def test_manual_match_conflicts(self, requester_client, delivery_request):
        response = requester_client.put(status_url(delivery_request), {'status': 'matched'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_unknown_status_value(self, requester_client, delivery_request):
        response = requester_client.put(status_url(delivery_request), {'status': 'lost'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_request(self, requester_client):
        response = requester_client.put(
            reverse('delivery_request_status', args=[uuid.uuid4()]),
            {'status': 'cancelled'},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
