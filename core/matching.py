"""
Trip matching operations.

These functions couple delivery requests and riders to trips:

- offer_delivery / cancel_delivery_offer: a traveler claims or releases a
  pending delivery request against their trip
- join_trip / leave_trip: a rider attaches to or detaches from a trip
- update_trip_status / update_delivery_status: lifecycle transitions that
  have to keep the slot pool and the trip pairing consistent

Each operation runs in one transaction. The Trip row is locked first and the
DeliveryRequest row second, so concurrent calls on the same trip serialize on
the trip before the capacity check.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from .capacity import adjust_capacity
from .exceptions import (
    DeliveryRequestNotFound,
    DeliveryUpdateForbidden,
    MatchingConflict,
    NotTripOwner,
    TripNotFound,
)
from .models import DeliveryRequest, Trip, User
from .permissions import delivery_status_denial, is_trip_owner

logger = logging.getLogger(__name__)


def _lock_trip(trip_id):
    try:
        return Trip.objects.select_for_update().get(pk=trip_id)
    except (Trip.DoesNotExist, ValidationError, ValueError):
        raise TripNotFound()


def _lock_delivery_request(delivery_request_id):
    try:
        return DeliveryRequest.objects.select_for_update().get(pk=delivery_request_id)
    except (DeliveryRequest.DoesNotExist, ValidationError, ValueError):
        raise DeliveryRequestNotFound()


def _ensure_delivery_request_exists(delivery_request_id):
    try:
        found = DeliveryRequest.objects.filter(pk=delivery_request_id).exists()
    except (ValidationError, ValueError):
        found = False
    if not found:
        raise DeliveryRequestNotFound()


def _save_capacity(trip, delta):
    trip.current_deliveries = adjust_capacity(trip.current_deliveries, trip.max_deliveries, delta)
    trip.save(update_fields=['current_deliveries', 'updated_at'])


@transaction.atomic
def offer_delivery(delivery_request_id, trip_id, user):
    """
    Match a pending delivery request to the caller's trip.

    Raises:
        DeliveryRequestNotFound, TripNotFound: an id does not resolve
        NotTripOwner: the caller is not the trip's traveler
        MatchingConflict: trip inactive or full, or request not pending
    """
    _ensure_delivery_request_exists(delivery_request_id)

    trip = _lock_trip(trip_id)
    delivery_request = _lock_delivery_request(delivery_request_id)

    if not is_trip_owner(trip, user):
        raise NotTripOwner('Only the trip traveler can offer delivery service')

    if not trip.is_active():
        raise MatchingConflict('Trip is not active')

    new_count = adjust_capacity(trip.current_deliveries, trip.max_deliveries, 1)

    if delivery_request.status != DeliveryRequest.Status.PENDING:
        raise MatchingConflict('Delivery request is already matched')

    delivery_request.status = DeliveryRequest.Status.MATCHED
    delivery_request.matched_trip = trip
    delivery_request.save(update_fields=['status', 'matched_trip', 'updated_at'])

    trip.current_deliveries = new_count
    trip.save(update_fields=['current_deliveries', 'updated_at'])

    return delivery_request


@transaction.atomic
def cancel_delivery_offer(delivery_request_id, trip_id, user):
    """
    Release a matched delivery request back to pending.

    The request must currently be matched to this trip. Once it is in
    transit or delivered the offer can no longer be withdrawn.
    """
    _ensure_delivery_request_exists(delivery_request_id)

    trip = _lock_trip(trip_id)
    delivery_request = _lock_delivery_request(delivery_request_id)

    if not is_trip_owner(trip, user):
        raise NotTripOwner('Only the trip traveler can cancel delivery offer')

    if delivery_request.matched_trip_id != trip.id:
        raise MatchingConflict('Delivery request is not matched with this trip')

    if delivery_request.status != DeliveryRequest.Status.MATCHED:
        raise MatchingConflict(
            f'Delivery request is already {delivery_request.get_status_display().lower()} '
            f'and can no longer be released'
        )

    delivery_request.status = DeliveryRequest.Status.PENDING
    delivery_request.matched_trip = None
    delivery_request.save(update_fields=['status', 'matched_trip', 'updated_at'])

    _save_capacity(trip, -1)
    return delivery_request


@transaction.atomic
def join_trip(trip_id, user):
    """Add the caller to the trip's riders, consuming one slot."""
    trip = _lock_trip(trip_id)

    if trip.traveler_id == user.pk:
        raise MatchingConflict('You cannot join your own trip')

    if trip.joined_users.filter(pk=user.pk).exists():
        raise MatchingConflict('You are already part of this trip')

    if not trip.is_active():
        raise MatchingConflict('Trip is not active')

    _save_capacity(trip, 1)
    trip.joined_users.add(user)
    return trip


@transaction.atomic
def leave_trip(trip_id, user):
    """Remove the caller from the trip's riders, freeing one slot."""
    trip = _lock_trip(trip_id)

    if not trip.joined_users.filter(pk=user.pk).exists():
        raise MatchingConflict('You are not part of this trip')

    trip.joined_users.remove(user)
    _save_capacity(trip, -1)
    return trip


@transaction.atomic
def update_trip_status(trip_id, user, new_status):
    """
    Move an active trip to completed or cancelled.

    Cancelling releases every still-matched request back to pending and
    removes all riders, returning their slots to the pool. A trip with
    deliveries in transit cannot be cancelled.
    """
    trip = _lock_trip(trip_id)

    if not is_trip_owner(trip, user):
        raise NotTripOwner('Only the trip traveler can update trip status')

    if trip.status == new_status:
        return trip

    if not trip.is_active():
        raise MatchingConflict(f'Cannot modify a {trip.status} trip')

    if new_status == Trip.Status.CANCELLED:
        if trip.matched_requests.filter(status=DeliveryRequest.Status.IN_TRANSIT).exists():
            raise MatchingConflict('Trip has deliveries in transit and cannot be cancelled')

        released = 0
        for delivery_request in trip.matched_requests.select_for_update().filter(
            status=DeliveryRequest.Status.MATCHED
        ):
            delivery_request.status = DeliveryRequest.Status.PENDING
            delivery_request.matched_trip = None
            delivery_request.save(update_fields=['status', 'matched_trip', 'updated_at'])
            released += 1

        riders = trip.joined_users.count()
        trip.joined_users.clear()

        trip.current_deliveries = adjust_capacity(
            trip.current_deliveries, trip.max_deliveries, -(released + riders)
        )
        logger.info(f"Trip {trip.id} cancelled: released {released} requests and {riders} riders")

    trip.status = new_status
    trip.save(update_fields=['status', 'current_deliveries', 'updated_at'])
    logger.info(f"Trip {trip.id} status changed to {new_status}")
    return trip


@transaction.atomic
def update_delivery_status(delivery_request_id, user, new_status):
    """
    Apply a lifecycle transition to a delivery request on behalf of ``user``.

    Who may make the change is decided on the locked row, so a request that
    was released from a trip can no longer be moved by that trip's traveler.
    When a request is delivered the traveler's delivery count is incremented.
    """
    delivery_request = _lock_delivery_request(delivery_request_id)

    denial = delivery_status_denial(delivery_request, user, new_status)
    if denial:
        raise DeliveryUpdateForbidden(denial)

    is_valid, error_message = delivery_request.can_transition_to(new_status)
    if not is_valid:
        raise MatchingConflict(error_message)

    if delivery_request.status == new_status:
        return delivery_request

    delivery_request.status = new_status
    delivery_request.save(update_fields=['status', 'updated_at'])

    if new_status == DeliveryRequest.Status.DELIVERED:
        User.objects.filter(pk=delivery_request.matched_trip.traveler_id).update(
            total_deliveries=F('total_deliveries') + 1
        )

    logger.info(f"Delivery request {delivery_request.id} status changed to {new_status}")
    return delivery_request
