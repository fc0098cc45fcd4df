"""
Custom permission classes for Campus Connect.
"""

from rest_framework import permissions


def is_trip_owner(trip, user):
    """Return True when ``user`` is the traveler who posted ``trip``."""
    return bool(user and user.is_authenticated and trip.traveler_id == user.pk)


class IsStaffUser(permissions.BasePermission):
    """
    Permission class that allows only staff users to access the endpoint.

    Used by the student verification endpoint.

    Usage:
        class MyView(APIView):
            permission_classes = [IsAuthenticated, IsStaffUser]
    """

    message = 'You do not have permission to perform this action. Staff privileges required.'

    def has_permission(self, request, view):
        # User must be authenticated
        if not request.user or not request.user.is_authenticated:
            return False

        return request.user.is_staff


class IsVerifiedStudent(permissions.BasePermission):
    """
    Permission class that allows only approved students to post trips and
    delivery requests.

    Returns 403 Forbidden while verification is pending or was rejected.
    """

    message = 'Your student account must be verified before you can perform this action.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        is_verified = getattr(request.user, 'is_verified_student', None)
        return bool(is_verified and is_verified())


class IsTripOwner(permissions.BasePermission):
    """
    Object-level permission: the caller must be the trip's traveler.

    Checked after the trip has been looked up, so a missing trip is reported
    as 404 before ownership is considered.
    """

    message = 'Only the trip traveler can perform this action.'

    def has_object_permission(self, request, view, obj):
        return is_trip_owner(obj, request.user)


def delivery_status_denial(delivery_request, user, new_status):
    """
    Return why ``user`` may not move ``delivery_request`` to ``new_status``,
    or None when the update is allowed.

    Authorization rules:
    - The requester can cancel their own request
    - The traveler of the matched trip can mark it in_transit or delivered
    - Nobody else can modify the request
    """
    if not user or not user.is_authenticated:
        return 'You do not have permission to modify this delivery request.'

    is_requester = delivery_request.requester_id == user.pk
    is_traveler = (
        delivery_request.matched_trip is not None
        and delivery_request.matched_trip.traveler_id == user.pk
    )

    if not is_requester and not is_traveler:
        return 'You do not have permission to modify this delivery request.'

    if new_status in ('in_transit', 'delivered') and not is_traveler:
        return 'Only the traveler of the matched trip can update delivery progress.'

    if new_status == 'cancelled' and not is_requester:
        return 'Only the requester can cancel a delivery request.'

    # Any other status is left to the state machine, which answers 409
    return None


class CanUpdateDeliveryStatus(permissions.BasePermission):
    """
    Permission class for delivery request status updates.

    ``matching.update_delivery_status`` applies the same rules again to the
    locked row.
    """

    message = 'You do not have permission to update this delivery request.'

    def has_object_permission(self, request, view, obj):
        denial = delivery_status_denial(obj, request.user, request.data.get('status'))
        if denial:
            self.message = denial
            return False
        return True
