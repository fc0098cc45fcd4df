"""
API views for Campus Connect.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.paginator import EmptyPage, Paginator
from django.db import IntegrityError, connection
from django.db.models import Q
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from . import matching
from .exceptions import DeliveryRequestNotFound, MatchingError, TripNotFound
from .models import DeliveryRequest, Trip
from .permissions import CanUpdateDeliveryStatus, IsStaffUser, IsTripOwner, IsVerifiedStudent
from .serializers import (
    DeliveryRequestCreateSerializer,
    DeliveryRequestSerializer,
    DeliveryStatusUpdateSerializer,
    LoginSerializer,
    StudentVerificationSerializer,
    TokenRefreshSerializer,
    TripCreateSerializer,
    TripDetailSerializer,
    TripSerializer,
    TripStatusUpdateSerializer,
    UserProfileSerializer,
    UserProfileUpdateSerializer,
    UserRegistrationSerializer,
    UserSummarySerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def get_client_ip(request):
    """
    Get client IP address from request.
    Handles proxy headers for accurate IP detection.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def paginate(request, queryset, serializer_class):
    """
    Paginate a queryset with ``page`` and ``limit`` query parameters.

    Returns a Response: 200 with the page, or 404 when the page is out of
    range.
    """
    try:
        limit = int(request.query_params.get('limit', DEFAULT_PAGE_SIZE))
        if limit < 1:
            limit = DEFAULT_PAGE_SIZE
        elif limit > MAX_PAGE_SIZE:
            limit = MAX_PAGE_SIZE
    except ValueError:
        limit = DEFAULT_PAGE_SIZE

    try:
        page_number = int(request.query_params.get('page', 1))
        if page_number < 1:
            page_number = 1
    except ValueError:
        page_number = 1

    paginator = Paginator(queryset, limit)

    try:
        page_obj = paginator.page(page_number)
    except EmptyPage:
        return Response(
            {'error': f'Invalid page number. Page {page_number} does not exist.'},
            status=status.HTTP_404_NOT_FOUND
        )

    serializer = serializer_class(page_obj.object_list, many=True, context={'request': request})

    response_data = {
        'count': paginator.count,
        'page': page_number,
        'limit': limit,
        'total_pages': paginator.num_pages,
        'next': None,
        'previous': None,
        'results': serializer.data,
    }

    if page_obj.has_next():
        response_data['next'] = request.build_absolute_uri(
            f"{request.path}?page={page_obj.next_page_number()}&limit={limit}"
        )
    if page_obj.has_previous():
        response_data['previous'] = request.build_absolute_uri(
            f"{request.path}?page={page_obj.previous_page_number()}&limit={limit}"
        )

    return Response(response_data, status=status.HTTP_200_OK)


def validate_choice(value, choices, param):
    """Return an error Response when ``value`` is not one of ``choices``."""
    valid = [choice for choice, _label in choices]
    if value not in valid:
        return Response(
            {'error': f'Invalid value for "{param}". Valid options: {", ".join(valid)}'},
            status=status.HTTP_400_BAD_REQUEST
        )
    return None


# ============================================================================
# Authentication Views
# ============================================================================

class UserRegistrationView(generics.CreateAPIView):
    """
    POST /api/auth/signup

    Creates a student account on the campus email domain. New accounts start
    with verification_status='pending'.

    Handles concurrent sign ups with the same email or student ID through
    the database uniqueness constraints.
    """
    serializer_class = UserRegistrationSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = serializer.save()
        except IntegrityError:
            logger.warning(f"Concurrent duplicate sign up rejected. IP: {get_client_ip(request)}")
            return Response(
                {'error': 'A user with that email or student ID already exists.'},
                status=status.HTTP_409_CONFLICT
            )

        logger.info(f"New student registered. Email: {user.email}, IP: {get_client_ip(request)}")

        return Response(
            {
                'message': 'User created successfully',
                'user': UserSummarySerializer(user).data,
            },
            status=status.HTTP_201_CREATED
        )


class SignInView(APIView):
    """
    POST /api/auth/signin

    Request body: {"email": "kofi@st.knust.edu.gh", "password": "..."}

    Success response (200):
    {
        "access": "<jwt_access_token>",
        "refresh": "<jwt_refresh_token>",
        "user": {...}
    }

    Every failure (unknown email, wrong password, inactive account) returns
    the same 401 so accounts cannot be enumerated.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'signin'

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email'].lower().strip()
        password = serializer.validated_data['password']
        client_ip = get_client_ip(request)

        invalid = Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            # Hash anyway to keep timing uniform
            User().set_password(password)
            logger.warning(f"Failed sign in for non-existent user. Email: {email}, IP: {client_ip}")
            return invalid

        if not user.check_password(password):
            logger.warning(f"Failed sign in with incorrect password. Email: {email}, IP: {client_ip}")
            return invalid

        if not user.is_active:
            logger.warning(f"Failed sign in for inactive account. Email: {email}, IP: {client_ip}")
            return invalid

        refresh = RefreshToken.for_user(user)
        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        logger.info(f"Successful sign in. Email: {email}, IP: {client_ip}")

        return Response({
            'message': 'Signed in successfully',
            'access': str(refresh.access_token),
            'refresh': str(refresh),
            'user': UserSummarySerializer(user).data,
        }, status=status.HTTP_200_OK)


class CustomTokenRefreshView(APIView):
    """
    POST /api/auth/token/refresh

    Request body: {"refresh": "<jwt_refresh_token>"}

    Returns a new access token and, with rotation enabled, a new refresh
    token; the old refresh token is blacklisted.

    Error responses:
    - 400: missing refresh field
    - 401: invalid, expired or blacklisted refresh token
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'refresh'

    def post(self, request, *args, **kwargs):
        serializer = TokenRefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        client_ip = get_client_ip(request)

        try:
            refresh_token = RefreshToken(serializer.validated_data['refresh'])
        except TokenError as e:
            logger.warning(f"Failed token refresh attempt. Error: {e}, IP: {client_ip}")
            return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        user_id = refresh_token.get(settings.SIMPLE_JWT.get('USER_ID_CLAIM', 'user_id'))
        try:
            user = User.objects.get(pk=user_id, is_active=True)
        except User.DoesNotExist:
            logger.warning(f"Token refresh for missing or inactive user {user_id}. IP: {client_ip}")
            return Response({'error': 'User not found'}, status=status.HTTP_401_UNAUTHORIZED)

        response_data = {'access': str(refresh_token.access_token)}

        if settings.SIMPLE_JWT.get('ROTATE_REFRESH_TOKENS', False):
            if settings.SIMPLE_JWT.get('BLACKLIST_AFTER_ROTATION', False):
                refresh_token.blacklist()
            response_data['refresh'] = str(RefreshToken.for_user(user))

        logger.info(f"Successful token refresh. User: {user.id}, IP: {client_ip}")
        return Response(response_data, status=status.HTTP_200_OK)


class CurrentUserView(APIView):
    """
    GET /api/auth/me

    Returns the signed-in user's full profile.
    """

    def get(self, request, *args, **kwargs):
        serializer = UserProfileSerializer(request.user, context={'request': request})
        return Response({'user': serializer.data}, status=status.HTTP_200_OK)


class UserProfileUpdateView(APIView):
    """
    PUT/PATCH /api/auth/update-profile

    Updates name, gender, index number, programme, current year, phone
    number and profile image. Email, student ID, verification status and
    permission flags cannot be changed here and are silently ignored.
    """

    def put(self, request, *args, **kwargs):
        return self._update_profile(request, partial=False)

    def patch(self, request, *args, **kwargs):
        return self._update_profile(request, partial=True)

    def _update_profile(self, request, partial=False):
        user = request.user

        serializer = UserProfileUpdateSerializer(
            user,
            data=request.data,
            partial=partial,
            context={'request': request}
        )

        if not serializer.is_valid():
            logger.warning(f"Profile update validation failed. User ID: {user.id}, Errors: {serializer.errors}")
            raise ValidationError(serializer.errors)

        serializer.save()

        logger.info(f"Profile updated. User ID: {user.id}, Partial: {partial}")

        return Response(
            {
                'message': 'Profile updated successfully',
                'user': UserProfileSerializer(user, context={'request': request}).data,
            },
            status=status.HTTP_200_OK
        )


class StudentVerificationView(APIView):
    """
    POST /api/auth/verify-student

    Staff-only. Request body: {"user_id": "<uuid>", "status": "approved"}

    Error responses:
    - 401: not signed in
    - 403: not a staff user
    - 404: user does not exist
    - 400: invalid payload
    """
    permission_classes = [IsAuthenticated, IsStaffUser]

    def post(self, request, *args, **kwargs):
        serializer = StudentVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = serializer.validated_data['user_id']
        new_status = serializer.validated_data['status']

        try:
            student = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            logger.warning(
                f"Verification attempted for non-existent user {user_id}. "
                f"Admin: {request.user.email}, IP: {get_client_ip(request)}"
            )
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        previous_status = student.verification_status
        student.verification_status = new_status
        student.save(update_fields=['verification_status', 'updated_at'])

        logger.info(
            f"Student verification {previous_status} -> {new_status}. "
            f"Student: {student.email} (ID: {student.id}), "
            f"Admin: {request.user.email} (ID: {request.user.id}), "
            f"IP: {get_client_ip(request)}"
        )

        return Response(
            {
                'message': f'Student verification {new_status}',
                'user': UserSummarySerializer(student).data,
            },
            status=status.HTTP_200_OK
        )


# ============================================================================
# Trip Views
# ============================================================================

class TripListView(APIView):
    """
    GET /api/trips

    Active trips ordered by departure time.

    Query Parameters:
    - transport_method: exact match on the transport method
    - from / to: case-insensitive substring match on the locations
    - page, limit: pagination (default limit 10, max 100)
    """

    def get(self, request, *args, **kwargs):
        queryset = (
            Trip.objects
            .filter(status=Trip.Status.ACTIVE)
            .select_related('traveler')
            .order_by('departure_time')
        )

        transport_method = request.query_params.get('transport_method')
        if transport_method:
            error = validate_choice(transport_method, Trip.TransportMethod.choices, 'transport_method')
            if error:
                return error
            queryset = queryset.filter(transport_method=transport_method)

        from_location = request.query_params.get('from')
        if from_location:
            queryset = queryset.filter(from_location__icontains=from_location)

        to_location = request.query_params.get('to')
        if to_location:
            queryset = queryset.filter(to_location__icontains=to_location)

        return paginate(request, queryset, TripSerializer)


class TripCreateView(APIView):
    """
    POST /api/trips/create

    Only verified students can post trips.
    """
    permission_classes = [IsAuthenticated, IsVerifiedStudent]

    def post(self, request, *args, **kwargs):
        serializer = TripCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        trip = serializer.save()

        logger.info(
            f"Trip created. ID: {trip.id}, Traveler: {request.user.email}, "
            f"Slots: {trip.max_deliveries}, IP: {get_client_ip(request)}"
        )

        return Response(
            {
                'message': 'Trip created successfully',
                'trip': TripSerializer(trip, context={'request': request}).data,
            },
            status=status.HTTP_201_CREATED
        )


class MyTripsView(APIView):
    """
    GET /api/trips/my-trips

    Trips posted by the caller, in any status, newest first.
    """

    def get(self, request, *args, **kwargs):
        queryset = Trip.objects.filter(traveler=request.user).select_related('traveler').order_by('-created_at')
        return paginate(request, queryset, TripSerializer)


class TripDetailView(APIView):
    """
    GET /api/trips/<id>

    Trip with its riders and matched delivery requests.
    """

    def get(self, request, pk, *args, **kwargs):
        try:
            trip = (
                Trip.objects
                .select_related('traveler')
                .prefetch_related('joined_users', 'matched_requests__requester')
                .get(pk=pk)
            )
        except Trip.DoesNotExist:
            raise TripNotFound()

        return Response(
            {'trip': TripDetailSerializer(trip, context={'request': request}).data},
            status=status.HTTP_200_OK
        )


class TripStatusUpdateView(APIView):
    """
    PUT /api/trips/<id>/status

    Request body: {"status": "completed" | "cancelled"}

    Only the traveler may change the status. Cancelling releases matched
    delivery requests back to pending and removes every rider.
    """
    permission_classes = [IsAuthenticated, IsTripOwner]

    def put(self, request, pk, *args, **kwargs):
        try:
            trip = Trip.objects.get(pk=pk)
        except Trip.DoesNotExist:
            raise TripNotFound()

        self.check_object_permissions(request, trip)

        serializer = TripStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        try:
            trip = matching.update_trip_status(trip.id, request.user, new_status)
        except MatchingError as e:
            logger.warning(
                f"Trip status update rejected: {e.message}. Trip: {pk}, "
                f"User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        return Response(
            {
                'message': f'Trip marked as {new_status}',
                'trip': TripSerializer(trip, context={'request': request}).data,
            },
            status=status.HTTP_200_OK
        )


class TripJoinView(APIView):
    """
    POST /api/trips/join

    Request body: {"tripId": "<uuid>"}

    Adds the caller to the trip's riders, using one slot.
    """

    def post(self, request, *args, **kwargs):
        trip_id = request.data.get('tripId') if isinstance(request.data, dict) else None
        if not trip_id:
            return Response({'error': 'Trip ID is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            matching.join_trip(trip_id, request.user)
        except MatchingError as e:
            logger.warning(
                f"Join rejected: {e.message}. Trip: {trip_id}, "
                f"User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        logger.info(f"User {request.user.id} joined trip {trip_id}. IP: {get_client_ip(request)}")
        return Response({'message': 'Successfully joined trip'}, status=status.HTTP_200_OK)


class TripLeaveView(APIView):
    """
    DELETE /api/trips/leave

    Request body: {"tripId": "<uuid>"}

    Removes the caller from the trip's riders, freeing one slot.
    """

    def delete(self, request, *args, **kwargs):
        trip_id = request.data.get('tripId') if isinstance(request.data, dict) else None
        if not trip_id:
            return Response({'error': 'Trip ID is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            matching.leave_trip(trip_id, request.user)
        except MatchingError as e:
            logger.warning(
                f"Leave rejected: {e.message}. Trip: {trip_id}, "
                f"User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        logger.info(f"User {request.user.id} left trip {trip_id}. IP: {get_client_ip(request)}")
        return Response({'message': 'Successfully left trip'}, status=status.HTTP_200_OK)


# ============================================================================
# Delivery Request Views
# ============================================================================

class DeliveryRequestListView(APIView):
    """
    GET /api/delivery-requests

    Pending delivery requests, newest first.

    Query Parameters:
    - item_size: small / medium / large
    - priority: low / normal / high / urgent
    - search: substring over pickup, dropoff and item description
    - page, limit: pagination
    """

    def get(self, request, *args, **kwargs):
        queryset = (
            DeliveryRequest.objects
            .filter(status=DeliveryRequest.Status.PENDING)
            .select_related('requester')
            .order_by('-created_at')
        )

        item_size = request.query_params.get('item_size')
        if item_size:
            error = validate_choice(item_size, DeliveryRequest.ItemSize.choices, 'item_size')
            if error:
                return error
            queryset = queryset.filter(item_size=item_size)

        priority = request.query_params.get('priority')
        if priority:
            error = validate_choice(priority, DeliveryRequest.Priority.choices, 'priority')
            if error:
                return error
            queryset = queryset.filter(priority=priority)

        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(pickup_location__icontains=search)
                | Q(dropoff_location__icontains=search)
                | Q(item_description__icontains=search)
            )

        return paginate(request, queryset, DeliveryRequestSerializer)


class DeliveryRequestCreateView(APIView):
    """
    POST /api/delivery-requests/create

    Only verified students can post delivery requests.
    """
    permission_classes = [IsAuthenticated, IsVerifiedStudent]

    def post(self, request, *args, **kwargs):
        serializer = DeliveryRequestCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        delivery_request = serializer.save()

        logger.info(
            f"Delivery request created. ID: {delivery_request.id}, "
            f"Requester: {request.user.email}, IP: {get_client_ip(request)}"
        )

        return Response(
            {
                'message': 'Delivery request created successfully',
                'deliveryRequest': DeliveryRequestSerializer(delivery_request).data,
            },
            status=status.HTTP_201_CREATED
        )


class MyDeliveryRequestsView(APIView):
    """
    GET /api/delivery-requests/mine

    Requests posted by the caller in any status. Accepts an optional
    ``status`` filter.
    """

    def get(self, request, *args, **kwargs):
        queryset = (
            DeliveryRequest.objects
            .filter(requester=request.user)
            .select_related('requester')
            .order_by('-created_at')
        )

        status_filter = request.query_params.get('status')
        if status_filter:
            error = validate_choice(status_filter, DeliveryRequest.Status.choices, 'status')
            if error:
                return error
            queryset = queryset.filter(status=status_filter)

        return paginate(request, queryset, DeliveryRequestSerializer)


class DeliveryRequestDetailView(APIView):
    """GET /api/delivery-requests/<id>"""

    def get(self, request, pk, *args, **kwargs):
        try:
            delivery_request = DeliveryRequest.objects.select_related('requester').get(pk=pk)
        except DeliveryRequest.DoesNotExist:
            raise DeliveryRequestNotFound()

        return Response(
            {'deliveryRequest': DeliveryRequestSerializer(delivery_request).data},
            status=status.HTTP_200_OK
        )


class DeliveryRequestStatusUpdateView(APIView):
    """
    PUT /api/delivery-requests/<id>/status

    Request body: {"status": "cancelled" | "in_transit" | "delivered"}

    Authorization rules (CanUpdateDeliveryStatus):
    - requester: cancel while pending
    - traveler of the matched trip: matched -> in_transit -> delivered

    Invalid transitions return 409.
    """
    permission_classes = [IsAuthenticated, CanUpdateDeliveryStatus]

    def put(self, request, pk, *args, **kwargs):
        try:
            delivery_request = DeliveryRequest.objects.select_related('matched_trip').get(pk=pk)
        except DeliveryRequest.DoesNotExist:
            raise DeliveryRequestNotFound()

        serializer = DeliveryStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        self.check_object_permissions(request, delivery_request)

        new_status = serializer.validated_data['status']

        try:
            delivery_request = matching.update_delivery_status(delivery_request.id, request.user, new_status)
        except MatchingError as e:
            logger.warning(
                f"Delivery status update rejected: {e.message}. Request: {pk}, "
                f"User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        return Response(
            {
                'message': f'Delivery request marked as {new_status}',
                'deliveryRequest': DeliveryRequestSerializer(delivery_request).data,
            },
            status=status.HTTP_200_OK
        )


class DeliveryOfferView(APIView):
    """
    POST /api/delivery-requests/offer

    Request body: {"deliveryRequestId": "<uuid>", "tripId": "<uuid>"}

    The trip's traveler claims a pending delivery request, using one slot.

    Error responses:
    - 400: missing ids
    - 401: not signed in
    - 403: caller is not the trip's traveler
    - 404: delivery request or trip not found
    - 409: trip inactive or full, request already matched
    """

    def post(self, request, *args, **kwargs):
        data = request.data if isinstance(request.data, dict) else {}
        delivery_request_id = data.get('deliveryRequestId')
        trip_id = data.get('tripId')

        if not delivery_request_id or not trip_id:
            return Response(
                {'error': 'Delivery request ID and trip ID are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            matching.offer_delivery(delivery_request_id, trip_id, request.user)
        except MatchingError as e:
            logger.warning(
                f"Delivery offer rejected: {e.message}. Request: {delivery_request_id}, "
                f"Trip: {trip_id}, User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        logger.info(
            f"Delivery offer made. Request: {delivery_request_id}, Trip: {trip_id}, "
            f"User: {request.user.id}, IP: {get_client_ip(request)}"
        )
        return Response({'message': 'Delivery offer made successfully'}, status=status.HTTP_200_OK)


class DeliveryOfferCancelView(APIView):
    """
    DELETE /api/delivery-requests/cancel

    Request body: {"deliveryRequestId": "<uuid>", "tripId": "<uuid>"}

    The trip's traveler releases a matched delivery request back to pending.
    """

    def delete(self, request, *args, **kwargs):
        data = request.data if isinstance(request.data, dict) else {}
        delivery_request_id = data.get('deliveryRequestId')
        trip_id = data.get('tripId')

        if not delivery_request_id or not trip_id:
            return Response(
                {'error': 'Delivery request ID and trip ID are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            matching.cancel_delivery_offer(delivery_request_id, trip_id, request.user)
        except MatchingError as e:
            logger.warning(
                f"Delivery offer cancel rejected: {e.message}. Request: {delivery_request_id}, "
                f"Trip: {trip_id}, User: {request.user.id}, IP: {get_client_ip(request)}"
            )
            raise

        logger.info(
            f"Delivery offer cancelled. Request: {delivery_request_id}, Trip: {trip_id}, "
            f"User: {request.user.id}, IP: {get_client_ip(request)}"
        )
        return Response({'message': 'Delivery offer cancelled successfully'}, status=status.HTTP_200_OK)


# ============================================================================
# Health
# ============================================================================

@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for monitoring system status"""

    health_status = {
        'service': settings.SERVICE_NAME,
        'version': settings.SERVICE_VERSION,
        'status': 'healthy',
        'timestamp': timezone.now().isoformat(),
        'services': {},
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        health_status['services']['database'] = 'healthy'
    except Exception as e:
        logger.error(f"Health check database failure: {e}")
        health_status['services']['database'] = f'unhealthy: {e}'
        health_status['status'] = 'unhealthy'

    http_status = status.HTTP_200_OK if health_status['status'] == 'healthy' else status.HTTP_503_SERVICE_UNAVAILABLE
    return Response(health_status, status=http_status)
