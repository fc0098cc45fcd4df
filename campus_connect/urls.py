"""
URL configuration for the campus_connect project.

API endpoints are mounted under /api without trailing slashes, matching the
paths used by the web client.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path
from rest_framework_simplejwt.views import TokenBlacklistView

from core.views import (
    CurrentUserView,
    CustomTokenRefreshView,
    DeliveryOfferCancelView,
    DeliveryOfferView,
    DeliveryRequestCreateView,
    DeliveryRequestDetailView,
    DeliveryRequestListView,
    DeliveryRequestStatusUpdateView,
    MyDeliveryRequestsView,
    MyTripsView,
    SignInView,
    StudentVerificationView,
    TripCreateView,
    TripDetailView,
    TripJoinView,
    TripLeaveView,
    TripListView,
    TripStatusUpdateView,
    UserProfileUpdateView,
    UserRegistrationView,
    health_check,
)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health_check, name='health_check'),

    # Authentication endpoints
    path('api/auth/signup', UserRegistrationView.as_view(), name='signup'),
    path('api/auth/signin', SignInView.as_view(), name='signin'),
    path('api/auth/logout', TokenBlacklistView.as_view(), name='logout'),
    path('api/auth/token/refresh', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/me', CurrentUserView.as_view(), name='me'),
    path('api/auth/update-profile', UserProfileUpdateView.as_view(), name='update_profile'),
    path('api/auth/verify-student', StudentVerificationView.as_view(), name='verify_student'),

    # Trip endpoints
    path('api/trips', TripListView.as_view(), name='trip_list'),
    path('api/trips/create', TripCreateView.as_view(), name='trip_create'),
    path('api/trips/my-trips', MyTripsView.as_view(), name='my_trips'),
    path('api/trips/join', TripJoinView.as_view(), name='trip_join'),
    path('api/trips/leave', TripLeaveView.as_view(), name='trip_leave'),
    path('api/trips/<uuid:pk>', TripDetailView.as_view(), name='trip_detail'),
    path('api/trips/<uuid:pk>/status', TripStatusUpdateView.as_view(), name='trip_status'),

    # Delivery request endpoints
    path('api/delivery-requests', DeliveryRequestListView.as_view(), name='delivery_request_list'),
    path('api/delivery-requests/create', DeliveryRequestCreateView.as_view(), name='delivery_request_create'),
    path('api/delivery-requests/mine', MyDeliveryRequestsView.as_view(), name='my_delivery_requests'),
    path('api/delivery-requests/offer', DeliveryOfferView.as_view(), name='delivery_offer'),
    path('api/delivery-requests/cancel', DeliveryOfferCancelView.as_view(), name='delivery_offer_cancel'),
    path('api/delivery-requests/<uuid:pk>', DeliveryRequestDetailView.as_view(), name='delivery_request_detail'),
    path(
        'api/delivery-requests/<uuid:pk>/status',
        DeliveryRequestStatusUpdateView.as_view(),
        name='delivery_request_status'
    ),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
