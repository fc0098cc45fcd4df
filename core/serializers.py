"""
Serializers for authentication, profiles, trips and delivery requests.

Trip and delivery request creation accept the camelCase field names used by
the web client (fromLocation, pickupDate, ...); responses use the model's
snake_case field names.
"""

import os
from datetime import datetime

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from .models import DeliveryRequest, Trip
from .validators import validate_campus_email, validate_phone_number

User = get_user_model()


def _run_validator(validator, value):
    """Adapt a Django field validator for use inside a DRF validate_<field>."""
    try:
        validator(value)
    except DjangoValidationError as e:
        raise serializers.ValidationError(list(e.messages))
    return value


# ============================================================================
# Authentication Serializers
# ============================================================================

class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for student sign up.

    Fields:
    - email: Required, unique, must be on the campus email domain
    - password / confirm_password: Required, must match and pass Django's
      password validators
    - first_name, last_name, student_id, phone_number: Required
    - gender, index_number, programme_of_study, current_year: Optional

    New accounts always start with verification_status='pending'.
    """

    password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    confirm_password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = [
            'id', 'email', 'password', 'confirm_password',
            'first_name', 'last_name', 'student_id', 'phone_number',
            'gender', 'index_number', 'programme_of_study', 'current_year',
            'verification_status', 'created_at',
        ]
        read_only_fields = ['id', 'verification_status', 'created_at']
        extra_kwargs = {
            'email': {'required': True},
            'first_name': {'required': True, 'allow_blank': False},
            'last_name': {'required': True, 'allow_blank': False},
            'student_id': {'required': True, 'allow_null': False, 'allow_blank': False, 'validators': []},
            'phone_number': {'required': True, 'allow_blank': False},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        _run_validator(validate_campus_email, value)

        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with that email already exists.")

        return value

    def validate_student_id(self, value):
        value = value.strip()
        if User.objects.filter(student_id__iexact=value).exists():
            raise serializers.ValidationError("A user with that student ID already exists.")
        return value

    def validate_password(self, value):
        return _run_validator(validate_password, value)

    def validate_phone_number(self, value):
        return _run_validator(validate_phone_number, value)

    def validate(self, attrs):
        if attrs.get('password') != attrs.get('confirm_password'):
            raise serializers.ValidationError({
                'confirm_password': 'Password confirmation does not match.'
            })
        return attrs

    def create(self, validated_data):
        """
        Create the user with a hashed password.

        Privileged fields are never accepted from the client; the username
        mirrors the email because AbstractUser still requires one.
        """
        validated_data.pop('confirm_password', None)
        password = validated_data.pop('password')

        for field in ('is_superuser', 'is_staff', 'is_active', 'groups', 'user_permissions'):
            validated_data.pop(field, None)

        validated_data['username'] = validated_data['email'][:150]
        validated_data['verification_status'] = User.VerificationStatus.PENDING

        with transaction.atomic():
            user = User(**validated_data)
            user.set_password(password)
            user.save()

        return user


class LoginSerializer(serializers.Serializer):
    """
    Serializer for sign in with email and password.

    Minimal validation to prevent user enumeration; authentication happens
    in the view.
    """
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class TokenRefreshSerializer(serializers.Serializer):
    """Refresh token to exchange for a new access token."""
    refresh = serializers.CharField(required=True)


# ============================================================================
# Profile Serializers
# ============================================================================

class UserSummarySerializer(serializers.ModelSerializer):
    """Public view of a user embedded in trips and delivery requests."""

    class Meta:
        model = User
        fields = [
            'id',
            'first_name',
            'last_name',
            'email',
            'student_id',
            'verification_status',
            'rating',
            'total_deliveries',
        ]
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for the signed-in user's own profile.

    Excludes sensitive fields (password, is_superuser, permissions) and
    renders profile_image as an absolute URL.
    """

    profile_image_url = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'student_id',
            'phone_number',
            'gender',
            'index_number',
            'programme_of_study',
            'current_year',
            'verification_status',
            'rating',
            'total_deliveries',
            'profile_image_url',
            'is_staff',
            'created_at',
        ]
        read_only_fields = fields

    def get_profile_image_url(self, obj):
        if obj.profile_image:
            request = self.context.get('request')
            if request is not None:
                return request.build_absolute_uri(obj.profile_image.url)
            return obj.profile_image.url
        return None


class UserProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for profile updates (PUT/PATCH).

    Updatable fields: first_name, last_name, phone_number, gender,
    index_number, programme_of_study, current_year, profile_image.

    Anything else sent by the client (email, student_id,
    verification_status, is_staff, ...) is ignored.
    """

    class Meta:
        model = User
        fields = [
            'first_name',
            'last_name',
            'phone_number',
            'gender',
            'index_number',
            'programme_of_study',
            'current_year',
            'profile_image',
        ]
        extra_kwargs = {field: {'required': False} for field in fields}

    def validate_phone_number(self, value):
        # Empty string clears the field
        if not value:
            return value
        return _run_validator(validate_phone_number, value)

    def update(self, instance, validated_data):
        """
        Update the profile, removing the old image file when it is replaced.
        """
        new_image = validated_data.get('profile_image')
        if instance.profile_image and new_image:
            try:
                old_image_path = instance.profile_image.path
            except NotImplementedError:
                old_image_path = None
            if old_image_path and os.path.exists(old_image_path):
                try:
                    os.remove(old_image_path)
                except OSError:
                    pass

        fields_to_update = []
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
            fields_to_update.append(attr)

        if fields_to_update:
            fields_to_update.append('updated_at')
            instance.save(update_fields=fields_to_update)

        return instance


class StudentVerificationSerializer(serializers.Serializer):
    """
    Staff decision on a student's verification.

    Fields:
    - user_id: UUID of the student
    - status: 'approved' or 'rejected'
    """

    user_id = serializers.UUIDField(required=True)
    status = serializers.ChoiceField(
        choices=[
            User.VerificationStatus.APPROVED,
            User.VerificationStatus.REJECTED,
        ],
        required=True,
    )


# ============================================================================
# Trip Serializers
# ============================================================================

class TripCreateSerializer(serializers.Serializer):
    """
    Serializer for posting a trip.

    Fields:
    - fromLocation, toLocation: Required, not blank
    - departureDate + departureTime: Required, combined into departure_time,
      must not be in the past
    - availableSeats: Required, becomes max_deliveries (1-50)
    - pricePerDelivery: Required, non-negative
    - vehicleType: Required transport method
    - description, contactInfo, isRecurring: Optional
    """

    fromLocation = serializers.CharField(max_length=300)
    toLocation = serializers.CharField(max_length=300)
    departureDate = serializers.DateField()
    departureTime = serializers.TimeField()
    availableSeats = serializers.IntegerField(min_value=1, max_value=50)
    pricePerDelivery = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    vehicleType = serializers.ChoiceField(choices=Trip.TransportMethod.choices)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    contactInfo = serializers.CharField(required=False, allow_blank=True, max_length=200, default='')
    isRecurring = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        departure = datetime.combine(attrs['departureDate'], attrs['departureTime'])
        departure = timezone.make_aware(departure, timezone.get_current_timezone())

        if departure < timezone.now():
            raise serializers.ValidationError({
                'departureDate': 'Departure time cannot be in the past.'
            })

        attrs['departure_time'] = departure
        return attrs

    def create(self, validated_data):
        request = self.context['request']

        return Trip.objects.create(
            traveler=request.user,
            from_location=validated_data['fromLocation'].strip(),
            to_location=validated_data['toLocation'].strip(),
            departure_time=validated_data['departure_time'],
            transport_method=validated_data['vehicleType'],
            max_deliveries=validated_data['availableSeats'],
            current_deliveries=0,
            price_per_delivery=validated_data['pricePerDelivery'],
            is_recurring=validated_data['isRecurring'],
            description=validated_data['description'],
            contact_info=validated_data['contactInfo'],
        )


class TripSerializer(serializers.ModelSerializer):
    """Trip as shown in listings, with the traveler embedded."""

    traveler = UserSummarySerializer(read_only=True)
    available_slots = serializers.IntegerField(read_only=True)

    class Meta:
        model = Trip
        fields = [
            'id',
            'traveler',
            'from_location',
            'to_location',
            'departure_time',
            'transport_method',
            'max_deliveries',
            'current_deliveries',
            'available_slots',
            'price_per_delivery',
            'is_recurring',
            'status',
            'description',
            'contact_info',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class TripStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[Trip.Status.COMPLETED, Trip.Status.CANCELLED],
        required=True,
    )


# ============================================================================
# Delivery Request Serializers
# ============================================================================

class DeliveryRequestCreateSerializer(serializers.Serializer):
    """
    Serializer for posting a delivery request.

    Fields:
    - pickupLocation, dropoffLocation, itemDescription: Required, not blank
    - itemSize: small / medium / large
    - priority: low / normal / high / urgent (default normal)
    - paymentAmount: Required, non-negative
    - pickupDate, pickupTime: Required; the date cannot be in the past
    - contactInfo: Required
    - specialInstructions: Optional, at most 500 characters
    """

    pickupLocation = serializers.CharField(max_length=300)
    dropoffLocation = serializers.CharField(max_length=300)
    itemDescription = serializers.CharField(max_length=200)
    itemSize = serializers.ChoiceField(choices=DeliveryRequest.ItemSize.choices)
    priority = serializers.ChoiceField(
        choices=DeliveryRequest.Priority.choices,
        required=False,
        default=DeliveryRequest.Priority.NORMAL,
    )
    paymentAmount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    pickupDate = serializers.DateField()
    pickupTime = serializers.TimeField()
    contactInfo = serializers.CharField(max_length=200)
    specialInstructions = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=500,
        default='',
    )

    def validate_pickupDate(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError('Pickup date cannot be in the past.')
        return value

    def create(self, validated_data):
        request = self.context['request']

        return DeliveryRequest.objects.create(
            requester=request.user,
            pickup_location=validated_data['pickupLocation'].strip(),
            dropoff_location=validated_data['dropoffLocation'].strip(),
            item_description=validated_data['itemDescription'].strip(),
            item_size=validated_data['itemSize'],
            priority=validated_data['priority'],
            payment_amount=validated_data['paymentAmount'],
            pickup_date=validated_data['pickupDate'],
            pickup_time=validated_data['pickupTime'],
            contact_info=validated_data['contactInfo'].strip(),
            special_instructions=validated_data['specialInstructions'],
            status=DeliveryRequest.Status.PENDING,
        )


class DeliveryRequestSerializer(serializers.ModelSerializer):
    """Delivery request with the requester embedded and the trip by id."""

    requester = UserSummarySerializer(read_only=True)

    class Meta:
        model = DeliveryRequest
        fields = [
            'id',
            'requester',
            'pickup_location',
            'dropoff_location',
            'item_description',
            'item_size',
            'priority',
            'payment_amount',
            'pickup_date',
            'pickup_time',
            'contact_info',
            'special_instructions',
            'status',
            'matched_trip',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class TripDetailSerializer(TripSerializer):
    """
    Full trip view including riders and matched delivery requests.
    """

    joined_users = UserSummarySerializer(many=True, read_only=True)
    matched_requests = DeliveryRequestSerializer(many=True, read_only=True)

    class Meta(TripSerializer.Meta):
        fields = TripSerializer.Meta.fields + ['joined_users', 'matched_requests']
        read_only_fields = fields


class DeliveryStatusUpdateSerializer(serializers.Serializer):
    """
    Requested lifecycle status for a delivery request.

    Whether the transition is allowed is decided by
    DeliveryRequest.can_transition_to().
    """
    status = serializers.ChoiceField(choices=DeliveryRequest.Status.choices, required=True)
