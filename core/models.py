"""
Data model for Campus Connect.

- User: a student account (email login, campus verification status)
- Trip: a traveler's route with a fixed pool of delivery slots
- DeliveryRequest: a student's request to have an item moved
"""

import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from .capacity import remaining_capacity
from .validators import validate_phone_number, validate_profile_image


def user_profile_image_upload_path(instance, filename):
    """
    Generate upload path for user profile images.

    Path format: profile_images/{user_id}/{filename}
    """
    return f'profile_images/{instance.id}/{filename}'


class User(AbstractUser):
    """
    Student account extending Django's AbstractUser.

    Additional fields:
    - email: Required, unique campus email address (used to sign in)
    - student_id: Unique student identifier
    - phone_number, gender, index_number, programme_of_study, current_year
    - profile_image: Optional profile picture
    - verification_status: pending / approved / rejected
    - rating: Average rating received as a traveler (0.00 - 5.00)
    - total_deliveries: Number of deliveries completed as a traveler
    """

    class VerificationStatus(models.TextChoices):
        PENDING = 'pending', _('Pending')
        APPROVED = 'approved', _('Approved')
        REJECTED = 'rejected', _('Rejected')

    class Gender(models.TextChoices):
        MALE = 'male', _('Male')
        FEMALE = 'female', _('Female')
        OTHER = 'other', _('Other')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(
        _('email address'),
        unique=True,
        blank=False,
        null=False,
        error_messages={
            'unique': _('A user with that email already exists.'),
        },
        help_text=_('Required. Campus email address used to sign in.')
    )

    student_id = models.CharField(
        _('student ID'),
        max_length=30,
        unique=True,
        null=True,
        blank=True,
        error_messages={
            'unique': _('A user with that student ID already exists.'),
        },
        help_text=_('Student identification number issued by the university.')
    )

    phone_number = models.CharField(
        _('phone number'),
        max_length=20,
        blank=True,
        default='',
        validators=[validate_phone_number],
    )

    gender = models.CharField(
        _('gender'),
        max_length=10,
        choices=Gender.choices,
        blank=True,
        default='',
    )

    index_number = models.CharField(_('index number'), max_length=30, blank=True, default='')

    programme_of_study = models.CharField(
        _('programme of study'),
        max_length=200,
        blank=True,
        default='',
    )

    current_year = models.PositiveSmallIntegerField(
        _('current year'),
        null=True,
        blank=True,
        validators=[
            MinValueValidator(1, message=_('Current year must be at least 1.')),
            MaxValueValidator(8, message=_('Current year cannot exceed 8.')),
        ],
    )

    profile_image = models.ImageField(
        _('profile image'),
        upload_to=user_profile_image_upload_path,
        blank=True,
        null=True,
        validators=[validate_profile_image],
        help_text=_('Optional. Upload a profile picture (max 5MB, formats: jpg, png, webp).')
    )

    verification_status = models.CharField(
        _('verification status'),
        max_length=10,
        choices=VerificationStatus.choices,
        default=VerificationStatus.PENDING,
        help_text=_('Campus verification state. Only approved students may post trips or requests.')
    )

    rating = models.DecimalField(
        _('rating'),
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[
            MinValueValidator(Decimal('0.00'), message=_('Rating cannot be negative.')),
            MaxValueValidator(Decimal('5.00'), message=_('Rating cannot exceed 5.00.'))
        ],
    )

    total_deliveries = models.PositiveIntegerField(
        _('total deliveries'),
        default=0,
        help_text=_('Deliveries completed as a traveler.')
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email'], name='user_email_idx'),
            models.Index(fields=['verification_status'], name='user_verification_idx'),
        ]

    def __str__(self):
        return self.email or self.username

    @property
    def full_name(self):
        name = f'{self.first_name} {self.last_name}'.strip()
        return name or self.email

    def is_verified_student(self):
        """Return True once campus verification has been approved."""
        return self.verification_status == self.VerificationStatus.APPROVED

    def save(self, *args, **kwargs):
        # Normalize email to lowercase for case-insensitive uniqueness
        if self.email:
            self.email = self.email.lower().strip()
        if self.student_id == '':
            self.student_id = None
        super().save(*args, **kwargs)


class Trip(models.Model):
    """
    A traveler's declared route and departure with a finite pool of slots.

    Both matched delivery requests and joined riders consume a slot from the
    same pool, tracked by current_deliveries. The counter is only changed
    through core.matching, which applies core.capacity.adjust_capacity.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', _('Active')
        COMPLETED = 'completed', _('Completed')
        CANCELLED = 'cancelled', _('Cancelled')

    class TransportMethod(models.TextChoices):
        CAR = 'car', _('Car')
        MOTORCYCLE = 'motorcycle', _('Motorcycle')
        BICYCLE = 'bicycle', _('Bicycle')
        WALKING = 'walking', _('Walking')
        PUBLIC_TRANSPORT = 'public_transport', _('Public Transport')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    traveler = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='trips',
        help_text=_('Student offering this trip')
    )

    from_location = models.CharField(_('from location'), max_length=300)
    to_location = models.CharField(_('to location'), max_length=300)

    departure_time = models.DateTimeField(_('departure time'))

    transport_method = models.CharField(
        _('transport method'),
        max_length=20,
        choices=TransportMethod.choices,
    )

    max_deliveries = models.PositiveIntegerField(
        _('max deliveries'),
        validators=[MinValueValidator(1, message=_('A trip must offer at least one slot.'))],
        help_text=_('Total number of slots, fixed when the trip is created')
    )

    current_deliveries = models.PositiveIntegerField(
        _('current deliveries'),
        default=0,
        help_text=_('Slots in use by matched requests and joined riders')
    )

    price_per_delivery = models.DecimalField(
        _('price per delivery'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'), message=_('Price cannot be negative.'))],
    )

    is_recurring = models.BooleanField(_('is recurring'), default=False)

    status = models.CharField(
        _('status'),
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE,
    )

    description = models.TextField(_('description'), blank=True, default='')
    contact_info = models.CharField(_('contact info'), max_length=200, blank=True, default='')

    joined_users = models.ManyToManyField(
        User,
        related_name='joined_trips',
        blank=True,
        help_text=_('Riders travelling along on this trip')
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('trip')
        verbose_name_plural = _('trips')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['traveler'], name='trip_traveler_idx'),
            models.Index(fields=['status'], name='trip_status_idx'),
            models.Index(fields=['departure_time'], name='trip_departure_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_deliveries__gte=1),
                name='trip_max_deliveries_positive'
            ),
            models.CheckConstraint(
                condition=models.Q(current_deliveries__lte=models.F('max_deliveries')),
                name='trip_current_within_max'
            ),
        ]

    def __str__(self):
        return f'{self.from_location} -> {self.to_location} ({self.departure_time:%Y-%m-%d %H:%M})'

    @property
    def available_slots(self):
        return remaining_capacity(self.current_deliveries, self.max_deliveries)

    @property
    def is_full(self):
        return self.current_deliveries >= self.max_deliveries

    def is_active(self):
        return self.status == self.Status.ACTIVE

    def clean(self):
        super().clean()

        if not self.from_location or not self.from_location.strip():
            raise ValidationError({'from_location': _('From location cannot be empty.')})

        if not self.to_location or not self.to_location.strip():
            raise ValidationError({'to_location': _('To location cannot be empty.')})

        if self.max_deliveries is not None and self.current_deliveries is not None:
            if self.current_deliveries > self.max_deliveries:
                raise ValidationError({
                    'current_deliveries': _('Current deliveries cannot exceed max deliveries.')
                })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class DeliveryRequest(models.Model):
    """
    A student's request to move an item between two locations.

    matched_trip is set exactly while the request is matched, in transit or
    delivered, and cleared when an offer is cancelled.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        MATCHED = 'matched', _('Matched')
        IN_TRANSIT = 'in_transit', _('In Transit')
        DELIVERED = 'delivered', _('Delivered')
        CANCELLED = 'cancelled', _('Cancelled')

    class ItemSize(models.TextChoices):
        SMALL = 'small', _('Small')
        MEDIUM = 'medium', _('Medium')
        LARGE = 'large', _('Large')

    class Priority(models.TextChoices):
        LOW = 'low', _('Low')
        NORMAL = 'normal', _('Normal')
        HIGH = 'high', _('High')
        URGENT = 'urgent', _('Urgent')

    PAIRED_STATUSES = (Status.MATCHED, Status.IN_TRANSIT, Status.DELIVERED)
    TERMINAL_STATUSES = (Status.DELIVERED, Status.CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    requester = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='delivery_requests',
        help_text=_('Student who posted the request')
    )

    pickup_location = models.CharField(_('pickup location'), max_length=300)
    dropoff_location = models.CharField(_('dropoff location'), max_length=300)

    item_description = models.CharField(_('item description'), max_length=200)

    item_size = models.CharField(_('item size'), max_length=10, choices=ItemSize.choices)

    priority = models.CharField(
        _('priority'),
        max_length=10,
        choices=Priority.choices,
        default=Priority.NORMAL,
    )

    payment_amount = models.DecimalField(
        _('payment amount'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'), message=_('Payment amount cannot be negative.'))],
    )

    pickup_date = models.DateField(_('pickup date'))
    pickup_time = models.TimeField(_('pickup time'))

    contact_info = models.CharField(_('contact info'), max_length=200)

    special_instructions = models.TextField(
        _('special instructions'),
        max_length=500,
        blank=True,
        default='',
    )

    status = models.CharField(
        _('status'),
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )

    matched_trip = models.ForeignKey(
        Trip,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='matched_requests',
        help_text=_('Trip carrying this request once matched')
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('delivery request')
        verbose_name_plural = _('delivery requests')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['requester'], name='request_requester_idx'),
            models.Index(fields=['status'], name='request_status_idx'),
            models.Index(fields=['pickup_date'], name='request_pickup_date_idx'),
            models.Index(fields=['matched_trip'], name='request_matched_trip_idx'),
        ]

    def __str__(self):
        return f'{self.item_description} ({self.pickup_location} -> {self.dropoff_location})'

    def clean(self):
        """
        Validate model fields and the trip pairing.

        Ensures:
        - Locations and item description are not empty
        - matched_trip is set if and only if status is matched, in_transit or delivered
        """
        super().clean()

        if not self.pickup_location or not self.pickup_location.strip():
            raise ValidationError({'pickup_location': _('Pickup location cannot be empty.')})

        if not self.dropoff_location or not self.dropoff_location.strip():
            raise ValidationError({'dropoff_location': _('Dropoff location cannot be empty.')})

        if not self.item_description or not self.item_description.strip():
            raise ValidationError({'item_description': _('Item description cannot be empty.')})

        paired = self.status in self.PAIRED_STATUSES
        if paired and self.matched_trip_id is None:
            raise ValidationError({
                'matched_trip': _('A %(status)s delivery request must reference a trip.') % {'status': self.status}
            })
        if not paired and self.matched_trip_id is not None:
            raise ValidationError({
                'matched_trip': _('A %(status)s delivery request cannot reference a trip.') % {'status': self.status}
            })

    def can_transition_to(self, new_status):
        """
        Validate a status change requested through the status endpoint.

        Valid transitions:
        - pending -> cancelled (requester)
        - matched -> in_transit (traveler)
        - in_transit -> delivered (traveler)

        pending <-> matched only happens through offer / cancel offer.

        Returns:
            tuple: (is_valid: bool, error_message: str or None)
        """
        current_status = self.status

        if current_status == new_status:
            return True, None

        if current_status == self.Status.DELIVERED:
            return False, 'Cannot modify a delivered request.'

        if current_status == self.Status.CANCELLED:
            return False, 'Cannot modify a cancelled request.'

        if current_status == self.Status.PENDING:
            if new_status == self.Status.CANCELLED:
                return True, None
            if new_status == self.Status.MATCHED:
                return False, 'Pending requests are matched by a traveler offering a trip.'
            return False, f'Invalid status transition from {current_status} to {new_status}.'

        if current_status == self.Status.MATCHED:
            if new_status == self.Status.IN_TRANSIT:
                return True, None
            if new_status == self.Status.PENDING:
                return False, 'Use the cancel offer endpoint to release a matched request.'
            if new_status == self.Status.DELIVERED:
                return False, 'Cannot transition from matched to delivered. Must be in transit first.'
            return False, f'Invalid status transition from {current_status} to {new_status}.'

        if current_status == self.Status.IN_TRANSIT:
            if new_status == self.Status.DELIVERED:
                return True, None
            return False, f'Invalid status transition from {current_status} to {new_status}.'

        return False, f'Invalid status transition from {current_status} to {new_status}.'

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
