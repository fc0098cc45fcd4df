"""
Django admin configuration for Campus Connect.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import DeliveryRequest, Trip, User


@admin.action(description=_('Approve selected students'))
def approve_students(modeladmin, request, queryset):
    queryset.update(verification_status=User.VerificationStatus.APPROVED)


@admin.action(description=_('Reject selected students'))
def reject_students(modeladmin, request, queryset):
    queryset.update(verification_status=User.VerificationStatus.REJECTED)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for students.

    Staff review pending accounts here and approve or reject them in bulk.
    """

    list_display = [
        'email',
        'first_name',
        'last_name',
        'student_id',
        'verification_status',
        'total_deliveries',
        'is_staff',
        'created_at',
    ]

    list_filter = [
        'verification_status',
        'gender',
        'current_year',
        'is_staff',
        'is_active',
        'created_at',
    ]

    search_fields = [
        'email',
        'first_name',
        'last_name',
        'student_id',
        'index_number',
    ]

    ordering = ['-created_at']

    actions = [approve_students, reject_students]

    fieldsets = (
        (None, {
            'fields': ('username', 'password')
        }),
        (_('Personal Info'), {
            'fields': (
                'first_name',
                'last_name',
                'email',
                'phone_number',
                'gender',
                'profile_image',
            )
        }),
        (_('Student Details'), {
            'fields': (
                'student_id',
                'index_number',
                'programme_of_study',
                'current_year',
                'verification_status',
            )
        }),
        (_('Delivery Record'), {
            'fields': ('rating', 'total_deliveries')
        }),
        (_('Permissions'), {
            'fields': (
                'is_active',
                'is_staff',
                'is_superuser',
                'groups',
                'user_permissions',
            ),
            'classes': ('collapse',),
        }),
        (_('Important Dates'), {
            'fields': ('last_login', 'date_joined', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'username',
                'email',
                'student_id',
                'password1',
                'password2',
            ),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login', 'date_joined']

    list_per_page = 25


class MatchedRequestInline(admin.TabularInline):
    model = DeliveryRequest
    fk_name = 'matched_trip'
    fields = ['item_description', 'requester', 'status', 'payment_amount']
    readonly_fields = fields
    extra = 0
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    """
    Admin interface for trips.

    current_deliveries is read-only here; use the reconcile_capacity
    management command to repair drift.
    """

    list_display = [
        'from_location',
        'to_location',
        'traveler',
        'departure_time',
        'transport_method',
        'current_deliveries',
        'max_deliveries',
        'status',
    ]

    list_filter = [
        'status',
        'transport_method',
        'is_recurring',
        'departure_time',
    ]

    search_fields = [
        'from_location',
        'to_location',
        'traveler__email',
    ]

    readonly_fields = ['current_deliveries', 'created_at', 'updated_at']

    filter_horizontal = ['joined_users']

    ordering = ['-departure_time']

    date_hierarchy = 'departure_time'

    list_per_page = 25

    inlines = [MatchedRequestInline]

    fieldsets = (
        (None, {
            'fields': ('traveler', 'from_location', 'to_location', 'departure_time')
        }),
        (_('Trip Details'), {
            'fields': ('transport_method', 'price_per_delivery', 'is_recurring', 'description', 'contact_info')
        }),
        (_('Capacity'), {
            'fields': ('max_deliveries', 'current_deliveries', 'joined_users')
        }),
        (_('Status'), {
            'fields': ('status',)
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(DeliveryRequest)
class DeliveryRequestAdmin(admin.ModelAdmin):
    """Admin interface for delivery requests."""

    list_display = [
        'item_description',
        'requester',
        'item_size',
        'priority',
        'status',
        'pickup_date',
        'matched_trip',
        'created_at',
    ]

    list_filter = [
        'status',
        'item_size',
        'priority',
        'pickup_date',
    ]

    search_fields = [
        'item_description',
        'pickup_location',
        'dropoff_location',
        'requester__email',
    ]

    readonly_fields = ['status', 'matched_trip', 'created_at', 'updated_at']

    raw_id_fields = ['requester']

    ordering = ['-created_at']

    date_hierarchy = 'created_at'

    list_per_page = 25

    fieldsets = (
        (None, {
            'fields': ('requester', 'item_description', 'item_size', 'priority')
        }),
        (_('Route'), {
            'fields': ('pickup_location', 'dropoff_location', 'pickup_date', 'pickup_time')
        }),
        (_('Payment & Contact'), {
            'fields': ('payment_amount', 'contact_info', 'special_instructions')
        }),
        (_('Matching'), {
            'fields': ('status', 'matched_trip')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )
