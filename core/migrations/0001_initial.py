import uuid
from decimal import Decimal

import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import core.models
import core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(error_messages={'unique': 'A user with that email already exists.'}, help_text='Required. Campus email address used to sign in.', max_length=254, unique=True, verbose_name='email address')),
                ('student_id', models.CharField(blank=True, error_messages={'unique': 'A user with that student ID already exists.'}, help_text='Student identification number issued by the university.', max_length=30, null=True, unique=True, verbose_name='student ID')),
                ('phone_number', models.CharField(blank=True, default='', max_length=20, validators=[core.validators.validate_phone_number], verbose_name='phone number')),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], default='', max_length=10, verbose_name='gender')),
                ('index_number', models.CharField(blank=True, default='', max_length=30, verbose_name='index number')),
                ('programme_of_study', models.CharField(blank=True, default='', max_length=200, verbose_name='programme of study')),
                ('current_year', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1, message='Current year must be at least 1.'), django.core.validators.MaxValueValidator(8, message='Current year cannot exceed 8.')], verbose_name='current year')),
                ('profile_image', models.ImageField(blank=True, help_text='Optional. Upload a profile picture (max 5MB, formats: jpg, png, webp).', null=True, upload_to=core.models.user_profile_image_upload_path, validators=[core.validators.validate_profile_image], verbose_name='profile image')),
                ('verification_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', help_text='Campus verification state. Only approved students may post trips or requests.', max_length=10, verbose_name='verification status')),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00'), message='Rating cannot be negative.'), django.core.validators.MaxValueValidator(Decimal('5.00'), message='Rating cannot exceed 5.00.')], verbose_name='rating')),
                ('total_deliveries', models.PositiveIntegerField(default=0, help_text='Deliveries completed as a traveler.', verbose_name='total deliveries')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['email'], name='user_email_idx'),
                    models.Index(fields=['verification_status'], name='user_verification_idx'),
                ],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Trip',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_location', models.CharField(max_length=300, verbose_name='from location')),
                ('to_location', models.CharField(max_length=300, verbose_name='to location')),
                ('departure_time', models.DateTimeField(verbose_name='departure time')),
                ('transport_method', models.CharField(choices=[('car', 'Car'), ('motorcycle', 'Motorcycle'), ('bicycle', 'Bicycle'), ('walking', 'Walking'), ('public_transport', 'Public Transport')], max_length=20, verbose_name='transport method')),
                ('max_deliveries', models.PositiveIntegerField(help_text='Total number of slots, fixed when the trip is created', validators=[django.core.validators.MinValueValidator(1, message='A trip must offer at least one slot.')], verbose_name='max deliveries')),
                ('current_deliveries', models.PositiveIntegerField(default=0, help_text='Slots in use by matched requests and joined riders', verbose_name='current deliveries')),
                ('price_per_delivery', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'), message='Price cannot be negative.')], verbose_name='price per delivery')),
                ('is_recurring', models.BooleanField(default=False, verbose_name='is recurring')),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='active', max_length=10, verbose_name='status')),
                ('description', models.TextField(blank=True, default='', verbose_name='description')),
                ('contact_info', models.CharField(blank=True, default='', max_length=200, verbose_name='contact info')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('traveler', models.ForeignKey(help_text='Student offering this trip', on_delete=django.db.models.deletion.CASCADE, related_name='trips', to=settings.AUTH_USER_MODEL)),
                ('joined_users', models.ManyToManyField(blank=True, help_text='Riders travelling along on this trip', related_name='joined_trips', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'trip',
                'verbose_name_plural': 'trips',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['traveler'], name='trip_traveler_idx'),
                    models.Index(fields=['status'], name='trip_status_idx'),
                    models.Index(fields=['departure_time'], name='trip_departure_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(max_deliveries__gte=1), name='trip_max_deliveries_positive'),
                    models.CheckConstraint(condition=models.Q(current_deliveries__lte=models.F('max_deliveries')), name='trip_current_within_max'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DeliveryRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('pickup_location', models.CharField(max_length=300, verbose_name='pickup location')),
                ('dropoff_location', models.CharField(max_length=300, verbose_name='dropoff location')),
                ('item_description', models.CharField(max_length=200, verbose_name='item description')),
                ('item_size', models.CharField(choices=[('small', 'Small'), ('medium', 'Medium'), ('large', 'Large')], max_length=10, verbose_name='item size')),
                ('priority', models.CharField(choices=[('low', 'Low'), ('normal', 'Normal'), ('high', 'High'), ('urgent', 'Urgent')], default='normal', max_length=10, verbose_name='priority')),
                ('payment_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'), message='Payment amount cannot be negative.')], verbose_name='payment amount')),
                ('pickup_date', models.DateField(verbose_name='pickup date')),
                ('pickup_time', models.TimeField(verbose_name='pickup time')),
                ('contact_info', models.CharField(max_length=200, verbose_name='contact info')),
                ('special_instructions', models.TextField(blank=True, default='', max_length=500, verbose_name='special instructions')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('matched', 'Matched'), ('in_transit', 'In Transit'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='status')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('requester', models.ForeignKey(help_text='Student who posted the request', on_delete=django.db.models.deletion.CASCADE, related_name='delivery_requests', to=settings.AUTH_USER_MODEL)),
                ('matched_trip', models.ForeignKey(blank=True, help_text='Trip carrying this request once matched', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='matched_requests', to='core.trip')),
            ],
            options={
                'verbose_name': 'delivery request',
                'verbose_name_plural': 'delivery requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['requester'], name='request_requester_idx'),
                    models.Index(fields=['status'], name='request_status_idx'),
                    models.Index(fields=['pickup_date'], name='request_pickup_date_idx'),
                    models.Index(fields=['matched_trip'], name='request_matched_trip_idx'),
                ],
            },
        ),
    ]
