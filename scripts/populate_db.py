import os
import sys
import random
from decimal import Decimal
from datetime import timedelta

import django
from faker import Faker

# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set up Django environment
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campus_connect.settings')
django.setup()

from django.conf import settings  # noqa: E402
from django.utils import timezone  # noqa: E402

from core import matching  # noqa: E402
from core.exceptions import MatchingError  # noqa: E402
from core.models import DeliveryRequest, Trip, User  # noqa: E402

fake = Faker()

CAMPUS_SPOTS = [
    "Unity Hall", "Queens Hall", "Republic Hall", "Independence Hall",
    "University Hall", "Africa Hall", "Main Library", "Commercial Area",
    "Ayeduase Gate", "Kotei", "Bomso", "Tech Junction", "Adum", "Kejetia Market",
]

ITEMS = [
    "Box of textbooks", "Mini fridge", "Laptop bag", "Rice cooker",
    "Mattress", "Standing fan", "Suitcase", "Printer", "Groceries", "Study lamp",
]


def phone_number():
    return f"0{random.choice(['20', '24', '26', '27', '50', '54', '55', '59'])}{random.randint(1000000, 9999999)}"


def create_users(num_students=20):
    print(f"Creating {num_students} students...")

    domain = settings.CAMPUS_EMAIL_DOMAIN or 'example.edu'
    students = []

    for index in range(num_students):
        first_name = fake.first_name()
        last_name = fake.last_name()
        email = f"{first_name}.{last_name}{index}@{domain}".lower()
        user = User.objects.create_user(
            username=email,
            email=email,
            password='password123',
            first_name=first_name,
            last_name=last_name,
            student_id=f"{random.randint(1000, 9999)}{index:04d}",
            phone_number=phone_number(),
            gender=random.choice([choice for choice, _ in User.Gender.choices]),
            programme_of_study=fake.job()[:200],
            current_year=random.randint(1, 4),
            verification_status=random.choice([
                User.VerificationStatus.APPROVED,
                User.VerificationStatus.APPROVED,
                User.VerificationStatus.PENDING,
            ]),
        )
        students.append(user)

    print(f"Created {len(students)} students.")
    return students


def create_trips(students):
    print("Creating trips...")
    trips = []

    travelers = [s for s in students if s.is_verified_student()]

    for traveler in travelers:
        for _ in range(random.randint(0, 2)):
            from_location, to_location = random.sample(CAMPUS_SPOTS, 2)
            trip = Trip.objects.create(
                traveler=traveler,
                from_location=from_location,
                to_location=to_location,
                departure_time=timezone.now() + timedelta(hours=random.randint(2, 96)),
                transport_method=random.choice([choice for choice, _ in Trip.TransportMethod.choices]),
                max_deliveries=random.randint(1, 5),
                price_per_delivery=Decimal(random.randint(5, 40)),
                is_recurring=random.random() < 0.2,
                description=fake.sentence(),
                contact_info=traveler.phone_number,
            )
            trips.append(trip)

    print(f"Created {len(trips)} trips.")
    return trips


def create_delivery_requests(students):
    print("Creating delivery requests...")
    requests = []

    for requester in students:
        if not requester.is_verified_student():
            continue
        for _ in range(random.randint(0, 3)):
            pickup, dropoff = random.sample(CAMPUS_SPOTS, 2)
            requests.append(DeliveryRequest.objects.create(
                requester=requester,
                pickup_location=pickup,
                dropoff_location=dropoff,
                item_description=random.choice(ITEMS),
                item_size=random.choice([choice for choice, _ in DeliveryRequest.ItemSize.choices]),
                priority=random.choice([choice for choice, _ in DeliveryRequest.Priority.choices]),
                payment_amount=Decimal(random.randint(5, 60)),
                pickup_date=timezone.localdate() + timedelta(days=random.randint(0, 7)),
                pickup_time=fake.time_object(),
                contact_info=requester.phone_number,
                special_instructions=fake.sentence() if random.random() < 0.3 else '',
            ))

    print(f"Created {len(requests)} delivery requests.")
    return requests


def match_requests(trips, requests, students):
    """Pair some requests with trips and add riders through the matching operations."""
    print("Matching requests and riders...")
    offers = 0
    joins = 0
    rejected = 0

    for delivery_request in requests:
        if not trips or random.random() < 0.5:
            continue
        trip = random.choice(trips)
        try:
            matching.offer_delivery(delivery_request.id, trip.id, trip.traveler)
            offers += 1
        except MatchingError:
            rejected += 1

    for student in students:
        if not trips or random.random() < 0.7:
            continue
        trip = random.choice(trips)
        try:
            matching.join_trip(trip.id, student)
            joins += 1
        except MatchingError:
            rejected += 1

    print(f"Made {offers} delivery offers and {joins} trip joins ({rejected} rejected).")


def main():
    print("Starting database population...")

    students = create_users(num_students=20)
    trips = create_trips(students)
    requests = create_delivery_requests(students)
    match_requests(trips, requests, students)

    print("Database population completed successfully!")


if __name__ == '__main__':
    main()
