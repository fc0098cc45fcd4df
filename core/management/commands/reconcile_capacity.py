# Reconcile Trip Capacity Management Command
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import Count, Q

from core.models import DeliveryRequest, Trip


class Command(BaseCommand):
    help = (
        'Recomputes current_deliveries for trips from their matched delivery '
        'requests and joined riders, capped at max_deliveries.'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without saving changes to the database.',
        )
        parser.add_argument(
            '--trip',
            help='Reconcile a single trip by id.',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=500,
            help='Chunk size used when iterating over trips.',
        )

    def expected_count(self, trip):
        """Slots used by paired requests and riders, read while the trip row is locked."""
        paired = trip.matched_requests.filter(status__in=DeliveryRequest.PAIRED_STATUSES).count()
        riders = trip.joined_users.count()
        return min(trip.max_deliveries, paired + riders)

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        batch_size = options['batch_size']

        trips = Trip.objects.all()

        if options['trip']:
            try:
                trips = trips.filter(pk=options['trip'])
                if not trips.exists():
                    raise CommandError(f"Trip {options['trip']} does not exist.")
            except ValidationError:
                raise CommandError(f"'{options['trip']}' is not a valid trip id.")

        trips = trips.annotate(
            paired_count=Count(
                'matched_requests',
                filter=Q(matched_requests__status__in=DeliveryRequest.PAIRED_STATUSES),
                distinct=True,
            ),
            rider_count=Count('joined_users', distinct=True),
        ).order_by('created_at')

        self.stdout.write('Reconciling trip capacity...')

        checked = 0
        corrected = 0

        for trip in trips.iterator(chunk_size=batch_size):
            expected = min(trip.max_deliveries, trip.paired_count + trip.rider_count)
            checked += 1

            if trip.current_deliveries == expected:
                continue

            if dry_run:
                corrected += 1
                self.stdout.write(
                    f'  [DRY-RUN] Trip {trip.id}: current_deliveries '
                    f'{trip.current_deliveries} -> {expected}'
                )
                continue

            with transaction.atomic():
                locked = Trip.objects.select_for_update().get(pk=trip.pk)
                # Counts read above may predate an offer or join that has since committed
                previous = locked.current_deliveries
                expected = self.expected_count(locked)
                if previous == expected:
                    continue
                locked.current_deliveries = expected
                locked.save(update_fields=['current_deliveries', 'updated_at'])

            corrected += 1

            self.stdout.write(
                f'  Trip {trip.id}: current_deliveries {previous} -> {expected}'
            )

        self.stdout.write(f'Checked {checked} trips, {corrected} out of sync.')

        if dry_run:
            self.stdout.write(self.style.SUCCESS('Dry run completed. No changes saved.'))
        else:
            self.stdout.write(self.style.SUCCESS('Reconciliation completed successfully.'))
