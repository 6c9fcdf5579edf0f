"""Management command to reconcile PROCESSING orders with their suppliers."""

from django.core.management.base import BaseCommand, CommandError

from django_bundle_orders.exceptions import UnknownCategoryError
from django_bundle_orders.reconciliation import StatusReconciler
from django_bundle_orders.scheduler import StatusPoller
from django_bundle_orders.services import resolve_category


class Command(BaseCommand):
    help = 'Check PROCESSING orders against their supplier and advance their status'

    def add_arguments(self, parser):
        parser.add_argument(
            '--once',
            action='store_true',
            help='Run a single reconciliation pass and exit'
        )
        parser.add_argument(
            '--interval',
            type=float,
            default=None,
            help='Seconds between passes (default: BUNDLE_ORDERS_POLL_INTERVAL_SECONDS)'
        )
        parser.add_argument(
            '--category',
            default=None,
            help='Only reconcile this service category'
        )

    def handle(self, *args, **options):
        category = options['category']
        if category:
            try:
                category = resolve_category(category)
            except UnknownCategoryError as e:
                raise CommandError(str(e))

        def tick():
            reconciler = StatusReconciler()
            if category:
                results = {category: reconciler.reconcile_category(category)}
            else:
                results = reconciler.poll_all()
            self._report(results)

        if options['once']:
            tick()
            return

        poller = StatusPoller(tick, interval=options['interval'])
        self.stdout.write(f'Polling order statuses every {poller.interval:.0f}s (Ctrl+C to stop)')
        try:
            poller.run()
        except KeyboardInterrupt:
            poller.stop()
            self.stdout.write('Stopped')

    def _report(self, results):
        for category, outcomes in results.items():
            updated = [o for o in outcomes if o.was_updated]
            errors = [o for o in outcomes if o.error]
            self.stdout.write(
                f'{category}: checked {len(outcomes)}, updated {len(updated)}, errors {len(errors)}'
            )
            for outcome in updated:
                self.stdout.write(
                    self.style.SUCCESS(
                        f'  - {outcome.short_id}: {outcome.previous_status} -> {outcome.normalized_status}'
                    )
                )
            for outcome in errors:
                self.stdout.write(self.style.ERROR(f'  - {outcome.short_id}: {outcome.error}'))
