from datetime import date

from django.core.management.base import BaseCommand
from django.utils import timezone

from notifications.services import milestone_reminders


class Command(BaseCommand):
    help = 'Send phase evaluation and closeout reminders for active internships.'

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Run as if today were this ISO date (YYYY-MM-DD).')

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options.get('date'):
            today = date.fromisoformat(options['date'])

        result = milestone_reminders.run_sweep(today)
        for error in result.errors:
            self.stderr.write(f'Error: {error}')

        self.stdout.write(
            f'Done. Internships checked: {result.internships_checked}, '
            f'notifications sent: {result.notifications_sent}'
        )
