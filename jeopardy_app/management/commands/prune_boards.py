import logging
from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from jeopardy_app.models import BoardSession

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Delete stored boards that have not been played for a while'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            help='Delete boards untouched for more than this many days (default from settings)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report how many boards would be deleted',
        )

    def handle(self, *args, **options):
        days = options.get('days')
        if days is None:
            days = settings.JEOPARDY_BOARD_MAX_AGE_DAYS
        if days < 1:
            raise CommandError(f"--days must be at least 1, got {days}")
        max_age = timedelta(days=days)

        if options.get('dry_run'):
            count = BoardSession.stale(max_age).count()
            self.stdout.write(f"{count} board(s) older than {days} day(s) would be deleted")
            return

        deleted = BoardSession.prune(max_age)
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} board(s) older than {days} day(s)"))
