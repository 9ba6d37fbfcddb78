"""
Management command to inspect the stored CMI history of a package/session.

Usage:
    python manage.py show_cmi_history <history_key>
    python manage.py show_cmi_history <history_key> --all
"""
import json

from django.core.management.base import BaseCommand, CommandError

from scorm.history import CmiHistoryStore


class Command(BaseCommand):
    help = 'Show the persisted CMI snapshots of a package/session'

    def add_arguments(self, parser):
        parser.add_argument(
            'history_key',
            help='Identity of the package/session',
        )
        parser.add_argument(
            '--all',
            action='store_true',
            help='Show every snapshot, oldest first (default: only the latest)',
        )

    def handle(self, *args, **options):
        store = CmiHistoryStore(options['history_key'])
        entries = store.entries() if options['all'] else [store.last()]
        entries = [entry for entry in entries if entry]

        if not entries:
            raise CommandError(f"No CMI history for {options['history_key']}")

        for entry in entries:
            self.stdout.write(self.style.SUCCESS(entry['timestamp']))
            self.stdout.write(json.dumps(entry['cmi'], indent=2, sort_keys=True))

        self.stdout.write(f"{len(entries)} snapshot(s) of {len(store)} stored")
