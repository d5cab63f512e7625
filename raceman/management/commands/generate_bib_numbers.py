"""
Management command to generate bib numbers for a race.

Usage:
    python manage.py generate_bib_numbers 42
"""

from django.core.management.base import BaseCommand, CommandError

from raceman import registration, RegistrationError


class Command(BaseCommand):
    """Generate bib numbers command."""

    help = 'Gera os números de peito de um evento'

    def add_arguments(self, parser):
        parser.add_argument('race_id', type=int, help='ID do evento')

    def handle(self, *args, **options):
        try:
            count = registration.generate_bib_numbers(options['race_id'])
        except RegistrationError as e:
            raise CommandError(f'{e.code}: {e.message}') from e

        self.stdout.write(
            self.style.SUCCESS(f'{count} número(s) de peito gerado(s)')
        )
