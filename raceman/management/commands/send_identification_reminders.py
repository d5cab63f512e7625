"""
Management command to remind buyers of registrations without an athlete.

Usage:
    python manage.py send_identification_reminders
    python manage.py send_identification_reminders --dry-run

Meant for a periodic scheduler (cron); rate limits come from RACEMAN settings.
"""

from django.core.management.base import BaseCommand

from raceman import registration


class Command(BaseCommand):
    """Send identification reminders command."""

    help = 'Envia lembretes de identificação pendente'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra quantos lembretes seriam enviados sem enviar'
        )

    def handle(self, *args, **options):
        sent, skipped = registration.send_pending_reminders(dry_run=options['dry_run'])

        if options['dry_run']:
            self.stdout.write(f'{sent} lembrete(s) seria(m) enviado(s), {skipped} pedido(s) ignorado(s)')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{sent} lembrete(s) enviado(s), {skipped} pedido(s) ignorado(s)')
            )
