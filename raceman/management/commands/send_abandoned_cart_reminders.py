"""
Management command to remind buyers who left a cart unfinished.

Usage:
    python manage.py send_abandoned_cart_reminders
    python manage.py send_abandoned_cart_reminders --dry-run
"""

from django.core.management.base import BaseCommand

from raceman import registration


class Command(BaseCommand):
    """Send abandoned-cart reminders command."""

    help = 'Envia lembretes de carrinho abandonado'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra quantos lembretes seriam enviados sem enviar'
        )

    def handle(self, *args, **options):
        sent, skipped = registration.send_abandoned_cart_reminders(dry_run=options['dry_run'])

        if options['dry_run']:
            self.stdout.write(f'{sent} lembrete(s) seria(m) enviado(s), {skipped} carrinho(s) ignorado(s)')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{sent} lembrete(s) enviado(s), {skipped} carrinho(s) ignorado(s)')
            )
