from django.core.management.base import BaseCommand

from core.services.booking import cancel_expired_bookings


class Command(BaseCommand):
    help = "Cancel owner-accepted booking requests whose payment deadline passed unpaid."

    def handle(self, *args, **options):
        references = cancel_expired_bookings()
        if not references:
            self.stdout.write("No expired booking requests.")
            return
        for reference in references:
            self.stdout.write(f"Cancelled {reference}")
        self.stdout.write(self.style.SUCCESS(f"{len(references)} booking(s) cancelled."))
