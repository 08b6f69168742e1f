from django.core.management.base import BaseCommand

from contests import services


class Command(BaseCommand):
    help = "Mark contests past their end time as ended and auto-submit unfinished attempts."

    def handle(self, *args, **options):
        ended, submitted = services.finalize_ended_contests()
        self.stdout.write(self.style.SUCCESS(f"Ended {ended} contest(s), auto-submitted {submitted} participant(s)."))
