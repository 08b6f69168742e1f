from django.core.management.base import BaseCommand
from django_q.models import Schedule

SCHEDULED_TASKS = (
    ("Refresh hackathon statuses", "hackathons.tasks.refresh_hackathon_statuses"),
    ("Finalize ended contests", "contests.tasks.finalize_contests"),
)


class Command(BaseCommand):
    help = "Register the periodic maintenance tasks with the django-q scheduler."

    def add_arguments(self, parser):
        parser.add_argument("--minutes", type=int, default=15, help="Interval between runs")

    def handle(self, *args, **options):
        minutes = max(1, options["minutes"])
        for name, func in SCHEDULED_TASKS:
            _, created = Schedule.objects.update_or_create(
                name=name,
                defaults={
                    "func": func,
                    "schedule_type": Schedule.MINUTES,
                    "minutes": minutes,
                    "repeats": -1,
                },
            )
            verb = "Scheduled" if created else "Updated"
            self.stdout.write(f"{verb} {func} every {minutes} minute(s).")
        self.stdout.write(self.style.SUCCESS("Maintenance tasks registered."))
