from django.core.management.base import BaseCommand

from hackathons import models, services


class Command(BaseCommand):
    help = "Recalculate hackathon statuses from their registration and event dates."

    def add_arguments(self, parser):
        parser.add_argument("--slug", help="Only refresh the hackathon with this slug")

    def handle(self, *args, **options):
        queryset = models.Hackathon.objects.all()
        if options.get("slug"):
            queryset = queryset.filter(slug=options["slug"])
        updated = services.refresh_statuses(queryset)
        self.stdout.write(self.style.SUCCESS(f"Updated {updated} hackathon(s)."))
