from django.apps import AppConfig


class HackathonsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hackathons"
    verbose_name = "Hackathons"
