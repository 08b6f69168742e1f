from datetime import date, datetime
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from contests.tests.utils import make_contest
from elevate import calendars
from elevate.forms import build_unique_slug, split_list
from hackathons.models import Hackathon
from hackathons.tests.utils import make_hackathon, make_organization, make_user

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
UTC = ZoneInfo("UTC")


@override_settings(TIME_ZONE="UTC")
class CalendarHelperTests(SimpleTestCase):
    def test_parse_month_falls_back_on_bad_input(self):
        self.assertEqual(calendars.parse_month("2025", "3"), (2025, 3))
        today = calendars.timezone.localdate()
        self.assertEqual(calendars.parse_month("2025", "13"), (today.year, today.month))
        self.assertEqual(calendars.parse_month("soon", None), (today.year, today.month))

    def test_shift_month_crosses_years(self):
        self.assertEqual(calendars.shift_month(2025, 1, -1), (2024, 12))
        self.assertEqual(calendars.shift_month(2025, 12, 1), (2026, 1))

    def test_one_event_per_entry_per_day(self):
        entry = calendars.CalendarEntry(
            obj="launch",
            milestones=(
                ("start", datetime(2025, 3, 10, 9, tzinfo=UTC)),
                ("end", datetime(2025, 3, 10, 18, tzinfo=UTC)),
            ),
        )
        events = calendars.events_for_day(date(2025, 3, 10), [entry])
        self.assertEqual([event.kind for event in events], ["start"])

    def test_build_month_pads_with_none(self):
        weeks = calendars.build_month(2025, 3, [])
        # March 2025 starts on a Saturday.
        self.assertEqual(weeks[0][:6], [None] * 6)
        self.assertEqual(weeks[0][6].day, date(2025, 3, 1))
        context = calendars.calendar_context(2025, 3, [])
        self.assertEqual(context["month_name"], "March")
        self.assertEqual(context["prev"], {"year": 2025, "month": 2})


class FormHelperTests(TestCase):
    def test_split_list(self):
        self.assertEqual(split_list(" python, ,django ,"), ["python", "django"])

    def test_build_unique_slug_appends_suffix(self):
        owner = make_user("owner@example.com")
        organization = make_organization(owner)
        make_hackathon(organization, slug="build-weekend")
        slug = build_unique_slug(Hackathon, "Build Weekend", fallback="hackathon")
        self.assertEqual(slug, "build-weekend-2")
        self.assertEqual(build_unique_slug(Hackathon, "!!!", fallback="hackathon"), "hackathon")


@override_settings(STORAGES=PLAIN_STORAGES)
class HomeViewTests(TestCase):
    def test_home_features_public_events(self):
        owner = make_user("owner@example.com")
        organization = make_organization(owner)
        make_hackathon(organization)
        make_contest(organization)
        response = self.client.get(reverse("home"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Build Weekend")
        self.assertContains(response, "Weekly Sprint")

    def test_unknown_page_uses_custom_404(self):
        with self.settings(DEBUG=False):
            response = self.client.get("/no-such-page/here/")
        self.assertEqual(response.status_code, 404)
        self.assertTemplateUsed(response, "404.html")
