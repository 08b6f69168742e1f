from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from organizations import models, services

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


@override_settings(STORAGES=PLAIN_STORAGES)
class OrganizationViewTests(TestCase):
    def setUp(self):
        self.owner = get_user_model().objects.create_user(email="owner@example.com", password="pw")
        self.member = get_user_model().objects.create_user(email="member@example.com", password="pw")

    def test_create_organization(self):
        self.client.force_login(self.owner)

        response = self.client.post(
            reverse("organizations:create"),
            {"name": "Orbit", "slug": "Orbit", "type": "COMPANY"},
        )

        self.assertRedirects(response, reverse("organizations:detail", args=["orbit"]))
        organization = models.Organization.objects.get(slug="orbit")
        self.assertEqual(organization.owner, self.owner)

    def test_duplicate_slug_shows_form_error(self):
        services.create_organization(self.owner, name="Orbit", slug="orbit")
        self.client.force_login(self.member)

        response = self.client.post(
            reverse("organizations:create"),
            {"name": "Orbit Two", "slug": "orbit", "type": "COMPANY"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("slug", response.context["form"].errors)

    def test_detail_is_public(self):
        services.create_organization(self.owner, name="Orbit", slug="orbit")

        response = self.client.get(reverse("organizations:detail", args=["orbit"]))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context["access"].is_member)
        self.assertIsNone(response.context["add_member_form"])

    def test_non_admin_cannot_edit(self):
        services.create_organization(self.owner, name="Orbit", slug="orbit")
        self.client.force_login(self.member)

        response = self.client.get(reverse("organizations:update", args=["orbit"]))

        self.assertEqual(response.status_code, 403)

    def test_add_member_via_form(self):
        organization = services.create_organization(self.owner, name="Orbit", slug="orbit")
        self.client.force_login(self.owner)

        response = self.client.post(
            reverse("organizations:member-add", args=["orbit"]),
            {"email": "member@example.com", "role": "MEMBER"},
        )

        self.assertRedirects(response, reverse("organizations:detail", args=["orbit"]))
        self.assertIsNotNone(services.get_membership(self.member, organization))
