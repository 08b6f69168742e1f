"""URL configuration for the elevate project."""
from django.contrib import admin
from django.urls import include, path

from . import views

handler404 = views.custom_404_view

urlpatterns = [
    path("", views.home, name="home"),
    path("admin/", admin.site.urls),
    path("accounts/", include("accounts.urls")),
    path("organizations/", include("organizations.urls")),
    path("hackathons/", include("hackathons.urls")),
    path("", include("stages.urls")),
    path("", include("roles.urls")),
    path("", include("teams.urls")),
    path("", include("notifications.urls")),
    path("contests/", include("contests.urls")),
    path("api/contests/", include("contests.api_urls")),
    path("certificates/", include("certificates.urls")),
]
