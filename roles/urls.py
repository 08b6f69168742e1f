from django.urls import path

from . import views

app_name = "roles"

urlpatterns = [
    path("roles/invitations/", views.invitations, name="invitations"),
    path("roles/mine/", views.invitations, name="mine"),
    path("roles/<int:role_id>/respond/", views.invitation_respond, name="respond"),
    path("hackathons/<slug:slug>/roles/", views.role_list, name="list"),
    path("hackathons/<slug:slug>/roles/<int:role_id>/revoke/", views.role_revoke, name="revoke"),
    path("hackathons/<slug:slug>/roles/<int:role_id>/edit/", views.role_update, name="update"),
]
