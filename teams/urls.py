from django.urls import path

from . import views

app_name = "teams"

urlpatterns = [
    path("teams/invitations/", views.invitations, name="invitations"),
    path("teams/invitations/<int:invitation_id>/respond/", views.invitation_respond, name="respond"),
    path("hackathons/<slug:slug>/team/", views.team_detail, name="detail"),
    path("hackathons/<slug:slug>/team/edit/", views.team_update, name="update"),
    path("hackathons/<slug:slug>/team/lock/", views.team_lock, name="lock"),
    path("hackathons/<slug:slug>/team/leave/", views.team_leave, name="leave"),
    path("hackathons/<slug:slug>/team/delete/", views.team_delete, name="delete"),
    path("hackathons/<slug:slug>/team/invite/", views.member_invite, name="invite"),
    path("hackathons/<slug:slug>/team/members/<int:user_id>/remove/", views.member_remove, name="remove"),
    path("hackathons/<slug:slug>/team/members/<int:user_id>/lead/", views.leadership_transfer, name="transfer"),
    path(
        "hackathons/<slug:slug>/team/invitations/<int:invitation_id>/cancel/",
        views.invitation_cancel,
        name="cancel-invitation",
    ),
    path("hackathons/<slug:slug>/teams/", views.team_list, name="list"),
]
