from django.urls import path

from . import views

app_name = "hackathons"

urlpatterns = [
    path("", views.hackathon_list, name="list"),
    path("calendar/", views.hackathon_calendar, name="calendar"),
    path("new/", views.hackathon_create, name="create"),
    path("mine/", views.my_hackathons, name="mine"),
    path("managed/", views.managed_hackathons, name="managed"),
    path("exports/my-registrations.csv", views.export_my_registrations_csv, name="export-my-registrations"),
    path("<slug:slug>/", views.hackathon_detail, name="detail"),
    path("<slug:slug>/edit/", views.hackathon_update, name="update"),
    path("<slug:slug>/manage/", views.hackathon_manage, name="manage"),
    path("<slug:slug>/status/", views.hackathon_status, name="status"),
    path("<slug:slug>/delete/", views.hackathon_delete, name="delete"),
    path("<slug:slug>/register/", views.hackathon_register, name="register"),
    path("<slug:slug>/register/cancel/", views.registration_cancel, name="register-cancel"),
    path(
        "<slug:slug>/registrations/<int:registration_id>/decide/",
        views.registration_decide,
        name="registration-decide",
    ),
    path("<slug:slug>/exports/participants.csv", views.export_participants_csv, name="export-participants"),
    path("<slug:slug>/exports/roles.csv", views.export_roles_csv, name="export-roles"),
]
