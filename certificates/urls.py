from django.urls import path

from . import views

app_name = "certificates"

urlpatterns = [
    path("", views.certificate_list, name="list"),
    path("verify/", views.certificate_verify, name="verify-lookup"),
    path("verify/<str:certificate_id>/", views.certificate_verify, name="verify"),
    path("hackathons/<slug:slug>/issue/", views.issue_hackathon, name="issue-hackathon"),
    path("contests/<slug:slug>/issue/", views.issue_contest, name="issue-contest"),
    path("<str:certificate_id>/download/", views.certificate_download, name="download"),
]
