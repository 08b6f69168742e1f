from django.urls import path

from . import views

app_name = "stages"

urlpatterns = [
    path("hackathons/<slug:slug>/leaderboard/", views.leaderboard, name="leaderboard"),
    path("hackathons/<slug:slug>/stages/", views.stage_list, name="list"),
    path("hackathons/<slug:slug>/stages/new/", views.stage_create, name="create"),
    path("hackathons/<slug:slug>/stages/reorder/", views.stage_reorder, name="reorder"),
    path("hackathons/<slug:slug>/stages/from-template/", views.stage_from_template, name="from-template"),
    path("hackathons/<slug:slug>/stages/templates/new/", views.template_create, name="template-create"),
    path("hackathons/<slug:slug>/stages/clone/", views.stage_clone, name="clone"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/", views.stage_detail, name="detail"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/edit/", views.stage_update, name="update"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/delete/", views.stage_delete, name="delete"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/activate/", views.stage_activate, name="activate"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/complete/", views.stage_complete, name="complete"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/eliminate/", views.stage_eliminate, name="eliminate"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/review/", views.submission_review, name="review"),
    path("hackathons/<slug:slug>/stages/<int:stage_id>/submit/", views.submission_create, name="submit"),
    path(
        "hackathons/<slug:slug>/stages/<int:stage_id>/submissions/<int:submission_id>/edit/",
        views.submission_update,
        name="submission-update",
    ),
    path(
        "hackathons/<slug:slug>/stages/<int:stage_id>/submissions/<int:submission_id>/delete/",
        views.submission_delete,
        name="submission-delete",
    ),
    path(
        "hackathons/<slug:slug>/stages/<int:stage_id>/submissions/<int:submission_id>/judge/",
        views.submission_judge,
        name="submission-judge",
    ),
    path(
        "hackathons/<slug:slug>/stages/<int:stage_id>/submissions/<int:submission_id>/status/",
        views.submission_status,
        name="submission-status",
    ),
]
