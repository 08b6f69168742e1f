from django.urls import path

from . import views

app_name = "contests"

urlpatterns = [
    path("", views.contest_list, name="list"),
    path("calendar/", views.contest_calendar, name="calendar"),
    path("new/", views.contest_create, name="create"),
    path("mine/", views.my_contests, name="mine"),
    path("<slug:slug>/", views.contest_detail, name="detail"),
    path("<slug:slug>/edit/", views.contest_update, name="update"),
    path("<slug:slug>/manage/", views.contest_manage, name="manage"),
    path("<slug:slug>/publish/", views.contest_publish, name="publish"),
    path("<slug:slug>/status/", views.contest_status, name="status"),
    path("<slug:slug>/delete/", views.contest_delete, name="delete"),
    path("<slug:slug>/register/", views.contest_register, name="register"),
    path("<slug:slug>/start/", views.contest_start, name="start"),
    path("<slug:slug>/participate/", views.contest_participate, name="participate"),
    path("<slug:slug>/submit/", views.contest_submit, name="submit"),
    path("<slug:slug>/results/", views.contest_results, name="results"),
    path("<slug:slug>/leaderboard/", views.contest_leaderboard, name="leaderboard"),
    path("<slug:slug>/leaderboard/export/", views.export_leaderboard_csv, name="export-leaderboard"),
    path("<slug:slug>/participants/<int:participant_id>/", views.participant_detail, name="participant-detail"),
    path(
        "<slug:slug>/participants/<int:participant_id>/disqualify/",
        views.participant_disqualify,
        name="participant-disqualify",
    ),
    path("<slug:slug>/questions/new/", views.question_create, name="question-create"),
    path("<slug:slug>/questions/reorder/", views.question_reorder, name="question-reorder"),
    path("<slug:slug>/questions/<int:question_id>/", views.question_detail, name="question-detail"),
    path("<slug:slug>/questions/<int:question_id>/edit/", views.question_update, name="question-update"),
    path("<slug:slug>/questions/<int:question_id>/delete/", views.question_delete, name="question-delete"),
    path("<slug:slug>/questions/<int:question_id>/tests/new/", views.test_case_create, name="test-case-create"),
    path("<slug:slug>/questions/<int:question_id>/tests/import/", views.test_case_import, name="test-case-import"),
    path(
        "<slug:slug>/questions/<int:question_id>/tests/<int:test_case_id>/edit/",
        views.test_case_update,
        name="test-case-update",
    ),
    path(
        "<slug:slug>/questions/<int:question_id>/tests/<int:test_case_id>/delete/",
        views.test_case_delete,
        name="test-case-delete",
    ),
]
