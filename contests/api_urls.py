from django.urls import path

from . import api

app_name = "contests-api"

urlpatterns = [
    path("run/", api.RunCodeAPI.as_view(), name="run"),
    path("<slug:slug>/questions/", api.ContestQuestionsAPI.as_view(), name="questions"),
    path("<slug:slug>/start/", api.StartContestAPI.as_view(), name="start"),
    path("<slug:slug>/submit/", api.SubmitContestAPI.as_view(), name="submit"),
    path("<slug:slug>/leaderboard/", api.LeaderboardAPI.as_view(), name="leaderboard"),
    path("participants/<int:participant_id>/mcq/", api.SubmitMCQAPI.as_view(), name="submit-mcq"),
    path("participants/<int:participant_id>/code/", api.SubmitCodeAPI.as_view(), name="submit-code"),
    path("participants/<int:participant_id>/submissions/", api.SubmissionListAPI.as_view(), name="submissions"),
    path("participants/<int:participant_id>/violations/", api.ViolationAPI.as_view(), name="violations"),
    path("participants/<int:participant_id>/tab-switch/", api.TabSwitchAPI.as_view(), name="tab-switch"),
    path("participants/<int:participant_id>/heartbeat/", api.HeartbeatAPI.as_view(), name="heartbeat"),
    path("participants/<int:participant_id>/proctoring/", api.ProctoringStatusAPI.as_view(), name="proctoring"),
]
