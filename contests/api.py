"""JSON endpoints used by the in-contest client."""
from __future__ import annotations

from django.core.exceptions import PermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.shortcuts import get_object_or_404
from rest_framework import exceptions, permissions, status, views
from rest_framework.response import Response

from elevate.forms import error_text

from . import serializers, services
from .models import CodingContest, CodingQuestion, ContestParticipant


def _success(message: str, data=None) -> dict:
    payload = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    return payload


def _failure(message: str, errors=None) -> dict:
    payload = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return payload


class ContestAPIView(views.APIView):
    """Turns service errors into ``{"success": false}`` responses."""

    permission_classes = [permissions.IsAuthenticated]

    def handle_exception(self, exc):
        if isinstance(exc, services.ParticipantLocked):
            return Response(_failure(error_text(exc)), status=status.HTTP_423_LOCKED)
        if isinstance(exc, exceptions.ValidationError):
            return Response(_failure("Validation failed", exc.detail), status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, DjangoValidationError):
            return Response(_failure(error_text(exc)), status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, PermissionDenied):
            return Response(_failure(str(exc) or "Unauthorized"), status=status.HTTP_403_FORBIDDEN)
        return super().handle_exception(exc)

    def validated(self, serializer_class):
        serializer = serializer_class(data=self.request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def get_participant(self) -> ContestParticipant:
        return get_object_or_404(
            ContestParticipant.objects.select_related("contest", "user"),
            pk=self.kwargs["participant_id"],
        )


class ContestQuestionsAPI(ContestAPIView):
    def get(self, request, slug: str):
        contest = get_object_or_404(CodingContest, slug=slug)
        if not services.can_view_contest(request.user, contest):
            raise PermissionDenied("Unauthorized")
        questions = services.visible_questions(request.user, contest)
        return Response(_success("Questions loaded", serializers.QuestionSerializer(questions, many=True).data))


class StartContestAPI(ContestAPIView):
    def post(self, request, slug: str):
        contest = get_object_or_404(CodingContest, slug=slug)
        data = self.validated(serializers.StartContestSerializer)
        participant = services.start_contest(request.user, contest, data.get("browser_info"))
        return Response(_success("Contest started!", serializers.ParticipantSerializer(participant).data))


class SubmitContestAPI(ContestAPIView):
    def post(self, request, slug: str):
        contest = get_object_or_404(CodingContest, slug=slug)
        participant = services.submit_contest(request.user, contest)
        return Response(_success("Contest submitted successfully!", serializers.ParticipantSerializer(participant).data))


class SubmitMCQAPI(ContestAPIView):
    def post(self, request, participant_id: int):
        participant = self.get_participant()
        data = self.validated(serializers.MCQAnswerSerializer)
        question = get_object_or_404(CodingQuestion, pk=data["question_id"])
        submission = services.submit_mcq_answer(request.user, participant, question, data["selected_options"])
        message = "Correct answer!" if submission.is_correct else "Answer submitted"
        return Response(_success(message, {"is_correct": submission.is_correct, "score": submission.score}))


class SubmitCodeAPI(ContestAPIView):
    def post(self, request, participant_id: int):
        participant = self.get_participant()
        data = self.validated(serializers.CodeSubmissionSerializer)
        question = get_object_or_404(CodingQuestion, pk=data["question_id"])
        submission, outcomes = services.submit_code(
            request.user,
            participant,
            question,
            data["code"],
            data["language"],
        )
        if submission.is_correct:
            message = "All test cases passed!"
        else:
            message = f"{submission.test_cases_passed}/{submission.test_cases_total} test cases passed"
        return Response(
            _success(
                message,
                {
                    "is_correct": submission.is_correct,
                    "score": submission.score,
                    "test_cases_passed": submission.test_cases_passed,
                    "test_cases_total": submission.test_cases_total,
                    "results": [outcome.public_data() for outcome in outcomes],
                },
            )
        )


class RunCodeAPI(ContestAPIView):
    def post(self, request):
        data = self.validated(serializers.RunCodeSerializer)
        result = services.run_code(data["code"], data["language"], data.get("input", ""))
        return Response(
            _success(
                "Code executed",
                {
                    "output": result.output,
                    "execution_time": result.execution_time,
                    "memory_used": result.memory_used,
                    "error": result.error or None,
                },
            )
        )


class SubmissionListAPI(ContestAPIView):
    def get(self, request, participant_id: int):
        participant = self.get_participant()
        question_id = request.query_params.get("question")
        question = get_object_or_404(CodingQuestion, pk=question_id) if question_id else None
        submissions = services.participant_submissions(request.user, participant, question)
        return Response(_success("Submissions loaded", serializers.QuestionSubmissionSerializer(submissions, many=True).data))


class ViolationAPI(ContestAPIView):
    def get(self, request, participant_id: int):
        violations = services.participant_violations(request.user, self.get_participant())
        return Response(_success("Violations loaded", serializers.ViolationRecordSerializer(violations, many=True).data))

    def post(self, request, participant_id: int):
        participant = self.get_participant()
        data = self.validated(serializers.ViolationSerializer)
        violation, should_disqualify = services.report_violation(
            request.user,
            participant,
            data["type"],
            data.get("details", ""),
        )
        return Response(
            _success("Violation recorded", {"violation_id": violation.pk, "should_disqualify": should_disqualify})
        )


class TabSwitchAPI(ContestAPIView):
    def post(self, request, participant_id: int):
        result = services.increment_tab_switch(request.user, self.get_participant())
        if result["should_disqualify"]:
            message = "You have been disqualified for exceeding the tab switch limit"
        else:
            message = f"Warning: {result['remaining']} tab switches remaining before disqualification"
        return Response(_success(message, result))


class HeartbeatAPI(ContestAPIView):
    def post(self, request, participant_id: int):
        services.heartbeat(request.user, self.get_participant())
        return Response(_success("Heartbeat recorded"))


class ProctoringStatusAPI(ContestAPIView):
    def get(self, request, participant_id: int):
        data = services.proctoring_status(request.user, self.get_participant())
        return Response(_success("Proctoring status", data))


class LeaderboardAPI(ContestAPIView):
    def get(self, request, slug: str):
        contest = get_object_or_404(CodingContest, slug=slug)
        if not services.can_view_contest(request.user, contest):
            raise PermissionDenied("Unauthorized")
        if not contest.show_leaderboard and not services.can_manage_contest(request.user, contest):
            raise PermissionDenied("The leaderboard is hidden for this contest")
        entries = services.contest_leaderboard(contest)
        return Response(_success("Leaderboard loaded", serializers.LeaderboardEntrySerializer(entries, many=True).data))
